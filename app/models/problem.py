"""
Coding problem model and its many-to-many link to stacks.
"""

import enum
import uuid
from sqlalchemy import Column, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class ProblemDifficulty(str, enum.Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class Problem(Base):
    __tablename__ = "problems"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    difficulty = Column(Enum(ProblemDifficulty), default=ProblemDifficulty.MEDIUM, nullable=False, index=True)

    department_id = Column(String(36), ForeignKey("departments.id", ondelete="RESTRICT"), nullable=False, index=True)
    position_id = Column(String(36), ForeignKey("positions.id", ondelete="RESTRICT"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    department = relationship("Department", back_populates="problems")
    position = relationship("Position", back_populates="problems")
    stacks = relationship(
        "ProblemStack",
        back_populates="problem",
        cascade="all, delete-orphan",
        order_by="ProblemStack.created_at"
    )
    candidates = relationship("Candidate", back_populates="problem", passive_deletes="all")

    def __repr__(self):
        return f"<Problem(id={self.id}, title='{self.title}', difficulty={self.difficulty.value})>"


class ProblemStack(Base):
    """Link row tagging a problem with a stack."""
    __tablename__ = "problem_stacks"

    problem_id = Column(String(36), ForeignKey("problems.id", ondelete="CASCADE"), primary_key=True)
    stack_id = Column(String(36), ForeignKey("stacks.id", ondelete="RESTRICT"), primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    problem = relationship("Problem", back_populates="stacks")
    stack = relationship("Stack", back_populates="problem_links")
