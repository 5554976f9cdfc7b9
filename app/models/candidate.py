"""
Candidate database model.

A Candidate is one scheduled test instance for one person. It is paired with a
User row (user_type CANDIDATE, same email) used for login.

Test lifecycle, derived from the timestamps:

    SCHEDULED (start_time NULL) -> STARTED (start_time set) -> SUBMITTED (submission_time set)
"""

import enum
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class CandidateState(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    STARTED = "STARTED"
    SUBMITTED = "SUBMITTED"


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)

    # Generated password kept in plain text so admins can hand it to the candidate.
    # The paired User row holds the bcrypt hash used for login.
    password = Column(String, nullable=False)

    department_id = Column(String(36), ForeignKey("departments.id", ondelete="RESTRICT"), nullable=False, index=True)
    position_id = Column(String(36), ForeignKey("positions.id", ondelete="RESTRICT"), nullable=False, index=True)
    problem_id = Column(String(36), ForeignKey("problems.id", ondelete="RESTRICT"), nullable=False, index=True)

    # Test window
    scheduled_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    start_time = Column(DateTime, nullable=True)
    submission_time = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    department = relationship("Department", back_populates="candidates")
    position = relationship("Position", back_populates="candidates")
    problem = relationship("Problem", back_populates="candidates")
    submission = relationship(
        "Submission",
        back_populates="candidate",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def state(self) -> CandidateState:
        if self.submission_time is not None:
            return CandidateState.SUBMITTED
        if self.start_time is not None:
            return CandidateState.STARTED
        return CandidateState.SCHEDULED

    def __repr__(self):
        return f"<Candidate(id={self.id}, email='{self.email}', state={self.state.value})>"
