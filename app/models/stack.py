import uuid
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class Stack(Base):
    """A technology stack a problem can be answered in (e.g. Node, Python)."""
    __tablename__ = "stacks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    problem_links = relationship("ProblemStack", back_populates="stack", passive_deletes="all")

    def __repr__(self):
        return f"<Stack(id={self.id}, name='{self.name}')>"
