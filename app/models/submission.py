"""
Submission database model.

One per candidate, written when the candidate submits. `answers` is an ordered
list of {"stackId", "code"} objects; `remarks` is an append-only list of
{"id", "text", "adminName", "adminEmail", "createdAt"} objects.
"""

import uuid
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base

JSONType = JSON().with_variant(JSONB, "postgresql")


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    candidate_id = Column(
        String(36),
        ForeignKey("candidates.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True
    )
    problem_id = Column(String(36), ForeignKey("problems.id", ondelete="RESTRICT"), nullable=False, index=True)
    position_id = Column(String(36), ForeignKey("positions.id", ondelete="RESTRICT"), nullable=False, index=True)

    submission_time = Column(DateTime, default=utcnow, nullable=False, index=True)
    answers = Column(JSONType, nullable=False, default=list)
    remarks = Column(JSONType, nullable=False, default=list)
    recommended_for_next_step = Column(Boolean, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    candidate = relationship("Candidate", back_populates="submission")
    problem = relationship("Problem")
    position = relationship("Position")

    def __repr__(self):
        return f"<Submission(id={self.id}, candidate_id={self.candidate_id}, remarks={len(self.remarks or [])})>"
