import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class Position(Base):
    """A role within a department. Names are unique per department."""
    __tablename__ = "positions"
    __table_args__ = (
        UniqueConstraint("name", "department_id", name="uq_positions_name_department"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    department_id = Column(
        String(36),
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    department = relationship("Department", back_populates="positions")
    problems = relationship("Problem", back_populates="position", passive_deletes="all")
    candidates = relationship("Candidate", back_populates="position", passive_deletes="all")

    def __repr__(self):
        return f"<Position(id={self.id}, name='{self.name}', department_id={self.department_id})>"
