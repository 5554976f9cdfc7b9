import uuid
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships (no ORM cascade: deletes are restricted while referenced)
    positions = relationship("Position", back_populates="department", passive_deletes="all")
    problems = relationship("Problem", back_populates="department", passive_deletes="all")
    candidates = relationship("Candidate", back_populates="department", passive_deletes="all")

    def __repr__(self):
        return f"<Department(id={self.id}, name='{self.name}')>"
