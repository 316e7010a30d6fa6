"""Application model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from bookcase_api.database import Base


class Application(Base):
    """Represents a student's application to a major."""
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    major_id = Column(Integer, ForeignKey("majors.id"), index=True)
    student_id = Column(Integer, ForeignKey("clients.id"), index=True)
    deadline = Column(DateTime)
    stage = Column(String, nullable=False, default="")
    notes = Column(String, nullable=False, default="")
