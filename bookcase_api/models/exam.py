"""Exam model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from bookcase_api.database import Base


class Exam(Base):
    """Represents an admission test sitting."""
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(DateTime)
    address = Column(String, nullable=False, default="")
    test_name = Column(String, nullable=False, default="")
    client_id = Column(Integer, ForeignKey("clients.id"), index=True)
