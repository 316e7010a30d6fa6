"""Client model definitions."""

from sqlalchemy import Column, Integer, String
from bookcase_api.database import Base


class Client(Base):
    """Represents a registered account that owns majors, exams and applications."""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False, default="")
    password_hash = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default="User")  # User/Admin
