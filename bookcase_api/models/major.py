"""Major model definitions."""

import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String
from bookcase_api.database import Base


class MajorStatus(str, enum.Enum):
    LIKED = "Liked"
    APPLY_TO = "ApplyTo"
    APPLIED = "Applied"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class Major(Base):
    """Represents a study program a client is interested in or applying to."""
    __tablename__ = "majors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, default="")
    university_name = Column(String, nullable=False, default="")
    address = Column(String, nullable=False, default="")
    duration = Column(String, nullable=False, default="")
    language = Column(String, nullable=False, default="")
    grading_system = Column(String, nullable=False, default="")
    notes = Column(String, nullable=False, default="")
    status = Column(
        Enum(MajorStatus, values_callable=lambda members: [member.value for member in members]),
        nullable=False,
        default=MajorStatus.LIKED,
    )
    client_id = Column(Integer, ForeignKey("clients.id"), index=True)
