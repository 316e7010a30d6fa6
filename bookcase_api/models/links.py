"""Join tables linking exams to majors and applications."""

from sqlalchemy import Column, ForeignKey, Integer
from bookcase_api.database import Base


class MajorExam(Base):
    __tablename__ = "major_exams"

    major_id = Column(Integer, ForeignKey("majors.id"), primary_key=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), primary_key=True)


class ApplicationExam(Base):
    __tablename__ = "application_exams"

    application_id = Column(Integer, ForeignKey("applications.id"), primary_key=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), primary_key=True)
