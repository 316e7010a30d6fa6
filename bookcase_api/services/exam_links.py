"""Helpers for the major/exam and application/exam join tables."""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from bookcase_api.models.exam import Exam
from bookcase_api.models.links import ApplicationExam, MajorExam


def validate_exam_ids(db: Session, exam_ids: list[int], owner_id: int) -> list[int]:
    """Return the de-duplicated exam ids, or raise 400 if any is missing or foreign.

    Linked exams must belong to the same client as the record they are
    attached to.
    """
    unique_ids = list(dict.fromkeys(exam_ids))
    if not unique_ids:
        return []

    owners = dict(db.query(Exam.id, Exam.client_id).filter(Exam.id.in_(unique_ids)).all())
    missing = [exam_id for exam_id in unique_ids if exam_id not in owners]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Exams not found: {missing}.',
        )

    foreign = [exam_id for exam_id in unique_ids if owners[exam_id] != owner_id]
    if foreign:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Exams {foreign} belong to a different client.',
        )

    return unique_ids


def get_major_exam_ids(db: Session, major_id: int) -> list[int]:
    rows = db.query(MajorExam.exam_id).filter(MajorExam.major_id == major_id).order_by(MajorExam.exam_id).all()
    return [exam_id for (exam_id,) in rows]


def get_application_exam_ids(db: Session, application_id: int) -> list[int]:
    rows = db.query(ApplicationExam.exam_id).filter(
        ApplicationExam.application_id == application_id,
    ).order_by(ApplicationExam.exam_id).all()
    return [exam_id for (exam_id,) in rows]


def replace_major_exams(db: Session, major_id: int, exam_ids: list[int]) -> None:
    db.query(MajorExam).filter(MajorExam.major_id == major_id).delete()
    db.add_all([MajorExam(major_id=major_id, exam_id=exam_id) for exam_id in exam_ids])


def replace_application_exams(db: Session, application_id: int, exam_ids: list[int]) -> None:
    db.query(ApplicationExam).filter(
        ApplicationExam.application_id == application_id,
    ).delete()
    db.add_all([ApplicationExam(application_id=application_id, exam_id=exam_id) for exam_id in exam_ids])
