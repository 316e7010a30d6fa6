"""Ordered deletion of records together with everything that depends on them.

None of these helpers commit; the calling route owns the transaction so a
failure half way through rolls back the whole sequence.
"""

from sqlalchemy.orm import Session

from bookcase_api.models.application import Application
from bookcase_api.models.client import Client
from bookcase_api.models.exam import Exam
from bookcase_api.models.links import ApplicationExam, MajorExam
from bookcase_api.models.major import Major


def _delete_applications(db: Session, application_ids: list[int]) -> None:
    if not application_ids:
        return
    db.query(ApplicationExam).filter(
        ApplicationExam.application_id.in_(application_ids),
    ).delete()
    db.query(Application).filter(
        Application.id.in_(application_ids),
    ).delete()


def _delete_majors(db: Session, major_ids: list[int]) -> None:
    if not major_ids:
        return
    application_ids = [
        application_id
        for (application_id,) in db.query(Application.id).filter(Application.major_id.in_(major_ids)).all()
    ]
    _delete_applications(db, application_ids)
    db.query(MajorExam).filter(MajorExam.major_id.in_(major_ids)).delete()
    db.query(Major).filter(Major.id.in_(major_ids)).delete()


def _delete_exams(db: Session, exam_ids: list[int]) -> None:
    if not exam_ids:
        return
    db.query(MajorExam).filter(MajorExam.exam_id.in_(exam_ids)).delete()
    db.query(ApplicationExam).filter(ApplicationExam.exam_id.in_(exam_ids)).delete()
    db.query(Exam).filter(Exam.id.in_(exam_ids)).delete()


def delete_application(db: Session, application: Application) -> None:
    _delete_applications(db, [application.id])


def delete_major(db: Session, major: Major) -> None:
    _delete_majors(db, [major.id])


def delete_exam(db: Session, exam: Exam) -> None:
    _delete_exams(db, [exam.id])


def delete_client(db: Session, client: Client) -> None:
    """Remove a client and every major, exam and application it owns."""
    major_ids = [major_id for (major_id,) in db.query(Major.id).filter(Major.client_id == client.id).all()]
    exam_ids = [exam_id for (exam_id,) in db.query(Exam.id).filter(Exam.client_id == client.id).all()]
    application_ids = [
        application_id
        for (application_id,) in db.query(Application.id).filter(Application.student_id == client.id).all()
    ]

    _delete_applications(db, application_ids)
    _delete_majors(db, major_ids)
    _delete_exams(db, exam_ids)
    db.query(Client).filter(Client.id == client.id).delete()
