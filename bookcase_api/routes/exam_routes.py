import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookcase_api.auth.dependencies import CallerIdentity, get_current_user
from bookcase_api.auth.permissions import ensure_can_access, resolve_owner_id
from bookcase_api.database import get_db
from bookcase_api.models.exam import Exam
from bookcase_api.routes.common import (
    RecordId,
    RecordIdPath,
    database_unavailable,
    ensure_ids_match,
    not_found,
    set_location,
)
from bookcase_api.services import cascade

router = APIRouter(tags=['exams'])
logger = logging.getLogger(__name__)


class CreateExamRequest(BaseModel):
    date: datetime
    address: str = ''
    test_name: str = ''
    client_id: RecordId | None = None


class UpdateExamRequest(BaseModel):
    id: RecordId
    date: datetime
    address: str = ''
    test_name: str = ''


class ExamResponse(BaseModel):
    id: int
    date: datetime | None = None
    address: str
    test_name: str
    client_id: int | None = None

    class Config:
        from_attributes = True


def get_exam_or_404(exam_id: int, db: Session) -> Exam:
    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if exam is None:
        raise not_found('Exam')
    return exam


@router.get('', response_model=list[ExamResponse])
def list_exams(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        query = db.query(Exam)
        if not caller.is_admin:
            query = query.filter(Exam.client_id == caller.user_id)
        return query.order_by(Exam.id.asc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{exam_id}', response_model=ExamResponse)
def get_exam(
    exam_id: RecordIdPath,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        exam = get_exam_or_404(exam_id, db)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc

    ensure_can_access(caller, exam.client_id)
    return exam


@router.post('', response_model=ExamResponse, status_code=status.HTTP_201_CREATED)
def create_exam(
    data: CreateExamRequest,
    response: Response,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        exam = Exam(
            date=data.date,
            address=data.address,
            test_name=data.test_name,
            client_id=resolve_owner_id(caller, data.client_id),
        )
        db.add(exam)
        db.commit()
        db.refresh(exam)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    set_location(response, '/exams', exam.id)
    return exam


@router.put('/{exam_id}', status_code=status.HTTP_204_NO_CONTENT)
def update_exam(
    exam_id: RecordIdPath,
    data: UpdateExamRequest,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    ensure_ids_match(exam_id, data.id)

    try:
        exam = get_exam_or_404(exam_id, db)
        ensure_can_access(caller, exam.client_id)

        exam.date = data.date
        exam.address = data.address
        exam.test_name = data.test_name
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{exam_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_exam(
    exam_id: RecordIdPath,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        exam = get_exam_or_404(exam_id, db)
        ensure_can_access(caller, exam.client_id)

        cascade.delete_exam(db, exam)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    logger.info('Client %s deleted exam %s', caller.user_id, exam_id)
