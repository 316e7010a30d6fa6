import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookcase_api.auth.dependencies import CallerIdentity, get_current_user
from bookcase_api.auth.permissions import ensure_can_access, resolve_owner_id
from bookcase_api.database import get_db
from bookcase_api.models.application import Application
from bookcase_api.models.major import Major
from bookcase_api.routes.common import (
    RecordId,
    RecordIdPath,
    database_unavailable,
    ensure_ids_match,
    not_found,
    set_location,
)
from bookcase_api.services import cascade, exam_links

router = APIRouter(tags=['applications'])
logger = logging.getLogger(__name__)


class ApplicationFields(BaseModel):
    major_id: RecordId
    deadline: datetime
    stage: str = ''
    notes: str = ''
    exam_ids: list[RecordId] = []


class CreateApplicationRequest(ApplicationFields):
    student_id: RecordId | None = None


class UpdateApplicationRequest(ApplicationFields):
    id: RecordId


class ApplicationResponse(BaseModel):
    id: int
    major_id: int
    student_id: int
    deadline: datetime | None = None
    stage: str
    notes: str
    exam_ids: list[int] = []


def get_application_or_404(application_id: int, db: Session) -> Application:
    application = db.query(Application).filter(Application.id == application_id).first()
    if application is None:
        raise not_found('Application')
    return application


def ensure_major_owned(major_id: int, owner_id: int, db: Session) -> None:
    """Raise 400 unless the major exists and belongs to the application's student.

    Missing and foreign majors share one message, so the response does not
    reveal which ids exist.
    """
    major_owner = db.query(Major.client_id).filter(Major.id == major_id).scalar()
    if major_owner is None or major_owner != owner_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Major {major_id} does not exist or belongs to a different client.',
        )


def to_application_response(application: Application, db: Session) -> ApplicationResponse:
    return ApplicationResponse(
        id=application.id,
        major_id=application.major_id,
        student_id=application.student_id,
        deadline=application.deadline,
        stage=application.stage,
        notes=application.notes,
        exam_ids=exam_links.get_application_exam_ids(db, application.id),
    )


@router.get('', response_model=list[ApplicationResponse])
def list_applications(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        query = db.query(Application)
        if not caller.is_admin:
            query = query.filter(Application.student_id == caller.user_id)
        return [
            to_application_response(application, db)
            for application in query.order_by(Application.id.asc()).all()
        ]
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{application_id}', response_model=ApplicationResponse)
def get_application(
    application_id: RecordIdPath,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        application = get_application_or_404(application_id, db)
        ensure_can_access(caller, application.student_id)
        return to_application_response(application, db)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('', response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def create_application(
    data: CreateApplicationRequest,
    response: Response,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    student_id = resolve_owner_id(caller, data.student_id)

    try:
        ensure_major_owned(data.major_id, student_id, db)
        exam_ids = exam_links.validate_exam_ids(db, data.exam_ids, student_id)

        application = Application(
            major_id=data.major_id,
            student_id=student_id,
            deadline=data.deadline,
            stage=data.stage,
            notes=data.notes,
        )
        db.add(application)
        db.flush()
        exam_links.replace_application_exams(db, application.id, exam_ids)
        db.commit()
        db.refresh(application)

        set_location(response, '/applications', application.id)
        return to_application_response(application, db)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.put('/{application_id}', status_code=status.HTTP_204_NO_CONTENT)
def update_application(
    application_id: RecordIdPath,
    data: UpdateApplicationRequest,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    ensure_ids_match(application_id, data.id)

    try:
        application = get_application_or_404(application_id, db)
        ensure_can_access(caller, application.student_id)
        ensure_major_owned(data.major_id, application.student_id, db)
        exam_ids = exam_links.validate_exam_ids(db, data.exam_ids, application.student_id)

        application.major_id = data.major_id
        application.deadline = data.deadline
        application.stage = data.stage
        application.notes = data.notes
        exam_links.replace_application_exams(db, application.id, exam_ids)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{application_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_application(
    application_id: RecordIdPath,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        application = get_application_or_404(application_id, db)
        ensure_can_access(caller, application.student_id)

        cascade.delete_application(db, application)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    logger.info('Client %s deleted application %s', caller.user_id, application_id)
