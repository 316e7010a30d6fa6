import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookcase_api.auth.dependencies import CallerIdentity, get_current_user
from bookcase_api.auth.permissions import ensure_can_access, resolve_owner_id
from bookcase_api.database import get_db
from bookcase_api.models.major import Major, MajorStatus
from bookcase_api.routes.common import (
    RecordId,
    RecordIdPath,
    database_unavailable,
    ensure_ids_match,
    not_found,
    set_location,
)
from bookcase_api.services import cascade, exam_links

router = APIRouter(tags=['majors'])
logger = logging.getLogger(__name__)


class MajorFields(BaseModel):
    name: str = ''
    university_name: str = ''
    address: str = ''
    duration: str = ''
    language: str = ''
    grading_system: str = ''
    notes: str = ''
    status: MajorStatus = MajorStatus.LIKED
    exam_ids: list[RecordId] = []


class CreateMajorRequest(MajorFields):
    client_id: RecordId | None = None


class UpdateMajorRequest(MajorFields):
    id: RecordId


class MajorResponse(BaseModel):
    id: int
    name: str
    university_name: str
    address: str
    duration: str
    language: str
    grading_system: str
    notes: str
    status: MajorStatus
    client_id: int | None = None
    exam_ids: list[int] = []


def get_major_or_404(major_id: int, db: Session) -> Major:
    major = db.query(Major).filter(Major.id == major_id).first()
    if major is None:
        raise not_found('Major')
    return major


def to_major_response(major: Major, db: Session) -> MajorResponse:
    return MajorResponse(
        id=major.id,
        name=major.name,
        university_name=major.university_name,
        address=major.address,
        duration=major.duration,
        language=major.language,
        grading_system=major.grading_system,
        notes=major.notes,
        status=major.status,
        client_id=major.client_id,
        exam_ids=exam_links.get_major_exam_ids(db, major.id),
    )


def apply_major_fields(major: Major, data: MajorFields) -> None:
    major.name = data.name
    major.university_name = data.university_name
    major.address = data.address
    major.duration = data.duration
    major.language = data.language
    major.grading_system = data.grading_system
    major.notes = data.notes
    major.status = data.status


@router.get('', response_model=list[MajorResponse])
def list_majors(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        query = db.query(Major)
        if not caller.is_admin:
            query = query.filter(Major.client_id == caller.user_id)
        return [to_major_response(major, db) for major in query.order_by(Major.id.asc()).all()]
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{major_id}', response_model=MajorResponse)
def get_major(
    major_id: RecordIdPath,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        major = get_major_or_404(major_id, db)
        ensure_can_access(caller, major.client_id)
        return to_major_response(major, db)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('', response_model=MajorResponse, status_code=status.HTTP_201_CREATED)
def create_major(
    data: CreateMajorRequest,
    response: Response,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    owner_id = resolve_owner_id(caller, data.client_id)

    try:
        exam_ids = exam_links.validate_exam_ids(db, data.exam_ids, owner_id)

        major = Major(client_id=owner_id)
        apply_major_fields(major, data)
        db.add(major)
        db.flush()
        exam_links.replace_major_exams(db, major.id, exam_ids)
        db.commit()
        db.refresh(major)

        set_location(response, '/majors', major.id)
        return to_major_response(major, db)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.put('/{major_id}', status_code=status.HTTP_204_NO_CONTENT)
def update_major(
    major_id: RecordIdPath,
    data: UpdateMajorRequest,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    ensure_ids_match(major_id, data.id)

    try:
        major = get_major_or_404(major_id, db)
        ensure_can_access(caller, major.client_id)
        exam_ids = exam_links.validate_exam_ids(db, data.exam_ids, major.client_id)

        apply_major_fields(major, data)
        exam_links.replace_major_exams(db, major.id, exam_ids)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{major_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_major(
    major_id: RecordIdPath,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        major = get_major_or_404(major_id, db)
        ensure_can_access(caller, major.client_id)

        cascade.delete_major(db, major)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    logger.info('Client %s deleted major %s', caller.user_id, major_id)
