import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookcase_api.auth.dependencies import CallerIdentity, get_current_user
from bookcase_api.auth.permissions import ensure_can_access
from bookcase_api.core import config
from bookcase_api.database import get_db
from bookcase_api.models.client import Client
from bookcase_api.routes.common import (
    RecordId,
    RecordIdPath,
    database_unavailable,
    ensure_ids_match,
    not_found,
    set_location,
)
from bookcase_api.services import cascade
from bookcase_api.services.auth_service import hash_password, normalize_role

router = APIRouter(tags=['clients'])
logger = logging.getLogger(__name__)


class CreateClientRequest(BaseModel):
    username: str
    password: str
    role: str = config.USER_ROLE


class UpdateClientRequest(BaseModel):
    id: RecordId
    username: str
    password: str | None = None
    role: str | None = None


class ClientResponse(BaseModel):
    id: int
    username: str
    role: str

    class Config:
        from_attributes = True


def get_client_or_404(client_id: int, db: Session) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if client is None:
        raise not_found('Client')
    return client


def ensure_username_available(username: str, db: Session, exclude_id: int | None = None) -> None:
    query = db.query(Client.id).filter(Client.username == username)
    if exclude_id is not None:
        query = query.filter(Client.id != exclude_id)
    if query.first() is not None:
        raise username_taken()


def username_taken() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail='Username already exists.',
    )


@router.get('', response_model=list[ClientResponse])
def list_clients(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        query = db.query(Client)
        if not caller.is_admin:
            query = query.filter(Client.id == caller.user_id)
        return query.order_by(Client.id.asc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{client_id}', response_model=ClientResponse)
def get_client(
    client_id: RecordIdPath,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        client = get_client_or_404(client_id, db)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc

    ensure_can_access(caller, client.id)
    return client


@router.post('', response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    data: CreateClientRequest,
    response: Response,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    if not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Only admins can create clients directly. Use /auth/register instead.',
        )

    try:
        ensure_username_available(data.username, db)

        client = Client(
            username=data.username,
            password_hash=hash_password(data.password),
            role=normalize_role(data.role),
        )
        db.add(client)
        db.commit()
        db.refresh(client)
    except IntegrityError as exc:
        db.rollback()
        raise username_taken() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    set_location(response, '/clients', client.id)
    return client


@router.put('/{client_id}', status_code=status.HTTP_204_NO_CONTENT)
def update_client(
    client_id: RecordIdPath,
    data: UpdateClientRequest,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    ensure_ids_match(client_id, data.id)

    try:
        client = get_client_or_404(client_id, db)
        ensure_can_access(caller, client.id)
        ensure_username_available(data.username, db, exclude_id=client.id)

        client.username = data.username
        if data.password:
            client.password_hash = hash_password(data.password)
        # Role changes from non-admins are ignored rather than rejected.
        if caller.is_admin and data.role is not None:
            client.role = normalize_role(data.role)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise username_taken() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{client_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: RecordIdPath,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    try:
        client = get_client_or_404(client_id, db)
        ensure_can_access(caller, client.id)

        cascade.delete_client(db, client)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    logger.info('Client %s deleted client %s and all owned records', caller.user_id, client_id)
