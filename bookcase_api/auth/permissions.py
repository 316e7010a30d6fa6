"""Owner-or-admin access rules shared by every resource router."""

import logging

from fastapi import HTTPException, status

from bookcase_api.auth.dependencies import CallerIdentity

logger = logging.getLogger(__name__)


def can_access(caller: CallerIdentity, owner_id: int | None) -> bool:
    return caller.is_admin or caller.user_id == owner_id


def ensure_can_access(caller: CallerIdentity, owner_id: int | None) -> None:
    if not can_access(caller, owner_id):
        logger.warning('Client %s denied access to a record owned by %s', caller.user_id, owner_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='You do not have access to this resource.',
        )


def resolve_owner_id(caller: CallerIdentity, requested_owner_id: int | None) -> int:
    """Return the owner id a new record should be stored with.

    Admins may create records on behalf of any client. For everyone else the
    requested owner is ignored and replaced with the caller's own id.
    """
    if caller.is_admin and requested_owner_id is not None:
        return requested_owner_id
    return caller.user_id
