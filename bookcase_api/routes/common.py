from typing import Annotated

from fastapi import HTTPException, Path, Response, status
from pydantic import Field

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'

# Primary keys are stored as signed 64-bit integers.
MIN_DB_ID = -(2**63)
MAX_DB_ID = 2**63 - 1

RecordId = Annotated[int, Field(ge=MIN_DB_ID, le=MAX_DB_ID)]
RecordIdPath = Annotated[int, Path(ge=MIN_DB_ID, le=MAX_DB_ID)]


def database_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=DATABASE_UNAVAILABLE_DETAIL,
    )


def ensure_ids_match(path_id: int, body_id: int) -> None:
    if path_id != body_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Path id does not match body id.',
        )


def not_found(resource: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f'{resource} not found.',
    )


def set_location(response: Response, prefix: str, record_id: int) -> None:
    response.headers['Location'] = f'{prefix}/{record_id}'
