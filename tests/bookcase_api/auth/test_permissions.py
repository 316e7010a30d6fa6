import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from bookcase_api.auth import jwt_handler
from bookcase_api.auth.dependencies import CallerIdentity, get_current_user
from bookcase_api.auth.permissions import can_access, ensure_can_access, resolve_owner_id


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


@pytest.mark.parametrize(
    ('caller', 'owner_id', 'expected'),
    [
        (CallerIdentity(user_id=1), 1, True),
        (CallerIdentity(user_id=1), 2, False),
        (CallerIdentity(user_id=1, role='Admin'), 2, True),
        (CallerIdentity(user_id=1, role='Other'), 2, False),
    ],
)
def test_can_access(caller: CallerIdentity, owner_id: int, expected: bool) -> None:
    assert can_access(caller, owner_id) is expected


def test_ensure_can_access_raises_forbidden_for_other_owner() -> None:
    with pytest.raises(HTTPException) as exception_info:
        ensure_can_access(CallerIdentity(user_id=1), 2)

    assert exception_info.value.status_code == 403


def test_resolve_owner_id_overwrites_owner_for_non_admin() -> None:
    assert resolve_owner_id(CallerIdentity(user_id=7), 999) == 7
    assert resolve_owner_id(CallerIdentity(user_id=7), None) == 7


def test_resolve_owner_id_honors_owner_for_admin() -> None:
    admin = CallerIdentity(user_id=1, role='Admin')

    assert resolve_owner_id(admin, 999) == 999
    assert resolve_owner_id(admin, None) == 1


def test_get_current_user_reads_id_and_role_from_claims() -> None:
    token = jwt_handler.create_access_token(subject='42', claims={'role': 'Admin'})

    caller = get_current_user(_credentials(token))

    assert caller == CallerIdentity(user_id=42, role='Admin')
    assert caller.is_admin


def test_get_current_user_defaults_to_user_role() -> None:
    token = jwt_handler.create_access_token(subject='5')

    caller = get_current_user(_credentials(token))

    assert caller.role == 'User'
    assert not caller.is_admin


def test_get_current_user_rejects_garbage_token() -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_current_user(_credentials('not-a-token'))

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid token'


def test_get_current_user_rejects_non_numeric_subject() -> None:
    token = jwt_handler.create_access_token(subject='alice')

    with pytest.raises(HTTPException) as exception_info:
        get_current_user(_credentials(token))

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid token subject'
