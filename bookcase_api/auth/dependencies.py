from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bookcase_api.auth import jwt_handler
from bookcase_api.core import config

security = HTTPBearer()


@dataclass(frozen=True)
class CallerIdentity:
    """Identity of the authenticated caller, taken from the token claims."""
    user_id: int
    role: str = config.USER_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == config.ADMIN_ROLE


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CallerIdentity:
    token = credentials.credentials
    try:
        payload = jwt_handler.decode_access_token(token)
    except Exception as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject") from exc

    return CallerIdentity(user_id=user_id, role=payload.get("role") or config.USER_ROLE)
