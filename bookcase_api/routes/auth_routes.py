from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookcase_api.auth.dependencies import CallerIdentity, get_current_user
from bookcase_api.database import get_db
from bookcase_api.routes.common import database_unavailable
from bookcase_api.services.auth_service import AuthResponse, AuthService, LoginRequest, RegisterRequest

router = APIRouter(tags=['auth'])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=AuthResponse)
def register(data: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    try:
        result = auth_service.register(data)
    except SQLAlchemyError as exc:
        auth_service.db.rollback()
        raise database_unavailable() from exc

    if result is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
    return result


@router.post("/login", response_model=AuthResponse)
def login(data: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    try:
        result = auth_service.login(data)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc

    if result is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    return result


@router.get("/me")
def me(current_user: CallerIdentity = Depends(get_current_user)):
    return {"id": current_user.user_id, "role": current_user.role}
