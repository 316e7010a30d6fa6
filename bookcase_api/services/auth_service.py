"""Registration, login and token issuing for clients.

The service is deliberately small: it hashes and verifies passwords with
passlib and delegates token signing to `bookcase_api.auth.jwt_handler`.
Failed registrations and logins return `None`; the HTTP layer decides which
status code that maps to.
"""

import logging

from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookcase_api.auth import jwt_handler
from bookcase_api.core import config
from bookcase_api.models.client import Client

logger = logging.getLogger(__name__)

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class RegisterRequest(BaseModel):
    username: str = ""
    password: str = ""
    role: str = config.USER_ROLE


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class AuthResponse(BaseModel):
    token: str = ""
    username: str = ""
    role: str = ""


def hash_password(password: str) -> str:
    return PWD_CTX.hash(password)


def normalize_role(role: str | None) -> str:
    """Only an explicit "Admin" request yields the admin role."""
    return config.ADMIN_ROLE if role == config.ADMIN_ROLE else config.USER_ROLE


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def get_by_username(self, username: str) -> Client | None:
        return self.db.query(Client).filter(Client.username == username).first()

    def create_client(self, username: str, password: str, role: str | None) -> Client | None:
        """Store a client with a hashed password without issuing a token.

        Returns `None` when the username is already taken.
        """
        client = self._add_client(username, password, role)
        if client is None or not self._commit_new_client(username):
            return None
        self.db.refresh(client)
        return client

    def register(self, request: RegisterRequest) -> AuthResponse | None:
        """Create a client with a hashed password and return a signed token.

        Returns `None` when the username is already taken. The token is signed
        before the commit, so a missing signing key leaves no account behind.
        """
        client = self._add_client(request.username, request.password, request.role)
        if client is None:
            return None

        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.info('Registration rejected: username %r already exists', request.username)
            return None

        username, role, client_id = client.username, client.role, client.id
        try:
            token = self.generate_jwt_token(username, role, client_id)
        except RuntimeError:
            self.db.rollback()
            raise

        if not self._commit_new_client(username):
            return None
        logger.info('Registered client %s with role %s', client_id, role)
        return AuthResponse(token=token, username=username, role=role)

    def login(self, request: LoginRequest) -> AuthResponse | None:
        """Verify credentials and return a signed token, or `None` on failure."""
        client = self.get_by_username(request.username)
        if client is None or not PWD_CTX.verify(request.password, client.password_hash):
            logger.warning('Failed login for username %r', request.username)
            return None

        token = self.generate_jwt_token(client.username, client.role, client.id)
        return AuthResponse(token=token, username=client.username, role=client.role)

    def generate_jwt_token(self, username: str, role: str, user_id: int) -> str:
        return jwt_handler.create_access_token(
            subject=str(user_id),
            claims={"name": username, "role": role},
        )

    def _add_client(self, username: str, password: str, role: str | None) -> Client | None:
        if self.get_by_username(username) is not None:
            logger.info('Registration rejected: username %r already exists', username)
            return None

        client = Client(
            username=username,
            password_hash=hash_password(password),
            role=normalize_role(role),
        )
        self.db.add(client)
        return client

    def _commit_new_client(self, username: str) -> bool:
        # The lookup in _add_client can lose a race with a concurrent insert.
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info('Registration rejected: username %r already exists', username)
            return False
        return True
