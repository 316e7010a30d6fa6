from datetime import datetime, timedelta, timezone

import jwt

from bookcase_api.core import config


def create_access_token(subject: str, claims: dict | None = None, expires_minutes: int | None = None) -> str:
    if not config.JWT_SECRET_KEY:
        raise RuntimeError("JWT Key not configured")
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    now = datetime.now(timezone.utc)
    payload = {
        **(claims or {}),
        "sub": subject,
        "iss": config.JWT_ISSUER,
        "aud": config.JWT_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    if not config.JWT_SECRET_KEY:
        raise RuntimeError("JWT Key not configured")
    return jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        audience=config.JWT_AUDIENCE,
        issuer=config.JWT_ISSUER,
    )
