from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from school_cms.exceptions import AuthError

from .settings import AuthSettings


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(subject: str, settings: AuthSettings, *, lifetime_seconds: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    lifetime = settings.token_lifetime_seconds if lifetime_seconds is None else lifetime_seconds
    payload: dict[str, Any] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=lifetime)).timestamp()),
    }
    return jwt.encode(payload, settings.signing_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: AuthSettings) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.signing_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Token expired, please log in again", status_code=403) from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError("Invalid token", status_code=403) from exc
    if "sub" not in payload:
        raise AuthError("Invalid token", status_code=403)
    return payload
