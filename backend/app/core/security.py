from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import uuid
import jwt

from app.core.config import settings


def new_session_id() -> str:
    return uuid.uuid4().hex


def create_session_token(session_id: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(tz=timezone.utc) + (expires_delta or timedelta(minutes=settings.session_expire_minutes))
    to_encode: dict[str, Any] = {"sub": session_id, "exp": expire, "kind": "booking_session"}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_session_token(token: str) -> str:
    """Return the session id carried by a booking session token.

    Raises jwt.PyJWTError if the token is invalid or expired.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    sub = payload.get("sub")
    if not sub or payload.get("kind") != "booking_session":
        raise jwt.InvalidTokenError("Not a booking session token")
    return sub
