from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt

from app.core.config import settings
from app.core.security import decode_session_token
from app.services.sessions import BookingSession, store

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/session")

def get_session_id(token: str = Depends(oauth2_scheme)) -> str:
    try:
        return decode_session_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

def get_booking_session(session_id: str = Depends(get_session_id)) -> BookingSession:
    """Booking state of the caller; recreated empty if the process restarted."""
    return store.get_or_create(session_id)
