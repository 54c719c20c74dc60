from fastapi import APIRouter
from pydantic import BaseModel

from app.core.security import create_session_token, new_session_id
from app.services.sessions import store

router = APIRouter()

class SessionToken(BaseModel):
    access_token: str
    token_type: str
    session_id: str

@router.post("/session", response_model=SessionToken)
def open_session():
    """Open an anonymous booking session.

    The returned bearer token scopes passengers and the order draft to this session only.
    """
    session_id = new_session_id()
    store.create(session_id)
    return {"access_token": create_session_token(session_id), "token_type": "bearer", "session_id": session_id}
