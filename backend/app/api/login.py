"""Login, logout and current-user endpoints."""

import logging

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.security import verify_password
from backend.app.db.session import get_db
from backend.app.dependencies.auth import clear_session_cookie, get_current_user, set_session_cookie
from backend.app.models.user import User
from backend.app.schemas.login import LoginRequest
from backend.app.schemas.user import SessionResponse, UserRead
from backend.app.services.auth_sessions import end_session, start_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=SessionResponse)
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not user.hashed_password:
        logger.warning("Failed login for unknown email")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not verify_password(credentials.password, user.hashed_password):
        logger.warning("Failed login for user %s", user.id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    _, token = start_session(db, user)
    set_session_cookie(response, token)
    logger.info("User %s logged in", user.id)
    return {"user": user}


@router.post("/logout")
def logout(response: Response, db: Session = Depends(get_db), session_id: str | None = Cookie(default=None)):
    if not session_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        end_session(db, session_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    clear_session_cookie(response)
    return {"status": "ok"}


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user
