"""Handles user registration for Freelance Forge."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_password_hash
from backend.app.db.session import get_db
from backend.app.dependencies.auth import set_session_cookie
from backend.app.models.user import User
from backend.app.schemas.user import SessionResponse, UserCreate
from backend.app.services.auth_sessions import start_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=SessionResponse)
def register_user(user_in: UserCreate, response: Response, db: Session = Depends(get_db)):
    if not user_in.password.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and password are required")
    existing = db.query(User).filter(User.email == user_in.email).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already exists")
    hashed_password = get_password_hash(user_in.password)  # Hash password before storing
    address = user_in.address.strip() if user_in.address and user_in.address.strip() else None
    user = User(email=user_in.email, hashed_password=hashed_password, address=address)
    db.add(user)
    db.commit()
    db.refresh(user)

    _, token = start_session(db, user)
    set_session_cookie(response, token)
    logger.info("Registered user %s", user.id)
    return {"user": user}
