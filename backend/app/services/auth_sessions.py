"""Server-side login sessions referenced by the signed session cookie."""

import logging
from datetime import timedelta
from typing import Tuple
from uuid import uuid4

from sqlalchemy.orm import Session

from backend.app.core.security import create_session_token, decode_session_token
from backend.app.core.settings import get_settings
from backend.app.core.time import as_utc, utc_now
from backend.app.models.auth_session import AuthSession
from backend.app.models.user import User

logger = logging.getLogger(__name__)


def start_session(db: Session, user: User) -> Tuple[AuthSession, str]:
    """Persist a new session for the user and return it with its cookie token."""
    settings = get_settings()
    now = utc_now()
    auth_session = AuthSession(
        id=uuid4().hex,
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(days=settings.SESSION_DURATION_DAYS),
    )
    db.add(auth_session)
    user.last_login = now
    db.commit()
    db.refresh(auth_session)
    token = create_session_token(user.id, auth_session.id)
    return auth_session, token


def _lookup_session(db: Session, token: str) -> AuthSession:
    payload = decode_session_token(token)
    session_id = payload.get("sid")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise ValueError("Invalid token")
    if not session_id:
        raise ValueError("Invalid token")

    auth_session = (
        db.query(AuthSession)
        .filter(AuthSession.id == session_id, AuthSession.user_id == user_id)
        .first()
    )
    if auth_session is None:
        raise ValueError("Unknown session")
    return auth_session


def resolve_session_user(db: Session, token: str) -> User:
    """Return the user behind a session token; raise ValueError if it is not usable."""
    auth_session = _lookup_session(db, token)
    if as_utc(auth_session.expires_at) < utc_now():
        raise ValueError("Session expired")
    return auth_session.user


def end_session(db: Session, token: str) -> None:
    auth_session = _lookup_session(db, token)
    user_id = auth_session.user_id
    db.delete(auth_session)
    db.commit()
    logger.info("User %s logged out", user_id)
