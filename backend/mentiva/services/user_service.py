"""Helpers for working with users, sessions and the allow-list."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mentiva.db.models.user import AllowedEmail, User, UserSession


def get_or_create_user(db: Session, user_id: UUID) -> User:
    """Fetch an existing user or create a new row safely."""
    user = db.get(User, user_id)
    if user:
        return user

    user = User(id=user_id)
    db.add(user)
    try:
        db.flush()
        return user
    except IntegrityError:
        db.rollback()
        existing = db.get(User, user_id)
        if existing:
            return existing
        raise


def resolve_session(db: Session, token: str, now: Optional[datetime] = None) -> Optional[User]:
    """Return the user behind a session token, or None when unknown or expired."""
    if not token:
        return None
    session_row = db.get(UserSession, token)
    if session_row is None:
        return None
    if session_row.expires_at is not None:
        expires_at = session_row.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= (now or datetime.now(timezone.utc)):
            return None
    return db.get(User, session_row.user_id)


def is_email_allowed(db: Session, email: Optional[str]) -> bool:
    if not email:
        return False
    return db.get(AllowedEmail, email.strip().lower()) is not None


def first_name(user: Optional[User], fallback: str = "friend") -> str:
    if user is None or not user.full_name:
        return fallback
    parts = user.full_name.split()
    return parts[0] if parts else fallback
