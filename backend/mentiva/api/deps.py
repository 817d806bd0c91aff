"""Shared FastAPI dependencies: the calendar clock and the session-bound user."""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from mentiva.core.clock import CalendarClock
from mentiva.core.config import settings
from mentiva.core.context import user_id_ctx_var
from mentiva.core.errors import Forbidden, Unauthorized
from mentiva.db.deps import get_db
from mentiva.db.models.user import User
from mentiva.services.completion_client import get_completion_client
from mentiva.services.user_service import is_email_allowed, resolve_session

__all__ = ["get_clock", "get_completion_client", "get_current_user", "session_token"]

_clock = CalendarClock()


def get_clock() -> CalendarClock:
    return _clock


def session_token(request: Request) -> Optional[str]:
    """Session token from the session cookie, else from ``Authorization: Bearer``."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def _authenticate(db: Session, token: Optional[str]) -> User:
    user = resolve_session(db, token) if token else None
    if user is None:
        raise Unauthorized()
    if settings.allowlist_enabled and not is_email_allowed(db, user.email):
        raise Forbidden("Email is not on the access list")
    return user


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the caller and bind its id to the logging context for the rest of the request."""
    user = await run_in_threadpool(_authenticate, db, session_token(request))
    user_id_ctx_var.set(str(user.id))
    return user
