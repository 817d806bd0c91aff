from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mentiva.core.clock import CalendarClock, fixed_clock
from mentiva.db import Base
from mentiva.db.models.user import AllowedEmail, User, UserSession
from mentiva.services.user_service import first_name, get_or_create_user, is_email_allowed, resolve_session


def test_fixed_clock_calendar_helpers() -> None:
    clock = fixed_clock(date(2026, 10, 18))  # Sunday

    assert clock.today() == date(2026, 10, 18)
    assert clock.yesterday() == date(2026, 10, 17)
    assert clock.week_start() == date(2026, 10, 12)
    assert clock.week_dates()[-1] == date(2026, 10, 18)
    assert clock.month_start() == date(2026, 10, 1)
    assert clock.day_name() == "Sunday"
    assert clock.is_weekend() is True
    assert clock.is_weekend(date(2026, 10, 16)) is False


def test_clock_uses_utc_date() -> None:
    late_evening_west = datetime(2026, 10, 14, 22, 30, tzinfo=timezone(timedelta(hours=-5)))
    clock = CalendarClock(now=lambda: late_evening_west)

    assert clock.today() == date(2026, 10, 15)


def test_first_name() -> None:
    assert first_name(User(full_name="Ana Maria Lopez")) == "Ana"
    assert first_name(User(full_name="   ")) == "friend"
    assert first_name(None) == "friend"


@pytest.fixture()
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def test_resolve_session_and_allow_list(session) -> None:
    user = get_or_create_user(session, uuid4())
    user.email = "ana@example.com"
    now = datetime(2026, 10, 14, 12, tzinfo=timezone.utc)
    session.add(UserSession(token="live", user_id=user.id, expires_at=now + timedelta(days=1)))
    session.add(UserSession(token="old", user_id=user.id, expires_at=now - timedelta(days=1)))
    session.add(AllowedEmail(email="ana@example.com"))
    session.commit()

    assert resolve_session(session, "live", now).id == user.id
    assert resolve_session(session, "old", now) is None
    assert resolve_session(session, "missing", now) is None
    assert is_email_allowed(session, " ANA@example.com ") is True
    assert is_email_allowed(session, "bob@example.com") is False
    assert is_email_allowed(session, None) is False
    assert get_or_create_user(session, user.id) is user
