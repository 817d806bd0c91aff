from __future__ import annotations

import json
from datetime import date
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mentiva.api.deps import get_clock, get_completion_client
from mentiva.core.clock import fixed_clock
from mentiva.core.config import settings
from mentiva.db import Base
from mentiva.db.deps import get_db
from mentiva.db.models.daily_task import DailyTask
from mentiva.db.models.north_star import NorthStar
from mentiva.db.models.user import User, UserSession
from mentiva.main import app
from mentiva.services.completion_client import CompletionClient

TODAY = date(2026, 10, 14)
TOKEN = "tok-swap"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


class FakeCompletionClient(CompletionClient):
    def __init__(self):
        self.responses: list[str] = []
        self.calls: list[dict] = []

    def complete(self, system_prompt: str, user_prompt: str, *, max_tokens: int) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt, "max_tokens": max_tokens})
        if not self.responses:
            raise AssertionError("Unexpected completion call")
        return self.responses.pop(0)


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_fk(conn, record):  # pragma: no cover - sqlite setup
        cursor = conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    fake = FakeCompletionClient()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_completion_client] = lambda: fake
    app.dependency_overrides[get_clock] = lambda: fixed_clock(TODAY)
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal, fake
    app.dependency_overrides.clear()


def _seed_day(session_factory) -> dict[str, UUID]:
    session = session_factory()
    try:
        user_id = uuid4()
        session.add(User(id=user_id, email="sam@example.com", full_name="Sam"))
        session.add(UserSession(token=TOKEN, user_id=user_id))
        session.flush()
        session.add(NorthStar(user_id=user_id, goal_text="Run a marathon", is_active=True))
        rows = {
            "non_negotiable": DailyTask(
                user_id=user_id,
                task_text="Run 5km at easy pace",
                enfoque_name="Training",
                task_type="non_negotiable",
                estimated_minutes=30,
                date=TODAY,
                lang="en",
                sort_order=0,
            ),
            "secondary": DailyTask(
                user_id=user_id,
                task_text="Plan meals for the week",
                enfoque_name="Nutrition",
                task_type="secondary",
                estimated_minutes=15,
                date=TODAY,
                lang="en",
                sort_order=1,
            ),
            "micro": DailyTask(
                user_id=user_id,
                task_text="Fill your water bottle",
                enfoque_name="Nutrition",
                task_type="micro",
                estimated_minutes=2,
                date=TODAY,
                lang="en",
                sort_order=2,
            ),
        }
        session.add_all(rows.values())
        session.commit()
        return {task_type: row.id for task_type, row in rows.items()}
    finally:
        session.close()


def _task(session_factory, task_id: UUID) -> DailyTask:
    session = session_factory()
    try:
        return session.get(DailyTask, task_id)
    finally:
        session.close()


def test_swap_secondary_task(client):
    test_client, session_factory, fake = client
    ids = _seed_day(session_factory)
    fake.responses.append(json.dumps({"task_text": "Buy groceries for three dinners", "estimated_minutes": 20}))

    resp = test_client.post("/swap-task", json={"taskId": str(ids["secondary"]), "lang": "en"}, headers=AUTH)

    assert resp.status_code == 200
    task = resp.json()["task"]
    assert task["id"] == str(ids["secondary"])
    assert task["task_text"] == "Buy groceries for three dinners"
    assert task["estimated_minutes"] == 20
    assert task["task_type"] == "secondary"
    assert fake.calls[0]["max_tokens"] == settings.swap_max_tokens

    prompt = fake.calls[0]["user"]
    assert "SECONDARY (10-20 minutes)" in prompt
    assert "NORTH STAR: Run a marathon" in prompt
    assert "ENFOQUE: Nutrition" in prompt
    for existing in ("Run 5km at easy pace", "Plan meals for the week", "Fill your water bottle"):
        assert existing in prompt


def test_swap_micro_task_uses_micro_prompt(client):
    test_client, session_factory, fake = client
    ids = _seed_day(session_factory)
    fake.responses.append(json.dumps({"task_text": "Stretch calves", "estimated_minutes": 0}))

    resp = test_client.post("/swap-task", json={"taskId": str(ids["micro"])}, headers=AUTH)

    assert resp.status_code == 200
    assert resp.json()["task"]["estimated_minutes"] == 1
    assert "MICRO WIN (under 5 minutes)" in fake.calls[0]["user"]


def test_swap_non_negotiable_is_rejected_without_mutation(client):
    test_client, session_factory, fake = client
    ids = _seed_day(session_factory)

    resp = test_client.post("/swap-task", json={"taskId": str(ids["non_negotiable"])}, headers=AUTH)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Cannot swap non-negotiable task"}
    assert fake.calls == []
    task = _task(session_factory, ids["non_negotiable"])
    assert task.task_text == "Run 5km at easy pace"
    assert task.estimated_minutes == 30


def test_swap_unknown_task_returns_404(client):
    test_client, session_factory, _ = client
    _seed_day(session_factory)

    resp = test_client.post("/swap-task", json={"taskId": str(uuid4())}, headers=AUTH)

    assert resp.status_code == 404
    assert resp.json() == {"error": "Task not found"}


def test_swap_requires_task_id(client):
    test_client, session_factory, _ = client
    _seed_day(session_factory)

    resp = test_client.post("/swap-task", json={"lang": "en"}, headers=AUTH)

    assert resp.status_code == 400
    assert resp.json() == {"error": "taskId required"}


def test_swap_parse_failure_leaves_task_untouched(client):
    test_client, session_factory, fake = client
    ids = _seed_day(session_factory)
    fake.responses.extend(["no idea", json.dumps({"estimated_minutes": 5})])

    resp = test_client.post("/swap-task", json={"taskId": str(ids["secondary"])}, headers=AUTH)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to swap task"}
    assert _task(session_factory, ids["secondary"]).task_text == "Plan meals for the week"


def test_swap_retries_when_replacement_repeats_a_task(client):
    test_client, session_factory, fake = client
    ids = _seed_day(session_factory)
    fake.responses.extend(
        [
            json.dumps({"task_text": "Fill your WATER bottle", "estimated_minutes": 10}),
            json.dumps({"task_text": "Prep overnight oats", "estimated_minutes": 12}),
        ]
    )

    resp = test_client.post("/swap-task", json={"taskId": str(ids["secondary"])}, headers=AUTH)

    assert resp.status_code == 200
    assert resp.json()["task"]["task_text"] == "Prep overnight oats"
    assert len(fake.calls) == 2
