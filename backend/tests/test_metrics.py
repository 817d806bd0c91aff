"""Tests for metrics helpers."""
from __future__ import annotations

from typing import Any, Dict

import pytest

from mentiva.observability import metrics
from mentiva.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.ended = False
        self.error_info = None

    def update(self, error_info=None, **kwargs) -> None:
        self.error_info = error_info

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


def test_log_metric_closes_trace(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    metrics.log_metric("demo_metric", 42, metadata={"foo": "bar"})

    assert dummy_client.traces, "Metric call should record a trace"
    assert dummy_client.traces[0].name == "metric:demo_metric"
    assert dummy_client.traces[0].metadata["value"] == 42
    assert dummy_client.traces[0].metadata["foo"] == "bar"
    assert dummy_client.traces[0].ended is True


def test_timed_reports_failure(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    with pytest.raises(RuntimeError):
        with metrics.timed("weekly_plan.run"):
            raise RuntimeError("boom")

    names = [t.name for t in dummy_client.traces]
    assert names == ["metric:weekly_plan.run.success", "metric:weekly_plan.run.latency_ms"]
    assert dummy_client.traces[0].metadata["value"] == 0


def test_trace_records_error_info(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    with pytest.raises(ValueError):
        with tracing.trace("missions.generate", metadata={"lang": "en", "skip": None}, user_id="u-1"):
            raise ValueError("bad output")

    recorded = dummy_client.traces[0]
    assert recorded.metadata == {"lang": "en", "user_id": "u-1"}
    assert recorded.error_info == {"exception_type": "ValueError", "message": "bad output"}
    assert recorded.ended is True
