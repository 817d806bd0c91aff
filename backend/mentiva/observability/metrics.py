"""Lightweight metrics helpers."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from mentiva.observability.tracing import trace

logger = logging.getLogger(__name__)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a metric as a short Opik trace when Opik is enabled."""
    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)
    with trace(f"metric:{name}", metadata=payload):
        pass


@contextmanager
def timed(name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[None]:
    """Emit ``<name>.success`` (1/0) and ``<name>.latency_ms`` around a block."""
    start = perf_counter()
    succeeded = False
    try:
        yield
        succeeded = True
    finally:
        latency_ms = (perf_counter() - start) * 1000
        log_metric(f"{name}.success", 1 if succeeded else 0, metadata=metadata)
        log_metric(f"{name}.latency_ms", latency_ms, metadata=metadata)
        if not succeeded:
            logger.debug("%s failed after %.1fms", name, latency_ms)
