"""Database package: declarative base, session factory and every mapped model."""

from mentiva.db.base import Base, SessionLocal, engine
from mentiva.db import models  # noqa: F401  registers tables on Base.metadata

__all__ = ["Base", "SessionLocal", "engine"]
