"""Database column type helpers."""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON, TypeDecorator


class JSONDocument(TypeDecorator):
    """JSON payload column: JSONB on Postgres, plain JSON on SQLite test databases.

    Holds vision-board analyses, weekly focus goal lists and per-goal context maps.
    """

    impl = JSONB
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())
