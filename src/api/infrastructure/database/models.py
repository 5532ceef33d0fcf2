"""SQLAlchemy declarative base and shared column types.

All ORM models inherit from `Base`. `StringList` stores a list of strings
as a native PostgreSQL array and as JSON on other dialects (SQLite in tests).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import DeclarativeBase

StringList = JSON().with_variant(ARRAY(String(255)), "postgresql")


def utc_now() -> datetime:
    """Generate UTC timestamp for database defaults.

    Uses a named function instead of lambda for SQLAlchemy 2.0 compatibility.
    """
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    type_annotation_map: dict[type, Any] = {}
