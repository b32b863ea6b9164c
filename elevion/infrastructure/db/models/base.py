"""
Base Model for SQLModel ORM

Provides common fields and behavior for all database models.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel


# JSON payload columns: JSONB on PostgreSQL, generic JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utc_now() -> datetime:
    """
    Current UTC time as a naive datetime.

    Columns are `timestamp without time zone` holding UTC values.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Convert an offset-aware datetime to naive UTC.

    Naive values are taken to be UTC already and returned unchanged.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class NaiveUTCDateTime(TypeDecorator):
    """
    `timestamp without time zone` column holding UTC.

    Offset-aware values (e.g. `2024-06-01T14:00:00+02:00` from a browser)
    are shifted to UTC before they are bound.
    """

    impl = DateTime(timezone=False)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_naive_utc(value)


class IntIdMixin(SQLModel):
    """Mixin providing an auto-assigned integer primary key."""

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Surrogate key assigned by the store"
    )


class CreatedAtMixin(SQLModel):
    """Mixin for append-only rows that are never updated."""

    created_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        sa_type=NaiveUTCDateTime,
        description="Record creation timestamp (UTC)"
    )


class TimestampMixin(CreatedAtMixin):
    """
    Mixin providing creation and update timestamps.

    `updated_at` is written explicitly by every repository update.
    """

    updated_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        sa_type=NaiveUTCDateTime,
        description="Last update timestamp (UTC)"
    )
