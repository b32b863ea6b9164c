"""
User and contact submission models.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from elevion.infrastructure.db.models.base import (
    CreatedAtMixin,
    IntIdMixin,
    NaiveUTCDateTime,
    TimestampMixin,
)


class UserBase(SQLModel):
    """Fields shared between the users table and its create schema."""

    username: str = Field(..., min_length=3, max_length=64)
    email: str = Field(..., max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: str = Field(default="user", max_length=20)


class User(UserBase, IntIdMixin, TimestampMixin, table=True):
    """
    Registered account.

    username and email are unique; stripe_customer_id is filled once the
    payment processor has a customer for this user.
    """

    __tablename__ = "users"

    username: str = Field(..., unique=True, index=True, max_length=64)
    email: str = Field(..., unique=True, index=True, max_length=255)
    password_hash: str = Field(..., description="Already-hashed password")
    stripe_customer_id: Optional[str] = Field(default=None, index=True)
    preferences: Optional[str] = Field(
        default=None,
        description="JSON-encoded content preferences for feed personalization"
    )
    is_verified: bool = Field(default=False)
    last_login_at: Optional[datetime] = Field(default=None, sa_type=NaiveUTCDateTime)


class UserCreate(UserBase):
    """Schema for creating a user. Hashing happens before this layer."""

    password_hash: str
    preferences: Optional[str] = None


class UserUpdate(SQLModel):
    """Partial update for a user; only supplied fields are written."""

    email: Optional[str] = Field(default=None, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: Optional[str] = Field(default=None, max_length=20)
    password_hash: Optional[str] = None
    stripe_customer_id: Optional[str] = None
    preferences: Optional[str] = None
    is_verified: Optional[bool] = None
    last_login_at: Optional[datetime] = None


class ContactSubmissionBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., max_length=255)
    company: Optional[str] = Field(default=None, max_length=200)
    message: str = Field(..., min_length=1)


class ContactSubmission(ContactSubmissionBase, IntIdMixin, CreatedAtMixin, table=True):
    """Inbound contact-form message."""

    __tablename__ = "contact_submissions"


class ContactSubmissionCreate(ContactSubmissionBase):
    pass
