"""
Client preview access codes.

A preview is valid iff it is active and its expiry lies in the future.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from elevion.infrastructure.db.models.base import IntIdMixin, NaiveUTCDateTime


class ClientPreviewBase(SQLModel):
    code: str = Field(..., min_length=1, max_length=64)
    client_name: str = Field(..., min_length=1, max_length=200)
    project_id: int
    expires_at: datetime = Field(..., sa_type=NaiveUTCDateTime)
    is_active: bool = Field(default=True)


class ClientPreview(ClientPreviewBase, IntIdMixin, table=True):
    """Human-chosen code granting a client access to a project preview."""

    __tablename__ = "client_previews"

    code: str = Field(..., unique=True, index=True, max_length=64)


class ClientPreviewCreate(ClientPreviewBase):
    pass


class ClientPreviewUpdate(SQLModel):
    client_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    is_active: Optional[bool] = None
