"""
cvdesk_gateway.db.models

Persistence schema for user profiles.

Responsibilities:
- Define the `User` profile row read by the session resolver (id, role, status)
  and maintained by sign-in and profile management.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cvdesk_gateway.access.capabilities import DEFAULT_ROLE
from cvdesk_gateway.db.base import Base

DEFAULT_STATUS = "Available"


def utcnow() -> datetime:
    # Naive UTC timestamps, consistent across SQLite and Postgres.
    return datetime.now(tz=UTC).replace(tzinfo=None)


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False, default="")

    # Stored as a plain string: rows written by other tools may carry roles this
    # service does not know, and those must load (and grant nothing).
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=DEFAULT_ROLE.value)
    status: Mapped[str] = mapped_column(String(64), nullable=False, default=DEFAULT_STATUS)
    workplace: Mapped[str | None] = mapped_column(String(256), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)


# --- Module Notes -----------------------------------------------------------
# Tasks, accounts and CV records belong to the front-end's backend and are not
# modelled here; this service only needs who a user is and what role they hold.
