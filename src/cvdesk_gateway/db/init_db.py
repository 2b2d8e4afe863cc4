"""
cvdesk_gateway.db.init_db

Table bootstrap for dev/test.

Responsibilities:
- Create the profile tables when running outside prod.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from cvdesk_gateway.db import models  # noqa: F401  # registers tables on Base.metadata
from cvdesk_gateway.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Create missing tables. Prod runs Alembic migrations instead.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
