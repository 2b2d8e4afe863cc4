"""
cvdesk_gateway.identity.sql

Profile backend over the local `users` table.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cvdesk_gateway.access.models import PrincipalRecord
from cvdesk_gateway.db.models import User
from cvdesk_gateway.db.repositories.users import UserRepo
from cvdesk_gateway.db.session import session_scope


def record_from_user(user: User) -> PrincipalRecord:
    return PrincipalRecord(
        id=user.id,
        display_name=user.name or "",
        role=user.role,
        status=user.status or "",
    )


class SqlProfileSource:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_profile(self, user_id: str) -> PrincipalRecord | None:
        # Read-only; one short session per lookup.
        async with session_scope(self._session_factory) as session:
            user = await UserRepo(session).get(user_id)
            return None if user is None else record_from_user(user)
