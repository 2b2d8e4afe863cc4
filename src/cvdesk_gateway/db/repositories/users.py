"""
cvdesk_gateway.db.repositories.users

Repository for `User` profiles.

Responsibilities:
- Look up profiles by id (session resolution) and email (sign-in).
- Create profiles on first sign-in and apply profile/role updates.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cvdesk_gateway.access.capabilities import DEFAULT_ROLE, Role
from cvdesk_gateway.db.models import DEFAULT_STATUS, User, utcnow


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email.strip().lower())
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(
        self,
        *,
        email: str,
        name: str = "",
        role: Role = DEFAULT_ROLE,
        status: str = DEFAULT_STATUS,
        workplace: str | None = None,
    ) -> User:
        user = User(
            email=email.strip().lower(),
            name=name,
            role=Role(role).value,
            status=status,
            workplace=workplace,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def update_profile(
        self,
        user_id: str,
        *,
        name: str | None = None,
        status: str | None = None,
        workplace: str | None = None,
    ) -> User | None:
        # Self-service fields only; role changes go through `set_role`.
        user = await self._session.get(User, user_id, with_for_update=True)
        if user is None:
            return None
        if name is not None:
            user.name = name
        if status is not None:
            user.status = status
        if workplace is not None:
            user.workplace = workplace
        user.updated_at = utcnow()
        await self._session.flush()
        return user

    async def set_role(self, user_id: str, role: Role) -> User | None:
        user = await self._session.get(User, user_id, with_for_update=True)
        if user is None:
            return None
        user.role = Role(role).value
        user.updated_at = utcnow()
        await self._session.flush()
        return user


# --- Module Notes -----------------------------------------------------------
# Emails are normalized to lowercase on write and lookup.
