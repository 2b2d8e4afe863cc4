"""
cvdesk_gateway.services.sign_in

First-sign-in provisioning and session issuing.

Responsibilities:
- Create a profile with the default role the first time an email signs in.
- Issue the session token that later resolves back to that profile.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from cvdesk_gateway.auth.jwt import JwtConfig, issue_session_token
from cvdesk_gateway.db.models import User
from cvdesk_gateway.db.repositories.users import UserRepo
from cvdesk_gateway.observability.logging import get_logger
from cvdesk_gateway.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SignInResult:
    user: User
    token: str
    created: bool


class SignInService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings

    async def sign_in(self, *, email: str, name: str = "") -> SignInResult:
        """
        Called once the external identity provider has vouched for `email`.
        """

        users = UserRepo(self._session)
        user = await users.get_by_email(email)
        created = user is None
        if user is None:
            user = await users.create(email=email, name=name)
            await self._session.commit()
            log.info("user_provisioned", user_id=user.id, role=user.role)

        token = issue_session_token(
            cfg=JwtConfig.from_settings(self._settings),
            user_id=user.id,
            ttl=timedelta(minutes=self._settings.session_ttl_minutes),
        )
        log.info("signed_in", user_id=user.id, created=created)
        return SignInResult(user=user, token=token, created=created)
