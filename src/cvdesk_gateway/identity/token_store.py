"""
cvdesk_gateway.identity.token_store

Session-token identity store.

Responsibilities:
- Implement `IdentityStore` over signed session tokens + a profile backend.
"""

from __future__ import annotations

from typing import Protocol

from cvdesk_gateway.access.models import PrincipalRecord
from cvdesk_gateway.auth.jwt import JwtConfig, JwtValidationError, session_subject
from cvdesk_gateway.observability.logging import get_logger

log = get_logger(__name__)


class ProfileSource(Protocol):
    async def get_profile(self, user_id: str) -> PrincipalRecord | None: ...


class TokenIdentityStore:
    def __init__(self, *, cfg: JwtConfig, profiles: ProfileSource) -> None:
        self._cfg = cfg
        self._profiles = profiles

    async def lookup_principal_by_session_evidence(
        self, evidence: str
    ) -> PrincipalRecord | None:
        try:
            user_id = session_subject(cfg=self._cfg, token=evidence)
        except JwtValidationError as e:
            # Bad, expired and foreign tokens all mean "no session".
            log.debug("session_token_rejected", reason=str(e))
            return None
        return await self._profiles.get_profile(user_id)
