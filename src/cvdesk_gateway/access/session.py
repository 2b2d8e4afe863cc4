"""
cvdesk_gateway.access.session

Session resolution.

Responsibilities:
- Turn raw session evidence (cookie/bearer value) into a `Principal`.
- Fail closed: missing evidence, unknown sessions and store failures all
  resolve to `UNAUTHENTICATED`.
"""

from __future__ import annotations

from typing import Protocol

from cvdesk_gateway.access.models import (
    UNAUTHENTICATED,
    Principal,
    PrincipalRecord,
    Unauthenticated,
)
from cvdesk_gateway.observability.logging import get_logger

log = get_logger(__name__)


class IdentityStore(Protocol):
    async def lookup_principal_by_session_evidence(
        self, evidence: str
    ) -> PrincipalRecord | None: ...


class SessionResolver:
    def __init__(self, store: IdentityStore) -> None:
        self._store = store

    async def resolve(self, evidence: str | None) -> Principal | Unauthenticated:
        if not evidence:
            return UNAUTHENTICATED

        try:
            record = await self._store.lookup_principal_by_session_evidence(evidence)
        except Exception as e:
            # Fail closed. CancelledError is a BaseException and propagates.
            log.warning("identity_lookup_failed", error_type=type(e).__name__, error=str(e))
            return UNAUTHENTICATED

        if record is None or not record.id:
            return UNAUTHENTICATED
        return Principal.from_record(record)


class RequestScopedResolver:
    """
    Memoizes one resolution for the lifetime of a single request.
    Create a new instance per request; never share one across requests.
    """

    def __init__(self, resolver: SessionResolver, evidence: str | None) -> None:
        self._resolver = resolver
        self._evidence = evidence
        self._result: Principal | Unauthenticated | None = None

    async def resolve(self) -> Principal | Unauthenticated:
        if self._result is None:
            self._result = await self._resolver.resolve(self._evidence)
        return self._result


# --- Module Notes -----------------------------------------------------------
# The resolver never says *why* a session was rejected; callers only see
# Principal vs UNAUTHENTICATED.
