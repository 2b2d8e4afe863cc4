"""
cvdesk_gateway.access.guard

Authorization guard for page navigation.

Responsibilities:
- Classify the requested path, resolve the session only when the route needs it,
  and produce an allow / redirect decision.
- Keep signed-in users away from the login surface.
- Expose the advisory capability check used by page-level UI affordances.

Flow: Start -> Classified -> Resolved -> Decided. Every branch ends in a decision;
nothing here raises for a bad or missing session.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from cvdesk_gateway.access.capabilities import RolePermissionTable
from cvdesk_gateway.access.models import AuthorizationDecision, Principal
from cvdesk_gateway.access.policy import AccessPolicy
from cvdesk_gateway.access.routes import ProtectionClass
from cvdesk_gateway.access.session import RequestScopedResolver, SessionResolver
from cvdesk_gateway.observability.logging import get_logger
from cvdesk_gateway.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Surfaces:
    login_path: str = "/login"
    unauthorized_path: str = "/unauthorized"
    landing_path: str = "/dashboard"
    return_to_param: str = "next"

    @classmethod
    def from_settings(cls, settings: Settings) -> Surfaces:
        return cls(
            login_path=settings.login_path,
            unauthorized_path=settings.unauthorized_path,
            landing_path=settings.landing_path,
            return_to_param=settings.return_to_param,
        )

    def is_login(self, path: str) -> bool:
        return path.rstrip("/") == self.login_path.rstrip("/")

    def login_redirect(self, requested_path: str) -> str:
        return f"{self.login_path}?{urlencode({self.return_to_param: requested_path})}"


def principal_has_capability(
    principal: Principal | None, capability: str, *, table: RolePermissionTable
) -> bool:
    # Advisory only; the guard is the authoritative check.
    if principal is None:
        return False
    return table.has_capability(principal.role, capability)


class AuthorizationGuard:
    def __init__(
        self,
        *,
        policy: AccessPolicy,
        resolver: SessionResolver,
        surfaces: Surfaces | None = None,
    ) -> None:
        self._policy = policy
        self._resolver = resolver
        self._surfaces = surfaces or Surfaces()

    @property
    def surfaces(self) -> Surfaces:
        return self._surfaces

    @property
    def resolver(self) -> SessionResolver:
        return self._resolver

    def principal_has_capability(self, principal: Principal | None, capability: str) -> bool:
        return principal_has_capability(principal, capability, table=self._policy.table)

    async def authorize(self, path: str, evidence: str | None) -> AuthorizationDecision:
        return await self.decide(path, RequestScopedResolver(self._resolver, evidence))

    async def decide(self, path: str, session: RequestScopedResolver) -> AuthorizationDecision:
        """
        Same as `authorize`, resolving through a request-scoped resolver so later
        consumers in the same request reuse the lookup.
        """

        # Classified
        rule = self._policy.classifier.match(path)
        protection = rule.protection
        on_login = self._surfaces.is_login(path)

        # Resolved: public routes skip the identity store, except the login page.
        principal: Principal | None = None
        if protection is not ProtectionClass.public or on_login:
            resolved = await session.resolve()
            if isinstance(resolved, Principal):
                principal = resolved

        # Decided
        if on_login and principal is not None:
            return AuthorizationDecision.redirect(self._surfaces.landing_path, principal)

        if protection is ProtectionClass.public:
            return AuthorizationDecision.allowed(principal)

        if principal is None:
            target = self._surfaces.login_redirect(path)
            log.info("access_denied", protection=protection.value, reason="unauthenticated")
            return AuthorizationDecision.redirect(target)

        if protection is ProtectionClass.authenticated:
            return AuthorizationDecision.allowed(principal)

        required = self._policy.required_capability(rule)
        if self._policy.table.has_capability(principal.role, required):
            return AuthorizationDecision.allowed(principal)

        log.info(
            "access_denied",
            protection=protection.value,
            reason="missing_capability",
            capability=required.value,
            principal_id=principal.id,
            role=principal.role,
        )
        return AuthorizationDecision.redirect(self._surfaces.unauthorized_path, principal)


# --- Module Notes -----------------------------------------------------------
# Denials carry the principal (when known) so the unauthorized page can still
# render the signed-in user's name.
