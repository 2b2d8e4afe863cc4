"""
cvdesk_gateway.access.models

Access-control domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) attached to a request.
- Define the `UNAUTHENTICATED` outcome of session resolution.
- Define the binary `AuthorizationDecision` produced by the guard.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PrincipalRecord:
    """
    Identity-store view of a user, before it becomes a request Principal.
    """

    id: str
    display_name: str
    role: str
    status: str


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated actor for a single request.

    Built fresh per request and never mutated; a role or status change is only
    visible after the next resolution against the identity store. `role` keeps
    the raw stored value so an unknown role degrades to zero capabilities
    instead of failing construction.
    """

    id: str
    display_name: str
    role: str
    status: str

    @classmethod
    def from_record(cls, record: PrincipalRecord) -> Principal:
        return cls(
            id=record.id,
            display_name=record.display_name or "",
            role=record.role,
            status=record.status or "",
        )


class Unauthenticated(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"


UNAUTHENTICATED = Unauthenticated.UNAUTHENTICATED


@dataclass(frozen=True, slots=True)
class AuthorizationDecision:
    allow: bool
    redirect_target: str | None = None
    # Resolved principal, handed to the page layer as request-scoped context.
    principal: Principal | None = None

    @classmethod
    def allowed(cls, principal: Principal | None = None) -> AuthorizationDecision:
        return cls(allow=True, redirect_target=None, principal=principal)

    @classmethod
    def redirect(
        cls, target: str, principal: Principal | None = None
    ) -> AuthorizationDecision:
        return cls(allow=False, redirect_target=target, principal=principal)


# --- Module Notes -----------------------------------------------------------
# These types cross the API/access boundary; keep them free of framework imports.
