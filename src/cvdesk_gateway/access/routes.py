"""
cvdesk_gateway.access.routes

Route classification.

Responsibilities:
- Map a request path to the protection class it requires.
- Resolve overlapping prefixes: longest wins, equal length goes to the stricter class.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from cvdesk_gateway.access.capabilities import Capability


class ProtectionClass(enum.StrEnum):
    public = "public"
    authenticated = "authenticated"
    admin_only = "admin_only"

    @property
    def strictness(self) -> int:
        return _STRICTNESS[self]


_STRICTNESS = {
    ProtectionClass.public: 0,
    ProtectionClass.authenticated: 1,
    ProtectionClass.admin_only: 2,
}


@dataclass(frozen=True, slots=True)
class RouteRule:
    prefix: str
    protection: ProtectionClass
    # Only meaningful for admin_only; None means the policy-wide admin capability.
    capability: Capability | None = None

    def matches(self, path: str) -> bool:
        return path.startswith(self.prefix)


PUBLIC_FALLBACK = RouteRule(prefix="", protection=ProtectionClass.public)


class RouteClassifier:
    """
    Prefix-based classifier over a fixed list of rules.
    Pure: no I/O, no state beyond the rules given at construction.
    """

    def __init__(self, rules: Iterable[RouteRule]) -> None:
        # Longest prefix first, then strictest, so the first match is the answer.
        self._rules: tuple[RouteRule, ...] = tuple(
            sorted(rules, key=lambda r: (len(r.prefix), r.protection.strictness), reverse=True)
        )

    @property
    def rules(self) -> tuple[RouteRule, ...]:
        return self._rules

    def match(self, path: str) -> RouteRule:
        for rule in self._rules:
            if rule.matches(path):
                return rule
        return PUBLIC_FALLBACK

    def classify(self, path: str) -> ProtectionClass:
        return self.match(path).protection


DEFAULT_ROUTE_RULES: tuple[RouteRule, ...] = (
    RouteRule("/", ProtectionClass.public),
    RouteRule("/login", ProtectionClass.public),
    RouteRule("/unauthorized", ProtectionClass.public),
    RouteRule("/dashboard", ProtectionClass.authenticated),
    RouteRule("/tasks", ProtectionClass.authenticated),
    RouteRule("/profile", ProtectionClass.authenticated),
    RouteRule("/tasks/new", ProtectionClass.admin_only, Capability.edit_all),
    RouteRule("/all-tasks", ProtectionClass.admin_only, Capability.view_all),
    RouteRule("/accounts", ProtectionClass.admin_only, Capability.view_accounts),
)


# --- Module Notes -----------------------------------------------------------
# Matching is plain string-prefix, so "/tasks" also covers "/tasks/42" and
# "/tasks-archive". Prefer the stricter reading when adding rules.
