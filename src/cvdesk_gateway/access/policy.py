"""
cvdesk_gateway.access.policy

Declarative access policy loading.

Responsibilities:
- Validate a JSON policy document (roles, route rules, admin capability).
- Fail fast on unknown roles, capabilities, or protection classes.
- Produce the immutable table + classifier pair shared by every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cvdesk_gateway.access.capabilities import (
    DEFAULT_ROLE_GRANTS,
    Capability,
    Role,
    RolePermissionTable,
)
from cvdesk_gateway.access.routes import (
    DEFAULT_ROUTE_RULES,
    ProtectionClass,
    RouteClassifier,
    RouteRule,
)
from cvdesk_gateway.observability.logging import get_logger

log = get_logger(__name__)


class PolicyError(Exception):
    pass


class RouteRuleDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")

    prefix: str = Field(min_length=1)
    protection: ProtectionClass
    capability: Capability | None = None

    @field_validator("prefix")
    @classmethod
    def _absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("route prefix must start with '/'")
        return v


class PolicyDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")

    roles: dict[Role, list[Capability]] = Field(default_factory=dict)
    routes: list[RouteRuleDoc] = Field(default_factory=list)
    admin_capability: Capability = Capability.manage_users


@dataclass(frozen=True, slots=True)
class AccessPolicy:
    table: RolePermissionTable
    classifier: RouteClassifier
    admin_capability: Capability

    def required_capability(self, rule: RouteRule) -> Capability:
        return rule.capability or self.admin_capability


def default_policy() -> AccessPolicy:
    return AccessPolicy(
        table=RolePermissionTable.build(DEFAULT_ROLE_GRANTS),
        classifier=RouteClassifier(DEFAULT_ROUTE_RULES),
        admin_capability=Capability.manage_users,
    )


def policy_from_doc(doc: PolicyDoc) -> AccessPolicy:
    rules = [RouteRule(r.prefix, r.protection, r.capability) for r in doc.routes]
    return AccessPolicy(
        table=RolePermissionTable.build(doc.roles),
        classifier=RouteClassifier(rules),
        admin_capability=doc.admin_capability,
    )


def parse_policy(raw: str | bytes) -> AccessPolicy:
    try:
        doc = PolicyDoc.model_validate_json(raw)
    except ValidationError as e:
        raise PolicyError(f"Invalid access policy: {e}") from e
    return policy_from_doc(doc)


def load_policy(path: str | None) -> AccessPolicy:
    """
    Load the policy once at startup. `None` selects the built-in default.
    """

    if path is None:
        log.info("access_policy_loaded", source="builtin")
        return default_policy()

    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise PolicyError(f"Cannot read access policy {path!r}: {e}") from e

    policy = parse_policy(raw)
    log.info(
        "access_policy_loaded",
        source=path,
        routes=len(policy.classifier.rules),
        admin_capability=policy.admin_capability.value,
    )
    return policy


# --- Module Notes -----------------------------------------------------------
# No reload path: policy changes ship with a redeploy.
