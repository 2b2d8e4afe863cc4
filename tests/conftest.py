"""
tests.conftest

Shared fixtures for access-control tests.
"""

from __future__ import annotations

import pytest

from cvdesk_gateway.access.policy import AccessPolicy, parse_policy

SCENARIO_POLICY = """
{
  "roles": {"admin": ["view_all", "edit_all", "view_accounts"], "designer": []},
  "routes": [
    {"prefix": "/accounts", "protection": "admin_only"},
    {"prefix": "/tasks", "protection": "authenticated"},
    {"prefix": "/", "protection": "public"}
  ],
  "admin_capability": "view_accounts"
}
"""


@pytest.fixture
def scenario_policy() -> AccessPolicy:
    return parse_policy(SCENARIO_POLICY)
