"""
cvdesk_gateway.identity.remote

Profile backend over a remote user-profile service.

Responsibilities:
- Fetch `GET {base_url}/users/{id}` and map the JSON body to a `PrincipalRecord`.
- Treat 404 as "no such profile"; raise on every other failure.

Expected body: {"id": ..., "name": ..., "role": ..., "status": ...}
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
from starlette.status import HTTP_404_NOT_FOUND

from cvdesk_gateway.access.models import PrincipalRecord


class ProfileServiceError(Exception):
    pass


class HttpProfileSource:
    def __init__(self, *, http: httpx.AsyncClient) -> None:
        # base_url and timeout are configured on the client (see `build_http_client`).
        self._http = http

    async def get_profile(self, user_id: str) -> PrincipalRecord | None:
        r = await self._http.get(f"/users/{quote(user_id, safe='')}")
        if r.status_code == HTTP_404_NOT_FOUND:
            return None
        r.raise_for_status()

        body = r.json()
        if not isinstance(body, dict):
            raise ProfileServiceError("profile response is not an object")
        return _record_from_body(body, fallback_id=user_id)


def _record_from_body(body: dict[str, Any], *, fallback_id: str) -> PrincipalRecord:
    return PrincipalRecord(
        id=str(body.get("id") or fallback_id),
        display_name=str(body.get("name") or ""),
        role=str(body.get("role") or ""),
        status=str(body.get("status") or ""),
    )


def build_http_client(*, base_url: str, timeout_seconds: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, timeout=httpx.Timeout(timeout_seconds))


# --- Module Notes -----------------------------------------------------------
# Timeouts surface as httpx.TimeoutException and are handled like any other
# lookup failure upstream (fail closed).
