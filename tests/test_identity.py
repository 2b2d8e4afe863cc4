"""
tests.test_identity

Session tokens and the profile backends behind `TokenIdentityStore`.
"""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from cvdesk_gateway.access.models import UNAUTHENTICATED, Principal, PrincipalRecord
from cvdesk_gateway.access.session import SessionResolver
from cvdesk_gateway.auth.jwt import (
    JwtConfig,
    JwtValidationError,
    issue_session_token,
    session_subject,
)
from cvdesk_gateway.identity.remote import HttpProfileSource
from cvdesk_gateway.identity.token_store import TokenIdentityStore

CFG = JwtConfig(alg="HS256", issuer="cvdesk-gateway", audience="cvdesk-web", secret="s3cret")


class DictProfiles:
    def __init__(self, profiles: dict[str, PrincipalRecord]) -> None:
        self.profiles = profiles

    async def get_profile(self, user_id: str) -> PrincipalRecord | None:
        return self.profiles.get(user_id)


def test_session_token_roundtrip_subject() -> None:
    token = issue_session_token(cfg=CFG, user_id="rec42")
    assert session_subject(cfg=CFG, token=token) == "rec42"


@pytest.mark.parametrize(
    "token",
    [
        issue_session_token(cfg=CFG, user_id="rec42", ttl=timedelta(seconds=-30)),
        issue_session_token(
            cfg=JwtConfig(alg="HS256", issuer="cvdesk-gateway", audience="cvdesk-web", secret="other"),
            user_id="rec42",
        ),
        issue_session_token(
            cfg=JwtConfig(alg="HS256", issuer="someone-else", audience="cvdesk-web", secret="s3cret"),
            user_id="rec42",
        ),
        "not-a-jwt",
    ],
)
def test_invalid_tokens_are_rejected(token: str) -> None:
    with pytest.raises(JwtValidationError):
        session_subject(cfg=CFG, token=token)


@pytest.mark.asyncio
async def test_token_store_resolves_profile() -> None:
    profiles = DictProfiles({"rec42": PrincipalRecord("rec42", "Sara", "reviewer", "On Leave")})
    store = TokenIdentityStore(cfg=CFG, profiles=profiles)
    token = issue_session_token(cfg=CFG, user_id="rec42")

    principal = await SessionResolver(store).resolve(token)
    assert principal == Principal(id="rec42", display_name="Sara", role="reviewer", status="On Leave")


@pytest.mark.asyncio
async def test_token_store_valid_token_missing_profile() -> None:
    store = TokenIdentityStore(cfg=CFG, profiles=DictProfiles({}))
    token = issue_session_token(cfg=CFG, user_id="deleted-user")
    assert await store.lookup_principal_by_session_evidence(token) is None
    assert await SessionResolver(store).resolve(token) is UNAUTHENTICATED


@pytest.mark.asyncio
async def test_token_store_bad_token_is_none() -> None:
    store = TokenIdentityStore(cfg=CFG, profiles=DictProfiles({}))
    assert await store.lookup_principal_by_session_evidence("garbage") is None


def _profile_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://profiles")


@pytest.mark.asyncio
async def test_http_profile_source_maps_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.raw_path == b"/users/rec%2F1"
        return httpx.Response(
            200, json={"id": "rec/1", "name": "Omar", "role": "manager", "status": "Busy"}
        )

    async with _profile_client(handler) as http:
        record = await HttpProfileSource(http=http).get_profile("rec/1")
    assert record == PrincipalRecord(id="rec/1", display_name="Omar", role="manager", status="Busy")


@pytest.mark.asyncio
async def test_http_profile_source_404_is_none() -> None:
    async with _profile_client(lambda request: httpx.Response(404)) as http:
        assert await HttpProfileSource(http=http).get_profile("nobody") is None


@pytest.mark.asyncio
async def test_http_profile_outage_fails_closed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    token = issue_session_token(cfg=CFG, user_id="rec42")
    async with _profile_client(handler) as http:
        store = TokenIdentityStore(cfg=CFG, profiles=HttpProfileSource(http=http))
        with pytest.raises(httpx.ConnectTimeout):
            await store.lookup_principal_by_session_evidence(token)
        assert await SessionResolver(store).resolve(token) is UNAUTHENTICATED


@pytest.mark.asyncio
async def test_http_profile_server_error_fails_closed() -> None:
    token = issue_session_token(cfg=CFG, user_id="rec42")
    async with _profile_client(lambda request: httpx.Response(503)) as http:
        store = TokenIdentityStore(cfg=CFG, profiles=HttpProfileSource(http=http))
        assert await SessionResolver(store).resolve(token) is UNAUTHENTICATED
