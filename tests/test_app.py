"""
tests.test_app

End-to-end tests through the FastAPI app: middleware, sign-in, pages.

Responsibilities:
- Ensure the app boots with a temporary SQLite profile store.
- Exercise redirects, role changes and the advisory `/v1/me` view over HTTP.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI

from cvdesk_gateway.access.capabilities import Role
from cvdesk_gateway.access.guard import AuthorizationGuard, Surfaces
from cvdesk_gateway.access.policy import PolicyError, default_policy
from cvdesk_gateway.access.session import SessionResolver
from cvdesk_gateway.api.app import create_app
from cvdesk_gateway.db.repositories.users import UserRepo
from cvdesk_gateway.settings import Settings
from tests.fakes import FakeIdentityStore, make_record


def _settings(tmp_path: Path, **overrides) -> Settings:
    return Settings(
        env=overrides.pop("env", "test"),
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'cvdesk.db'}",
        jwt_secret="test-secret",
        **overrides,
    )


@asynccontextmanager
async def running(settings: Settings) -> AsyncIterator[tuple[FastAPI, httpx.AsyncClient]]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not drive lifespan; do it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield app, client


async def _sign_in(client: httpx.AsyncClient, email: str, name: str = "") -> dict:
    r = await client.post("/v1/dev/sign-in", json={"email": email, "name": name})
    assert r.status_code == 200, r.text
    # Tests pass credentials explicitly per request.
    client.cookies.clear()
    return r.json()


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def _set_role(app: FastAPI, user_id: str, role: Role) -> None:
    async with app.state.sessionmaker() as session:
        await UserRepo(session).set_role(user_id, role)
        await session.commit()


@pytest.mark.asyncio
async def test_health_endpoints(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (_, client):
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

        r = await client.get("/readyz")
        assert r.status_code == 200
        assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_anonymous_navigation(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (_, client):
        r = await client.get("/tasks")
        assert r.status_code == 307
        assert r.headers["location"] == "/login?next=%2Ftasks"

        r = await client.get("/accounts")
        assert r.status_code == 307
        assert r.headers["location"] == "/login?next=%2Faccounts"

        r = await client.get("/")
        assert r.status_code == 200
        assert r.json()["principal"] is None
        assert r.json()["navigation"] == []

        r = await client.get("/login", params={"next": "/tasks"})
        assert r.status_code == 200
        assert r.json()["return_to"] == "/tasks"


@pytest.mark.asyncio
async def test_first_sign_in_provisions_designer(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (_, client):
        r = await client.post("/v1/dev/sign-in", json={"email": "Lina@Example.com", "name": "Lina"})
        assert r.status_code == 200
        assert "cvdesk_session=" in r.headers["set-cookie"]
        first = r.json()
        assert first["created"] is True
        assert first["role"] == "designer"

        client.cookies.clear()
        again = await _sign_in(client, "lina@example.com")
        assert again["created"] is False
        assert again["user_id"] == first["user_id"]


@pytest.mark.asyncio
async def test_designer_session(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (_, client):
        token = (await _sign_in(client, "designer@example.com", "Dana"))["access_token"]

        r = await client.get("/tasks", headers=_bearer(token))
        assert r.status_code == 200
        body = r.json()
        assert body["principal"]["role"] == "designer"
        hrefs = [item["href"] for item in body["navigation"]]
        assert hrefs == ["/dashboard", "/tasks", "/profile"]

        r = await client.get("/accounts", headers=_bearer(token))
        assert r.status_code == 307
        assert r.headers["location"] == "/unauthorized"

        r = await client.get("/login", headers=_bearer(token))
        assert r.status_code == 307
        assert r.headers["location"] == "/dashboard"

        r = await client.get("/unauthorized", headers=_bearer(token))
        assert r.status_code == 200
        assert r.json()["principal"]["display_name"] == "Dana"


@pytest.mark.asyncio
async def test_session_cookie_is_accepted(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (_, client):
        token = (await _sign_in(client, "cookie@example.com"))["access_token"]
        r = await client.get("/profile", headers={"cookie": f"cvdesk_session={token}"})
        assert r.status_code == 200
        assert r.json()["page"] == "profile"


@pytest.mark.asyncio
async def test_role_change_applies_on_next_request(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (app, client):
        signed_in = await _sign_in(client, "boss@example.com")
        token = signed_in["access_token"]

        r = await client.get("/accounts", headers=_bearer(token))
        assert r.headers["location"] == "/unauthorized"

        await _set_role(app, signed_in["user_id"], Role.admin)

        r = await client.get("/accounts", headers=_bearer(token))
        assert r.status_code == 200
        assert r.json()["affordances"]["add_account"] is True
        hrefs = [item["href"] for item in r.json()["navigation"]]
        assert "/accounts" in hrefs and "/all-tasks" in hrefs

        await _set_role(app, signed_in["user_id"], Role.manager)
        assert (await client.get("/all-tasks", headers=_bearer(token))).status_code == 200
        r = await client.get("/accounts", headers=_bearer(token))
        assert r.headers["location"] == "/unauthorized"


@pytest.mark.asyncio
async def test_me_endpoint(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (app, client):
        assert (await client.get("/v1/me")).status_code == 401
        assert (await client.get("/v1/me", headers=_bearer("forged"))).status_code == 401

        signed_in = await _sign_in(client, "me@example.com", "Mona")
        await _set_role(app, signed_in["user_id"], Role.manager)

        r = await client.get("/v1/me", headers=_bearer(signed_in["access_token"]))
        assert r.status_code == 200
        body = r.json()
        assert body["display_name"] == "Mona"
        assert body["status"] == "Available"
        assert body["capabilities"] == ["view_all", "edit_all"]


@pytest.mark.asyncio
async def test_profile_update_is_visible_next_request(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (_, client):
        token = (await _sign_in(client, "busy@example.com", "Rami"))["access_token"]

        r = await client.patch("/v1/me", json={"status": "Busy"}, headers=_bearer(token))
        assert r.status_code == 200
        assert r.json()["status"] == "Busy"
        assert r.json()["role"] == "designer"

        r = await client.get("/v1/me", headers=_bearer(token))
        assert r.json()["status"] == "Busy"
        assert r.json()["display_name"] == "Rami"

        # Role is not part of the self-service payload.
        r = await client.patch("/v1/me", json={"role": "admin"}, headers=_bearer(token))
        assert r.json()["role"] == "designer"


@pytest.mark.asyncio
async def test_logout_clears_cookie(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (_, client):
        r = await client.post("/logout")
        assert r.status_code == 200
        assert "cvdesk_session=" in r.headers["set-cookie"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (_, client):
        r = await client.get("/healthz", headers={"x-request-id": "req-123"})
        assert r.headers["x-request-id"] == "req-123"

        r = await client.get("/tasks")
        assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_dev_sign_in_hidden_in_prod(tmp_path: Path) -> None:
    async with running(_settings(tmp_path, env="prod")) as (_, client):
        r = await client.post("/v1/dev/sign-in", json={"email": "x@example.com"})
        assert r.status_code == 404


def test_bad_policy_file_stops_startup(tmp_path: Path) -> None:
    policy = tmp_path / "policy.json"
    policy.write_text('{"roles": {"admin": ["view_acounts"]}}')
    with pytest.raises(PolicyError):
        create_app(settings=_settings(tmp_path, policy_file=str(policy)))


def _install_store(app: FastAPI, store: FakeIdentityStore) -> None:
    app.state.guard = AuthorizationGuard(
        policy=default_policy(), resolver=SessionResolver(store), surfaces=Surfaces()
    )


@pytest.mark.asyncio
async def test_login_page_looks_up_session_once(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (app, client):
        store = FakeIdentityStore({})
        _install_store(app, store)

        r = await client.get("/login", headers=_bearer("stale"))
        assert r.status_code == 200
        assert r.json()["principal"] is None
        assert store.calls == ["stale"]


@pytest.mark.asyncio
async def test_protected_page_reuses_guard_lookup(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (app, client):
        store = FakeIdentityStore({"good": make_record("u-admin", "admin", name="Admin")})
        _install_store(app, store)

        r = await client.get("/accounts", headers=_bearer("good"))
        assert r.status_code == 200
        assert r.json()["principal"]["id"] == "u-admin"
        assert store.calls == ["good"]


@pytest.mark.asyncio
async def test_bearer_header_wins_over_stale_cookie(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (app, client):
        store = FakeIdentityStore({"good": make_record("u-admin", "admin")})
        _install_store(app, store)

        r = await client.get(
            "/accounts",
            headers={"Authorization": "Bearer good", "cookie": "cvdesk_session=expired"},
        )
        assert r.status_code == 200
        assert store.calls == ["good"]


@pytest.mark.asyncio
async def test_cookie_used_when_no_authorization_header(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (app, client):
        store = FakeIdentityStore({"good": make_record("u-1", "designer")})
        _install_store(app, store)

        r = await client.get("/tasks", headers={"cookie": "cvdesk_session=good"})
        assert r.status_code == 200
        assert store.calls == ["good"]


@pytest.mark.asyncio
async def test_authorization_header_schemes(tmp_path: Path) -> None:
    async with running(_settings(tmp_path)) as (app, client):
        store = FakeIdentityStore({"good": make_record("u-1", "designer")})
        _install_store(app, store)

        r = await client.get("/tasks", headers={"Authorization": "bearer good"})
        assert r.status_code == 200

        r = await client.get("/tasks", headers={"Authorization": "Basic good"})
        assert r.status_code == 307
        assert r.headers["location"] == "/login?next=%2Ftasks"
        assert store.calls == ["good"]
