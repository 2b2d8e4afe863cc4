"""
cvdesk_gateway.api.app

FastAPI app factory for the CV desk gateway.

Responsibilities:
- Load and validate the access policy before the app exists (fail fast).
- Build the identity store, session resolver and guard on startup.
- Register routers and middleware in one composition root.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.security import APIKeyCookie

from cvdesk_gateway import __version__
from cvdesk_gateway.access.guard import AuthorizationGuard, Surfaces
from cvdesk_gateway.access.policy import AccessPolicy, load_policy
from cvdesk_gateway.access.session import SessionResolver
from cvdesk_gateway.api.middleware import AuthorizationMiddleware
from cvdesk_gateway.api.routers.dev_auth import router as dev_auth_router
from cvdesk_gateway.api.routers.health import router as health_router
from cvdesk_gateway.api.routers.pages import router as pages_router
from cvdesk_gateway.api.routers.session import router as session_router
from cvdesk_gateway.auth.jwt import JwtConfig
from cvdesk_gateway.db.init_db import init_db
from cvdesk_gateway.db.session import create_engine, create_sessionmaker
from cvdesk_gateway.identity.remote import HttpProfileSource, build_http_client
from cvdesk_gateway.identity.sql import SqlProfileSource
from cvdesk_gateway.identity.token_store import ProfileSource, TokenIdentityStore
from cvdesk_gateway.observability.logging import configure_logging, get_logger
from cvdesk_gateway.observability.middleware import RequestContextMiddleware
from cvdesk_gateway.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings, policy: AccessPolicy | None = None) -> FastAPI:
    configure_logging(service_name=settings.service_name, env=settings.env, level=settings.log_level)

    # Raises PolicyError on a bad document; the process should not start.
    policy = policy or load_policy(settings.policy_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, profile_backend=settings.profile_backend)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            await init_db(engine)

        http = None
        profiles: ProfileSource
        if settings.profile_backend == "http":
            http = build_http_client(
                base_url=settings.profile_service_url,
                timeout_seconds=settings.profile_service_timeout_seconds,
            )
            profiles = HttpProfileSource(http=http)
        else:
            profiles = SqlProfileSource(app.state.sessionmaker)

        store = TokenIdentityStore(cfg=JwtConfig.from_settings(settings), profiles=profiles)
        app.state.guard = AuthorizationGuard(
            policy=policy,
            resolver=SessionResolver(store),
            surfaces=Surfaces.from_settings(settings),
        )
        try:
            yield
        finally:
            if http is not None:
                await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="CV Desk Gateway",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_cookie = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)

    # Last added runs first: request context is bound before authorization logs.
    app.add_middleware(AuthorizationMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router, tags=["health"])
    app.include_router(session_router)
    app.include_router(dev_auth_router)
    app.include_router(pages_router)
    return app


# --- Module Notes -----------------------------------------------------------
# Policy and guard are process-wide and immutable; everything per-request lives
# on `request.state`.
