"""
cvdesk_gateway.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the guard.
- Extract session evidence from the cookie / bearer header.
- Expose the request-scoped Principal to endpoints.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.status import HTTP_401_UNAUTHORIZED

from cvdesk_gateway.access.guard import AuthorizationGuard
from cvdesk_gateway.access.models import Principal
from cvdesk_gateway.access.session import RequestScopedResolver
from cvdesk_gateway.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


def guard_dep(request: Request) -> AuthorizationGuard:
    # Built on app startup in `cvdesk_gateway.api.app.create_app`.
    return request.app.state.guard  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


def session_cookie_scheme(request: Request) -> APIKeyCookie:
    # Built in `create_app`, where the configured cookie name is known.
    return request.app.state.session_cookie  # type: ignore[attr-defined]


async def session_cookie(request: Request) -> str | None:
    return await session_cookie_scheme(request)(request)


def pick_evidence(creds: HTTPAuthorizationCredentials | None, cookie: str | None) -> str | None:
    # An explicit Authorization header wins over the ambient cookie.
    if creds is not None and creds.credentials:
        return creds.credentials
    return cookie or None


async def session_evidence(request: Request) -> str | None:
    return pick_evidence(await _bearer(request), await session_cookie(request))


def scoped_session(
    request: Request, guard: AuthorizationGuard, evidence: str | None
) -> RequestScopedResolver:
    """
    The request's single `RequestScopedResolver`, created on first use.
    """

    scoped: RequestScopedResolver | None = getattr(request.state, "session_resolver", None)
    if scoped is None:
        scoped = RequestScopedResolver(guard.resolver, evidence)
        request.state.session_resolver = scoped
    return scoped


async def current_principal(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    cookie: str | None = Depends(session_cookie),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> Principal | None:
    # AuthorizationMiddleware normally created the resolver already; reuse its lookup.
    resolved = await scoped_session(request, guard, pick_evidence(creds, cookie)).resolve()
    return resolved if isinstance(resolved, Principal) else None


async def require_principal(
    principal: Principal | None = Depends(current_principal),
) -> Principal:
    if principal is None:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return principal


# --- Module Notes -----------------------------------------------------------
# There is no module-level "current user": the Principal only ever lives on
# `request.state` for the duration of one request.
#
# Evidence precedence: a non-empty `Authorization: Bearer` header is used as-is
# and the cookie is ignored, so a stale browser cookie cannot mask explicit
# credentials. Without the header, the session cookie is the evidence.
