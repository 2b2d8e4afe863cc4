"""
cvdesk_gateway.api.middleware

Page authorization middleware.

Responsibilities:
- Run the authorization guard once per request, before any endpoint logic.
- Redirect on deny; on allow, hand the Principal to endpoints via `request.state`.
- Leave the request's `RequestScopedResolver` on `request.state` so endpoints reuse
  the same identity lookup.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.status import HTTP_307_TEMPORARY_REDIRECT

from cvdesk_gateway.access.guard import AuthorizationGuard
from cvdesk_gateway.api.deps import scoped_session, session_evidence


class AuthorizationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        guard: AuthorizationGuard = request.app.state.guard

        session = scoped_session(request, guard, await session_evidence(request))
        decision = await guard.decide(request.url.path, session)
        request.state.principal = decision.principal
        if not decision.allow:
            return RedirectResponse(
                decision.redirect_target or guard.surfaces.login_path,
                status_code=HTTP_307_TEMPORARY_REDIRECT,
            )
        return await call_next(request)
