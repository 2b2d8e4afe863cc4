"""
cvdesk_gateway.api.routers.session

Session endpoints.

Responsibilities:
- `GET /v1/me`: the signed-in principal and its capabilities, for UI affordances.
- `PATCH /v1/me`: self-service profile edits (name, availability, workplace).
- `POST /logout`: drop the session cookie.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_404_NOT_FOUND

from cvdesk_gateway.access.capabilities import Capability
from cvdesk_gateway.access.guard import AuthorizationGuard
from cvdesk_gateway.access.models import Principal
from cvdesk_gateway.api.deps import db_session, guard_dep, require_principal, settings_dep
from cvdesk_gateway.db.repositories.users import UserRepo
from cvdesk_gateway.settings import Settings

router = APIRouter(tags=["session"])


class MeResponse(BaseModel):
    id: str
    display_name: str
    role: str
    status: str
    capabilities: list[str]


class ProfileUpdateRequest(BaseModel):
    name: str | None = Field(default=None, max_length=256)
    status: str | None = Field(default=None, min_length=1, max_length=64)
    workplace: str | None = Field(default=None, max_length=256)


def set_session_cookie(response: Response, *, token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.env == "prod",
    )


@router.get("/v1/me", response_model=MeResponse)
async def me(
    principal: Principal = Depends(require_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> MeResponse:
    held = [c.value for c in Capability if guard.principal_has_capability(principal, c)]
    return MeResponse(
        id=principal.id,
        display_name=principal.display_name,
        role=principal.role,
        status=principal.status,
        capabilities=held,
    )


@router.patch("/v1/me", response_model=MeResponse)
async def update_me(
    body: ProfileUpdateRequest,
    principal: Principal = Depends(require_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
    session: AsyncSession = Depends(db_session),
) -> MeResponse:
    # Role is not editable here; it changes only through an admin operation.
    user = await UserRepo(session).update_profile(
        principal.id, name=body.name, status=body.status, workplace=body.workplace
    )
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Profile not found")
    await session.commit()

    updated = Principal(id=user.id, display_name=user.name, role=user.role, status=user.status)
    return await me(updated, guard)


@router.post("/logout")
async def logout(response: Response, settings: Settings = Depends(settings_dep)) -> dict[str, str]:
    response.delete_cookie(settings.session_cookie_name)
    return {"status": "signed_out"}


# --- Module Notes -----------------------------------------------------------
# Session tokens are stateless; logout only clears the browser's copy.
