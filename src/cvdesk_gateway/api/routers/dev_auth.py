from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_404_NOT_FOUND

from cvdesk_gateway.api.deps import db_session, settings_dep
from cvdesk_gateway.api.routers.session import set_session_cookie
from cvdesk_gateway.services.sign_in import SignInService
from cvdesk_gateway.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevSignInRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str = Field(default="", max_length=256)


class DevSignInResponse(BaseModel):
    user_id: str
    role: str
    created: bool
    access_token: str
    token_type: str = "bearer"


@router.post("/sign-in", response_model=DevSignInResponse)
async def dev_sign_in(
    body: DevSignInRequest,
    response: Response,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> DevSignInResponse:
    # Stands in for the external identity provider outside prod.
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    result = await SignInService(session=session, settings=settings).sign_in(
        email=body.email, name=body.name
    )
    set_session_cookie(response, token=result.token, settings=settings)
    return DevSignInResponse(
        user_id=result.user.id,
        role=result.user.role,
        created=result.created,
        access_token=result.token,
    )
