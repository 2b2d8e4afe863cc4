"""
cvdesk_gateway.auth.jwt

Session token issuing and validation helpers.

Responsibilities:
- Issue session JWTs after sign-in (subject = user id).
- Decode and validate JWTs with strict claim requirements (iss/aud/exp/iat/sub).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from cvdesk_gateway.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


class JwtValidationError(Exception):
    pass


def issue_session_token(
    *,
    cfg: JwtConfig,
    user_id: str,
    ttl: timedelta = timedelta(hours=12),
) -> str:
    now = datetime.now(tz=UTC)
    # Role and status are not embedded; the profile store is re-read per request
    # so role changes apply without re-login.
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e


def session_subject(*, cfg: JwtConfig, token: str) -> str:
    payload = decode_and_validate(cfg=cfg, token=token)
    subject = str(payload.get("sub", ""))
    if not subject:
        raise JwtValidationError("empty subject")
    return subject


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `services.sign_in`; validation by
# `identity.token_store.TokenIdentityStore`.
