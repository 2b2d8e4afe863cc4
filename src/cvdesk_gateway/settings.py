"""
cvdesk_gateway.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Name the login/unauthorized/landing surfaces used by the authorization guard.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `CVDESK_`).
    Defaults are safe for local dev; prod must override `jwt_secret`.
    """

    model_config = SettingsConfigDict(env_prefix="CVDESK_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "cvdesk-gateway"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Session tokens
    jwt_alg: str = "HS256"
    jwt_issuer: str = "cvdesk-gateway"
    jwt_audience: str = "cvdesk-web"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    session_ttl_minutes: int = Field(default=12 * 60, ge=1)
    session_cookie_name: str = "cvdesk_session"

    # Profile store
    profile_backend: Literal["sql", "http"] = "sql"
    database_url: str = "sqlite+aiosqlite:///./cvdesk.db"
    profile_service_url: str = "http://localhost:9090"
    profile_service_timeout_seconds: float = 5.0

    # Access policy; None means the built-in default table.
    policy_file: str | None = None

    login_path: str = "/login"
    unauthorized_path: str = "/unauthorized"
    landing_path: str = "/dashboard"
    return_to_param: str = "next"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Surface paths live here rather than in the policy document: they describe the
# web front-end, while the policy describes who may reach what.
