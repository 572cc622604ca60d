from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _csv(name: str, default: str) -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    base_url: str
    jwt_secret: str
    access_token_ttl_seconds: int
    refresh_token_ttl_days: int
    session_ttl_seconds: int
    session_extend_threshold_seconds: int
    oauth_state_ttl_seconds: int
    oauth_http_timeout_seconds: float
    google_client_id: str
    google_client_secret: str
    discord_client_id: str
    discord_client_secret: str
    cors_allow_origins: tuple[str, ...]
    log_level: str


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        base_url=_env("BASE_URL", "http://localhost:3000"),
        jwt_secret=_env("JWT_SECRET", ""),
        access_token_ttl_seconds=int(_env("ACCESS_TOKEN_TTL_SECONDS", "3600")),
        refresh_token_ttl_days=int(_env("REFRESH_TOKEN_TTL_DAYS", "30")),
        session_ttl_seconds=int(_env("SESSION_TTL_SECONDS", "86400")),
        session_extend_threshold_seconds=int(_env("SESSION_EXTEND_THRESHOLD_SECONDS", "3600")),
        oauth_state_ttl_seconds=int(_env("OAUTH_STATE_TTL_SECONDS", "600")),
        oauth_http_timeout_seconds=float(_env("OAUTH_HTTP_TIMEOUT_SECONDS", "10")),
        google_client_id=_env("GOOGLE_CLIENT_ID", ""),
        google_client_secret=_env("GOOGLE_CLIENT_SECRET", ""),
        discord_client_id=_env("DISCORD_CLIENT_ID", ""),
        discord_client_secret=_env("DISCORD_CLIENT_SECRET", ""),
        cors_allow_origins=_csv("CORS_ALLOW_ORIGINS", "*"),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
