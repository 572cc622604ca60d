from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RefreshTokenRequest(CamelModel):
    refresh_token: str | None = None


class LoginResponse(CamelModel):
    access_token: str
    refresh_token: str
    expires_in: int
    session_id: str


class AccessTokenResponse(CamelModel):
    access_token: str
    expires_in: int


class MessageResponse(CamelModel):
    message: str


class SessionResponse(CamelModel):
    id: str
    user_id: str
    data: dict[str, Any]
    expires_at: datetime
    created_at: datetime
    last_accessed_at: datetime


class UserResponse(CamelModel):
    id: str
    provider: str
    email: str
    name: str
    created_at: datetime
