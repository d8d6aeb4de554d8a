"""Pydantic schemas for authentication endpoints and the client session."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .users import ServerModel, UserSummary


class LoginRequest(ServerModel):
    email: str
    password: str


class SignupRequest(ServerModel):
    username: str
    email: str
    password: str
    confirm_password: str


class AuthPayload(BaseModel):
    """Credential token and identity returned by login and signup."""

    token: str = Field(..., min_length=1)
    user: UserSummary


class SessionState(BaseModel):
    """Immutable snapshot of the client's authentication state."""

    model_config = ConfigDict(frozen=True)

    user: UserSummary | None = None
    token: str | None = None
    is_authenticated: bool = False
    is_loading: bool = False
