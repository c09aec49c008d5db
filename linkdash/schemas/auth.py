from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    success: bool = True


class SessionOut(BaseModel):
    authenticated: bool
    expires_at: int | None = None
