# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        value = value.strip().lower()
        local, _, domain = value.partition("@")
        if not local or "." not in domain:
            raise ValueError("not a valid email address")
        return value


class RegisterRequest(Credentials):
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(Credentials):
    pass


class UserPublic(BaseModel):
    id: str
    email: str
    created_at: str
    last_login_at: Optional[str] = None
    has_profile: bool = Field(False, description="False until /api/profile/setup has been called")


class AuthResponse(BaseModel):
    user: UserPublic
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
