# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import settings
from ..profile.storage import get_profile
from .models import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from .security import TOKEN_COOKIE_NAME, create_access_token, get_current_user, hash_password, verify_password
from .storage import EmailTakenError, create_user, find_user, record_login

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _token_seconds() -> int:
    return int(settings.token_ttl_days) * 24 * 60 * 60


def _user_public(row: dict) -> UserPublic:
    return UserPublic(
        id=row["id"],
        email=row["email"],
        created_at=row["created_at"],
        last_login_at=row.get("last_login_at"),
        has_profile=get_profile(row["id"]) is not None,
    )


def _issue_token(response: Response, user: dict) -> AuthResponse:
    token = create_access_token(user_id=user["id"], email=user["email"])
    response.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=_token_seconds(),
        path="/",
    )
    return AuthResponse(user=_user_public(user), token=token, expires_in=_token_seconds())


@router.post("/register", response_model=AuthResponse, summary="Create an account and sign in")
def register(request: RegisterRequest, response: Response):
    try:
        user = create_user(email=request.email, password_hash=hash_password(request.password))
    except EmailTakenError as exc:
        raise HTTPException(status_code=400, detail="Email already registered") from exc
    return _issue_token(response, user)


@router.post("/login", response_model=AuthResponse, summary="Sign in")
def login(request: LoginRequest, response: Response):
    user = find_user(request.email)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    user["last_login_at"] = record_login(user["id"])
    return _issue_token(response, user)


@router.post("/logout", summary="Clear the session cookie")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}


@router.get("/me", response_model=UserPublic, summary="Current user")
def me(user: dict = Depends(get_current_user)):
    return _user_public(user)
