from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt

from linkdash.core.config import Settings
from linkdash.core.dependencies import get_app_settings

logger = logging.getLogger(__name__)

UTC = timezone.utc


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, settings: Settings) -> bool:
    hashed = settings.dashboard_password_hash
    if not hashed:
        raise RuntimeError("DASHBOARD_PASSWORD_HASH not configured")
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.error("DASHBOARD_PASSWORD_HASH is not a valid bcrypt hash")
        raise RuntimeError("DASHBOARD_PASSWORD_HASH is invalid")


def create_session_token(settings: Settings) -> tuple[str, int]:
    now = datetime.now(UTC)
    exp = int((now + timedelta(hours=settings.session_expires_hours)).timestamp())
    claims = {"authenticated": True, "iat": int(now.timestamp()), "exp": exp}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm), exp


def decode_session_token(token: str, settings: Settings) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session")


def set_session_cookie(response: Response, settings: Settings) -> int:
    token, exp = create_session_token(settings)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
        max_age=settings.session_expires_hours * 3600,
    )
    return exp


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.session_cookie_name, path="/")


def require_session(request: Request, settings: Settings = Depends(get_app_settings)) -> dict:
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    payload = decode_session_token(token, settings)
    if not payload.get("authenticated"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session")
    return payload
