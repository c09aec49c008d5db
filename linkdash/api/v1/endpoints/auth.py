from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from linkdash.core.config import Settings
from linkdash.core.dependencies import get_app_settings
from linkdash.core.security import clear_session_cookie, require_session, set_session_cookie, verify_password
from linkdash.schemas.auth import LoginRequest, LoginResponse, SessionOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, response: Response, settings: Settings = Depends(get_app_settings)):
    try:
        ok = verify_password(payload.password, settings)
    except RuntimeError as e:
        logger.error("Authentication error: %s", e)
        raise HTTPException(status_code=500, detail="Authentication failed")

    if not ok:
        logger.warning("Rejected dashboard login")
        raise HTTPException(status_code=401, detail="Invalid password")

    set_session_cookie(response, settings)
    return LoginResponse()


@router.post("/logout", response_model=LoginResponse)
def logout(response: Response, settings: Settings = Depends(get_app_settings)):
    clear_session_cookie(response, settings)
    return LoginResponse()


@router.get("/session", response_model=SessionOut)
def session(request: Request, claims: dict = Depends(require_session)):
    return SessionOut(authenticated=True, expires_at=claims.get("exp"))
