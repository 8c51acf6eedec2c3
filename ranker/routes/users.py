"""
User routes: login, registration and the current user.
Login and registration are the only /api routes reachable without a token.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, Dict
from ranker.auth import create_access_token, require_user
from ranker.config import settings
from ranker.schemas import Credentials, LoginResponse, MeResponse, RegisterResponse
from ranker.services.users import user_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/login", response_model=LoginResponse)
async def login(payload: Credentials):
    """Exchange a username and password for a bearer token."""
    try:
        user = await user_service.authenticate(payload.username, payload.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not user:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    token = create_access_token(user["id"], user["username"])
    return {"token": token, "user": user}


@router.post("/add", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: Credentials):
    """
    Create a new account.

    Disabled with ALLOW_REGISTRATION=false.
    """
    if not settings.allow_registration:
        logger.warning("Registration attempt while registration is disabled")
        raise HTTPException(status_code=403, detail="Registration is disabled")

    try:
        user = await user_service.create_user(payload.username, payload.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error registering user: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"user": user}


@router.get("/me", response_model=MeResponse)
async def me(user: Dict[str, Any] = Depends(require_user)):
    """Return the user the bearer token belongs to."""
    return {"user": user}
