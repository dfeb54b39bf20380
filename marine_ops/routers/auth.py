"""
Authentication router for the Marine Ops API.

Mounts under ``/api/auth`` (prefix set in ``main.py``).

Endpoints:
    POST /login   — Authenticate with username + password, receive JWT.
    POST /refresh — Exchange a valid token for a new one (extend session).
    GET  /me      — Return the currently authenticated user's profile.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.auth import TokenResponse, UserResponse
from marine_ops.services.auth_service import authenticate_user, get_current_user
from marine_ops.utils.constants import ROLE_CAPABILITIES
from marine_ops.utils.security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _issue_token(user: Profile) -> TokenResponse:
    token = create_access_token(
        data={
            "sub": str(user.id),
            "username": user.username,
            "role": user.role,
        }
    )
    return TokenResponse(access_token=token)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in",
    description="OAuth2 password form; the token lasts ``JWT_EXPIRATION_MINUTES``.",
    responses={
        401: {"description": "Wrong credentials or inactive account."},
        422: {"description": "Malformed request body."},
    },
)
def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    user = authenticate_user(db, form_data.username, form_data.password)
    if user is None:
        logger.warning("Failed login attempt for username='%s'", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect credentials or inactive account",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info("Login: username='%s' role='%s'", user.username, user.role)
    return _issue_token(user)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh token",
    responses={401: {"description": "Invalid or expired token."}},
)
def refresh_token(
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> TokenResponse:
    logger.debug("Token refreshed for user_id=%d", current_user.id)
    return _issue_token(current_user)


@router.get("/me", response_model=UserResponse, summary="Current user and capabilities")
def me(
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> UserResponse:
    response = UserResponse.model_validate(current_user)
    capabilities = sorted(ROLE_CAPABILITIES.get(current_user.role, frozenset()))
    return response.model_copy(update={"capabilities": capabilities})
