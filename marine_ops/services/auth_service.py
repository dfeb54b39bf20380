"""
Authentication and authorisation for the Marine Ops dashboard.

Login checks a username/password pair against ``Profile``; every other
request carries a Bearer JWT resolved by ``get_current_user``.  What a
caller may do is decided by role capabilities (``ROLE_CAPABILITIES``):

- ``has_capability`` / ``can_view_financial_data`` answer the question
  for code that branches on it (invoice redaction, export columns).
- ``require_capability`` turns it into a route dependency returning 403.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.utils.constants import CAP_VIEW_FINANCIAL_DATA, ROLE_CAPABILITIES
from marine_ops.utils.security import verify_password, verify_token

logger = logging.getLogger(__name__)

# Swagger's "Authorize" dialog posts to the login route
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


def authenticate_user(db: Session, username: str, password: str) -> Profile | None:
    """Return the active profile matching the credentials, else ``None``.

    A successful login stamps ``last_login``; failing to save that stamp
    does not fail the login.
    """
    user = (
        db.query(Profile)
        .filter(Profile.username == username, Profile.is_active.is_(True))
        .first()
    )
    if user is None or not verify_password(password, user.password_hash):
        logger.debug("authenticate_user: rejected credentials for '%s'", username)
        return None

    try:
        user.last_login = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError:  # pragma: no cover
        db.rollback()
        logger.warning("Could not update last_login for user '%s'", username)

    return user


# ---------------------------------------------------------------------------
# Bearer token
# ---------------------------------------------------------------------------


def _profile_id(token: str) -> int | None:
    try:
        payload = verify_token(token)
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> Profile:
    """Resolve the caller's ``Profile`` from the Bearer token.

    Raises:
        HTTPException 401: Bad or expired token, or the profile is gone or
                           deactivated.
    """
    profile_id = _profile_id(token)
    user = None
    if profile_id is not None:
        user = (
            db.query(Profile)
            .filter(Profile.id == profile_id, Profile.is_active.is_(True))
            .first()
        )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


# ---------------------------------------------------------------------------
# Capability checks
# ---------------------------------------------------------------------------


def has_capability(user: Profile | None, capability: str) -> bool:
    """Return True if the user's role grants ``capability``.

    Unknown roles and anonymous callers have no capabilities.
    """
    if user is None or not user.role:
        return False
    return capability in ROLE_CAPABILITIES.get(user.role, frozenset())


def can_view_financial_data(user: Profile | None) -> bool:
    return has_capability(user, CAP_VIEW_FINANCIAL_DATA)


def require_capability(capability: str):
    """Return a FastAPI dependency that restricts access to one capability.

    .. code-block:: python

        @router.post("/")
        def create_invoice(
            current_user: Profile = Depends(require_capability("manage-invoices")),
        ):
            ...

    Raises:
        HTTPException 403: If the authenticated user's role does not grant
                           ``capability``.
    """

    def _check_capability(
        current_user: Annotated[Profile, Depends(get_current_user)],
    ) -> Profile:
        if not has_capability(current_user, capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Missing capability: {capability}",
            )
        return current_user

    return _check_capability
