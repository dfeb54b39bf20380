"""
Password hashing and JWTs for the Marine Ops dashboard.

Two kinds of token are signed with ``JWT_SECRET``: access tokens issued at
login, and short-lived document tokens embedded in signed file URLs.  A
document token carries ``purpose="document"`` and is refused wherever an
access token is expected.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from marine_ops.config import get_settings

logger = logging.getLogger(__name__)

_DOCUMENT_PURPOSE = "document"


# ---------------------------------------------------------------------------
# Passwords (bcrypt directly; passlib breaks on bcrypt 4.x)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


# ---------------------------------------------------------------------------
# Access tokens
# ---------------------------------------------------------------------------


def _encode(payload: dict[str, Any]) -> str:
    settings = get_settings()
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str) -> dict[str, Any]:
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


def create_access_token(data: dict[str, Any]) -> str:
    """Sign ``data`` as an access token valid for ``JWT_EXPIRATION_MINUTES``.

    Callers put the profile id in ``sub``::

        token = create_access_token({"sub": str(user.id), "role": user.role})
    """
    now = datetime.now(timezone.utc)
    payload = {
        **data,
        "iat": now,
        "exp": now + timedelta(minutes=get_settings().JWT_EXPIRATION_MINUTES),
    }
    return _encode(payload)


def verify_token(token: str) -> dict[str, Any]:
    """Return the claims of a valid access token.

    Raises:
        ValueError: Bad signature, expired, or a document token.  The auth
            dependency turns this into a 401.
    """
    try:
        payload = _decode(token)
    except JWTError as exc:
        logger.debug("Access token rejected: %s", exc)
        raise ValueError("Invalid or expired token") from exc

    if payload.get("purpose") == _DOCUMENT_PURPOSE:
        raise ValueError("Document tokens cannot be used for authentication")
    return payload


# ---------------------------------------------------------------------------
# Signed document tokens
# ---------------------------------------------------------------------------


def create_document_token(storage_path: str, expires_in: int) -> str:
    """Sign a storage path (relative to ``STORAGE_DIR``) for ``expires_in`` seconds."""
    return _encode(
        {
            "purpose": _DOCUMENT_PURPOSE,
            "path": storage_path,
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        }
    )


def verify_document_token(token: str) -> str:
    """Return the storage path signed into ``token``.

    Raises:
        ValueError: If the token is invalid, expired, or not a document token.
    """
    try:
        payload = _decode(token)
    except JWTError as exc:
        logger.debug("Document token rejected: %s", exc)
        raise ValueError("Invalid or expired document link") from exc

    if payload.get("purpose") != _DOCUMENT_PURPOSE or not payload.get("path"):
        raise ValueError("Invalid or expired document link")
    return payload["path"]
