"""
Pydantic v2 schemas for the authentication endpoints.

Covers the JWT token response and the public user representation
returned by ``GET /api/auth/me``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TokenResponse(BaseModel):
    """Response body returned after a successful authentication.

    Attributes:
        access_token: Signed JWT string to be sent in the
                      ``Authorization: Bearer <token>`` header.
        token_type: Always ``"bearer"`` per OAuth2 convention.
    """

    access_token: str = Field(..., description="Signed JWT access token")
    token_type: str = Field(default="bearer", description="OAuth2 token type")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
            }
        }
    )


class UserResponse(BaseModel):
    """Public representation of an authenticated user.

    Never includes ``password_hash``.  ``capabilities`` lists what
    the role grants so the dashboard can hide controls the API would reject.
    """

    id: int
    username: str
    email: str
    name: str | None
    role: str
    is_active: bool
    capabilities: list[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
