"""Pydantic v2 schemas for stored documents."""

from __future__ import annotations

from pydantic import BaseModel


class SignedUrlResponse(BaseModel):
    """Time-limited link to a stored document.

    Attributes:
        url: Relative URL; fetch it without an Authorization header.
        expires_in: Lifetime of the link in seconds.
        storage_path: Key of the stored file.
    """

    url: str
    expires_in: int
    storage_path: str


class DocumentUploadResponse(BaseModel):
    storage_path: str
    url: str
