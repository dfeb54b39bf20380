"""
Shared Pydantic v2 schemas reused across multiple modules.

Provides pagination and message response models so that each domain
module can compose them without duplicating field definitions.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PaginationParams(BaseModel):
    """Pagination parameters for list endpoints.

    Attributes:
        page: 1-based page number.
        page_size: Rows per page, at most 200.
    """

    page: int = Field(default=1, ge=1, description="Page number (1-based).")
    page_size: int = Field(
        default=50,
        ge=1,
        le=200,
        description="Rows per page (max 200).",
    )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class MessageResponse(BaseModel):
    """Generic message envelope for operations that do not return a resource.

    Returned by write operations (e.g. soft deletes) when the caller only
    needs a confirmation, not the full updated resource.

    Attributes:
        message: Short human-readable result summary.
        detail: Optional extended information.
    """

    message: str = Field(..., description="Summary of the operation result.")
    detail: str | None = Field(default=None, description="Additional context.")
