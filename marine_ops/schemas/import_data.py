"""Pydantic v2 schemas for the data import endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImportOptions(BaseModel):
    """Import switches sent as form fields next to the uploaded file.

    Attributes:
        overwrite: Upsert by ``id`` instead of inserting.
        skip_duplicates: Count a batch that collides with existing rows as
            skipped instead of failed (ignored with ``overwrite``).
        validate_only: Parse and validate without writing anything.
    """

    overwrite: bool = False
    skip_duplicates: bool = True
    validate_only: bool = False


class ImportResult(BaseModel):
    success: bool
    message: str
    entity: str
    format: str
    total_records: int = 0
    imported_count: int = 0
    skipped_count: int = 0
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ImportEntity(BaseModel):
    """Column layout accepted for one importable entity."""

    entity: str
    columns: list[str]
    required: list[str]
