"""Pydantic v2 schemas for vessels."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field


class VesselCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: str | None = Field(default=None, max_length=100)
    company: str | None = Field(default=None, max_length=200)


class VesselUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    type: str | None = Field(default=None, max_length=100)
    company: str | None = Field(default=None, max_length=200)


class VesselResponse(BaseModel):
    id: int
    name: str
    type: str | None
    company: str | None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
