"""Pydantic v2 schemas for the activity log."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict


class ActivityLogResponse(BaseModel):
    id: int
    action: str
    table_name: str
    record_id: int | None
    description: str | None
    user_id: int | None
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
