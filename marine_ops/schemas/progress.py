"""
Pydantic v2 schemas for progress reports, verification and dashboard stats.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field

from marine_ops.utils.constants import PROGRESS_MAX, PROGRESS_MIN


class WorkProgressCreate(BaseModel):
    """Payload for ``POST /api/work-progress``.

    The 0–100 range is enforced here; monotonicity and the one-report-per-date
    rule are checked by the service against existing reports.
    """

    work_details_id: int = Field(..., ge=1)
    progress_percentage: float = Field(..., ge=PROGRESS_MIN, le=PROGRESS_MAX)
    report_date: datetime.date
    notes: str | None = Field(default=None, max_length=2000)


class WorkProgressResponse(BaseModel):
    id: int
    work_details_id: int
    progress_percentage: float
    report_date: datetime.date
    notes: str | None
    evidence_url: str | None
    storage_path: str | None
    user_id: int | None
    reporter_name: str | None = None
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectProgressCreate(BaseModel):
    work_order_id: int = Field(..., ge=1)
    progress: float = Field(..., ge=PROGRESS_MIN, le=PROGRESS_MAX)
    report_date: datetime.date
    notes: str | None = Field(default=None, max_length=2000)


class ProjectProgressResponse(BaseModel):
    id: int
    work_order_id: int
    progress: float
    report_date: datetime.date
    notes: str | None
    user_id: int | None
    reporter_name: str | None = None
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class ProgressHistoryItem(BaseModel):
    date: datetime.date
    progress: float
    reporter: str


class ProgressSummaryResponse(BaseModel):
    """Latest project-level progress of one work order plus its history."""

    work_order_id: int
    shipyard_wo_number: str | None
    customer_wo_number: str | None
    vessel_name: str | None
    current_progress: float
    latest_report_date: datetime.date | None
    total_reports: int
    progress_history: list[ProgressHistoryItem]


class ProgressChartPoint(BaseModel):
    date: datetime.date
    progress: float
    reporter: str


class ProgressStatsResponse(BaseModel):
    total_projects: int
    active_projects: int
    completed_projects: int
    average_project_progress: float
    projects_behind_schedule: int
    projects_on_track: int
    total_work_details: int
    completed_work_details: int
    work_details_with_evidence: int
    average_details_progress: float

    model_config = ConfigDict(from_attributes=True)


class VerificationCreate(BaseModel):
    work_verification: bool = True
    verification_date: datetime.date | None = None


class VerificationResponse(BaseModel):
    id: int
    work_details_id: int
    work_verification: bool
    verification_date: datetime.date | None
    user_id: int | None
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
