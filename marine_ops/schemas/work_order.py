"""
Pydantic v2 schemas for work orders and work details.

Response models carry the derived progress values computed by the progress
aggregator; they are never stored.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Work orders
# ---------------------------------------------------------------------------


class WorkOrderCreate(BaseModel):
    vessel_id: int = Field(..., ge=1)
    customer_wo_number: str | None = Field(default=None, max_length=100)
    customer_wo_date: datetime.date | None = None
    shipyard_wo_number: str | None = Field(default=None, max_length=100)
    shipyard_wo_date: datetime.date | None = None
    wo_document_delivery_date: datetime.date | None = None
    wo_location: str | None = Field(default=None, max_length=300)
    wo_description: str | None = Field(default=None, max_length=2000)


class WorkOrderUpdate(BaseModel):
    customer_wo_number: str | None = Field(default=None, max_length=100)
    customer_wo_date: datetime.date | None = None
    shipyard_wo_number: str | None = Field(default=None, max_length=100)
    shipyard_wo_date: datetime.date | None = None
    wo_document_delivery_date: datetime.date | None = None
    wo_location: str | None = Field(default=None, max_length=300)
    wo_description: str | None = Field(default=None, max_length=2000)


class WorkOrderResponse(BaseModel):
    """Work order with its aggregated progress.

    Attributes:
        overall_progress: Rounded mean of every work detail's current progress.
        is_fully_completed: All work details (at least one) report 100 %.
        verification_status: At least one work detail has been verified.
        has_invoice: A live invoice exists for this work order.
    """

    id: int
    vessel_id: int
    vessel_name: str | None = None
    customer_wo_number: str | None
    customer_wo_date: datetime.date | None
    shipyard_wo_number: str | None
    shipyard_wo_date: datetime.date | None
    wo_document_delivery_date: datetime.date | None
    wo_location: str | None
    wo_description: str | None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    overall_progress: int = 0
    is_fully_completed: bool = False
    verification_status: bool = False
    work_details_count: int = 0
    has_invoice: bool = False


class WorkOrderDetailResponse(WorkOrderResponse):
    work_details: list[WorkDetailsResponse] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Work details
# ---------------------------------------------------------------------------


class WorkDetailsCreate(BaseModel):
    work_order_id: int = Field(..., ge=1)
    description: str = Field(..., min_length=1, max_length=2000)
    location: str | None = Field(default=None, max_length=300)
    pic: str | None = Field(default=None, max_length=200)
    planned_start_date: datetime.date | None = None
    target_close_date: datetime.date | None = None
    period_close_target: str | None = Field(default=None, max_length=100)
    actual_start_date: datetime.date | None = None
    actual_close_date: datetime.date | None = None


class WorkDetailsUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1, max_length=2000)
    location: str | None = Field(default=None, max_length=300)
    pic: str | None = Field(default=None, max_length=200)
    planned_start_date: datetime.date | None = None
    target_close_date: datetime.date | None = None
    period_close_target: str | None = Field(default=None, max_length=100)
    actual_start_date: datetime.date | None = None
    actual_close_date: datetime.date | None = None


class WorkDetailsResponse(BaseModel):
    id: int
    work_order_id: int
    description: str
    location: str | None
    pic: str | None
    planned_start_date: datetime.date | None
    target_close_date: datetime.date | None
    period_close_target: str | None
    actual_start_date: datetime.date | None
    actual_close_date: datetime.date | None
    storage_path: str | None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    current_progress: float = 0
    latest_progress_date: datetime.date | None = None
    progress_count: int = 0
    is_verified: bool = False

    model_config = ConfigDict(from_attributes=True)


WorkOrderDetailResponse.model_rebuild()
