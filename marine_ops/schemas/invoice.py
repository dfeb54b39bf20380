"""
Pydantic v2 schemas for invoices.

``payment_price`` is financial data: responses leave it ``None`` for
callers whose role lacks the ``view-financial-data`` capability.
"""

from __future__ import annotations

import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class InvoiceCreate(BaseModel):
    work_order_id: int = Field(..., ge=1)
    wo_document_collection_date: datetime.date | None = None
    invoice_number: str | None = Field(default=None, max_length=100)
    faktur_number: str | None = Field(default=None, max_length=100)
    due_date: datetime.date | None = None
    delivery_date: datetime.date | None = None
    collection_date: datetime.date | None = None
    receiver_name: str | None = Field(default=None, max_length=200)
    payment_price: Decimal | None = Field(default=None, ge=0, max_digits=15, decimal_places=2)
    remarks: str | None = Field(default=None, max_length=2000)


class InvoiceUpdate(BaseModel):
    wo_document_collection_date: datetime.date | None = None
    invoice_number: str | None = Field(default=None, max_length=100)
    faktur_number: str | None = Field(default=None, max_length=100)
    due_date: datetime.date | None = None
    delivery_date: datetime.date | None = None
    collection_date: datetime.date | None = None
    receiver_name: str | None = Field(default=None, max_length=200)
    payment_price: Decimal | None = Field(default=None, ge=0, max_digits=15, decimal_places=2)
    remarks: str | None = Field(default=None, max_length=2000)


class PaymentStatusUpdate(BaseModel):
    """Body of ``POST /api/invoices/{id}/mark-paid``; date defaults to today."""

    payment_date: datetime.date | None = None


class InvoiceResponse(BaseModel):
    id: int
    work_order_id: int
    wo_document_collection_date: datetime.date | None
    invoice_number: str | None
    faktur_number: str | None
    due_date: datetime.date | None
    delivery_date: datetime.date | None
    collection_date: datetime.date | None
    receiver_name: str | None
    payment_price: Decimal | None
    payment_status: bool
    payment_date: datetime.date | None
    remarks: str | None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class InvoiceListResponse(BaseModel):
    """Invoice list plus paid/unpaid counters shown above the table."""

    items: list[InvoiceResponse]
    total: int
    paid: int
    unpaid: int
