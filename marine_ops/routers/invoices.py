"""
Invoices router.

Mounts under ``/api/invoices``.  Listing needs ``view-invoices``; writes
need ``manage-invoices``.  ``payment_price`` is ``null`` in every response
for callers without ``view-financial-data``.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.common import MessageResponse
from marine_ops.schemas.invoice import (
    InvoiceCreate,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceUpdate,
    PaymentStatusUpdate,
)
from marine_ops.services import invoice_service
from marine_ops.services.auth_service import require_capability
from marine_ops.utils.constants import CAP_MANAGE_INVOICES, CAP_VIEW_INVOICES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Invoices"])

_Viewer = Annotated[Profile, Depends(require_capability(CAP_VIEW_INVOICES))]
_Manager = Annotated[Profile, Depends(require_capability(CAP_MANAGE_INVOICES))]


@router.get(
    "/",
    response_model=InvoiceListResponse,
    summary="List invoices",
    description="Optional ``paid`` filter; the paid/unpaid counters ignore it.",
)
def list_invoices(
    db: Annotated[Session, Depends(get_db)],
    current_user: _Viewer,
    paid: Annotated[bool | None, Query(description="true = paid, false = unpaid.")] = None,
    work_order_id: Annotated[int | None, Query(ge=1)] = None,
) -> InvoiceListResponse:
    return invoice_service.list_invoices(db, current_user, paid, work_order_id)


@router.get("/{invoice_id}", response_model=InvoiceResponse, summary="Invoice detail")
def get_invoice(
    invoice_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Viewer,
) -> InvoiceResponse:
    return invoice_service.get_invoice(db, invoice_id, current_user)


@router.post(
    "/",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create invoice",
    responses={409: {"description": "The work order already has an invoice."}},
)
def create_invoice(
    data: InvoiceCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> InvoiceResponse:
    return invoice_service.create_invoice(db, data, current_user)


@router.put("/{invoice_id}", response_model=InvoiceResponse, summary="Update invoice")
def update_invoice(
    invoice_id: int,
    data: InvoiceUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> InvoiceResponse:
    return invoice_service.update_invoice(db, invoice_id, data, current_user)


@router.post("/{invoice_id}/mark-paid", response_model=InvoiceResponse, summary="Mark as paid")
def mark_paid(
    invoice_id: int,
    data: PaymentStatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> InvoiceResponse:
    return invoice_service.mark_paid(db, invoice_id, data, current_user)


@router.post("/{invoice_id}/mark-unpaid", response_model=InvoiceResponse, summary="Mark as unpaid")
def mark_unpaid(
    invoice_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> InvoiceResponse:
    return invoice_service.mark_unpaid(db, invoice_id, current_user)


@router.delete("/{invoice_id}", response_model=MessageResponse, summary="Delete invoice")
def delete_invoice(
    invoice_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> MessageResponse:
    invoice_service.delete_invoice(db, invoice_id, current_user)
    return MessageResponse(message=f"Invoice {invoice_id} deleted.")
