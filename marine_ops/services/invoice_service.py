"""
Invoice service layer.

All database access for ``/api/invoices``.  A work order has at most one
live invoice.  ``payment_price`` is financial data and is returned as
``None`` to callers without the ``view-financial-data`` capability; the
same check drives the CSV export.
"""

from __future__ import annotations

import datetime
import logging

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from marine_ops.models.invoice import InvoiceDetails
from marine_ops.models.profile import Profile
from marine_ops.models.work_order import WorkOrder
from marine_ops.schemas.invoice import (
    InvoiceCreate,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceUpdate,
    PaymentStatusUpdate,
)
from marine_ops.services.activity_log_service import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    log_activity,
)
from marine_ops.services.auth_service import can_view_financial_data

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def to_response(invoice: InvoiceDetails, user: Profile) -> InvoiceResponse:
    """Serialise an invoice, redacting ``payment_price`` when required."""
    response = InvoiceResponse.model_validate(invoice)
    if not can_view_financial_data(user):
        response = response.model_copy(update={"payment_price": None})
    return response


def _get_row(db: Session, invoice_id: int) -> InvoiceDetails:
    invoice = (
        db.query(InvoiceDetails)
        .filter(InvoiceDetails.id == invoice_id, InvoiceDetails.active())
        .first()
    )
    if invoice is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invoice with id {invoice_id} not found.",
        )
    return invoice


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def list_invoices(
    db: Session,
    user: Profile,
    paid: bool | None = None,
    work_order_id: int | None = None,
) -> InvoiceListResponse:
    """Return live invoices plus paid/unpaid counters.

    The counters cover every live invoice (respecting ``work_order_id``)
    regardless of the ``paid`` filter, so the tabs above the table always
    show both totals.
    """
    base = db.query(InvoiceDetails).filter(InvoiceDetails.active())
    if work_order_id is not None:
        base = base.filter(InvoiceDetails.work_order_id == work_order_id)

    counts = dict(
        base.with_entities(InvoiceDetails.payment_status, func.count(InvoiceDetails.id))
        .group_by(InvoiceDetails.payment_status)
        .all()
    )
    paid_count = counts.get(True, 0)
    unpaid_count = counts.get(False, 0)

    query = base
    if paid is not None:
        query = query.filter(InvoiceDetails.payment_status.is_(paid))
    rows = query.order_by(InvoiceDetails.id.desc()).all()

    logger.debug(
        "list_invoices: paid=%s rows=%d (paid=%d unpaid=%d)",
        paid,
        len(rows),
        paid_count,
        unpaid_count,
    )
    return InvoiceListResponse(
        items=[to_response(row, user) for row in rows],
        total=paid_count + unpaid_count,
        paid=paid_count,
        unpaid=unpaid_count,
    )


def get_invoice(db: Session, invoice_id: int, user: Profile) -> InvoiceResponse:
    return to_response(_get_row(db, invoice_id), user)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def create_invoice(db: Session, data: InvoiceCreate, user: Profile) -> InvoiceResponse:
    """Create the invoice of a work order.

    Raises:
        HTTPException 422: If the work order does not exist or was deleted.
        HTTPException 409: If the work order already has a live invoice.
    """
    work_order = (
        db.query(WorkOrder)
        .filter(WorkOrder.id == data.work_order_id, WorkOrder.active())
        .first()
    )
    if work_order is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Work order with id {data.work_order_id} does not exist.",
        )

    existing = (
        db.query(InvoiceDetails)
        .filter(InvoiceDetails.work_order_id == work_order.id, InvoiceDetails.active())
        .first()
    )
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Work order {work_order.id} already has invoice {existing.id}.",
        )

    invoice = InvoiceDetails(**data.model_dump(), payment_status=False, user_id=user.id)
    db.add(invoice)
    db.flush()
    log_activity(
        db,
        user,
        ACTION_CREATE,
        InvoiceDetails.__tablename__,
        invoice.id,
        f"Invoice {invoice.invoice_number or invoice.id} for work order {work_order.id}",
    )
    db.commit()
    db.refresh(invoice)

    logger.info("create_invoice: id=%d work_order_id=%d", invoice.id, work_order.id)
    return to_response(invoice, user)


def update_invoice(
    db: Session,
    invoice_id: int,
    data: InvoiceUpdate,
    user: Profile,
) -> InvoiceResponse:
    invoice = _get_row(db, invoice_id)
    for field_name, value in data.model_dump(exclude_unset=True).items():
        setattr(invoice, field_name, value)
    log_activity(db, user, ACTION_UPDATE, InvoiceDetails.__tablename__, invoice.id)
    db.commit()
    db.refresh(invoice)

    logger.info("update_invoice: id=%d", invoice_id)
    return to_response(invoice, user)


def mark_paid(
    db: Session,
    invoice_id: int,
    data: PaymentStatusUpdate,
    user: Profile,
) -> InvoiceResponse:
    """Set ``payment_status`` and ``payment_date`` (today when omitted)."""
    invoice = _get_row(db, invoice_id)
    invoice.payment_status = True
    invoice.payment_date = data.payment_date or datetime.date.today()
    log_activity(
        db,
        user,
        ACTION_UPDATE,
        InvoiceDetails.__tablename__,
        invoice.id,
        f"Marked paid on {invoice.payment_date.isoformat()}",
    )
    db.commit()
    db.refresh(invoice)

    logger.info("mark_paid: id=%d date=%s", invoice_id, invoice.payment_date)
    return to_response(invoice, user)


def mark_unpaid(db: Session, invoice_id: int, user: Profile) -> InvoiceResponse:
    invoice = _get_row(db, invoice_id)
    invoice.payment_status = False
    invoice.payment_date = None
    log_activity(db, user, ACTION_UPDATE, InvoiceDetails.__tablename__, invoice.id, "Marked unpaid")
    db.commit()
    db.refresh(invoice)

    logger.info("mark_unpaid: id=%d", invoice_id)
    return to_response(invoice, user)


def delete_invoice(db: Session, invoice_id: int, user: Profile) -> None:
    invoice = _get_row(db, invoice_id)
    invoice.soft_delete()
    log_activity(db, user, ACTION_DELETE, InvoiceDetails.__tablename__, invoice.id)
    db.commit()
    logger.info("delete_invoice: id=%d", invoice_id)
