"""InvoiceDetails model — billing record for a work order."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from marine_ops.database import Base
from marine_ops.models.soft_delete import SoftDeleteMixin


class InvoiceDetails(SoftDeleteMixin, Base):
    """Invoice issued for a work order (one live invoice per work order).

    Attributes:
        id: Primary key.
        work_order_id: FK to WorkOrder.
        wo_document_collection_date: Date the WO documents were collected.
        invoice_number: Invoice reference.
        faktur_number: Tax invoice (faktur pajak) number.
        due_date: Payment due date.
        delivery_date: Date the invoice was delivered to the customer.
        collection_date: Date the payment was collected.
        receiver_name: Person who received the invoice.
        payment_price: Invoiced amount; financial data, redacted for
            roles without the ``view-financial-data`` capability.
        payment_status: True once paid.
        payment_date: Date the payment was registered.
        remarks: Free-text remarks.
        user_id: FK to the Profile that created the invoice.
    """

    __tablename__ = "invoice_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    work_order_id = Column(Integer, ForeignKey("work_order.id"), nullable=False, index=True)
    wo_document_collection_date = Column(Date, nullable=True)
    invoice_number = Column(String(100), nullable=True)
    faktur_number = Column(String(100), nullable=True)
    due_date = Column(Date, nullable=True)
    delivery_date = Column(Date, nullable=True)
    collection_date = Column(Date, nullable=True)
    receiver_name = Column(String(200), nullable=True)
    payment_price = Column(Numeric(15, 2), nullable=True)
    payment_status = Column(Boolean, default=False, nullable=False)
    payment_date = Column(Date, nullable=True)
    remarks = Column(String(2000), nullable=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True)

    work_order = relationship("WorkOrder", back_populates="invoices", lazy="select")
