"""WorkOrder model — contracted work against one vessel."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from marine_ops.database import Base
from marine_ops.models.soft_delete import SoftDeleteMixin


class WorkOrder(SoftDeleteMixin, Base):
    """Customer-facing unit of contracted work.

    Attributes:
        id: Primary key.
        vessel_id: FK to Vessel.
        customer_wo_number: Customer's own reference number.
        customer_wo_date: Date on the customer's work order.
        shipyard_wo_number: Internal shipyard reference number.
        shipyard_wo_date: Date of the shipyard work order.
        wo_document_delivery_date: Date the WO document was delivered.
        wo_location: Where the work takes place.
        wo_description: Free-text description.
        user_id: FK to the Profile that created the order.
    """

    __tablename__ = "work_order"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vessel_id = Column(Integer, ForeignKey("vessel.id"), nullable=False, index=True)
    customer_wo_number = Column(String(100), nullable=True)
    customer_wo_date = Column(Date, nullable=True)
    shipyard_wo_number = Column(String(100), nullable=True)
    shipyard_wo_date = Column(Date, nullable=True)
    wo_document_delivery_date = Column(Date, nullable=True)
    wo_location = Column(String(300), nullable=True)
    wo_description = Column(String(2000), nullable=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True)

    # Relationships
    vessel = relationship("Vessel", back_populates="work_orders", lazy="select")
    work_details = relationship(
        "WorkDetails",
        back_populates="work_order",
        order_by="WorkDetails.id",
        lazy="select",
    )
    invoices = relationship(
        "InvoiceDetails",
        back_populates="work_order",
        order_by="InvoiceDetails.id",
        lazy="select",
    )
    project_progress = relationship(
        "ProjectProgress",
        back_populates="work_order",
        order_by="ProjectProgress.id",
        lazy="select",
    )
