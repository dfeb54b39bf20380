"""Vessel model — ship serviced by the yard."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from marine_ops.database import Base
from marine_ops.models.soft_delete import SoftDeleteMixin


class Vessel(SoftDeleteMixin, Base):
    """Reference data for a ship; owns any number of work orders.

    Attributes:
        id: Primary key.
        name: Vessel name, also used for export filenames.
        type: Vessel type, e.g. "Tug Boat", "Barge".
        company: Owning company.
    """

    __tablename__ = "vessel"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    type = Column(String(100), nullable=True)
    company = Column(String(200), nullable=True)

    work_orders = relationship(
        "WorkOrder",
        back_populates="vessel",
        order_by="WorkOrder.id",
        lazy="select",
    )
