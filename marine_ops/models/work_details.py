"""WorkDetails model — discrete task inside a work order."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from marine_ops.database import Base
from marine_ops.models.soft_delete import SoftDeleteMixin


class WorkDetails(SoftDeleteMixin, Base):
    """Independently tracked unit of work with planned and actual dates.

    Attributes:
        id: Primary key.
        work_order_id: FK to WorkOrder.
        description: What has to be done.
        location: Location on the vessel.
        pic: Person in charge.
        planned_start_date / target_close_date: Planned window.
        period_close_target: Reporting period the work should close in.
        actual_start_date / actual_close_date: Recorded execution window.
        work_permit_url: Signed-URL source for the uploaded permit.
        storage_path: Storage key of the uploaded permit document.
        user_id: FK to the Profile that created the record.
    """

    __tablename__ = "work_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    work_order_id = Column(Integer, ForeignKey("work_order.id"), nullable=False, index=True)
    description = Column(String(2000), nullable=False)
    location = Column(String(300), nullable=True)
    pic = Column(String(200), nullable=True)
    planned_start_date = Column(Date, nullable=True)
    target_close_date = Column(Date, nullable=True)
    period_close_target = Column(String(100), nullable=True)
    actual_start_date = Column(Date, nullable=True)
    actual_close_date = Column(Date, nullable=True)
    work_permit_url = Column(String(1000), nullable=True)
    storage_path = Column(String(500), nullable=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True)

    # Relationships
    work_order = relationship("WorkOrder", back_populates="work_details", lazy="select")
    progress_reports = relationship(
        "WorkProgress",
        back_populates="work_details",
        order_by="WorkProgress.id",
        lazy="select",
    )
    verifications = relationship(
        "WorkVerification",
        back_populates="work_details",
        order_by="WorkVerification.id",
        lazy="select",
    )
