"""Progress report models — dated percentage-complete submissions.

``WorkProgress`` tracks a single work detail; ``ProjectProgress`` is the
work-order-level variant reported directly against a work order.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from marine_ops.database import Base
from marine_ops.models.soft_delete import SoftDeleteMixin


class WorkProgress(SoftDeleteMixin, Base):
    """Progress report for one work detail.

    At most one live report exists per (work_details_id, report_date);
    the check happens in the service layer before insert.

    Attributes:
        id: Primary key.
        work_details_id: FK to WorkDetails.
        progress_percentage: Completion 0–100.
        report_date: Day the progress was observed.
        notes: Optional remarks.
        evidence_url: Signed-URL source for the evidence image.
        storage_path: Storage key of the evidence image.
        user_id: FK to the reporting Profile.
    """

    __tablename__ = "work_progress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    work_details_id = Column(Integer, ForeignKey("work_details.id"), nullable=False, index=True)
    progress_percentage = Column(Numeric(5, 2), nullable=False)
    report_date = Column(Date, nullable=False)
    notes = Column(String(2000), nullable=True)
    evidence_url = Column(String(1000), nullable=True)
    storage_path = Column(String(500), nullable=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True)

    # Relationships
    work_details = relationship("WorkDetails", back_populates="progress_reports", lazy="select")
    reporter = relationship("Profile", lazy="select")


class ProjectProgress(SoftDeleteMixin, Base):
    """Overall progress report for a whole work order.

    Attributes:
        id: Primary key.
        work_order_id: FK to WorkOrder.
        progress: Completion 0–100.
        report_date: Day the progress was observed.
        notes: Optional remarks.
        user_id: FK to the reporting Profile.
    """

    __tablename__ = "project_progress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    work_order_id = Column(Integer, ForeignKey("work_order.id"), nullable=False, index=True)
    progress = Column(Numeric(5, 2), nullable=False)
    report_date = Column(Date, nullable=False)
    notes = Column(String(2000), nullable=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True)

    # Relationships
    work_order = relationship("WorkOrder", back_populates="project_progress", lazy="select")
    reporter = relationship("Profile", lazy="select")
