"""WorkVerification model — sign-off on a work detail."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer
from sqlalchemy.orm import relationship

from marine_ops.database import Base
from marine_ops.models.soft_delete import SoftDeleteMixin


class WorkVerification(SoftDeleteMixin, Base):
    """Verification record confirming a work detail is complete and correct.

    Attributes:
        id: Primary key.
        work_details_id: FK to WorkDetails.
        work_verification: Whether the work was verified.
        verification_date: Day of the sign-off.
        user_id: FK to the verifying Profile.
    """

    __tablename__ = "work_verification"

    id = Column(Integer, primary_key=True, autoincrement=True)
    work_details_id = Column(Integer, ForeignKey("work_details.id"), nullable=False, index=True)
    work_verification = Column(Boolean, default=False, nullable=False)
    verification_date = Column(Date, nullable=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True)

    work_details = relationship("WorkDetails", back_populates="verifications", lazy="select")
