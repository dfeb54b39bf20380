"""ActivityLog model — append-only audit trail of write actions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from marine_ops.database import Base


class ActivityLog(Base):
    """One row per create/update/delete performed through the API.

    Attributes:
        id: Primary key.
        action: Verb, e.g. "CREATE", "UPDATE", "DELETE", "MARK_PAID".
        table_name: Affected table.
        record_id: Primary key of the affected row.
        description: Human-readable summary.
        user_id: FK to the acting Profile.
        created_at: When the action happened.
    """

    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String(50), nullable=False)
    table_name = Column(String(100), nullable=False)
    record_id = Column(Integer, nullable=True)
    description = Column(String(1000), nullable=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
