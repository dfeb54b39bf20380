"""
Soft delete mixin.

Adds ``created_at``/``updated_at`` timestamps and a nullable ``deleted_at``
column. Rows are never physically removed: ``soft_delete()`` stamps the
deletion time and every read goes through ``active()``.

Usage:
    class Vessel(SoftDeleteMixin, Base):
        ...

    vessel.soft_delete()
    db.commit()

    db.query(Vessel).filter(Vessel.active()).all()
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func


class SoftDeleteMixin:
    """Timestamps plus soft delete support for any declarative model."""

    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
    deleted_at = Column(DateTime, nullable=True, default=None, index=True)

    def soft_delete(self):
        """Mark this record as deleted."""
        now = datetime.now(timezone.utc)
        self.deleted_at = now
        self.updated_at = now

    @classmethod
    def active(cls):
        """WHERE clause that excludes soft-deleted rows."""
        return cls.deleted_at.is_(None)
