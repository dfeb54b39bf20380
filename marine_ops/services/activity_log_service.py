"""
Activity log service.

``log_activity`` appends an ``ActivityLog`` row to the caller's session so
the audit entry commits (or rolls back) together with the change it
describes.  ``list_activity`` backs the ``/api/activity-log`` endpoint.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from marine_ops.models.activity_log import ActivityLog
from marine_ops.models.profile import Profile
from marine_ops.schemas.common import PaginationParams

logger = logging.getLogger(__name__)

ACTION_CREATE = "CREATE"
ACTION_UPDATE = "UPDATE"
ACTION_DELETE = "DELETE"
ACTION_IMPORT = "IMPORT"
ACTION_EXPORT = "EXPORT"


def log_activity(
    db: Session,
    user: Profile | None,
    action: str,
    table_name: str,
    record_id: int | None = None,
    description: str | None = None,
) -> ActivityLog:
    """Stage an audit entry; the caller commits."""
    entry = ActivityLog(
        action=action,
        table_name=table_name,
        record_id=record_id,
        description=description,
        user_id=user.id if user is not None else None,
    )
    db.add(entry)
    logger.debug("log_activity: %s %s id=%s", action, table_name, record_id)
    return entry


def list_activity(
    db: Session,
    pagination: PaginationParams,
    table_name: str | None = None,
) -> list[ActivityLog]:
    query = db.query(ActivityLog)
    if table_name:
        query = query.filter(ActivityLog.table_name == table_name)
    return (
        query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .offset(pagination.offset)
        .limit(pagination.page_size)
        .all()
    )
