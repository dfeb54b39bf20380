"""SQLAlchemy models package for the Marine Ops dashboard.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` or Alembic migrations run.
The import order follows the foreign-key dependency graph so that parent
tables are always registered before their children.

Usage from other modules:
    from marine_ops.models import Vessel, WorkOrder
"""

# Users
from marine_ops.models.profile import Profile  # noqa: F401

# Vessel → work order → work details chain
from marine_ops.models.vessel import Vessel  # noqa: F401
from marine_ops.models.work_order import WorkOrder  # noqa: F401
from marine_ops.models.work_details import WorkDetails  # noqa: F401

# Progress and sign-off
from marine_ops.models.work_progress import ProjectProgress, WorkProgress  # noqa: F401
from marine_ops.models.work_verification import WorkVerification  # noqa: F401

# Billing
from marine_ops.models.invoice import InvoiceDetails  # noqa: F401

# Audit trail
from marine_ops.models.activity_log import ActivityLog  # noqa: F401

__all__ = [
    "Profile",
    "Vessel",
    "WorkOrder",
    "WorkDetails",
    "WorkProgress",
    "ProjectProgress",
    "WorkVerification",
    "InvoiceDetails",
    "ActivityLog",
]
