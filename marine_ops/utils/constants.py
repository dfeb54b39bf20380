"""
Application-wide constants for the Marine Ops dashboard.

Defines roles, the role → capability table used by the central
authorisation check, and business rule thresholds shared by the
progress, export, and import services.
"""

from typing import Final

# ---------------------------------------------------------------------------
# User roles
# ---------------------------------------------------------------------------

ROLES: Final[list[str]] = [
    "MASTER",
    "ADMIN",
    "PPIC",
    "PRODUCTION",
    "OPERATION",
    "FINANCE",
]

# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------

CAP_VIEW_FINANCIAL_DATA: Final[str] = "view-financial-data"
CAP_VIEW_INVOICES: Final[str] = "view-invoices"
CAP_MANAGE_INVOICES: Final[str] = "manage-invoices"
CAP_MANAGE_VESSELS: Final[str] = "manage-vessels"
CAP_MANAGE_WORK_ORDERS: Final[str] = "manage-work-orders"
CAP_MANAGE_WORK_PROGRESS: Final[str] = "manage-work-progress"
CAP_VERIFY_WORK: Final[str] = "verify-work"
CAP_EXPORT_DATA: Final[str] = "export-data"
CAP_IMPORT_DATA: Final[str] = "import-data"
CAP_VIEW_ACTIVITY_LOG: Final[str] = "view-activity-log"

_WORK_TRACKING: Final[frozenset[str]] = frozenset({
    CAP_VIEW_INVOICES,
    CAP_MANAGE_VESSELS,
    CAP_MANAGE_WORK_ORDERS,
    CAP_MANAGE_WORK_PROGRESS,
    CAP_VERIFY_WORK,
    CAP_EXPORT_DATA,
})

_INVOICING: Final[frozenset[str]] = frozenset({
    CAP_VIEW_FINANCIAL_DATA,
    CAP_VIEW_INVOICES,
    CAP_MANAGE_INVOICES,
})

ROLE_CAPABILITIES: Final[dict[str, frozenset[str]]] = {
    "MASTER": _WORK_TRACKING | _INVOICING | {CAP_IMPORT_DATA, CAP_VIEW_ACTIVITY_LOG},
    "ADMIN": _WORK_TRACKING | {CAP_IMPORT_DATA, CAP_VIEW_ACTIVITY_LOG},
    "PPIC": _WORK_TRACKING,
    "PRODUCTION": _WORK_TRACKING,
    "OPERATION": _WORK_TRACKING,
    "FINANCE": _INVOICING | {CAP_EXPORT_DATA},
}

# ---------------------------------------------------------------------------
# Progress rules
# ---------------------------------------------------------------------------

PROGRESS_MIN: Final[int] = 0
PROGRESS_MAX: Final[int] = 100

# A project with no report for more than this many days is behind schedule
DAYS_BEHIND_SCHEDULE: Final[int] = 3

# ---------------------------------------------------------------------------
# Export / import
# ---------------------------------------------------------------------------

EXPORT_MEDIA_TYPE: Final[str] = "text/csv"

IMPORT_BATCH_SIZE: Final[int] = 100

IMPORTABLE_ENTITIES: Final[list[str]] = [
    "vessels",
    "work_orders",
    "work_details",
    "work_progress",
    "invoice_details",
]

# ---------------------------------------------------------------------------
# Signed document URLs (seconds)
# ---------------------------------------------------------------------------

SIGNED_URL_DOWNLOAD_SECONDS: Final[int] = 300
SIGNED_URL_VIEW_SECONDS: Final[int] = 1800
