import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from marine_ops.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def _seed_master_user() -> None:
    """Create the initial MASTER account when the profiles table is empty.

    Runs only when ``SEED_MASTER_PASSWORD`` is configured.
    """
    if not settings.SEED_MASTER_PASSWORD:
        return

    from marine_ops.database import SessionLocal
    from marine_ops.models.profile import Profile
    from marine_ops.utils.security import hash_password

    db = SessionLocal()
    try:
        if db.query(Profile).count():
            return
        db.add(
            Profile(
                username=settings.SEED_MASTER_USERNAME,
                email=settings.SEED_MASTER_EMAIL,
                password_hash=hash_password(settings.SEED_MASTER_PASSWORD),
                name="Master",
                role="MASTER",
                is_active=True,
            )
        )
        db.commit()
        logger.info("Seeded MASTER user '%s'", settings.SEED_MASTER_USERNAME)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not seed the MASTER user")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _seed_master_user()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Total-Records"],
)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from marine_ops.routers import auth  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])

# Fleet and work tracking
from marine_ops.routers import vessels, work_details, work_orders  # noqa: E402

app.include_router(vessels.router, prefix="/api/vessels", tags=["Vessels"])
app.include_router(work_orders.router, prefix="/api/work-orders", tags=["Work orders"])
app.include_router(work_details.router, prefix="/api/work-details", tags=["Work details"])

# Progress
from marine_ops.routers import dashboard, project_progress, work_progress  # noqa: E402

app.include_router(
    work_progress.router,
    prefix="/api/work-progress",
    tags=["Work progress"],
)
app.include_router(
    project_progress.router,
    prefix="/api/project-progress",
    tags=["Project progress"],
)
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])

# Invoicing
from marine_ops.routers import invoices  # noqa: E402

app.include_router(invoices.router, prefix="/api/invoices", tags=["Invoices"])

# Documents (work permits, progress evidence)
from marine_ops.routers import documents  # noqa: E402

app.include_router(documents.router, prefix="/api/documents", tags=["Documents"])

# CSV export / import
from marine_ops.routers import data_import, export  # noqa: E402

app.include_router(export.router, prefix="/api/export", tags=["Export"])
app.include_router(data_import.router, prefix="/api/import", tags=["Import"])

# Audit trail
from marine_ops.routers import activity_log  # noqa: E402

app.include_router(
    activity_log.router,
    prefix="/api/activity-log",
    tags=["Activity log"],
)
