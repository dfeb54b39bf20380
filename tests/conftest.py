import os

# Settings are read once at import time; point them at SQLite before any
# marine_ops module is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("SEED_MASTER_PASSWORD", "")

import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import marine_ops.models  # noqa: E402,F401
from marine_ops.database import Base, get_db  # noqa: E402
from marine_ops.main import app  # noqa: E402
from marine_ops.models import (  # noqa: E402
    InvoiceDetails,
    Profile,
    Vessel,
    WorkDetails,
    WorkOrder,
    WorkProgress,
    WorkVerification,
)
from marine_ops.utils.security import create_access_token, hash_password  # noqa: E402

PASSWORD = "Secret123!"
_PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    yield factory
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_user(db):
    def _make(role: str = "OPERATION", username: str | None = None) -> Profile:
        username = username or role.lower()
        user = Profile(
            username=username,
            email=f"{username}@example.com",
            password_hash=_PASSWORD_HASH,
            name=username.title(),
            role=role,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


def auth_headers(user: Profile) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def master(make_user):
    return make_user("MASTER")


@pytest.fixture()
def operator(make_user):
    return make_user("OPERATION")


@pytest.fixture()
def finance(make_user):
    return make_user("FINANCE")


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------


@pytest.fixture()
def fleet(db, master):
    """Two vessels: "KM Bahari" with one fully populated work order and
    "Sea Star" with no work orders at all."""
    bahari = Vessel(name="KM Bahari", type="Tug", company="PT Samudra")
    star = Vessel(name="Sea Star", type="Barge", company="PT Laut")
    db.add_all([bahari, star])
    db.flush()

    wo = WorkOrder(
        vessel_id=bahari.id,
        customer_wo_number="CWO-001",
        shipyard_wo_number="SWO-001",
        shipyard_wo_date=datetime.date(2026, 3, 1),
        user_id=master.id,
    )
    db.add(wo)
    db.flush()

    hull = WorkDetails(work_order_id=wo.id, description="Hull blasting", pic="Andi", user_id=master.id)
    paint = WorkDetails(work_order_id=wo.id, description="Painting, 2 coats", user_id=master.id)
    db.add_all([hull, paint])
    db.flush()

    db.add_all(
        [
            WorkProgress(
                work_details_id=hull.id,
                progress_percentage=50,
                report_date=datetime.date(2026, 3, 2),
                user_id=master.id,
            ),
            WorkProgress(
                work_details_id=hull.id,
                progress_percentage=80,
                report_date=datetime.date(2026, 3, 5),
                user_id=master.id,
            ),
            WorkVerification(
                work_details_id=hull.id,
                work_verification=True,
                verification_date=datetime.date(2026, 3, 6),
                user_id=master.id,
            ),
            InvoiceDetails(
                work_order_id=wo.id,
                invoice_number="INV-001",
                payment_price=1500000,
                payment_status=False,
                user_id=master.id,
            ),
        ]
    )
    db.commit()
    return {
        "bahari": bahari.id,
        "star": star.id,
        "work_order": wo.id,
        "hull": hull.id,
        "paint": paint.id,
    }
