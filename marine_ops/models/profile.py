"""Profile model — application user with role-based access control."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from marine_ops.database import Base


class Profile(Base):
    """Dashboard user whose role controls which capabilities are granted.

    Roles:
        - MASTER: Complete system access, including invoices and finances.
        - ADMIN: Everything except invoice management; manages users.
        - PPIC / PRODUCTION / OPERATION: Work tracking, read-only invoices.
        - FINANCE: Full invoice access, read-only work tracking.

    Attributes:
        id: Primary key.
        username: Unique login username.
        email: Unique email address.
        password_hash: Bcrypt-hashed password (never store plain text).
        name: Display name shown as the reporter of progress entries.
        role: Role identifier, one of ``constants.ROLES``.
        is_active: Whether the account may log in.
        last_login: Timestamp of the last successful login.
    """

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False)
    email = Column(String(200), unique=True, nullable=False)
    password_hash = Column(String(200), nullable=False)
    name = Column(String(300), nullable=True)
    role = Column(String(50), nullable=False, default="OPERATION")
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
