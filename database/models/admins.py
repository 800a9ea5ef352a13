"""
Administrators Module

Back-office accounts that manage positions and other administrators,
plus the single-row guard that records the bootstrap administrator.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    ForeignKey,
    Integer,
    DateTime,
    CheckConstraint,
    func,
    Enum as SQLEnum,
)
from database.engine import Base
from datetime import datetime
from enum import Enum as PyEnum


# ==================== Admin Enums ===================== #
class AdminRole(str, PyEnum):
    STANDARD = "standard"  # manages positions, reads applications
    SUPERADMIN = "superadmin"  # additionally manages other admins


class RecordStatus(str, PyEnum):
    """Soft-delete status shared by admins and positions."""

    ACTIVE = "active"
    DELETED = "deleted"


def enum_values(enum_cls: type[PyEnum]) -> list[str]:
    """Persist enum values rather than member names."""
    return [member.value for member in enum_cls]


# Shared by admins and positions so Postgres only gets one enum type
record_status_enum = SQLEnum(RecordStatus, name="status", values_callable=enum_values)


class Admin(Base):
    """
    Administrator account.
    """

    __tablename__: str = "admins"
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False, autoincrement=True
    )
    first_name: Mapped[str] = mapped_column(String(60), nullable=False)
    last_name: Mapped[str] = mapped_column(String(60), nullable=False)
    email: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[AdminRole] = mapped_column(
        SQLEnum(AdminRole, name="roles", values_callable=enum_values),
        default=AdminRole.STANDARD,
        nullable=False,
    )
    status: Mapped[RecordStatus] = mapped_column(
        record_status_enum,
        default=RecordStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    created_by_admin_id: Mapped[int | None] = mapped_column(
        ForeignKey("admins.id", ondelete="SET NULL"), nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    created_by: Mapped["Admin | None"] = relationship(remote_side=[id])

    @property
    def is_deleted(self) -> bool:
        return self.status == RecordStatus.DELETED


class AdminBootstrap(Base):
    """
    Marker row written in the same transaction as the first administrator.

    The primary key is pinned to 1, so a second concurrent bootstrap fails
    with an integrity error instead of producing a second unauthenticated
    superadmin.
    """

    __tablename__: str = "admin_bootstrap"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    admin_id: Mapped[int] = mapped_column(ForeignKey("admins.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (CheckConstraint("id = 1", name="ck_admin_bootstrap_single_row"),)
