"""
Positions Module

Job openings published by administrators for public application.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    ForeignKey,
    Integer,
    DateTime,
    Text,
    func,
    Index,
    Enum as SQLEnum,
)
from database.engine import Base
from database.models.admins import Admin, RecordStatus, enum_values, record_status_enum
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.applications import Application


# ==================== Position Enums ===================== #
class WorkType(str, PyEnum):
    """Work arrangement for a position."""

    REMOTE = "remote"
    HYBRID = "hybrid"
    ONSITE = "onsite"
    FREELANCER = "freelancer"


class Position(Base):
    """
    Job opening. Soft-deleted positions are hidden from every read.
    """

    __tablename__: str = "positions"
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False, autoincrement=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    work_type: Mapped[WorkType] = mapped_column(
        SQLEnum(WorkType, name="worktype", values_callable=enum_values),
        default=WorkType.ONSITE,
        nullable=False,
    )
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[RecordStatus] = mapped_column(
        record_status_enum,
        default=RecordStatus.ACTIVE,
        nullable=False,
    )
    created_by_admin_id: Mapped[int] = mapped_column(
        ForeignKey("admins.id"), nullable=False
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

    created_by: Mapped[Admin] = relationship()
    applications: Mapped[list["Application"]] = relationship(back_populates="position")

    __table_args__ = (
        Index("idx_positions_status_created", "status", "created_at"),
    )
