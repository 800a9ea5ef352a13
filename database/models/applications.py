"""
Applications Module

A single résumé submission linking a candidate to a position. The résumé
bytes live in object storage; only the file name and storage key are kept here.
Applications are immutable once created.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, ForeignKey, Integer, DateTime, func, Index
from database.engine import Base
from database.models.candidates import Candidate
from database.models.positions import Position
from datetime import datetime


class Application(Base):
    """
    Résumé submission for a position.
    """

    __tablename__: str = "applications"
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False, autoincrement=True
    )
    candidate_id: Mapped[int] = mapped_column(
        ForeignKey("candidates.id"), nullable=False, index=True
    )
    position_id: Mapped[int] = mapped_column(
        ForeignKey("positions.id"), nullable=False, index=True
    )
    resume_file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    resume_file_path: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    candidate: Mapped[Candidate] = relationship(back_populates="applications")
    position: Mapped[Position] = relationship(back_populates="applications")

    __table_args__ = (
        Index("idx_applications_created", "created_at"),
    )
