"""
Candidates Module

One row per applicant email. Name variants submitted under the same
email accumulate in ``aliases`` as a ", "-joined list.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, Text
from database.engine import Base
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.applications import Application


ALIAS_SEPARATOR = ", "


class Candidate(Base):
    """
    Applicant identity, deduplicated by email.
    """

    __tablename__: str = "candidates"
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False, autoincrement=True
    )
    full_name: Mapped[str] = mapped_column(String(180), nullable=False)
    email: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    aliases: Mapped[str | None] = mapped_column(Text, nullable=True)

    applications: Mapped[list["Application"]] = relationship(
        back_populates="candidate"
    )

    @property
    def alias_list(self) -> list[str]:
        if not self.aliases:
            return []
        return [alias.strip() for alias in self.aliases.split(",") if alias.strip()]

    def add_alias(self, name: str) -> bool:
        """
        Record ``name`` as an alias unless it is the primary name or already known.

        Returns:
            True if the alias list changed
        """
        if name == self.full_name:
            return False

        current = self.alias_list
        if name in current:
            return False

        self.aliases = ALIAS_SEPARATOR.join([*current, name])
        return True
