"""SQLAlchemy ORM model for the pronouns table."""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class PronounModel(Base):
    """ORM model for pronouns table.

    Each (subjective, objective) pair is stored once and shared by every
    user who picked it.
    """

    __tablename__ = "pronouns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subjective: Mapped[str] = mapped_column(String(64), nullable=False)
    objective: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("subjective", "objective", name="uq_pronouns_pair"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<PronounModel(id={self.id}, {self.subjective}/{self.objective})>"
