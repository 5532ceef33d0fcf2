"""SQLAlchemy ORM model for the users table.

Stores the base profile row. Satellite records live in their own one-to-one
tables keyed by user_id.
"""

from sqlalchemy import Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, StringList


class UserModel(Base):
    """ORM model for users table.

    Notes:
    - id is an integer identity; the domain exposes it as a decimal string
    - (oauth_provider, oauth_uid) is unique and closes the duplicate
      registration race
    - race is a text array on PostgreSQL
    - name search uses a GIN expression index created by migration
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="NORMAL")
    gender: Mapped[str | None] = mapped_column(String(64), nullable=True)
    race: Mapped[list[str] | None] = mapped_column(StringList, nullable=True)
    years_of_experience: Mapped[float | None] = mapped_column(Float, nullable=True)
    shirt_size: Mapped[str | None] = mapped_column(String(8), nullable=True)
    pronoun_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("pronouns.id", ondelete="RESTRICT"),
        nullable=True,
    )
    oauth_uid: Mapped[str] = mapped_column(String(255), nullable=False)
    oauth_provider: Mapped[str] = mapped_column(String(16), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "oauth_provider",
            "oauth_uid",
            name="uq_users_oauth_identity",
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<UserModel(id={self.id}, oauth_provider={self.oauth_provider}, "
            f"oauth_uid={self.oauth_uid})>"
        )
