"""SQLAlchemy ORM models for tables owned by other hackathon services.

These tables reference users.id. This service never reads them; deleting a
user clears its rows here before removing the user row.
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


def _user_fk() -> Mapped[int]:
    return mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )


class HackathonApplicationModel(Base):
    """ORM model for hackathon_applications table."""

    __tablename__ = "hackathon_applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = _user_fk()
    hackathon_id: Mapped[str] = mapped_column(String(64), nullable=False)


class MealModel(Base):
    """ORM model for meals table."""

    __tablename__ = "meals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = _user_fk()
    hackathon_id: Mapped[str] = mapped_column(String(64), nullable=False)
    meal: Mapped[str] = mapped_column(String(64), nullable=False)


class HackathonCheckinModel(Base):
    """ORM model for hackathon_checkin table."""

    __tablename__ = "hackathon_checkin"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = _user_fk()
    hackathon_id: Mapped[str] = mapped_column(String(64), nullable=False)


class EventAttendanceModel(Base):
    """ORM model for event_attendance table."""

    __tablename__ = "event_attendance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = _user_fk()
    event_id: Mapped[str] = mapped_column(String(64), nullable=False)
