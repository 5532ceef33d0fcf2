"""SQLAlchemy ORM models for the one-to-one satellite tables.

Each table is keyed by user_id. A missing row means the user never
provided that record.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, StringList, utc_now


class MailingAddressModel(Base):
    """ORM model for mailing_addresses table."""

    __tablename__ = "mailing_addresses"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True
    )
    country: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(32), nullable=False)
    address_lines: Mapped[list[str]] = mapped_column(StringList, nullable=False)


class MLHTermsModel(Base):
    """ORM model for mlh_terms table."""

    __tablename__ = "mlh_terms"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True
    )
    send_messages: Mapped[bool] = mapped_column(Boolean, nullable=False)
    share_info: Mapped[bool] = mapped_column(Boolean, nullable=False)
    code_of_conduct: Mapped[bool] = mapped_column(Boolean, nullable=False)


class EducationInfoModel(Base):
    """ORM model for education_info table."""

    __tablename__ = "education_info"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    major: Mapped[str] = mapped_column(String(255), nullable=False)
    graduation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    level: Mapped[str | None] = mapped_column(String(16), nullable=True)


class APIKeyModel(Base):
    """ORM model for api_keys table. One key per user."""

    __tablename__ = "api_keys"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True
    )
    key: Mapped[str] = mapped_column(String(128), nullable=False)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
