"""User aggregate and its satellite records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from users.domain.value_objects import (
    LevelOfStudy,
    OAuthIdentity,
    Pronouns,
    Race,
    Role,
    ShirtSize,
)


@dataclass(frozen=True)
class MailingAddress:
    """Postal address a user registered with."""

    country: str
    state: str
    city: str
    postal_code: str
    address_lines: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class EducationInfo:
    """School a user attends and their expected graduation."""

    name: str
    major: str
    graduation_date: datetime
    level: LevelOfStudy | None = None


@dataclass(frozen=True)
class MLHTerms:
    """Major League Hacking consent flags."""

    send_messages: bool
    share_info: bool
    code_of_conduct: bool


@dataclass(frozen=True)
class APIKey:
    """API key issued to a user. A user holds at most one key."""

    key: str
    created: datetime


@dataclass(frozen=True)
class User:
    """User aggregate representing a hackathon participant.

    `id` is the decimal string form of the store's integer primary key.
    Satellite records (mailing address, education info, MLH terms, API key)
    are only populated when the caller loaded them; reads that project the
    base columns leave them as None.
    """

    id: str
    first_name: str
    last_name: str
    email: str
    phone_number: str
    role: Role = Role.NORMAL
    age: int | None = None
    gender: str | None = None
    race: list[Race] | None = None
    years_of_experience: float | None = None
    shirt_size: ShirtSize | None = None
    pronouns: Pronouns | None = None
    oauth: OAuthIdentity | None = None
    mailing_address: MailingAddress | None = None
    education_info: EducationInfo | None = None
    mlh: MLHTerms | None = None
    api_key: APIKey | None = None

    @property
    def full_name(self) -> str:
        """Return the first and last name joined by a space."""
        return f"{self.first_name} {self.last_name}"

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.id}, {self.full_name})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
