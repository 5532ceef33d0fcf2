"""Inputs for creating and partially updating users.

`UserPatch` and the nested satellite patches carry one slot per updatable
field. A slot holding `UNSET` is absent and leaves the stored value alone;
any other value, including None for nullable fields, is written.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Final

from users.domain.aggregates import EducationInfo, MailingAddress, MLHTerms
from users.domain.value_objects import LevelOfStudy, Pronouns, Race, ShirtSize


class Unset(Enum):
    """Sentinel type marking an absent patch slot."""

    UNSET = "UNSET"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = Unset.UNSET

_REQUIRED_USER_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "mailing_address",
    "education_info",
    "mlh",
)


def _present(patch: Any) -> dict[str, Any]:
    return {
        f.name: getattr(patch, f.name)
        for f in fields(patch)
        if getattr(patch, f.name) is not UNSET
    }


def _reject_none(patch: Any, required: tuple[str, ...]) -> None:
    for name in required:
        if getattr(patch, name) is None:
            raise ValueError(f"{name} cannot be set to null")


@dataclass(frozen=True)
class NewUser:
    """Profile submitted at registration."""

    first_name: str
    last_name: str
    email: str
    phone_number: str
    age: int | None = None
    gender: str | None = None
    race: list[Race] | None = None
    years_of_experience: float | None = None
    shirt_size: ShirtSize | None = None
    pronouns: Pronouns | None = None
    mailing_address: MailingAddress | None = None
    education_info: EducationInfo | None = None
    mlh: MLHTerms | None = None


@dataclass(frozen=True)
class MailingAddressPatch:
    """Partial update of a user's mailing address."""

    country: str | Unset = UNSET
    state: str | Unset = UNSET
    city: str | Unset = UNSET
    postal_code: str | Unset = UNSET
    address_lines: list[str] | Unset = UNSET

    def __post_init__(self) -> None:
        _reject_none(
            self, ("country", "state", "city", "postal_code", "address_lines")
        )
        if not self.present_fields():
            raise ValueError("mailing address update has no fields")

    def present_fields(self) -> dict[str, Any]:
        """Return column name to value for every present slot."""
        return _present(self)


@dataclass(frozen=True)
class EducationInfoPatch:
    """Partial update of a user's education info."""

    name: str | Unset = UNSET
    major: str | Unset = UNSET
    graduation_date: datetime | Unset = UNSET
    level: LevelOfStudy | None | Unset = UNSET

    def __post_init__(self) -> None:
        _reject_none(self, ("name", "major", "graduation_date"))
        if not self.present_fields():
            raise ValueError("education info update has no fields")

    def present_fields(self) -> dict[str, Any]:
        """Return column name to value for every present slot."""
        return _present(self)


@dataclass(frozen=True)
class MLHTermsPatch:
    """Partial update of a user's MLH consent flags."""

    send_messages: bool | Unset = UNSET
    share_info: bool | Unset = UNSET
    code_of_conduct: bool | Unset = UNSET

    def __post_init__(self) -> None:
        _reject_none(self, ("send_messages", "share_info", "code_of_conduct"))
        if not self.present_fields():
            raise ValueError("MLH terms update has no fields")

    def present_fields(self) -> dict[str, Any]:
        """Return column name to value for every present slot."""
        return _present(self)


@dataclass(frozen=True)
class UserPatch:
    """Partial update of a user profile.

    first_name, last_name, email and phone_number are required columns and
    may not be patched to None. Every other slot accepts None to clear the
    stored value.

    Example:
        patch = UserPatch(first_name="Ada", age=None)
        patch.present_fields()  # {"first_name": "Ada", "age": None}
    """

    first_name: str | Unset = UNSET
    last_name: str | Unset = UNSET
    email: str | Unset = UNSET
    phone_number: str | Unset = UNSET
    pronouns: Pronouns | None | Unset = UNSET
    age: int | None | Unset = UNSET
    gender: str | None | Unset = UNSET
    race: list[Race] | None | Unset = UNSET
    years_of_experience: float | None | Unset = UNSET
    shirt_size: ShirtSize | None | Unset = UNSET
    mailing_address: MailingAddressPatch | Unset = UNSET
    education_info: EducationInfoPatch | Unset = UNSET
    mlh: MLHTermsPatch | Unset = UNSET

    def __post_init__(self) -> None:
        _reject_none(self, _REQUIRED_USER_FIELDS)

    def present_fields(self) -> dict[str, Any]:
        """Return field name to value for every present slot, in declaration order."""
        return _present(self)

    def is_empty(self) -> bool:
        """Return True when no slot is present."""
        return not self.present_fields()
