"""Value objects for the Users domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for profile attributes and external identities.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Provider(StrEnum):
    """OAuth providers a user can authenticate with."""

    GITHUB = "GITHUB"
    GMAIL = "GMAIL"


class Role(StrEnum):
    """Authorization role carried in session tokens."""

    NORMAL = "NORMAL"
    ADMIN = "ADMIN"


class ShirtSize(StrEnum):
    """Event shirt sizes."""

    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"


class Race(StrEnum):
    """Self-reported race options."""

    CAUCASIAN = "CAUCASIAN"
    AFRICAN_AMERICAN = "AFRICAN_AMERICAN"
    HISPANIC = "HISPANIC"
    ASIAN = "ASIAN"
    NATIVE_AMERICAN = "NATIVE_AMERICAN"
    PACIFIC_ISLANDER = "PACIFIC_ISLANDER"
    OTHER = "OTHER"


class LevelOfStudy(StrEnum):
    """Current level of study for education info."""

    FRESHMAN = "FRESHMAN"
    SOPHOMORE = "SOPHOMORE"
    JUNIOR = "JUNIOR"
    SENIOR = "SENIOR"
    GRADUATE = "GRADUATE"


@dataclass(frozen=True)
class Pronouns:
    """A (subjective, objective) pronoun pair, e.g. ("she", "her").

    Frozen so the pair can serve as a dictionary key in the pronoun cache.
    """

    subjective: str
    objective: str

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.subjective}/{self.objective}"


@dataclass(frozen=True)
class OAuthIdentity:
    """External identity of a user at an OAuth provider.

    The (provider, uid) pair is unique across all users.
    """

    provider: Provider
    uid: str

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.provider.value}:{self.uid}"
