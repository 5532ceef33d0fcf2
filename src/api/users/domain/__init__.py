"""Users domain: the user aggregate, its value objects and update inputs."""

from users.domain.aggregates import (
    APIKey,
    EducationInfo,
    MailingAddress,
    MLHTerms,
    User,
)
from users.domain.inputs import (
    UNSET,
    EducationInfoPatch,
    MailingAddressPatch,
    MLHTermsPatch,
    NewUser,
    Unset,
    UserPatch,
)
from users.domain.value_objects import (
    LevelOfStudy,
    OAuthIdentity,
    Pronouns,
    Provider,
    Race,
    Role,
    ShirtSize,
)

__all__ = [
    "APIKey",
    "EducationInfo",
    "EducationInfoPatch",
    "LevelOfStudy",
    "MailingAddress",
    "MailingAddressPatch",
    "MLHTerms",
    "MLHTermsPatch",
    "NewUser",
    "OAuthIdentity",
    "Pronouns",
    "Provider",
    "Race",
    "Role",
    "ShirtSize",
    "UNSET",
    "Unset",
    "User",
    "UserPatch",
]
