"""SQLAlchemy ORM models for the Users bounded context.

These models map to database tables and are used by the reader and writer.
"""

from users.infrastructure.models.participation import (
    EventAttendanceModel,
    HackathonApplicationModel,
    HackathonCheckinModel,
    MealModel,
)
from users.infrastructure.models.pronoun import PronounModel
from users.infrastructure.models.satellites import (
    APIKeyModel,
    EducationInfoModel,
    MailingAddressModel,
    MLHTermsModel,
)
from users.infrastructure.models.user import UserModel

__all__ = [
    "APIKeyModel",
    "EducationInfoModel",
    "EventAttendanceModel",
    "HackathonApplicationModel",
    "HackathonCheckinModel",
    "MailingAddressModel",
    "MealModel",
    "MLHTermsModel",
    "PronounModel",
    "UserModel",
]
