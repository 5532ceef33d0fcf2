"""Write side of the user store.

Every method takes the caller's session and runs inside the caller's
transaction. A partial update dispatches each present patch field to a
single-statement update that must touch exactly one row.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Awaitable, Callable

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import utc_now
from users.domain.aggregates import APIKey, User
from users.domain.inputs import (
    EducationInfoPatch,
    MailingAddressPatch,
    MLHTermsPatch,
    NewUser,
    UserPatch,
)
from users.domain.value_objects import OAuthIdentity, Pronouns, Race, Role, ShirtSize
from users.infrastructure.models import (
    APIKeyModel,
    EducationInfoModel,
    EventAttendanceModel,
    HackathonApplicationModel,
    HackathonCheckinModel,
    MailingAddressModel,
    MealModel,
    MLHTermsModel,
    UserModel,
)
from users.infrastructure.pronoun_resolver import PronounResolver
from users.infrastructure.user_reader import UserReader
from users.ports.exceptions import (
    APIKeyAlreadyExistsError,
    EmptyUpdateError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

# Dependent tables cleared before the users row, in delete order.
CASCADE_MODELS = (
    HackathonApplicationModel,
    MLHTermsModel,
    MealModel,
    MailingAddressModel,
    HackathonCheckinModel,
    EducationInfoModel,
    APIKeyModel,
    EventAttendanceModel,
)

OAUTH_IDENTITY_CONSTRAINT = "uq_users_oauth_identity"

_Applier = Callable[[AsyncSession, int, Any], Awaitable[None]]


def _constraint_name(error: IntegrityError) -> str | None:
    # asyncpg's UniqueViolationError sits behind SQLAlchemy's DBAPI adapter
    for candidate in (error.orig, getattr(error.orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name is not None:
            return name
    return None


def _is_oauth_identity_conflict(error: IntegrityError) -> bool:
    name = _constraint_name(error)
    if name is not None:
        return name == OAUTH_IDENTITY_CONSTRAINT
    # SQLite names the columns instead of the constraint
    return "users.oauth_provider, users.oauth_uid" in str(error.orig)


class UserWriter:
    """Creates, updates and deletes users and their satellite rows."""

    def __init__(self, reader: UserReader, pronouns: PronounResolver):
        self._reader = reader
        self._pronouns = pronouns
        self._appliers: dict[str, _Applier] = {
            "first_name": self._column_applier("first_name"),
            "last_name": self._column_applier("last_name"),
            "email": self._column_applier("email"),
            "phone_number": self._column_applier("phone_number"),
            "age": self._column_applier("age"),
            "gender": self._column_applier("gender"),
            "years_of_experience": self._column_applier("years_of_experience"),
            "race": self._apply_race,
            "shirt_size": self._apply_shirt_size,
            "pronouns": self._apply_pronouns,
            "mailing_address": self._apply_mailing_address,
            "education_info": self._apply_education_info,
            "mlh": self._apply_mlh_terms,
        }

    async def create(
        self, session: AsyncSession, identity: OAuthIdentity, new_user: NewUser
    ) -> User:
        """Insert a user bound to an OAuth identity, plus any satellites given.

        Raises:
            UserAlreadyExistsError: If the identity is already registered
        """
        if await self._identity_registered(session, identity):
            raise UserAlreadyExistsError(f"user with identity {identity} already exists")

        pronoun_id = None
        if new_user.pronouns is not None:
            pronoun_id = await self._pronouns.resolve_or_create(
                session, new_user.pronouns
            )

        stmt = (
            insert(UserModel)
            .values(
                first_name=new_user.first_name,
                last_name=new_user.last_name,
                email=new_user.email,
                phone_number=new_user.phone_number,
                age=new_user.age,
                role=Role.NORMAL.value,
                gender=new_user.gender,
                race=_race_values(new_user.race),
                years_of_experience=new_user.years_of_experience,
                shirt_size=_shirt_size_value(new_user.shirt_size),
                pronoun_id=pronoun_id,
                oauth_uid=identity.uid,
                oauth_provider=identity.provider.value,
            )
            .returning(UserModel.id)
        )
        try:
            user_id = (await session.execute(stmt)).scalar_one()
        except IntegrityError as e:
            if _is_oauth_identity_conflict(e):
                raise UserAlreadyExistsError(
                    f"user with identity {identity} already exists"
                ) from e
            raise

        if new_user.mailing_address is not None:
            address = new_user.mailing_address
            await session.execute(
                insert(MailingAddressModel).values(
                    user_id=user_id,
                    country=address.country,
                    state=address.state,
                    city=address.city,
                    postal_code=address.postal_code,
                    address_lines=list(address.address_lines),
                )
            )
        if new_user.education_info is not None:
            education = new_user.education_info
            await session.execute(
                insert(EducationInfoModel).values(
                    user_id=user_id,
                    name=education.name,
                    major=education.major,
                    graduation_date=education.graduation_date,
                    level=education.level.value if education.level else None,
                )
            )
        if new_user.mlh is not None:
            await session.execute(
                insert(MLHTermsModel).values(
                    user_id=user_id,
                    send_messages=new_user.mlh.send_messages,
                    share_info=new_user.mlh.share_info,
                    code_of_conduct=new_user.mlh.code_of_conduct,
                )
            )

        return User(
            id=str(user_id),
            first_name=new_user.first_name,
            last_name=new_user.last_name,
            email=new_user.email,
            phone_number=new_user.phone_number,
            role=Role.NORMAL,
            age=new_user.age,
            gender=new_user.gender,
            race=new_user.race,
            years_of_experience=new_user.years_of_experience,
            shirt_size=new_user.shirt_size,
            pronouns=new_user.pronouns,
            oauth=identity,
            mailing_address=new_user.mailing_address,
            education_info=new_user.education_info,
            mlh=new_user.mlh,
        )

    async def update(self, session: AsyncSession, user_id: int, patch: UserPatch) -> User:
        """Apply every present patch field, then re-read the user.

        Raises:
            EmptyUpdateError: If the patch has no present fields
            UserNotFoundError: If any statement touched no row
        """
        present = patch.present_fields()
        if not present:
            raise EmptyUpdateError("empty user field")

        for name, value in present.items():
            await self._appliers[name](session, user_id, value)

        user = await self._reader.get_by_id(session, user_id)
        return replace(
            user,
            oauth=await self._reader.get_oauth_identity(session, user_id),
            mailing_address=await self._reader.get_mailing_address(session, user_id),
            education_info=await self._reader.get_education_info(session, user_id),
            mlh=await self._reader.get_mlh_terms(session, user_id),
        )

    async def delete(self, session: AsyncSession, user_id: int) -> bool:
        """Delete every dependent row, then the user row.

        Raises:
            UserNotFoundError: If no users row was deleted
        """
        for model in CASCADE_MODELS:
            await session.execute(delete(model).where(model.user_id == user_id))

        result = await session.execute(delete(UserModel).where(UserModel.id == user_id))
        if result.rowcount == 0:
            raise UserNotFoundError("user not found")
        return True

    async def add_api_key(self, session: AsyncSession, user_id: int, key: str) -> APIKey:
        """Store an API key for a user.

        Raises:
            UserNotFoundError: If no user has this id
            APIKeyAlreadyExistsError: If the user already holds a key
        """
        if not await self._reader.user_exists(session, user_id):
            raise UserNotFoundError("user not found")
        if await self._reader.get_api_key(session, user_id) is not None:
            raise APIKeyAlreadyExistsError(f"user {user_id} already has an API key")

        created = utc_now()
        try:
            await session.execute(
                insert(APIKeyModel).values(user_id=user_id, key=key, created=created)
            )
        except IntegrityError as e:
            raise APIKeyAlreadyExistsError(
                f"user {user_id} already has an API key"
            ) from e
        return APIKey(key=key, created=created)

    async def delete_api_key(self, session: AsyncSession, user_id: int) -> bool:
        """Delete the API key of a user and report whether one existed."""
        result = await session.execute(
            delete(APIKeyModel).where(APIKeyModel.user_id == user_id)
        )
        return result.rowcount > 0

    async def _identity_registered(
        self, session: AsyncSession, identity: OAuthIdentity
    ) -> bool:
        """Fast-path lookup; the unique constraint still decides under races."""
        existing = await session.execute(
            select(UserModel.id).where(
                UserModel.oauth_provider == identity.provider.value,
                UserModel.oauth_uid == identity.uid,
            )
        )
        return existing.scalar_one_or_none() is not None

    def _column_applier(self, column: str) -> _Applier:
        async def apply(session: AsyncSession, user_id: int, value: Any) -> None:
            await self._update_user_row(session, user_id, {column: value})

        return apply

    async def _apply_race(
        self, session: AsyncSession, user_id: int, value: list[Race] | None
    ) -> None:
        await self._update_user_row(session, user_id, {"race": _race_values(value)})

    async def _apply_shirt_size(
        self, session: AsyncSession, user_id: int, value: ShirtSize | None
    ) -> None:
        await self._update_user_row(
            session, user_id, {"shirt_size": _shirt_size_value(value)}
        )

    async def _apply_pronouns(
        self, session: AsyncSession, user_id: int, value: Pronouns | None
    ) -> None:
        pronoun_id = None
        if value is not None:
            pronoun_id = await self._pronouns.resolve_or_create(session, value)
        await self._update_user_row(session, user_id, {"pronoun_id": pronoun_id})

    async def _apply_mailing_address(
        self, session: AsyncSession, user_id: int, patch: MailingAddressPatch
    ) -> None:
        await self._update_satellite(
            session, MailingAddressModel, user_id, patch.present_fields()
        )

    async def _apply_education_info(
        self, session: AsyncSession, user_id: int, patch: EducationInfoPatch
    ) -> None:
        values = patch.present_fields()
        if "level" in values and values["level"] is not None:
            values["level"] = values["level"].value
        await self._update_satellite(session, EducationInfoModel, user_id, values)

    async def _apply_mlh_terms(
        self, session: AsyncSession, user_id: int, patch: MLHTermsPatch
    ) -> None:
        await self._update_satellite(
            session, MLHTermsModel, user_id, patch.present_fields()
        )

    async def _update_user_row(
        self, session: AsyncSession, user_id: int, values: dict[str, Any]
    ) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount != 1:
            raise UserNotFoundError("user not found")

    async def _update_satellite(
        self,
        session: AsyncSession,
        model: type[MailingAddressModel | EducationInfoModel | MLHTermsModel],
        user_id: int,
        values: dict[str, Any],
    ) -> None:
        stmt = (
            update(model)
            .where(model.user_id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount != 1:
            raise UserNotFoundError("user not found")


def _race_values(race: list[Race] | None) -> list[str] | None:
    if race is None:
        return None
    return [value.value for value in race]


def _shirt_size_value(shirt_size: ShirtSize | None) -> str | None:
    return shirt_size.value if shirt_size is not None else None
