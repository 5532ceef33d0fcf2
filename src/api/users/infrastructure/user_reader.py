"""Read side of the user store.

Every method takes the caller's session and runs inside the caller's
transaction, so a page of users and the pronouns it references are read
consistently.
"""

from __future__ import annotations

import re
from typing import Any

from sqlalchemy import Select, func, literal_column, select
from sqlalchemy.ext.asyncio import AsyncSession

from users.domain.aggregates import (
    APIKey,
    EducationInfo,
    MailingAddress,
    MLHTerms,
    User,
)
from users.domain.value_objects import (
    LevelOfStudy,
    OAuthIdentity,
    Provider,
    Race,
    Role,
    ShirtSize,
)
from users.infrastructure.models import (
    APIKeyModel,
    EducationInfoModel,
    MailingAddressModel,
    MLHTermsModel,
    UserModel,
)
from users.infrastructure.pronoun_resolver import PronounResolver
from users.ports.exceptions import UserNotFoundError

SEARCH_LIMIT = 10

_BASE_COLUMNS = (
    UserModel.id,
    UserModel.first_name,
    UserModel.last_name,
    UserModel.email,
    UserModel.phone_number,
    UserModel.pronoun_id,
    UserModel.age,
    UserModel.role,
    UserModel.gender,
    UserModel.race,
    UserModel.shirt_size,
    UserModel.years_of_experience,
)

_SEARCH_TERM = re.compile(r"\w+")


def search_terms(text: str) -> list[str]:
    """Split free text into lowercase word terms."""
    return _SEARCH_TERM.findall(text.lower())


def _full_name_expr() -> Any:
    return UserModel.first_name + " " + UserModel.last_name


class UserReader:
    """Assembles User aggregates from the base row plus resolved pronouns."""

    def __init__(self, pronouns: PronounResolver):
        self._pronouns = pronouns

    async def get_by_id(self, session: AsyncSession, user_id: int) -> User:
        """Return the user with this id.

        Raises:
            UserNotFoundError: If no row matches
        """
        stmt = select(*_BASE_COLUMNS).where(UserModel.id == user_id).limit(1)
        return await self._fetch_one(session, stmt)

    async def get_by_oauth_identity(
        self, session: AsyncSession, identity: OAuthIdentity
    ) -> User:
        """Return the user registered with this OAuth identity.

        Raises:
            UserNotFoundError: If no row matches
        """
        stmt = (
            select(*_BASE_COLUMNS)
            .where(
                UserModel.oauth_provider == identity.provider.value,
                UserModel.oauth_uid == identity.uid,
            )
            .limit(1)
        )
        return await self._fetch_one(session, stmt)

    async def search_by_name(self, session: AsyncSession, text: str) -> list[User]:
        """Return up to SEARCH_LIMIT users whose names match every term by prefix.

        PostgreSQL uses the full-text index; other dialects fall back to a
        case-insensitive substring match.
        """
        terms = search_terms(text)
        if not terms:
            return []

        full_name = _full_name_expr()
        stmt = select(*_BASE_COLUMNS)
        if session.get_bind().dialect.name == "postgresql":
            query = " & ".join(f"{term}:*" for term in terms)
            document = func.to_tsvector(literal_column("'simple'"), full_name)
            stmt = stmt.where(
                document.bool_op("@@")(
                    func.to_tsquery(literal_column("'simple'"), query)
                )
            )
        else:
            lowered = func.lower(full_name)
            for term in terms:
                stmt = stmt.where(lowered.contains(term, autoescape=True))

        stmt = stmt.order_by(UserModel.id).limit(SEARCH_LIMIT)
        rows = (await session.execute(stmt)).all()
        return [await self._to_user(session, row) for row in rows]

    async def list_page(
        self, session: AsyncSession, first: int, after_id: int
    ) -> tuple[list[User], int]:
        """Return users with id greater than after_id and the total user count.

        The page is ordered by id descending. The count is a separate query
        over the whole table, so it can drift from the page under concurrent
        writes.
        """
        stmt = (
            select(*_BASE_COLUMNS)
            .where(UserModel.id > after_id)
            .order_by(UserModel.id.desc())
            .limit(first)
        )
        rows = (await session.execute(stmt)).all()
        users = [await self._to_user(session, row) for row in rows]

        count_stmt = select(func.count()).select_from(UserModel)
        total_count = (await session.execute(count_stmt)).scalar_one()
        return users, total_count

    async def get_oauth_identity(
        self, session: AsyncSession, user_id: int
    ) -> OAuthIdentity | None:
        """Return the OAuth identity of a user, None if the user is absent."""
        stmt = select(UserModel.oauth_provider, UserModel.oauth_uid).where(
            UserModel.id == user_id
        )
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            return None
        return OAuthIdentity(provider=Provider(row.oauth_provider), uid=row.oauth_uid)

    async def get_mailing_address(
        self, session: AsyncSession, user_id: int
    ) -> MailingAddress | None:
        """Return the mailing address of a user, None if never provided."""
        stmt = select(MailingAddressModel).where(MailingAddressModel.user_id == user_id)
        model = (await session.execute(stmt)).scalar_one_or_none()
        if model is None:
            return None
        return MailingAddress(
            country=model.country,
            state=model.state,
            city=model.city,
            postal_code=model.postal_code,
            address_lines=list(model.address_lines or []),
        )

    async def get_mlh_terms(
        self, session: AsyncSession, user_id: int
    ) -> MLHTerms | None:
        """Return the MLH terms of a user, None if never provided."""
        stmt = select(MLHTermsModel).where(MLHTermsModel.user_id == user_id)
        model = (await session.execute(stmt)).scalar_one_or_none()
        if model is None:
            return None
        return MLHTerms(
            send_messages=model.send_messages,
            share_info=model.share_info,
            code_of_conduct=model.code_of_conduct,
        )

    async def get_education_info(
        self, session: AsyncSession, user_id: int
    ) -> EducationInfo | None:
        """Return the education info of a user, None if never provided."""
        stmt = select(EducationInfoModel).where(EducationInfoModel.user_id == user_id)
        model = (await session.execute(stmt)).scalar_one_or_none()
        if model is None:
            return None
        return EducationInfo(
            name=model.name,
            major=model.major,
            graduation_date=model.graduation_date,
            level=LevelOfStudy(model.level) if model.level is not None else None,
        )

    async def get_api_key(self, session: AsyncSession, user_id: int) -> APIKey | None:
        """Return the API key of a user, None if none was issued."""
        stmt = select(APIKeyModel).where(APIKeyModel.user_id == user_id)
        model = (await session.execute(stmt)).scalar_one_or_none()
        if model is None:
            return None
        return APIKey(key=model.key, created=model.created)

    async def user_exists(self, session: AsyncSession, user_id: int) -> bool:
        """Return True if a base row with this id exists."""
        stmt = select(UserModel.id).where(UserModel.id == user_id)
        return (await session.execute(stmt)).scalar_one_or_none() is not None

    async def _fetch_one(self, session: AsyncSession, stmt: Select[Any]) -> User:
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            raise UserNotFoundError("user not found")
        return await self._to_user(session, row)

    async def _to_user(self, session: AsyncSession, row: Any) -> User:
        pronouns = None
        if row.pronoun_id is not None:
            pronouns = await self._pronouns.resolve_id(session, row.pronoun_id)

        return User(
            id=str(row.id),
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            phone_number=row.phone_number,
            role=Role(row.role),
            age=row.age,
            gender=row.gender,
            race=[Race(value) for value in row.race] if row.race is not None else None,
            years_of_experience=row.years_of_experience,
            shirt_size=ShirtSize(row.shirt_size) if row.shirt_size else None,
            pronouns=pronouns,
        )
