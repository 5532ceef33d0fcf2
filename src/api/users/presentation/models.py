"""Pydantic models for Users API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from users.application.value_objects import (
    LoginPayload,
    RegistrationPayload,
    UsersConnection,
)
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


def _present_values(model: BaseModel) -> dict[str, Any]:
    """Return the fields the client actually sent, UNSET for the rest."""
    return {
        name: getattr(model, name) if name in model.model_fields_set else UNSET
        for name in type(model).model_fields
    }


class PronounsModel(BaseModel):
    """A subjective/objective pronoun pair."""

    subjective: str = Field(..., min_length=1, max_length=64)
    objective: str = Field(..., min_length=1, max_length=64)

    def to_domain(self) -> Pronouns:
        """Convert to the domain value object."""
        return Pronouns(subjective=self.subjective, objective=self.objective)

    @classmethod
    def from_domain(cls, pronouns: Pronouns) -> PronounsModel:
        """Convert from the domain value object."""
        return cls(subjective=pronouns.subjective, objective=pronouns.objective)


class MailingAddressModel(BaseModel):
    """Mailing address, used for both input and output."""

    country: str
    state: str
    city: str
    postal_code: str
    address_lines: list[str] = Field(default_factory=list)

    def to_domain(self) -> MailingAddress:
        """Convert to the domain record."""
        return MailingAddress(**self.model_dump())

    @classmethod
    def from_domain(cls, address: MailingAddress) -> MailingAddressModel:
        """Convert from the domain record."""
        return cls(
            country=address.country,
            state=address.state,
            city=address.city,
            postal_code=address.postal_code,
            address_lines=list(address.address_lines),
        )


class EducationInfoModel(BaseModel):
    """Education info, used for both input and output."""

    name: str
    major: str
    graduation_date: datetime
    level: LevelOfStudy | None = None

    def to_domain(self) -> EducationInfo:
        """Convert to the domain record."""
        return EducationInfo(
            name=self.name,
            major=self.major,
            graduation_date=self.graduation_date,
            level=self.level,
        )

    @classmethod
    def from_domain(cls, education: EducationInfo) -> EducationInfoModel:
        """Convert from the domain record."""
        return cls(
            name=education.name,
            major=education.major,
            graduation_date=education.graduation_date,
            level=education.level,
        )


class MLHTermsModel(BaseModel):
    """MLH consent flags, used for both input and output."""

    send_messages: bool
    share_info: bool
    code_of_conduct: bool

    def to_domain(self) -> MLHTerms:
        """Convert to the domain record."""
        return MLHTerms(**self.model_dump())

    @classmethod
    def from_domain(cls, terms: MLHTerms) -> MLHTermsModel:
        """Convert from the domain record."""
        return cls(
            send_messages=terms.send_messages,
            share_info=terms.share_info,
            code_of_conduct=terms.code_of_conduct,
        )


class OAuthResponse(BaseModel):
    """External identity a user logs in with."""

    provider: Provider
    uid: str

    @classmethod
    def from_domain(cls, identity: OAuthIdentity) -> OAuthResponse:
        """Convert from the domain value object."""
        return cls(provider=identity.provider, uid=identity.uid)


class APIKeyResponse(BaseModel):
    """API key issued to a user."""

    key: str
    created: datetime

    @classmethod
    def from_domain(cls, api_key: APIKey) -> APIKeyResponse:
        """Convert from the domain record."""
        return cls(key=api_key.key, created=api_key.created)


class UserResponse(BaseModel):
    """Response model for a user profile."""

    id: str = Field(..., description="User ID (decimal string)")
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone_number: str
    role: Role
    age: int | None = None
    gender: str | None = None
    race: list[Race] | None = None
    years_of_experience: float | None = None
    shirt_size: ShirtSize | None = None
    pronouns: PronounsModel | None = None
    oauth: OAuthResponse | None = None
    mailing_address: MailingAddressModel | None = None
    education_info: EducationInfoModel | None = None
    mlh: MLHTermsModel | None = None

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User aggregate to API response.

        Args:
            user: User domain aggregate

        Returns:
            UserResponse with every loaded satellite record
        """
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            email=user.email,
            phone_number=user.phone_number,
            role=user.role,
            age=user.age,
            gender=user.gender,
            race=user.race,
            years_of_experience=user.years_of_experience,
            shirt_size=user.shirt_size,
            pronouns=PronounsModel.from_domain(user.pronouns) if user.pronouns else None,
            oauth=OAuthResponse.from_domain(user.oauth) if user.oauth else None,
            mailing_address=(
                MailingAddressModel.from_domain(user.mailing_address)
                if user.mailing_address
                else None
            ),
            education_info=(
                EducationInfoModel.from_domain(user.education_info)
                if user.education_info
                else None
            ),
            mlh=MLHTermsModel.from_domain(user.mlh) if user.mlh else None,
        )


class NewUserRequest(BaseModel):
    """Profile submitted at registration."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone_number: str = Field(..., min_length=1, max_length=32)
    age: int | None = Field(None, ge=0)
    gender: str | None = None
    race: list[Race] | None = None
    years_of_experience: float | None = Field(None, ge=0)
    shirt_size: ShirtSize | None = None
    pronouns: PronounsModel | None = None
    mailing_address: MailingAddressModel | None = None
    education_info: EducationInfoModel | None = None
    mlh: MLHTermsModel | None = None

    def to_domain(self) -> NewUser:
        """Convert to the domain input."""
        return NewUser(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone_number=self.phone_number,
            age=self.age,
            gender=self.gender,
            race=self.race,
            years_of_experience=self.years_of_experience,
            shirt_size=self.shirt_size,
            pronouns=self.pronouns.to_domain() if self.pronouns else None,
            mailing_address=(
                self.mailing_address.to_domain() if self.mailing_address else None
            ),
            education_info=(
                self.education_info.to_domain() if self.education_info else None
            ),
            mlh=self.mlh.to_domain() if self.mlh else None,
        )


class MailingAddressUpdate(BaseModel):
    """Partial mailing address update. Omitted fields are left unchanged."""

    country: str | None = None
    state: str | None = None
    city: str | None = None
    postal_code: str | None = None
    address_lines: list[str] | None = None

    def to_domain(self) -> MailingAddressPatch:
        """Convert to a domain patch, keeping only fields the client sent."""
        return MailingAddressPatch(**_present_values(self))


class EducationInfoUpdate(BaseModel):
    """Partial education info update. Omitted fields are left unchanged."""

    name: str | None = None
    major: str | None = None
    graduation_date: datetime | None = None
    level: LevelOfStudy | None = None

    def to_domain(self) -> EducationInfoPatch:
        """Convert to a domain patch, keeping only fields the client sent."""
        return EducationInfoPatch(**_present_values(self))


class MLHTermsUpdate(BaseModel):
    """Partial MLH terms update. Omitted fields are left unchanged."""

    send_messages: bool | None = None
    share_info: bool | None = None
    code_of_conduct: bool | None = None

    def to_domain(self) -> MLHTermsPatch:
        """Convert to a domain patch, keeping only fields the client sent."""
        return MLHTermsPatch(**_present_values(self))


class UpdateUserRequest(BaseModel):
    """Partial user update.

    Omitted fields are left unchanged. An explicit null clears a nullable
    field and is rejected for required ones.
    """

    first_name: str | None = Field(None, min_length=1, max_length=255)
    last_name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = Field(None, min_length=3, max_length=255)
    phone_number: str | None = Field(None, min_length=1, max_length=32)
    pronouns: PronounsModel | None = None
    age: int | None = Field(None, ge=0)
    gender: str | None = None
    race: list[Race] | None = None
    years_of_experience: float | None = Field(None, ge=0)
    shirt_size: ShirtSize | None = None
    mailing_address: MailingAddressUpdate | None = None
    education_info: EducationInfoUpdate | None = None
    mlh: MLHTermsUpdate | None = None

    def to_domain(self) -> UserPatch:
        """Convert to a domain patch, keeping only fields the client sent.

        Raises:
            ValueError: If a required field is set to null or a nested
                update carries no fields
        """
        values = _present_values(self)
        for name in ("pronouns", "mailing_address", "education_info", "mlh"):
            nested = values[name]
            if isinstance(nested, BaseModel):
                values[name] = nested.to_domain()
        return UserPatch(**values)


class PageInfoResponse(BaseModel):
    """Cursors bounding a page of users."""

    start_cursor: str | None = None
    end_cursor: str | None = None


class UsersConnectionResponse(BaseModel):
    """A page of users with the total user count."""

    total_count: int
    page_info: PageInfoResponse
    users: list[UserResponse]

    @classmethod
    def from_domain(cls, connection: UsersConnection) -> UsersConnectionResponse:
        """Convert from the application result."""
        return cls(
            total_count=connection.total_count,
            page_info=PageInfoResponse(
                start_cursor=connection.page_info.start_cursor,
                end_cursor=connection.page_info.end_cursor,
            ),
            users=[UserResponse.from_domain(user) for user in connection.users],
        )


class RedirectLinkResponse(BaseModel):
    """Provider consent URL to send the browser to."""

    url: str


class LoginRequest(BaseModel):
    """OAuth callback parameters."""

    provider: Provider
    code: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Outcome of an OAuth login."""

    account_exists: bool
    user: UserResponse | None = None
    refresh_token: str | None = None
    access_token: str | None = None
    encrypted_oauth_access_token: str | None = None

    @classmethod
    def from_domain(cls, payload: LoginPayload) -> LoginResponse:
        """Convert from the application result."""
        return cls(
            account_exists=payload.account_exists,
            user=UserResponse.from_domain(payload.user) if payload.user else None,
            refresh_token=payload.refresh_token,
            access_token=payload.access_token,
            encrypted_oauth_access_token=payload.encrypted_oauth_access_token,
        )


class RegisterRequest(BaseModel):
    """Registration of a new account after an unregistered login."""

    provider: Provider
    encrypted_oauth_access_token: str = Field(..., min_length=1)
    input: NewUserRequest


class RegistrationResponse(BaseModel):
    """The new user and its session tokens."""

    user: UserResponse
    refresh_token: str
    access_token: str

    @classmethod
    def from_domain(cls, payload: RegistrationPayload) -> RegistrationResponse:
        """Convert from the application result."""
        return cls(
            user=UserResponse.from_domain(payload.user),
            refresh_token=payload.refresh_token,
            access_token=payload.access_token,
        )


class RefreshRequest(BaseModel):
    """Refresh token to exchange."""

    refresh_token: str = Field(..., min_length=1)


class RefreshResponse(BaseModel):
    """Freshly issued access token."""

    access_token: str
