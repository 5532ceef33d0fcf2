"""HTTP routes for authentication and user profiles.

Each route mirrors one GraphQL query, mutation or User field resolver.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Query, Response, status

from shared_kernel.auth import InvalidTokenError, OAuthExchangeError
from users.application.services import AuthService, UserService
from users.application.value_objects import CurrentUser
from users.dependencies import get_auth_service, get_current_user, get_user_service
from users.domain.value_objects import Provider
from users.ports.exceptions import (
    APIKeyAlreadyExistsError,
    InvalidOAuthStateError,
    UnauthorizedError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from users.presentation.models import (
    APIKeyResponse,
    EducationInfoModel,
    LoginRequest,
    LoginResponse,
    MailingAddressModel,
    MLHTermsModel,
    OAuthResponse,
    RedirectLinkResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegistrationResponse,
    UpdateUserRequest,
    UserResponse,
    UsersConnectionResponse,
)

OAUTH_STATE_COOKIE = "oauthstate"
OAUTH_STATE_MAX_AGE = 60 * 10

auth_router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="user not found",
    )


def _forbidden(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@auth_router.get("/{provider}/redirect")
async def get_auth_redirect_link(
    provider: Provider,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> RedirectLinkResponse:
    """Return the provider consent URL and set the oauthstate cookie.

    The cookie lives ten minutes and must come back with the login call.
    """
    url, state = service.get_auth_redirect_link(provider)
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        max_age=OAUTH_STATE_MAX_AGE,
        path="/",
        httponly=True,
        samesite="none",
    )
    response.headers["Access-Control-Allow-Credentials"] = "true"
    return RedirectLinkResponse(url=url)


@auth_router.post("/login")
async def login(
    request: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
    oauth_state: Annotated[str | None, Cookie(alias=OAUTH_STATE_COOKIE)] = None,
) -> LoginResponse:
    """Complete an OAuth login.

    Raises:
        HTTPException: 401 if the state does not match the oauthstate cookie
        HTTPException: 502 if the provider rejects the code
        HTTPException: 500 for unexpected errors
    """
    try:
        payload = await service.login(
            provider=request.provider,
            code=request.code,
            state=request.state,
            expected_state=oauth_state,
        )
        return LoginResponse.from_domain(payload)
    except InvalidOAuthStateError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except OAuthExchangeError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except Exception:
        raise _internal_error()


@auth_router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> RegistrationResponse:
    """Create an account for an identity that logged in without one.

    Raises:
        HTTPException: 401 if the encrypted provider token is invalid
        HTTPException: 409 if the identity is already registered
        HTTPException: 502 if the provider lookup fails
        HTTPException: 500 for unexpected errors
    """
    try:
        payload = await service.register(
            provider=request.provider,
            encrypted_oauth_access_token=request.encrypted_oauth_access_token,
            new_user=request.input.to_domain(),
        )
        return RegistrationResponse.from_domain(payload)
    except InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except OAuthExchangeError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except Exception:
        raise _internal_error()


@auth_router.post("/refresh")
async def refresh_jwt(
    request: RefreshRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> RefreshResponse:
    """Exchange a refresh token for a new access token.

    Raises:
        HTTPException: 401 if the refresh token is invalid or expired
    """
    try:
        return RefreshResponse(access_token=service.refresh_jwt(request.refresh_token))
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


@users_router.get("/me")
async def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Return the caller's own profile."""
    try:
        return UserResponse.from_domain(await service.me(current_user))
    except UserNotFoundError:
        raise _not_found()
    except Exception:
        raise _internal_error()


@users_router.get("")
async def list_users(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
    first: Annotated[int, Query(description="Page size (1-100)")],
    after: Annotated[str | None, Query(description="Cursor of the last seen user")] = None,
) -> UsersConnectionResponse:
    """List a page of users. Admin only.

    Raises:
        HTTPException: 400 if first or after is invalid
        HTTPException: 403 if the caller is not an admin
    """
    try:
        connection = await service.list_users(current_user, first, after)
        return UsersConnectionResponse.from_domain(connection)
    except UnauthorizedError as e:
        raise _forbidden(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        raise _internal_error()


@users_router.get("/search")
async def search_users(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
    name: Annotated[str, Query(min_length=1, max_length=255)],
) -> list[UserResponse]:
    """Search users by name. Admin only.

    Raises:
        HTTPException: 400 if the name is not ASCII
        HTTPException: 403 if the caller is not an admin
    """
    try:
        users = await service.search_users(current_user, name)
        return [UserResponse.from_domain(user) for user in users]
    except UnauthorizedError as e:
        raise _forbidden(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        raise _internal_error()


@users_router.get("/{user_id}")
async def get_user(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Return a user by id."""
    try:
        return UserResponse.from_domain(await service.get_user(user_id))
    except UserNotFoundError:
        raise _not_found()
    except Exception:
        raise _internal_error()


@users_router.patch("/{user_id}")
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Partially update a user. Only fields present in the body change.

    Raises:
        HTTPException: 400 if the body is empty or sets a required field to null
        HTTPException: 403 if the caller is neither the user nor an admin
        HTTPException: 404 if the user (or a patched satellite record) is missing
    """
    try:
        user = await service.update_user(current_user, user_id, request.to_domain())
        return UserResponse.from_domain(user)
    except UnauthorizedError as e:
        raise _forbidden(e)
    except UserNotFoundError:
        raise _not_found()
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        raise _internal_error()


@users_router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> bool:
    """Delete a user and every record that references it."""
    try:
        return await service.delete_user(current_user, user_id)
    except UnauthorizedError as e:
        raise _forbidden(e)
    except UserNotFoundError:
        raise _not_found()
    except Exception:
        raise _internal_error()


@users_router.get("/{user_id}/oauth")
async def get_oauth(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> OAuthResponse | None:
    """Return the user's OAuth identity, null if absent."""
    try:
        identity = await service.get_oauth(current_user, user_id)
        return OAuthResponse.from_domain(identity) if identity else None
    except UnauthorizedError as e:
        raise _forbidden(e)
    except UserNotFoundError:
        raise _not_found()
    except Exception:
        raise _internal_error()


@users_router.get("/{user_id}/mailing-address")
async def get_mailing_address(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> MailingAddressModel | None:
    """Return the user's mailing address, null if never provided."""
    try:
        address = await service.get_mailing_address(current_user, user_id)
        return MailingAddressModel.from_domain(address) if address else None
    except UnauthorizedError as e:
        raise _forbidden(e)
    except UserNotFoundError:
        raise _not_found()
    except Exception:
        raise _internal_error()


@users_router.get("/{user_id}/mlh-terms")
async def get_mlh_terms(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> MLHTermsModel | None:
    """Return the user's MLH terms, null if never provided."""
    try:
        terms = await service.get_mlh_terms(current_user, user_id)
        return MLHTermsModel.from_domain(terms) if terms else None
    except UnauthorizedError as e:
        raise _forbidden(e)
    except UserNotFoundError:
        raise _not_found()
    except Exception:
        raise _internal_error()


@users_router.get("/{user_id}/education-info")
async def get_education_info(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> EducationInfoModel | None:
    """Return the user's education info, null if never provided."""
    try:
        education = await service.get_education_info(current_user, user_id)
        return EducationInfoModel.from_domain(education) if education else None
    except UnauthorizedError as e:
        raise _forbidden(e)
    except UserNotFoundError:
        raise _not_found()
    except Exception:
        raise _internal_error()


@users_router.get("/{user_id}/api-key")
async def get_api_key(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> APIKeyResponse | None:
    """Return the user's API key, null if none was issued."""
    try:
        api_key = await service.get_api_key(current_user, user_id)
        return APIKeyResponse.from_domain(api_key) if api_key else None
    except UnauthorizedError as e:
        raise _forbidden(e)
    except UserNotFoundError:
        raise _not_found()
    except Exception:
        raise _internal_error()


@users_router.post("/{user_id}/api-key", status_code=status.HTTP_201_CREATED)
async def add_api_key(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> APIKeyResponse:
    """Generate a new API key for the user.

    Raises:
        HTTPException: 409 if the user already holds a key
    """
    try:
        return APIKeyResponse.from_domain(
            await service.add_api_key(current_user, user_id)
        )
    except UnauthorizedError as e:
        raise _forbidden(e)
    except UserNotFoundError:
        raise _not_found()
    except APIKeyAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception:
        raise _internal_error()


@users_router.delete("/{user_id}/api-key")
async def delete_api_key(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> bool:
    """Delete the user's API key. Returns false if the user had none."""
    try:
        return await service.delete_api_key(current_user, user_id)
    except UnauthorizedError as e:
        raise _forbidden(e)
    except UserNotFoundError:
        raise _not_found()
    except Exception:
        raise _internal_error()
