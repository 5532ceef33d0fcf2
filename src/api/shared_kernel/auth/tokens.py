"""Session token issuing and parsing.

Access and refresh tokens are HS256-signed JWTs carrying the user id and
role. Refresh tokens are only accepted by the refresh flow; access tokens
only by request authentication.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import TokenServiceProbe


class TokenType(StrEnum):
    """Kind of session token, stored in the `type` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Validated session token claims."""

    user_id: str
    role: str
    token_type: TokenType


class InvalidTokenError(Exception):
    """Raised when a session token is malformed, expired or of the wrong type."""

    pass


class TokenService:
    """Issues and validates session tokens."""

    def __init__(
        self,
        secret: str,
        probe: TokenServiceProbe,
        algorithm: str = "HS256",
        access_token_ttl: timedelta = timedelta(minutes=15),
        refresh_token_ttl: timedelta = timedelta(days=7),
    ):
        """Initialize the token service.

        Args:
            secret: HMAC secret used to sign and verify tokens.
            probe: Observability probe for logging events.
            algorithm: JWT signing algorithm (default: HS256).
            access_token_ttl: Lifetime of access tokens.
            refresh_token_ttl: Lifetime of refresh tokens.
        """
        self._secret = secret
        self._probe = probe
        self._algorithm = algorithm
        self._ttl = {
            TokenType.ACCESS: access_token_ttl,
            TokenType.REFRESH: refresh_token_ttl,
        }

    def new_token_pair(self, user_id: str, role: str) -> tuple[str, str]:
        """Issue a refresh and an access token for a user.

        Returns:
            Tuple of (refresh_token, access_token)
        """
        refresh_token = self._encode(user_id, role, TokenType.REFRESH)
        access_token = self._encode(user_id, role, TokenType.ACCESS)
        self._probe.token_pair_issued(user_id=user_id)
        return refresh_token, access_token

    def new_access_token(self, refresh_token: str) -> str:
        """Exchange a valid refresh token for a fresh access token.

        Raises:
            InvalidTokenError: If the refresh token is invalid or expired
        """
        claims = self.parse_token(refresh_token, TokenType.REFRESH)
        access_token = self._encode(claims.user_id, claims.role, TokenType.ACCESS)
        self._probe.access_token_refreshed(user_id=claims.user_id)
        return access_token

    def parse_token(self, token: str, expected_type: TokenType) -> TokenClaims:
        """Validate a token and return its claims.

        Raises:
            InvalidTokenError: If the signature, expiry or token type is wrong
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="token_expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=str(e))
            raise InvalidTokenError(f"Invalid token: {e}") from e

        user_id = payload.get("sub")
        role = payload.get("role")
        token_type = payload.get("type")
        if not user_id or not role:
            self._probe.token_validation_failed(reason="missing_claims")
            raise InvalidTokenError("Token is missing required claims")
        if token_type != expected_type.value:
            self._probe.token_validation_failed(reason="wrong_token_type")
            raise InvalidTokenError(f"Expected a {expected_type.value} token")

        return TokenClaims(user_id=user_id, role=role, token_type=expected_type)

    def _encode(self, user_id: str, role: str, token_type: TokenType) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user_id,
            "role": role,
            "type": token_type.value,
            "iat": now,
            "exp": now + self._ttl[token_type],
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)
