"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        USERS_DB_HOST: Database host (default: localhost)
        USERS_DB_PORT: Database port (default: 5432)
        USERS_DB_DATABASE: Database name (default: users)
        USERS_DB_USERNAME: Database user (default: users)
        USERS_DB_PASSWORD: Database password (required in production)
        USERS_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        USERS_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="USERS_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="users", description="Database name")
    username: str = Field(default="users", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Token issuing, token encryption and OAuth provider settings.

    Environment variables:
        USERS_AUTH_JWT_SECRET: HMAC secret for signing session tokens
        USERS_AUTH_JWT_ALGORITHM: Signing algorithm (default: HS256)
        USERS_AUTH_ACCESS_TOKEN_TTL_MINUTES: Access token lifetime (default: 15)
        USERS_AUTH_REFRESH_TOKEN_TTL_DAYS: Refresh token lifetime (default: 7)
        USERS_AUTH_ENCRYPTION_KEY: Fernet key used to round-trip provider tokens
        USERS_AUTH_GITHUB_CLIENT_ID / USERS_AUTH_GITHUB_CLIENT_SECRET
        USERS_AUTH_GMAIL_CLIENT_ID / USERS_AUTH_GMAIL_CLIENT_SECRET
        USERS_AUTH_OAUTH_REDIRECT_URI: Redirect URI registered with providers
        USERS_AUTH_API_KEY_LENGTH: Length of generated API keys (default: 32)
    """

    model_config = SettingsConfigDict(
        env_prefix="USERS_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr("dev-only-insecure-jwt-secret"),
        description="HMAC secret for signing session tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_ttl_minutes: int = Field(
        default=15,
        description="Access token lifetime in minutes",
        ge=1,
    )
    refresh_token_ttl_days: int = Field(
        default=7,
        description="Refresh token lifetime in days",
        ge=1,
    )
    encryption_key: SecretStr = Field(
        default=SecretStr("ZGV2LW9ubHktaW5zZWN1cmUtZmVybmV0LWtleS0wMDA="),
        description="Fernet key for encrypting provider access tokens",
    )
    github_client_id: str = Field(default="", description="GitHub OAuth client ID")
    github_client_secret: SecretStr = Field(
        default=SecretStr(""),
        description="GitHub OAuth client secret",
    )
    gmail_client_id: str = Field(default="", description="Google OAuth client ID")
    gmail_client_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Google OAuth client secret",
    )
    oauth_redirect_uri: str = Field(
        default="http://localhost:3000/auth/callback",
        description="Redirect URI registered with the OAuth providers",
    )
    api_key_length: int = Field(
        default=32,
        description="Length of generated API keys",
        ge=16,
        le=128,
    )

    @property
    def access_token_ttl(self) -> timedelta:
        """Access token lifetime as a timedelta."""
        return timedelta(minutes=self.access_token_ttl_minutes)

    @property
    def refresh_token_ttl(self) -> timedelta:
        """Refresh token lifetime as a timedelta."""
        return timedelta(days=self.refresh_token_ttl_days)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Hackathon Users API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get auth settings."""
        return get_auth_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached auth settings."""
    return AuthSettings()
