"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock

import pytest
import structlog

from infrastructure.observability import (
    DefaultConnectionProbe,
    DefaultStartupProbe,
    ObservationContext,
)
from shared_kernel.auth import DefaultOAuthClientProbe, DefaultTokenServiceProbe
from users.application.observability import (
    DefaultAuthServiceProbe,
    DefaultUserServiceProbe,
)
from users.infrastructure.observability import (
    DefaultPronounProbe,
    DefaultUserRepositoryProbe,
)


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock(spec=structlog.stdlib.BoundLogger)


class TestConnectionProbe:
    """Tests for ConnectionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        """Default probe should work without explicit logger."""
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_default_probe_accepts_custom_logger(self, mock_logger):
        """Default probe should accept a custom logger."""
        probe = DefaultConnectionProbe(logger=mock_logger)
        assert probe._logger is mock_logger

    def test_engine_created_logs_info(self, mock_logger):
        """engine_created should log host, database and pool size."""
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.engine_created(host="localhost", database="users", pool_size=5)

        mock_logger.info.assert_called_once_with(
            "database_engine_created",
            host="localhost",
            database="users",
            pool_size=5,
        )

    def test_engine_disposed_logs_info(self, mock_logger):
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.engine_disposed()

        mock_logger.info.assert_called_once_with("database_engine_disposed")


class TestStartupProbe:
    """Tests for StartupProbe."""

    def test_pronoun_cache_warmed_logs_info(self, mock_logger):
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.pronoun_cache_warmed(entries=3)

        mock_logger.info.assert_called_once_with("pronoun_cache_warmed", entries=3)

    def test_pronoun_cache_warm_failed_logs_error(self, mock_logger):
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.pronoun_cache_warm_failed(error="connection refused")

        mock_logger.error.assert_called_once_with(
            "pronoun_cache_warm_failed", error="connection refused"
        )

    def test_application_stopped_logs_info(self, mock_logger):
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.application_stopped()

        mock_logger.info.assert_called_once_with("application_stopped")


class TestUserRepositoryProbe:
    """Tests for UserRepositoryProbe."""

    def test_user_retrieved_logs_debug(self, mock_logger):
        probe = DefaultUserRepositoryProbe(logger=mock_logger)

        probe.user_retrieved(user_id="7")

        mock_logger.debug.assert_called_once_with("user_retrieved", user_id="7")

    def test_user_created_logs_info(self, mock_logger):
        probe = DefaultUserRepositoryProbe(logger=mock_logger)

        probe.user_created(user_id="7", provider="GITHUB")

        mock_logger.info.assert_called_once_with(
            "user_created", user_id="7", provider="GITHUB"
        )

    def test_duplicate_user_logs_warning(self, mock_logger):
        probe = DefaultUserRepositoryProbe(logger=mock_logger)

        probe.duplicate_user(provider="DISCORD")

        mock_logger.warning.assert_called_once_with(
            "duplicate_user", provider="DISCORD"
        )

    def test_repository_error_logs_error(self, mock_logger):
        probe = DefaultUserRepositoryProbe(logger=mock_logger)

        probe.repository_error(operation="update_user", error="deadlock")

        mock_logger.error.assert_called_once_with(
            "user_repository_error", operation="update_user", error="deadlock"
        )

    def test_with_context_includes_context_metadata(self, mock_logger):
        """Events from a bound probe should carry the context fields."""
        context = ObservationContext(request_id="req-1", operation="deleteUser")
        probe = DefaultUserRepositoryProbe(logger=mock_logger).with_context(context)

        probe.user_deleted(user_id="7")

        mock_logger.info.assert_called_once_with(
            "user_deleted",
            user_id="7",
            request_id="req-1",
            operation="deleteUser",
        )


class TestPronounProbe:
    """Tests for PronounProbe."""

    def test_pronoun_created_logs_info(self, mock_logger):
        probe = DefaultPronounProbe(logger=mock_logger)

        probe.pronoun_created(pronoun_id=4, pronouns="they/them")

        mock_logger.info.assert_called_once_with(
            "pronoun_created", pronoun_id=4, pronouns="they/them"
        )

    def test_dangling_reference_logs_error(self, mock_logger):
        probe = DefaultPronounProbe(logger=mock_logger)

        probe.dangling_pronoun_reference(pronoun_id=99)

        mock_logger.error.assert_called_once_with(
            "dangling_pronoun_reference", pronoun_id=99
        )

    def test_pending_pronouns_published_logs_debug(self, mock_logger):
        probe = DefaultPronounProbe(logger=mock_logger)

        probe.pending_pronouns_published(count=2)

        mock_logger.debug.assert_called_once_with(
            "pending_pronouns_published", count=2
        )


class TestUserServiceProbe:
    """Tests for UserServiceProbe."""

    def test_access_denied_logs_warning(self, mock_logger):
        probe = DefaultUserServiceProbe(logger=mock_logger)

        probe.access_denied(actor_id="1", target_user_id="2", operation="deleteUser")

        mock_logger.warning.assert_called_once_with(
            "user_access_denied",
            actor_id="1",
            target_user_id="2",
            operation="deleteUser",
        )

    def test_api_key_revoked_logs_info(self, mock_logger):
        probe = DefaultUserServiceProbe(logger=mock_logger)

        probe.api_key_revoked(user_id="2", actor_id="2", deleted=False)

        mock_logger.info.assert_called_once_with(
            "api_key_revoked", user_id="2", actor_id="2", deleted=False
        )

    def test_with_context_preserves_logger(self, mock_logger):
        probe = DefaultUserServiceProbe(logger=mock_logger)

        bound = probe.with_context(ObservationContext(actor_id="1"))

        assert bound._logger is mock_logger
        assert bound is not probe


class TestAuthServiceProbe:
    """Tests for AuthServiceProbe."""

    def test_oauth_state_mismatch_logs_warning(self, mock_logger):
        probe = DefaultAuthServiceProbe(logger=mock_logger)

        probe.oauth_state_mismatch(provider="GITHUB")

        mock_logger.warning.assert_called_once_with(
            "oauth_state_mismatch", provider="GITHUB"
        )

    def test_registration_failed_logs_error(self, mock_logger):
        probe = DefaultAuthServiceProbe(logger=mock_logger)

        probe.registration_failed(provider="DISCORD", error="duplicate")

        mock_logger.error.assert_called_once_with(
            "registration_failed", provider="DISCORD", error="duplicate"
        )


class TestTokenProbes:
    """Tests for the token service and OAuth client probes."""

    def test_token_validation_failed_logs_warning(self, mock_logger):
        probe = DefaultTokenServiceProbe(logger=mock_logger)

        probe.token_validation_failed(reason="expired")

        mock_logger.warning.assert_called_once_with(
            "token_validation_failed", reason="expired"
        )

    def test_code_exchange_failed_logs_warning(self, mock_logger):
        probe = DefaultOAuthClientProbe(logger=mock_logger)

        probe.code_exchange_failed(provider="GITHUB", error="bad_verification_code")

        mock_logger.warning.assert_called_once_with(
            "oauth_code_exchange_failed",
            provider="GITHUB",
            error="bad_verification_code",
        )
