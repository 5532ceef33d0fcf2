"""Security utilities for API key and OAuth state generation."""

import base64
import secrets
import string

API_KEY_ALPHABET = string.ascii_letters + string.digits

OAUTH_STATE_BYTES = 16


def generate_api_key(length: int) -> str:
    """Generate an alphanumeric API key from a cryptographically secure source.

    Args:
        length: Number of characters in the key

    Returns:
        The API key
    """
    return "".join(secrets.choice(API_KEY_ALPHABET) for _ in range(length))


def generate_oauth_state() -> str:
    """Generate the anti-forgery state for an OAuth redirect.

    Returns:
        16 random bytes as URL-safe base64
    """
    return base64.urlsafe_b64encode(secrets.token_bytes(OAUTH_STATE_BYTES)).decode()
