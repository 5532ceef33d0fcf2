"""Symmetric encryption for OAuth provider access tokens.

Between login and registration the provider token travels through the
client, so it is sealed with Fernet and handed out as URL-safe text.
"""

from __future__ import annotations

from cryptography.fernet import Fernet, InvalidToken

from shared_kernel.auth.tokens import InvalidTokenError


class TokenCipher:
    """Encrypts and decrypts provider tokens with a Fernet key."""

    def __init__(self, key: str):
        """Initialize the cipher.

        Args:
            key: URL-safe base64-encoded 32-byte Fernet key
        """
        self._fernet = Fernet(key.encode())

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a token.

        Returns:
            URL-safe base64 ciphertext
        """
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a token produced by encrypt().

        Raises:
            InvalidTokenError: If the ciphertext was tampered with or uses another key
        """
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except (InvalidToken, ValueError) as e:
            raise InvalidTokenError("Encrypted token could not be decrypted") from e
