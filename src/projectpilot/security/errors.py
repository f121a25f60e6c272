"""Secret store error types.

None of these are retried anywhere in ProjectPilot; they propagate to the caller.
"""

from projectpilot.core.errors import ProjectPilotError


class SecretStoreError(ProjectPilotError):
    """Base class for secret store failures."""


class KeyStoreError(SecretStoreError):
    """The underlying key store rejected a store, retrieve or delete."""


class KeyNotFoundError(SecretStoreError):
    """No key material exists for the requested key id."""

    def __init__(self, key_id: str):
        super().__init__(f"Encryption key not found: {key_id}")
        self.key_id = key_id


class DecryptionError(SecretStoreError):
    """Ciphertext failed authentication (tampered, truncated or wrong key)."""


class UnsupportedAlgorithmError(SecretStoreError):
    """The encrypted payload names an algorithm this store cannot open."""
