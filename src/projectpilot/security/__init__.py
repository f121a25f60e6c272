"""Secret store: AES-GCM encryption over pluggable key storage."""

from projectpilot.security.encryption import ALGORITHM, EncryptedData, EncryptionManager
from projectpilot.security.errors import (
    DecryptionError,
    KeyNotFoundError,
    KeyStoreError,
    SecretStoreError,
    UnsupportedAlgorithmError,
)
from projectpilot.security.key_store import FileKeyStore, KeyStore, MemoryKeyStore

__all__ = [
    "ALGORITHM",
    "EncryptedData",
    "EncryptionManager",
    "DecryptionError",
    "KeyNotFoundError",
    "KeyStoreError",
    "SecretStoreError",
    "UnsupportedAlgorithmError",
    "FileKeyStore",
    "KeyStore",
    "MemoryKeyStore",
]
