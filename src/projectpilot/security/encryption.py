"""Authenticated encryption (AES-256-GCM) for data ProjectPilot keeps at rest."""

import base64
import os
import secrets as py_secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from projectpilot.core.logging import StructuredLogger, get_logger
from projectpilot.security.errors import (
    DecryptionError,
    KeyNotFoundError,
    SecretStoreError,
    UnsupportedAlgorithmError,
)
from projectpilot.security.key_store import KeyStore, MemoryKeyStore

ALGORITHM = "AES-GCM-256"
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_PREFIX = "projectpilot.encryption.key"
ACTIVE_KEY_POINTER = "projectpilot.encryption.active"


@dataclass(frozen=True)
class EncryptedData:
    """Ciphertext (nonce-prefixed) plus what is needed to open it."""

    ciphertext: bytes
    algorithm: str
    key_id: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ciphertext": base64.b64encode(self.ciphertext).decode("ascii"),
            "algorithm": self.algorithm,
            "key_id": self.key_id,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EncryptedData":
        return cls(
            ciphertext=base64.b64decode(data["ciphertext"], validate=True),
            algorithm=data["algorithm"],
            key_id=data["key_id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


class EncryptionManager:
    """
    Encrypts and decrypts payloads with AES-GCM.

    Each ciphertext records the id of the key that sealed it. Rotating a key
    creates new material under a new id and keeps the old material, so older
    ciphertexts stay readable until that key is explicitly retired.
    """

    def __init__(self, key_store: Optional[KeyStore] = None, logger: Optional[StructuredLogger] = None):
        self.key_store: KeyStore = key_store if key_store is not None else MemoryKeyStore()
        self.logger = logger or get_logger()

    def encrypt(self, data: Union[bytes, str]) -> EncryptedData:
        """Seal ``data`` under the active key with a fresh random nonce."""
        if isinstance(data, str):
            data = data.encode("utf-8")

        key_id = self.active_key_id()
        key = self.key_store.retrieve_key(key_id)

        nonce = os.urandom(NONCE_SIZE)
        sealed = AESGCM(key).encrypt(nonce, data, key_id.encode("utf-8"))

        self.logger.debug("Data encrypted", context={"size": len(data), "key_id": key_id})
        return EncryptedData(ciphertext=nonce + sealed, algorithm=ALGORITHM, key_id=key_id)

    def decrypt(self, encrypted: EncryptedData) -> bytes:
        """
        Open ``encrypted`` or fail closed.

        Raises:
            UnsupportedAlgorithmError: Payload was not sealed with AES-GCM-256
            KeyNotFoundError: The sealing key is not in the key store
            DecryptionError: Authentication failed (tampering or wrong key)
        """
        if encrypted.algorithm != ALGORITHM:
            raise UnsupportedAlgorithmError(f"Unsupported encryption algorithm: {encrypted.algorithm}")

        key = self.key_store.retrieve_key(encrypted.key_id)

        if len(encrypted.ciphertext) < NONCE_SIZE + TAG_SIZE:
            raise DecryptionError("Ciphertext is too short to be valid")

        nonce = encrypted.ciphertext[:NONCE_SIZE]
        sealed = encrypted.ciphertext[NONCE_SIZE:]
        try:
            plaintext = AESGCM(key).decrypt(nonce, sealed, encrypted.key_id.encode("utf-8"))
        except InvalidTag as e:
            raise DecryptionError("Failed to decrypt data: authentication failed") from e

        self.logger.debug("Data decrypted", context={"size": len(plaintext), "key_id": encrypted.key_id})
        return plaintext

    def decrypt_to_string(self, encrypted: EncryptedData) -> str:
        try:
            return self.decrypt(encrypted).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("Decrypted data is not valid UTF-8") from e

    def active_key_id(self) -> str:
        """Id of the key new ciphertexts are sealed with, creating one on first use."""
        try:
            return self.key_store.retrieve_secret(ACTIVE_KEY_POINTER)
        except KeyNotFoundError:
            pass

        key_id = self._create_key()
        self.key_store.store_secret(ACTIVE_KEY_POINTER, key_id)
        self.logger.info("New encryption key generated and stored", context={"key_id": key_id})
        return key_id

    def rotate_key(self, key_id: Optional[str] = None) -> str:
        """
        Replace ``key_id`` (default: the active key) with fresh key material.

        Existing ciphertexts are not re-encrypted. The previous material is
        kept under its own id so they still decrypt.

        Returns:
            The id of the new key
        """
        current = self.active_key_id()
        target = key_id or current
        # Raises KeyNotFoundError for unknown ids
        self.key_store.retrieve_key(target)

        self.logger.info("Rotating encryption key", context={"key_id": target})
        new_key_id = self._create_key()
        if target == current:
            self.key_store.store_secret(ACTIVE_KEY_POINTER, new_key_id)

        self.logger.info(
            "Encryption key rotated successfully",
            context={"previous_key_id": target, "key_id": new_key_id},
        )
        return new_key_id

    def retire_key(self, key_id: str) -> None:
        """Delete old key material. Ciphertexts sealed with it become unreadable."""
        if key_id == self.active_key_id():
            raise SecretStoreError("Cannot retire the active encryption key; rotate it first")
        self.key_store.delete_key(key_id)
        self.logger.warning("Encryption key retired", context={"key_id": key_id})

    def _create_key(self) -> str:
        key_id = f"{KEY_PREFIX}.{py_secrets.token_hex(8)}"
        self.key_store.store_key(key_id, AESGCM.generate_key(bit_length=256))
        return key_id
