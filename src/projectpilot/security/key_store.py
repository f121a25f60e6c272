"""Key material storage backends for the secret store."""

import base64
import json
import os
from pathlib import Path
from typing import Protocol

from projectpilot.security.errors import KeyNotFoundError, KeyStoreError


class KeyStore(Protocol):
    """
    Protocol for secure storage of raw key material and small secrets.

    Implementations raise :class:`KeyStoreError` when the backing store fails
    and :class:`KeyNotFoundError` when an identifier is unknown.
    """

    def store_key(self, key_id: str, key: bytes) -> None:
        ...

    def retrieve_key(self, key_id: str) -> bytes:
        ...

    def delete_key(self, key_id: str) -> None:
        ...

    def list_keys(self) -> list[str]:
        ...

    def store_secret(self, name: str, value: str) -> None:
        ...

    def retrieve_secret(self, name: str) -> str:
        ...


class MemoryKeyStore:
    """Process-local key store. Keys vanish with the process."""

    def __init__(self):
        self._keys: dict[str, bytes] = {}
        self._secrets: dict[str, str] = {}

    def store_key(self, key_id: str, key: bytes) -> None:
        self._keys[key_id] = bytes(key)

    def retrieve_key(self, key_id: str) -> bytes:
        try:
            return self._keys[key_id]
        except KeyError:
            raise KeyNotFoundError(key_id) from None

    def delete_key(self, key_id: str) -> None:
        self._keys.pop(key_id, None)

    def list_keys(self) -> list[str]:
        return sorted(self._keys)

    def store_secret(self, name: str, value: str) -> None:
        self._secrets[name] = value

    def retrieve_secret(self, name: str) -> str:
        try:
            return self._secrets[name]
        except KeyError:
            raise KeyNotFoundError(name) from None


class FileKeyStore:
    """
    Key store backed by a JSON file readable only by its owner.

    Layout: ``{"keys": {id: base64}, "secrets": {name: value}}``. Every write
    replaces the file atomically.
    """

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict:
        if not self.path.exists():
            return {"keys": {}, "secrets": {}}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise KeyStoreError(f"Failed to read key store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise KeyStoreError(f"Key store {self.path} is malformed")
        data.setdefault("keys", {})
        data.setdefault("secrets", {})
        return data

    def _write(self, data: dict) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise KeyStoreError(f"Failed to write key store {self.path}: {e}") from e

    def store_key(self, key_id: str, key: bytes) -> None:
        data = self._read()
        data["keys"][key_id] = base64.b64encode(key).decode("ascii")
        self._write(data)

    def retrieve_key(self, key_id: str) -> bytes:
        encoded = self._read()["keys"].get(key_id)
        if encoded is None:
            raise KeyNotFoundError(key_id)
        try:
            return base64.b64decode(encoded, validate=True)
        except ValueError as e:
            raise KeyStoreError(f"Key material for {key_id} is corrupt") from e

    def delete_key(self, key_id: str) -> None:
        data = self._read()
        if data["keys"].pop(key_id, None) is not None:
            self._write(data)

    def list_keys(self) -> list[str]:
        return sorted(self._read()["keys"])

    def store_secret(self, name: str, value: str) -> None:
        data = self._read()
        data["secrets"][name] = value
        self._write(data)

    def retrieve_secret(self, name: str) -> str:
        value = self._read()["secrets"].get(name)
        if value is None:
            raise KeyNotFoundError(name)
        return value
