"""Session persistence: one JSON file per session, optionally encrypted at rest."""

import json
from pathlib import Path
from typing import Any, Optional, Union
from uuid import UUID

from pydantic import ValidationError

from projectpilot.core.errors import SessionDecodeError
from projectpilot.core.logging import StructuredLogger, get_logger
from projectpilot.schemas.session import Session
from projectpilot.security.encryption import EncryptedData, EncryptionManager

FORMAT_VERSION = 1
PLAIN = "plain"
ENCRYPTED = "encrypted"


class SessionStore:
    """
    Saves and loads Co-Pilot sessions.

    File layout: ``{"version": 1, "format": "plain", "session": {...}}`` or
    ``{"version": 1, "format": "encrypted", "payload": {...}}`` where the
    payload is an :class:`EncryptedData` dict sealing the session JSON.
    """

    def __init__(
        self,
        directory: Path,
        encryption: Optional[EncryptionManager] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize session store.

        Args:
            directory: Directory session files live in
            encryption: Seal sessions with this manager when given
            logger: Structured logger
        """
        self.directory = directory
        self.encryption = encryption
        self.logger = logger or get_logger()
        directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, session_id: Union[UUID, str]) -> Path:
        return self.directory / f"{session_id}.json"

    def save(self, session: Session) -> Path:
        """Write ``session``, replacing any earlier save of the same id."""
        session_json = session.model_dump_json()

        if self.encryption is not None:
            sealed = self.encryption.encrypt(session_json)
            document: dict[str, Any] = {
                "version": FORMAT_VERSION,
                "format": ENCRYPTED,
                "payload": sealed.to_dict(),
            }
        else:
            document = {
                "version": FORMAT_VERSION,
                "format": PLAIN,
                "session": json.loads(session_json),
            }

        path = self.path_for(session.id)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        tmp_path.replace(path)

        self.logger.debug(
            "Session saved",
            context={"session_id": str(session.id), "format": document["format"]},
        )
        return path

    def load(self, session_id: Union[UUID, str]) -> Session:
        """
        Load a saved session.

        Raises:
            FileNotFoundError: No session with that id was saved
            SessionDecodeError: The file is malformed, violates the schema or
                carries an unknown tag
            SecretStoreError: The encrypted payload could not be opened
        """
        path = self.path_for(session_id)
        if not path.exists():
            raise FileNotFoundError(f"No saved session {session_id} in {self.directory}")
        return self._decode(path)

    def _decode(self, path: Path) -> Session:
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SessionDecodeError(f"Session file {path.name} is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise SessionDecodeError(f"Session file {path.name} is malformed")

        file_format = document.get("format")
        if file_format == PLAIN:
            raw = document.get("session")
            if not isinstance(raw, dict):
                raise SessionDecodeError(f"Session file {path.name} has no session data")
            return self._validate(raw, path)

        if file_format == ENCRYPTED:
            if self.encryption is None:
                raise SessionDecodeError(
                    f"Session file {path.name} is encrypted but no encryption manager is configured"
                )
            try:
                sealed = EncryptedData.from_dict(document["payload"])
            except (KeyError, TypeError, ValueError) as e:
                raise SessionDecodeError(f"Session file {path.name} has a malformed payload") from e
            plaintext = self.encryption.decrypt_to_string(sealed)
            try:
                raw = json.loads(plaintext)
            except json.JSONDecodeError as e:
                raise SessionDecodeError(f"Decrypted session {path.name} is not valid JSON") from e
            return self._validate(raw, path)

        raise SessionDecodeError(f"Session file {path.name} has unknown format: {file_format!r}")

    @staticmethod
    def _validate(raw: Any, path: Path) -> Session:
        try:
            return Session.model_validate(raw)
        except ValidationError as e:
            raise SessionDecodeError(f"Session file {path.name} failed validation: {e}") from e

    def list_sessions(self) -> list[Session]:
        """All readable sessions, most recently updated first.

        Files that fail to decode are logged and left out of the listing.
        """
        sessions = []
        for path in self.directory.glob("*.json"):
            try:
                sessions.append(self._decode(path))
            except SessionDecodeError as e:
                self.logger.warning("Skipping unreadable session file", context={"file": path.name, "error": str(e)})

        return sorted(sessions, key=lambda s: s.updated_at, reverse=True)

    def delete(self, session_id: Union[UUID, str]) -> bool:
        path = self.path_for(session_id)
        if path.exists():
            path.unlink()
            return True
        return False
