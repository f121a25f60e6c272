"""Tests for session persistence."""

import json

import pytest

from projectpilot.core.errors import SessionDecodeError
from projectpilot.core.session_store import SessionStore
from projectpilot.schemas.ai_model import AIModel, ModelKind
from projectpilot.schemas.session import Phase, Role, Session
from projectpilot.security import DecryptionError, EncryptionManager, MemoryKeyStore


@pytest.fixture
def session(macos_spec):
    session = Session(advisor_model=AIModel(kind=ModelKind.OLLAMA, name="llama3.2"))
    session.add_turn(Role.ASSISTANT, "Tell me about your project idea.")
    session.add_turn(Role.USER, macos_spec.purpose)
    session.update_specification(macos_spec)
    session.advance(Phase.DISCOVERY)
    return session


@pytest.fixture
def encryption(quiet_logger):
    return EncryptionManager(MemoryKeyStore(), logger=quiet_logger)


class TestPlainStore:
    """Unencrypted session files."""

    def test_round_trip(self, tmp_path, session, quiet_logger):
        store = SessionStore(tmp_path / "sessions", logger=quiet_logger)
        path = store.save(session)

        assert path == store.path_for(session.id)
        document = json.loads(path.read_text())
        assert document["format"] == "plain"
        assert document["version"] == 1

        loaded = store.load(session.id)
        assert loaded == session
        assert loaded.specification.target_platforms == session.specification.target_platforms

    def test_save_replaces(self, tmp_path, session, quiet_logger):
        store = SessionStore(tmp_path, logger=quiet_logger)
        store.save(session)
        session.add_turn(Role.USER, "macOS please")
        store.save(session)
        assert len(store.load(str(session.id)).turns) == 3
        assert list(tmp_path.glob("*.tmp")) == []

    def test_missing(self, tmp_path, quiet_logger):
        store = SessionStore(tmp_path, logger=quiet_logger)
        with pytest.raises(FileNotFoundError):
            store.load("00000000-0000-0000-0000-000000000000")

    def test_malformed_json(self, tmp_path, session, quiet_logger):
        store = SessionStore(tmp_path, logger=quiet_logger)
        store.path_for(session.id).write_text("{truncated")
        with pytest.raises(SessionDecodeError):
            store.load(session.id)

    def test_unknown_format(self, tmp_path, session, quiet_logger):
        store = SessionStore(tmp_path, logger=quiet_logger)
        store.path_for(session.id).write_text(json.dumps({"version": 1, "format": "zip"}))
        with pytest.raises(SessionDecodeError):
            store.load(session.id)

    def test_unknown_model_tag(self, tmp_path, session, quiet_logger):
        store = SessionStore(tmp_path, logger=quiet_logger)
        path = store.save(session)
        document = json.loads(path.read_text())
        document["session"]["advisor_model"]["kind"] = "mystery-runtime"
        path.write_text(json.dumps(document))

        with pytest.raises(SessionDecodeError):
            store.load(session.id)


class TestEncryptedStore:
    """Sessions sealed with the secret store."""

    def test_round_trip(self, tmp_path, session, encryption, quiet_logger):
        store = SessionStore(tmp_path, encryption=encryption, logger=quiet_logger)
        path = store.save(session)

        raw = path.read_text()
        assert json.loads(raw)["format"] == "encrypted"
        assert session.specification.purpose not in raw
        assert store.load(session.id) == session

    def test_needs_encryption_manager(self, tmp_path, session, encryption, quiet_logger):
        SessionStore(tmp_path, encryption=encryption, logger=quiet_logger).save(session)
        with pytest.raises(SessionDecodeError):
            SessionStore(tmp_path, logger=quiet_logger).load(session.id)

    def test_tampered_payload(self, tmp_path, session, encryption, quiet_logger):
        store = SessionStore(tmp_path, encryption=encryption, logger=quiet_logger)
        path = store.save(session)
        document = json.loads(path.read_text())
        ciphertext = document["payload"]["ciphertext"]
        document["payload"]["ciphertext"] = ("A" if ciphertext[0] != "A" else "B") + ciphertext[1:]
        path.write_text(json.dumps(document))

        with pytest.raises(DecryptionError):
            store.load(session.id)


class TestListing:
    """Listing and deleting sessions."""

    def test_newest_first_and_skips_bad_files(self, tmp_path, quiet_logger):
        store = SessionStore(tmp_path, logger=quiet_logger)
        older = Session()
        newer = Session()
        store.save(older)
        newer.touch()
        store.save(newer)
        (tmp_path / "broken.json").write_text("not json at all")

        assert [s.id for s in store.list_sessions()] == [newer.id, older.id]

    def test_empty(self, tmp_path, quiet_logger):
        assert SessionStore(tmp_path / "none", logger=quiet_logger).list_sessions() == []

    def test_delete(self, tmp_path, session, quiet_logger):
        store = SessionStore(tmp_path, logger=quiet_logger)
        store.save(session)
        assert store.delete(session.id) is True
        assert store.delete(session.id) is False
        with pytest.raises(FileNotFoundError):
            store.load(session.id)
