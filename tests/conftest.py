"""Shared fixtures."""

from unittest.mock import MagicMock

import pytest

from projectpilot.core.engine import CoPilotEngine
from projectpilot.core.logging import LogLevel, StructuredLogger
from projectpilot.core.privacy import PrivacyManager
from projectpilot.generator.project_generator import ProjectGenerator
from projectpilot.generator.vcs import GitRepository
from projectpilot.schemas.specification import Language, Platform, ProjectSpecification


@pytest.fixture
def quiet_logger():
    """Logger with no handlers attached."""
    return StructuredLogger(name="projectpilot.tests", level=LogLevel.DEBUG, console=False)


@pytest.fixture
def fake_vcs():
    """VCS double that records calls instead of running git."""
    return MagicMock(spec=GitRepository)


@pytest.fixture
def generator(tmp_path, fake_vcs, quiet_logger):
    return ProjectGenerator(tmp_path / "projects", vcs=fake_vcs, logger=quiet_logger)


@pytest.fixture
def privacy(quiet_logger):
    return PrivacyManager(enabled=True, logger=quiet_logger)


@pytest.fixture
def engine(generator, privacy, quiet_logger):
    engine = CoPilotEngine(generator=generator, privacy=privacy, logger=quiet_logger)
    engine.start_new_session()
    return engine


@pytest.fixture
def macos_spec():
    """Complete spec for a native macOS app."""
    return ProjectSpecification(
        purpose="I want to build a macOS productivity app",
        target_platforms=[Platform.MACOS],
        requires_gui=True,
        requires_offline=True,
        preferred_language=Language.SWIFT,
        needs_testing=True,
    )
