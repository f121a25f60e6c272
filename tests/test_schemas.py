"""Unit tests for Pydantic schemas."""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from projectpilot.schemas.ai_model import AIModel, ModelKind
from projectpilot.schemas.architecture import ArchitecturePattern, ModuleSpec, ProjectArchitecture
from projectpilot.schemas.session import Phase, Role, Session
from projectpilot.schemas.specification import Language, LicenseKind, Platform, ProjectSpecification
from projectpilot.schemas.stack import BuildSystemKind, ProjectKind, TechStack


class TestProjectSpecification:
    """Test ProjectSpecification schema."""

    def test_defaults(self):
        """Test the default slot values."""
        spec = ProjectSpecification()
        assert spec.purpose == ""
        assert spec.target_platforms == []
        assert spec.requires_gui is True
        assert spec.requires_offline is True
        assert spec.needs_testing is True
        assert spec.license == LicenseKind.APACHE2
        assert spec.preferred_language is None

    @pytest.mark.parametrize(
        "purpose,platforms,expected",
        [
            ("", [], False),
            ("notes app", [], False),
            ("   ", [Platform.MACOS], False),
            ("notes app", [Platform.MACOS], True),
        ],
    )
    def test_is_complete(self, purpose, platforms, expected):
        """Complete means a non-blank purpose and at least one platform."""
        spec = ProjectSpecification(purpose=purpose, target_platforms=platforms)
        assert spec.is_complete() is expected

    def test_platforms_deduplicated_in_order(self):
        """Duplicate platforms collapse to the first mention."""
        spec = ProjectSpecification(
            target_platforms=[Platform.IOS, Platform.MACOS, Platform.IOS],
        )
        assert spec.target_platforms == [Platform.IOS, Platform.MACOS]

    def test_summary_lists_fields_in_order(self):
        """Test summary layout."""
        spec = ProjectSpecification(
            purpose="Photo organizer",
            target_platforms=[Platform.MACOS, Platform.IOS],
            preferred_language=Language.SWIFT,
            license=LicenseKind.MIT,
            additional_requirements=["iCloud sync"],
        )
        lines = spec.summary().splitlines()
        assert lines[0] == "Project Specification:"
        assert lines[1] == "  Purpose: Photo organizer"
        assert lines[2] == "  Platform(s): macOS, iOS"
        assert lines[3] == "  GUI: Yes"
        assert lines[4] == "  Offline: Yes"
        assert lines[5] == "  Language: Swift"
        assert lines[6] == "  Testing: Yes"
        assert lines[7] == "  License: MIT"
        assert lines[8] == "  Additional: iCloud sync"

    def test_summary_omits_unset_language(self):
        """Language line only appears once a language is chosen."""
        summary = ProjectSpecification(purpose="x", target_platforms=[Platform.WEB]).summary()
        assert "Language:" not in summary
        assert "Additional:" not in summary


class TestImmutableModels:
    """Stack and architecture records are frozen."""

    def test_tech_stack_frozen(self):
        stack = TechStack(
            kind=ProjectKind.CLI,
            language=Language.RUST,
            framework="clap",
            build_system=BuildSystemKind.CARGO,
        )
        with pytest.raises(ValidationError):
            stack.framework = "structopt"

    def test_architecture_frozen(self):
        architecture = ProjectArchitecture(
            pattern=ArchitecturePattern.SIMPLE,
            modules=[ModuleSpec(name="App", purpose="Entry point")],
        )
        with pytest.raises(ValidationError):
            architecture.pattern = ArchitecturePattern.MVVM


class TestAIModel:
    """Test AIModel schema."""

    def test_only_hosted_models_need_network(self):
        assert AIModel(kind=ModelKind.OLLAMA, name="llama3.2").requires_network is False
        assert AIModel(kind=ModelKind.MLX, name="phi-3").requires_network is False
        assert AIModel(kind=ModelKind.OPENAI, name="gpt-4o").requires_network is True

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            AIModel.model_validate({"kind": "llamafile", "name": "x"})

    def test_display_name(self):
        assert AIModel(kind=ModelKind.OLLAMA, name="llama3.2").display_name == "ollama:llama3.2"


class TestSession:
    """Test Session schema."""

    def test_new_session_defaults(self):
        session = Session()
        assert session.phase == Phase.INTRODUCTION
        assert session.turns == []
        assert session.specification is None
        assert session.generated_project is None

    def test_add_turn_appends_and_touches(self):
        """Test add_turn."""
        session = Session()
        before = session.updated_at
        turn = session.add_turn(Role.USER, "hello")
        assert session.turns == [turn]
        assert turn.role == Role.USER
        assert session.updated_at > before

    def test_touch_strictly_increases_when_clock_stalls(self):
        """updated_at moves forward even if the clock has not."""
        session = Session()
        session.updated_at = datetime.now() + timedelta(days=1)
        frozen = session.updated_at
        session.touch()
        assert session.updated_at == frozen + timedelta(microseconds=1)

    def test_advance(self):
        session = Session()
        session.advance(Phase.DISCOVERY)
        assert session.phase == Phase.DISCOVERY

    def test_phase_labels_and_terminal(self):
        assert Phase.ARCHITECTURE.label == "Architecture Design"
        assert Phase.GENERATION.label == "Code Generation"
        assert Phase.COMPLETED.is_terminal
        assert Phase.ERROR.is_terminal
        assert not Phase.DISCOVERY.is_terminal

    def test_turns_by_role(self):
        session = Session()
        session.add_turn(Role.ASSISTANT, "hi")
        session.add_turn(Role.USER, "build a thing")
        session.add_turn(Role.ASSISTANT, "questions")
        assert [t.text for t in session.turns_by(Role.ASSISTANT)] == ["hi", "questions"]

    def test_round_trip_json(self):
        """A session survives JSON serialization unchanged."""
        session = Session(advisor_model=AIModel(kind=ModelKind.OLLAMA, name="llama3.2"))
        session.add_turn(Role.USER, "notes app", metadata={"source": "cli"})
        session.update_specification(ProjectSpecification(purpose="notes app"))

        restored = Session.model_validate_json(session.model_dump_json())
        assert restored == session
