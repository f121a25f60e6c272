"""Tests for the architecture advisor."""

from unittest.mock import MagicMock

import pytest

from projectpilot.core.errors import PrivacyBlockedError
from projectpilot.schemas.architecture import ArchitectureReview
from projectpilot.stages.advisor import ArchitectureAdvisor
from projectpilot.stages.architecture import propose_architecture
from projectpilot.stages.stack_decider import decide_stack_for


@pytest.fixture
def proposal(macos_spec):
    stack = decide_stack_for(macos_spec)
    return macos_spec, stack, propose_architecture(macos_spec, stack)


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.generate.return_value = '{"summary": "Good fit"}'
    client.extract_json.return_value = {
        "summary": "Good fit for a native app",
        "risks": ["No persistence layer yet"],
        "suggestions": ["Add a Storage module"],
    }
    return client


class TestArchitectureAdvisor:
    """Model review of a proposal."""

    def test_prompt_describes_proposal(self, mock_client, proposal):
        prompt = ArchitectureAdvisor(mock_client).build_prompt(*proposal)
        assert "I want to build a macOS productivity app" in prompt
        assert "SwiftUI" in prompt
        assert "MVVM" in prompt
        assert "App, Views, Models, Services, Core" in prompt
        assert '"summary"' in prompt

    def test_review_parsed(self, mock_client, proposal):
        review = ArchitectureAdvisor(mock_client).review(*proposal)
        assert isinstance(review, ArchitectureReview)
        assert review.risks == ["No persistence layer yet"]
        mock_client.generate.assert_called_once()

    def test_invalid_review(self, mock_client, proposal):
        mock_client.extract_json.return_value = {"risks": ["missing summary"]}
        with pytest.raises(ValueError):
            ArchitectureAdvisor(mock_client).review(*proposal)

    def test_privacy_block_propagates(self, mock_client, proposal):
        mock_client.generate.side_effect = PrivacyBlockedError("Local model inference", "http://localhost:11434")
        with pytest.raises(PrivacyBlockedError):
            ArchitectureAdvisor(mock_client).review(*proposal)

    def test_render(self):
        text = ArchitectureAdvisor.render(
            ArchitectureReview(summary="Fine", risks=["r1"], suggestions=["s1", "s2"])
        )
        assert text.splitlines() == ["Fine", "", "Risks:", "- r1", "", "Suggestions:", "- s1", "- s2"]

    def test_render_summary_only(self):
        assert ArchitectureAdvisor.render(ArchitectureReview(summary="Fine")) == "Fine"
