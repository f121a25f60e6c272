"""Tests for the slot-filling parser and dialogue text."""

import pytest

from projectpilot.schemas.specification import Language, LicenseKind, Platform, ProjectSpecification
from projectpilot.stages.dialogue import DialogueManager, SignalCategory


@pytest.fixture
def dialogue():
    return DialogueManager()


@pytest.fixture
def base_spec():
    return ProjectSpecification(purpose="A note taking app")


class TestParsePlatforms:
    """Platform signals."""

    def test_single_platform(self, dialogue, base_spec):
        spec = dialogue.parse("It should run on macOS", base_spec)
        assert spec.target_platforms == [Platform.MACOS]

    def test_order_of_first_mention(self, dialogue, base_spec):
        """Platforms are appended in the order the user names them."""
        spec = dialogue.parse("iPhone first, then the Mac", base_spec)
        assert spec.target_platforms == [Platform.IOS, Platform.MACOS]

    def test_cross_platform_and_web(self, dialogue, base_spec):
        spec = dialogue.parse("cross-platform desktop plus a web version", base_spec)
        assert spec.target_platforms == [Platform.MULTI_OS, Platform.WEB]

    def test_no_duplicates_across_utterances(self, dialogue, base_spec):
        spec = dialogue.parse("macOS", base_spec)
        spec = dialogue.parse("definitely mac, macOS only", spec)
        assert spec.target_platforms == [Platform.MACOS]

    def test_short_tokens_need_word_boundaries(self, dialogue, base_spec):
        """'ios' inside 'studios' is not iOS."""
        spec = dialogue.parse("a tool for recording studios", base_spec)
        assert spec.target_platforms == []


class TestParseInterfaceAndConnectivity:
    """Interface and network signals."""

    def test_cli_turns_gui_off(self, dialogue, base_spec):
        spec = dialogue.parse("just a command-line tool", base_spec)
        assert spec.requires_gui is False
        assert spec.requires_cli is True

    def test_gui_applied_after_cli(self, dialogue, base_spec):
        """A GUI trigger wins over a CLI trigger in the same utterance."""
        spec = dialogue.parse("a cli with an optional gui", base_spec)
        assert spec.requires_cli is True
        assert spec.requires_gui is True

    def test_offline(self, dialogue, base_spec):
        spec = dialogue.parse("must work offline", base_spec.model_copy(update={"requires_offline": False}))
        assert spec.requires_offline is True

    def test_online_enables_api(self, dialogue, base_spec):
        spec = dialogue.parse("it syncs online", base_spec)
        assert spec.requires_offline is False
        assert spec.needs_api is True

    def test_negated_network_stays_offline(self, dialogue, base_spec):
        """'no network' is an offline phrase, not an online trigger."""
        spec = dialogue.parse("no network access at all", base_spec)
        assert spec.requires_offline is True
        assert spec.needs_api is False

    def test_api_is_whole_word(self, dialogue, base_spec):
        spec = dialogue.parse("rapid prototyping", base_spec)
        assert spec.needs_api is False


class TestParseLanguageAndLicense:
    """Exclusive categories resolve to the latest mention."""

    @pytest.mark.parametrize(
        "utterance,expected",
        [
            ("prefer swift", Language.SWIFT),
            ("write it in Rust", Language.RUST),
            ("python please", Language.PYTHON),
            ("TypeScript", Language.TYPESCRIPT),
            ("plain js is fine", Language.JAVASCRIPT),
        ],
    )
    def test_language_triggers(self, dialogue, base_spec, utterance, expected):
        assert dialogue.parse(utterance, base_spec).preferred_language == expected

    def test_latest_language_wins(self, dialogue, base_spec):
        spec = dialogue.parse("not python, rust", base_spec)
        assert spec.preferred_language == Language.RUST

    def test_later_utterance_overrides(self, dialogue, base_spec):
        spec = dialogue.parse("swift", base_spec)
        spec = dialogue.parse("actually python", spec)
        assert spec.preferred_language == Language.PYTHON

    def test_tests_do_not_select_typescript(self, dialogue, base_spec):
        spec = dialogue.parse("include tests", base_spec)
        assert spec.preferred_language is None
        assert spec.needs_testing is True

    @pytest.mark.parametrize(
        "utterance,expected",
        [
            ("MIT license", LicenseKind.MIT),
            ("gpl", LicenseKind.GPL3),
            ("BSD", LicenseKind.BSD3),
            ("apache 2", LicenseKind.APACHE2),
            ("closed source", LicenseKind.PROPRIETARY),
        ],
    )
    def test_license_triggers(self, dialogue, base_spec, utterance, expected):
        assert dialogue.parse(utterance, base_spec).license == expected

    def test_mit_not_matched_inside_words(self, dialogue, base_spec):
        """'commit' and 'submit' are not the MIT license."""
        spec = dialogue.parse("submit and commit changes", base_spec.model_copy(update={"license": LicenseKind.BSD3}))
        assert spec.license == LicenseKind.BSD3


class TestParseFlags:
    """Switch-on categories and testing."""

    def test_no_tests(self, dialogue, base_spec):
        assert dialogue.parse("no tests needed", base_spec).needs_testing is False
        assert dialogue.parse("skip tests", base_spec).needs_testing is False

    def test_flags_switch_on(self, dialogue, base_spec):
        spec = dialogue.parse(
            "store data in a database, login for each user, github actions and a plugin system",
            base_spec,
        )
        assert spec.needs_database is True
        assert spec.needs_authentication is True
        assert spec.needs_ci is True
        assert spec.needs_plugin_system is True

    def test_ci_is_whole_word(self, dialogue, base_spec):
        spec = dialogue.parse("a specific circle", base_spec)
        assert spec.needs_ci is False


class TestParseProperties:
    """Purity and determinism."""

    def test_input_not_mutated(self, dialogue, base_spec):
        before = base_spec.model_copy(deep=True)
        dialogue.parse("macOS, rust, database, mit", base_spec)
        assert base_spec == before

    def test_idempotent(self, dialogue, base_spec):
        utterance = "macOS and iOS, offline, swift, include tests"
        once = dialogue.parse(utterance, base_spec)
        twice = dialogue.parse(utterance, once)
        assert once == twice

    def test_several_categories_in_one_utterance(self, dialogue):
        categories = dialogue.matched_categories("macOS, needs a GUI, must work offline, prefer swift, include tests")
        assert categories == [
            SignalCategory.PLATFORM,
            SignalCategory.INTERFACE,
            SignalCategory.CONNECTIVITY,
            SignalCategory.LANGUAGE,
            SignalCategory.TESTING,
        ]

    def test_scenario_utterance(self, dialogue):
        spec = dialogue.parse(
            "macOS, needs a GUI, must work offline, prefer swift, include tests",
            ProjectSpecification(purpose="I want to build a macOS productivity app"),
        )
        assert spec.target_platforms == [Platform.MACOS]
        assert spec.requires_gui is True
        assert spec.requires_offline is True
        assert spec.preferred_language == Language.SWIFT
        assert spec.needs_testing is True
        assert spec.is_complete()


class TestDialogueText:
    """Prompt and suggestion generators."""

    def test_follow_up_asks_for_platform(self, dialogue, base_spec):
        text = dialogue.get_follow_up_questions(base_spec)
        assert "platform" in text.lower()
        assert "language" in text.lower()

    def test_follow_up_generic_when_nothing_missing(self, dialogue):
        spec = ProjectSpecification(target_platforms=[Platform.MACOS], preferred_language=Language.SWIFT)
        assert "more detail" in dialogue.get_follow_up_questions(spec)

    def test_suggestions_do_not_mutate(self, dialogue):
        spec = ProjectSpecification(purpose="an automation script", requires_gui=False)
        before = spec.model_copy(deep=True)
        suggestions = dialogue.generate_suggestions(spec)
        assert any("Python" in s for s in suggestions)
        assert spec == before

    def test_suggest_tests_for_complex_projects(self, dialogue):
        spec = ProjectSpecification(needs_testing=False, needs_database=True)
        assert any("tests" in s for s in dialogue.generate_suggestions(spec))

    def test_confirmation_contains_summary(self, dialogue, macos_spec):
        text = dialogue.format_confirmation(macos_spec)
        assert macos_spec.summary() in text
        assert "(yes/no)" in text
