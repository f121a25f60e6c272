"""Slot-filling dialogue: keyword rules that turn utterances into spec updates.

Matching is case-insensitive. Multi-character phrases match as substrings;
the short tokens in ``WHOLE_WORD_TRIGGERS`` only match as whole words so that
"tests" never reads as TypeScript and "specific" never reads as CI.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from projectpilot.schemas.architecture import ProjectArchitecture, TestingStrategy
from projectpilot.schemas.project import GeneratedProject
from projectpilot.schemas.specification import (
    Language,
    LicenseKind,
    Platform,
    ProjectSpecification,
)
from projectpilot.schemas.stack import TechStack


class SignalCategory(str, Enum):
    """Slot categories the parser recognizes."""

    PLATFORM = "platform"
    INTERFACE = "interface"
    CONNECTIVITY = "connectivity"
    LANGUAGE = "language"
    STORAGE = "storage"
    TESTING = "testing"
    AUTH = "auth"
    CI = "ci"
    PLUGINS = "plugins"
    LICENSE = "license"


class Resolution(str, Enum):
    """How several matching rules in one category combine."""

    APPEND = "append"  # every match, in order of first mention
    LATEST = "latest"  # the rule matched latest in the utterance wins
    FIRST = "first"  # first rule in table order wins
    ALL = "all"  # every match, in table order


CATEGORY_RESOLUTION: dict[SignalCategory, Resolution] = {
    SignalCategory.PLATFORM: Resolution.APPEND,
    SignalCategory.INTERFACE: Resolution.ALL,
    SignalCategory.CONNECTIVITY: Resolution.ALL,
    SignalCategory.LANGUAGE: Resolution.LATEST,
    SignalCategory.STORAGE: Resolution.ALL,
    SignalCategory.TESTING: Resolution.FIRST,
    SignalCategory.AUTH: Resolution.ALL,
    SignalCategory.CI: Resolution.ALL,
    SignalCategory.PLUGINS: Resolution.ALL,
    SignalCategory.LICENSE: Resolution.LATEST,
}

WHOLE_WORD_TRIGGERS = {"mac", "ios", "cli", "gui", "api", "ts", "js", "ci", "mit", "gpl", "bsd"}

OFFLINE_PHRASES = ("offline", "no network", "without network", "local only")
NO_TEST_PHRASES = ("no test", "skip test")


def _compile(phrase: str) -> re.Pattern:
    if phrase in WHOLE_WORD_TRIGGERS:
        return re.compile(rf"\b{re.escape(phrase)}s?\b")
    return re.compile(re.escape(phrase))


@dataclass(frozen=True)
class SlotRule:
    """One row of the trigger table: phrases in a category and their effect."""

    category: SignalCategory
    triggers: tuple[str, ...]
    updates: dict[str, Any] = field(default_factory=dict)
    platform: Optional[Platform] = None
    masked_by: tuple[str, ...] = ()

    def match_positions(self, text: str) -> list[int]:
        """Start offsets of every trigger occurrence, ignoring masked phrases."""
        for phrase in self.masked_by:
            text = text.replace(phrase, " " * len(phrase))
        positions = []
        for trigger in self.triggers:
            positions.extend(m.start() for m in _compile(trigger).finditer(text))
        return sorted(positions)


SLOT_RULES: tuple[SlotRule, ...] = (
    # Platform
    SlotRule(SignalCategory.PLATFORM, ("macos", "mac"), platform=Platform.MACOS),
    SlotRule(SignalCategory.PLATFORM, ("ios", "iphone"), platform=Platform.IOS),
    SlotRule(SignalCategory.PLATFORM, ("multi", "cross-platform", "cross platform"), platform=Platform.MULTI_OS),
    SlotRule(SignalCategory.PLATFORM, ("web",), platform=Platform.WEB),
    # Interface
    SlotRule(
        SignalCategory.INTERFACE,
        ("cli", "command-line", "command line", "terminal"),
        {"requires_gui": False, "requires_cli": True},
    ),
    SlotRule(SignalCategory.INTERFACE, ("gui", "interface", "window"), {"requires_gui": True}),
    # Connectivity
    SlotRule(SignalCategory.CONNECTIVITY, OFFLINE_PHRASES, {"requires_offline": True}),
    SlotRule(
        SignalCategory.CONNECTIVITY,
        ("online", "network", "api"),
        {"requires_offline": False, "needs_api": True},
        masked_by=OFFLINE_PHRASES,
    ),
    # Language
    SlotRule(SignalCategory.LANGUAGE, ("swift",), {"preferred_language": Language.SWIFT}),
    SlotRule(SignalCategory.LANGUAGE, ("rust",), {"preferred_language": Language.RUST}),
    SlotRule(SignalCategory.LANGUAGE, ("python",), {"preferred_language": Language.PYTHON}),
    SlotRule(SignalCategory.LANGUAGE, ("typescript", "ts"), {"preferred_language": Language.TYPESCRIPT}),
    SlotRule(SignalCategory.LANGUAGE, ("javascript", "js"), {"preferred_language": Language.JAVASCRIPT}),
    # Storage
    SlotRule(SignalCategory.STORAGE, ("database", "storage", "persist"), {"needs_database": True}),
    # Testing
    SlotRule(SignalCategory.TESTING, NO_TEST_PHRASES, {"needs_testing": False}),
    SlotRule(SignalCategory.TESTING, ("test",), {"needs_testing": True}),
    # Auth
    SlotRule(SignalCategory.AUTH, ("auth", "login", "user"), {"needs_authentication": True}),
    # CI
    SlotRule(SignalCategory.CI, ("ci", "github actions", "automation"), {"needs_ci": True}),
    # Plugins
    SlotRule(SignalCategory.PLUGINS, ("plugin", "extension", "modular"), {"needs_plugin_system": True}),
    # License
    SlotRule(SignalCategory.LICENSE, ("apache",), {"license": LicenseKind.APACHE2}),
    SlotRule(SignalCategory.LICENSE, ("mit",), {"license": LicenseKind.MIT}),
    SlotRule(SignalCategory.LICENSE, ("gpl",), {"license": LicenseKind.GPL3}),
    SlotRule(SignalCategory.LICENSE, ("bsd",), {"license": LicenseKind.BSD3}),
    SlotRule(SignalCategory.LICENSE, ("proprietary", "closed"), {"license": LicenseKind.PROPRIETARY}),
)

CONFIRM_WORDS = ("yes", "correct", "good")
PROCEED_WORDS = ("yes", "proceed", "generate")


def contains_any(text: str, words: tuple[str, ...]) -> bool:
    normalized = text.strip().lower()
    return any(word in normalized for word in words)


class DialogueManager:
    """Parses discovery answers and writes every message the co-pilot sends."""

    def __init__(self, rules: tuple[SlotRule, ...] = SLOT_RULES):
        self.rules = rules

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(self, utterance: str, spec: ProjectSpecification) -> ProjectSpecification:
        """
        Merge the signals found in ``utterance`` into a copy of ``spec``.

        Args:
            utterance: Free-text user input
            spec: Specification accumulated so far (not modified)

        Returns:
            Updated specification
        """
        text = utterance.lower()
        updated = spec.model_copy(deep=True)

        matched: dict[SignalCategory, list[tuple[SlotRule, list[int]]]] = {}
        for rule in self.rules:
            positions = rule.match_positions(text)
            if positions:
                matched.setdefault(rule.category, []).append((rule, positions))

        for category, hits in matched.items():
            resolution = CATEGORY_RESOLUTION[category]

            if resolution == Resolution.APPEND:
                for rule, _ in sorted(hits, key=lambda hit: hit[1][0]):
                    if rule.platform is not None and rule.platform not in updated.target_platforms:
                        updated.target_platforms.append(rule.platform)
            elif resolution == Resolution.LATEST:
                rule, _ = max(hits, key=lambda hit: hit[1][-1])
                _apply(updated, rule)
            elif resolution == Resolution.FIRST:
                _apply(updated, hits[0][0])
            else:
                for rule, _ in hits:
                    _apply(updated, rule)

        return updated

    def matched_categories(self, utterance: str) -> list[SignalCategory]:
        """Categories with at least one trigger in ``utterance``, in table order."""
        text = utterance.lower()
        categories: list[SignalCategory] = []
        for rule in self.rules:
            if rule.category not in categories and rule.match_positions(text):
                categories.append(rule.category)
        return categories

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def get_introduction_message(self) -> str:
        return (
            "Hello! I'm your Project Co-Pilot.\n\n"
            "I'll help you turn your idea into a working project scaffold with:\n"
            "- A technology stack chosen for your requirements\n"
            "- A clean architecture proposal\n"
            "- Build configuration, README, license and .gitignore\n"
            "- Initial source code and tests\n"
            "- A git repository with an initial commit\n\n"
            "**Tell me about your project idea.** What would you like to build?"
        )

    def get_discovery_questions(self, spec: ProjectSpecification) -> str:
        return (
            "Great! To design the best solution for you, I need to understand your requirements better.\n\n"
            "**Please answer these questions:**\n\n"
            "1. **Platform(s):** Where should this run? (macOS, iOS, multi-platform, web)\n"
            "2. **Interface:** Does it need a graphical interface (GUI) or is it a command-line tool (CLI)?\n"
            "3. **Network:** Should it work completely offline, or can it use network resources?\n"
            "4. **Language:** Do you have a preferred programming language? "
            "(Swift, Rust, Python, TypeScript, or let me decide)\n"
            "5. **Database:** Will you need to store data locally?\n"
            "6. **Testing:** Should I include a test suite?\n"
            "7. **License:** What license should the project use? (Apache 2.0, MIT, GPL-3.0, BSD, Proprietary)\n\n"
            "You can answer in natural language - just tell me what you need!"
        )

    def get_follow_up_questions(self, spec: ProjectSpecification) -> str:
        """Ask for whichever mandatory slots are still missing."""
        questions = []

        if not spec.target_platforms:
            questions.append("- Which platform(s) should this target? (macOS, iOS, multi-platform, web)")

        if spec.preferred_language is None and spec.purpose.strip():
            questions.append("- Do you have a programming language preference, or should I choose the best fit?")

        if not questions:
            return "Could you provide a bit more detail about your project requirements?"

        return "I need a few more details:\n\n" + "\n".join(questions)

    def generate_suggestions(self, spec: ProjectSpecification) -> list[str]:
        """Advisory hints for unset fields. Never changes ``spec``."""
        suggestions = []
        purpose = spec.purpose.lower()

        if not spec.target_platforms:
            if "mac" in purpose:
                suggestions.append("Consider targeting macOS for native performance")
            if spec.requires_offline:
                suggestions.append("Offline-first suggests a native app (macOS/iOS)")

        if spec.preferred_language is None:
            if spec.requires_gui and Platform.MACOS in spec.target_platforms:
                suggestions.append("Swift + SwiftUI would be ideal for a macOS GUI")
            if not spec.requires_gui and Platform.MULTI_OS in spec.target_platforms:
                suggestions.append("Rust would provide excellent cross-platform CLI performance")
            if "script" in purpose:
                suggestions.append("Python might be perfect for scripting tasks")

        if not spec.needs_testing and (spec.needs_database or spec.needs_api):
            suggestions.append("Given the complexity, I'd recommend including tests")

        return suggestions

    def format_confirmation(self, spec: ProjectSpecification) -> str:
        return (
            "Great! Here's what I understand:\n\n"
            f"{spec.summary()}\n\n"
            "Does this look correct? (yes/no)\n"
            "If you'd like to change anything, just let me know!"
        )

    def get_change_prompt(self) -> str:
        return "No problem! What would you like to change?"

    def format_proposal(self, stack: TechStack, architecture: ProjectArchitecture) -> str:
        modules = "\n".join(f"- {m.name}: {m.purpose}" for m in architecture.modules)
        return (
            "Perfect! Based on your requirements, I recommend:\n\n"
            "**Technology Stack:**\n"
            f"- Type: {stack.kind.value}\n"
            f"- Language: {stack.language.value}\n"
            f"- Framework: {stack.framework}\n"
            f"- Build System: {stack.build_system.value}\n\n"
            "**Architecture:**\n"
            f"- Pattern: {architecture.pattern.value}\n"
            f"- Testing: {architecture.testing_strategy.value}\n\n"
            "**Modules:**\n"
            f"{modules}\n\n"
            "Shall I proceed to generate this project? (yes/no)"
        )

    def get_architecture_clarification(self) -> str:
        return "What aspects of the architecture would you like me to adjust?"

    def get_generation_started(self) -> str:
        return "Excellent! I'll now generate your project. This will take a few moments..."

    def format_success(self, project: GeneratedProject, duration_s: float) -> str:
        lines = [
            "Project generated successfully!",
            "",
            f"**Location:** {project.output_path}",
            f"**Generation time:** {duration_s:.2f}s",
            "",
            "Your project includes:",
            f"- {project.stack.framework} source structure ({project.stack.language.value})",
            "- Build configuration",
            "- README with instructions",
            f"- {project.metadata.license.value} LICENSE and .gitignore",
        ]
        if project.architecture.testing_strategy == TestingStrategy.UNIT:
            lines.append("- Initial tests")
        if project.vcs_initialized:
            lines.append("- Git repository with an initial commit")
        for warning in project.warnings:
            lines.append(f"\nNote: {warning}")
        return "\n".join(lines)

    def format_failure(self, error: Exception, partial_path: Optional[str] = None) -> str:
        message = f"I encountered an error: {error}. Please start a new session to try again."
        if partial_path:
            message += f"\n\nSome files may already have been written to {partial_path}."
        return message

    def format_advisor_notes(self, notes: str) -> str:
        return f"**Model review notes:**\n\n{notes}"

    def get_privacy_blocked_message(self) -> str:
        return (
            "I couldn't ask the local model for a review because Privacy Mode blocks network access. "
            "Disable Privacy Mode (`projectpilot privacy off`) if you want model suggestions; "
            "the rule-based proposal above is unaffected."
        )


def _apply(spec: ProjectSpecification, rule: SlotRule) -> None:
    for name, value in rule.updates.items():
        setattr(spec, name, value)
