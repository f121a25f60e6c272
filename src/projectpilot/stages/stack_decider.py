"""Technology stack decision."""

from typing import Any

from projectpilot.schemas.specification import Language, Platform, ProjectSpecification
from projectpilot.schemas.stack import BuildSystemKind, ProjectKind, TechStack

SCRIPT_HINTS = ("script", "automation")
LIGHTWEIGHT_LANGUAGES = (Language.PYTHON, Language.JAVASCRIPT)


def decide_stack(
    purpose: str,
    primary_platform: Platform,
    requires_gui: bool,
    needs_offline: bool,
    needs_performance: bool,
) -> TechStack:
    """
    Pick a technology stack. First matching rule wins.

    ``purpose`` and ``needs_offline`` do not influence the current rules; they
    are accepted so callers always hand over the full decision context.
    """
    if primary_platform == Platform.MACOS and requires_gui:
        return TechStack(
            kind=ProjectKind.MACOS_NATIVE,
            language=Language.SWIFT,
            framework="SwiftUI",
            build_system=BuildSystemKind.SWIFT_PM,
        )

    if primary_platform == Platform.MULTI_OS and requires_gui:
        return TechStack(
            kind=ProjectKind.CROSS_PLATFORM_GUI,
            language=Language.RUST,
            framework="Tauri",
            build_system=BuildSystemKind.CARGO,
        )

    if not requires_gui and needs_performance:
        return TechStack(
            kind=ProjectKind.CLI,
            language=Language.RUST,
            framework="clap",
            build_system=BuildSystemKind.CARGO,
        )

    if not requires_gui:
        return TechStack(
            kind=ProjectKind.SCRIPT,
            language=Language.PYTHON,
            framework="click",
            build_system=BuildSystemKind.PIP,
        )

    # GUI on iOS or the web: Tauri is the closest thing we scaffold
    return TechStack(
        kind=ProjectKind.CROSS_PLATFORM_GUI,
        language=Language.RUST,
        framework="Tauri",
        build_system=BuildSystemKind.CARGO,
    )


def stack_inputs(spec: ProjectSpecification) -> dict[str, Any]:
    """Derive :func:`decide_stack` keyword arguments from a specification."""
    purpose = spec.purpose.lower()
    needs_performance = not (
        spec.preferred_language in LIGHTWEIGHT_LANGUAGES
        or any(hint in purpose for hint in SCRIPT_HINTS)
    )
    return {
        "purpose": spec.purpose,
        "primary_platform": spec.target_platforms[0] if spec.target_platforms else Platform.MACOS,
        "requires_gui": spec.requires_gui,
        "needs_offline": spec.requires_offline,
        "needs_performance": needs_performance,
    }


def decide_stack_for(spec: ProjectSpecification) -> TechStack:
    return decide_stack(**stack_inputs(spec))
