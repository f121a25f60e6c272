"""Schema for the technology stack decision."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from projectpilot.schemas.specification import Language


class ProjectKind(str, Enum):
    """Broad shape of the generated project."""

    MACOS_NATIVE = "macOS Native"
    CROSS_PLATFORM_GUI = "Cross-platform GUI"
    CLI = "Command-line Tool"
    SCRIPT = "Script"


class BuildSystemKind(str, Enum):
    """Build tooling the generated manifest targets."""

    SWIFT_PM = "Swift Package Manager"
    CARGO = "Cargo"
    NPM = "npm"
    PIP = "pip"


class TechStack(BaseModel):
    """Technology stack chosen for a project. Immutable once decided."""

    model_config = ConfigDict(frozen=True)

    kind: ProjectKind
    language: Language
    framework: str = Field(description="Primary framework or library (e.g. 'SwiftUI', 'Tauri')")
    build_system: BuildSystemKind
