"""Schema for the project specification gathered during a Co-Pilot session."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Platform(str, Enum):
    """Target platform for the generated project."""

    MACOS = "macOS"
    IOS = "iOS"
    MULTI_OS = "Multi-platform"
    WEB = "Web"


class Language(str, Enum):
    """Programming languages the co-pilot knows how to scaffold."""

    SWIFT = "Swift"
    RUST = "Rust"
    PYTHON = "Python"
    TYPESCRIPT = "TypeScript"
    JAVASCRIPT = "JavaScript"


class LicenseKind(str, Enum):
    """License written into the generated project."""

    APACHE2 = "Apache-2.0"
    MIT = "MIT"
    GPL3 = "GPL-3.0"
    BSD3 = "BSD-3-Clause"
    PROPRIETARY = "Proprietary"


class ProjectSpecification(BaseModel):
    """Structured requirements accumulated from the conversation."""

    purpose: str = Field(default="", description="What the user wants to build, in their words")
    target_platforms: list[Platform] = Field(
        default_factory=list,
        description="Platforms in order of first mention",
    )
    requires_gui: bool = True
    requires_offline: bool = True
    requires_cli: bool = False
    preferred_language: Optional[Language] = None
    needs_database: bool = False
    needs_api: bool = False
    needs_authentication: bool = False
    needs_testing: bool = True
    needs_ci: bool = False
    needs_plugin_system: bool = False
    license: LicenseKind = LicenseKind.APACHE2
    additional_requirements: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)

    @field_validator("target_platforms", mode="after")
    @classmethod
    def dedupe_platforms(cls, v: list[Platform]) -> list[Platform]:
        """Keep the first mention of each platform only."""
        seen: list[Platform] = []
        for platform in v:
            if platform not in seen:
                seen.append(platform)
        return seen

    def is_complete(self) -> bool:
        """Whether enough is known to leave the discovery loop."""
        return bool(self.purpose.strip()) and len(self.target_platforms) > 0

    def summary(self) -> str:
        """Ordered, human-readable listing used for confirmation prompts."""
        lines = [
            "Project Specification:",
            f"  Purpose: {self.purpose}",
            f"  Platform(s): {', '.join(p.value for p in self.target_platforms)}",
            f"  GUI: {_yes_no(self.requires_gui)}",
            f"  Offline: {_yes_no(self.requires_offline)}",
        ]
        if self.preferred_language is not None:
            lines.append(f"  Language: {self.preferred_language.value}")
        lines.append(f"  Testing: {_yes_no(self.needs_testing)}")
        lines.append(f"  License: {self.license.value}")

        if self.additional_requirements:
            lines.append(f"  Additional: {', '.join(self.additional_requirements)}")

        return "\n".join(lines)


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"
