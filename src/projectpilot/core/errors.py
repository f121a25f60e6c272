"""Exception types raised by the Co-Pilot core."""

from pathlib import Path
from typing import Optional


class ProjectPilotError(Exception):
    """Base class for ProjectPilot errors."""


class GenerationError(ProjectPilotError):
    """Artifact generation failed.

    ``partial_path`` points at the output directory when it was created before
    the failure; files written up to that point are left on disk.
    """

    def __init__(self, message: str, partial_path: Optional[Path] = None):
        super().__init__(message)
        self.partial_path = partial_path


class VCSError(ProjectPilotError):
    """Repository initialization or the initial commit failed."""


class PrivacyBlockedError(ProjectPilotError):
    """The privacy gate denied a network request."""

    def __init__(self, purpose: str, destination: str):
        super().__init__(
            f"Network access for '{purpose}' to {destination} was blocked by Privacy Mode. "
            "Disable Privacy Mode to allow it."
        )
        self.purpose = purpose
        self.destination = destination


class SessionDecodeError(ProjectPilotError):
    """Persisted session data could not be decoded."""
