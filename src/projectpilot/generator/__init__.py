"""Artifact generation: templates, license and ignore files, git."""

from projectpilot.generator.project_generator import ProjectGenerator, derive_names
from projectpilot.generator.vcs import GitRepository

__all__ = ["ProjectGenerator", "derive_names", "GitRepository"]
