"""Pydantic schemas for sessions, specifications, stacks and generated projects."""

from projectpilot.schemas.ai_model import AIModel, ModelKind
from projectpilot.schemas.architecture import (
    ArchitecturePattern,
    ArchitectureReview,
    ModuleSpec,
    ProjectArchitecture,
    TestingStrategy,
)
from projectpilot.schemas.project import GeneratedProject, ProjectMetadata
from projectpilot.schemas.session import Phase, Role, Session, Turn
from projectpilot.schemas.specification import (
    Language,
    LicenseKind,
    Platform,
    ProjectSpecification,
)
from projectpilot.schemas.stack import BuildSystemKind, ProjectKind, TechStack

__all__ = [
    "AIModel",
    "ModelKind",
    "ArchitecturePattern",
    "ArchitectureReview",
    "ModuleSpec",
    "ProjectArchitecture",
    "TestingStrategy",
    "GeneratedProject",
    "ProjectMetadata",
    "Phase",
    "Role",
    "Session",
    "Turn",
    "Language",
    "LicenseKind",
    "Platform",
    "ProjectSpecification",
    "BuildSystemKind",
    "ProjectKind",
    "TechStack",
]
