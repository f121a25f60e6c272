"""Schema for the record of a generated project."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from projectpilot.schemas.architecture import ProjectArchitecture
from projectpilot.schemas.specification import LicenseKind
from projectpilot.schemas.stack import TechStack


class ProjectMetadata(BaseModel):
    """Metadata stamped on a generated project."""

    model_config = ConfigDict(frozen=True)

    license: LicenseKind
    version: str = "0.1.0"
    created_at: datetime = Field(default_factory=datetime.now)


class GeneratedProject(BaseModel):
    """Write-once record of a successful generation.

    The directory at ``output_path`` belongs to the user once this record
    exists; nothing in ProjectPilot writes to it afterwards.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    stack: TechStack
    architecture: ProjectArchitecture
    output_path: Path
    metadata: ProjectMetadata
    files: list[str] = Field(default_factory=list, description="Paths relative to output_path")
    vcs_initialized: bool = False
    warnings: list[str] = Field(default_factory=list)
