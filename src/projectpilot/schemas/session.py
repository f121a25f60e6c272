"""Schema for Co-Pilot sessions and their conversation turns."""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from projectpilot.schemas.ai_model import AIModel
from projectpilot.schemas.project import GeneratedProject
from projectpilot.schemas.specification import ProjectSpecification


class Phase(str, Enum):
    """Named states of the session state machine."""

    INTRODUCTION = "introduction"
    DISCOVERY = "discovery"
    REFINEMENT = "refinement"
    ARCHITECTURE = "architecture"
    GENERATION = "generation"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]

    @property
    def is_terminal(self) -> bool:
        """Terminal for turn processing (the session itself lives on)."""
        return self in (Phase.COMPLETED, Phase.ERROR)


_PHASE_LABELS = {
    Phase.INTRODUCTION: "Introduction",
    Phase.DISCOVERY: "Discovery",
    Phase.REFINEMENT: "Refinement",
    Phase.ARCHITECTURE: "Architecture Design",
    Phase.GENERATION: "Code Generation",
    Phase.COMPLETED: "Completed",
    Phase.ERROR: "Error",
}


class Role(str, Enum):
    """Author of a turn."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Turn(BaseModel):
    """A single conversation turn. Immutable once appended."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    role: Role
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)
    metadata: Optional[dict[str, str]] = None


class Session(BaseModel):
    """A Co-Pilot "idea to project" session.

    ``turns`` is append-only and ``updated_at`` strictly increases on every
    mutation made through :meth:`add_turn`, :meth:`advance` or :meth:`touch`.
    """

    id: UUID = Field(default_factory=uuid4)
    phase: Phase = Phase.INTRODUCTION
    turns: list[Turn] = Field(default_factory=list)
    specification: Optional[ProjectSpecification] = None
    generated_project: Optional[GeneratedProject] = None
    advisor_model: Optional[AIModel] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def touch(self) -> None:
        """Bump ``updated_at``, never reusing a previous value."""
        now = datetime.now()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now

    def add_turn(
        self,
        role: Role,
        text: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> Turn:
        turn = Turn(role=role, text=text, metadata=metadata)
        self.turns.append(turn)
        self.touch()
        return turn

    def advance(self, phase: Phase) -> None:
        self.phase = phase
        self.touch()

    def update_specification(self, spec: ProjectSpecification) -> None:
        self.specification = spec
        self.touch()

    def record_project(self, project: GeneratedProject) -> None:
        if self.generated_project is not None:
            raise ValueError("Session already has a generated project")
        self.generated_project = project
        self.touch()

    def turns_by(self, role: Role) -> list[Turn]:
        return [t for t in self.turns if t.role == role]
