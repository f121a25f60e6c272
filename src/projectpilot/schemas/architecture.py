"""Schema for the proposed project architecture."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ArchitecturePattern(str, Enum):
    """Structural pattern for the generated code."""

    MVVM = "MVVM"
    MODULAR = "Modular"
    SIMPLE = "Simple"


class TestingStrategy(str, Enum):
    """How much test scaffolding to generate."""

    UNIT = "Unit tests"
    MINIMAL = "Minimal"


class ModuleSpec(BaseModel):
    """A top-level module in the proposed layout."""

    model_config = ConfigDict(frozen=True)

    name: str
    purpose: str


class ProjectArchitecture(BaseModel):
    """Architecture proposal. Immutable once produced."""

    model_config = ConfigDict(frozen=True)

    pattern: ArchitecturePattern
    modules: list[ModuleSpec] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    testing_strategy: TestingStrategy = TestingStrategy.UNIT


class ArchitectureReview(BaseModel):
    """Review notes returned by the optional model advisor."""

    summary: str = Field(..., min_length=1)
    risks: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
