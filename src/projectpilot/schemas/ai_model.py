"""Schema for references to AI models used by optional collaborators."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ModelKind(str, Enum):
    """Where a model runs. Persisted as a tag; unknown tags fail to decode."""

    OLLAMA = "ollama"
    MLX = "mlx"
    OPENAI = "openai"


class AIModel(BaseModel):
    """A model reference such as ``ollama:llama3.2``."""

    model_config = ConfigDict(frozen=True)

    kind: ModelKind
    name: str

    @property
    def requires_network(self) -> bool:
        """Local runtimes stay on the machine; hosted providers do not."""
        return self.kind == ModelKind.OPENAI

    @property
    def display_name(self) -> str:
        return f"{self.kind.value}:{self.name}"
