"""Ollama client wrapper gated by privacy mode, with JSON extraction."""

import json
import os
import re
from typing import Optional, Protocol

import httpx
from ollama import Client, ResponseError

from projectpilot.core.errors import PrivacyBlockedError
from projectpilot.core.logging import StructuredLogger, get_logger
from projectpilot.core.privacy import PrivacyManager
from projectpilot.schemas.ai_model import AIModel, ModelKind

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "llama3.2"


class LLMClientBase(Protocol):
    """Interface the advisor relies on."""

    @property
    def ai_model(self) -> AIModel:
        ...

    def generate(self, prompt: str, max_retries: int = 2) -> str:
        ...

    def extract_json(self, text: str) -> dict:
        ...


class OllamaClient:
    """
    Client for a local Ollama server.

    Every call to :meth:`generate` asks the privacy gate first. Even a
    localhost server is an outbound connection, so with privacy mode on the
    request never leaves the process.
    """

    def __init__(
        self,
        privacy: PrivacyManager,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.0,
        seed: Optional[int] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize Ollama client.

        Args:
            privacy: Privacy gate consulted before each request
            base_url: Base URL for Ollama API (defaults to http://localhost:11434)
            model: Model name to use (default: llama3.2)
            temperature: Temperature for generation (0.0 for determinism)
            seed: Random seed for determinism
            logger: Structured logger
        """
        self.privacy = privacy
        self.base_url = base_url or os.getenv("OLLAMA_BASE_URL", DEFAULT_BASE_URL)
        self.model = model or os.getenv("OLLAMA_MODEL", DEFAULT_MODEL)
        self.temperature = temperature
        self.seed = seed
        self.logger = logger or get_logger()
        self.client = Client(host=self.base_url)

    @property
    def ai_model(self) -> AIModel:
        return AIModel(kind=ModelKind.OLLAMA, name=self.model)

    def generate(self, prompt: str, max_retries: int = 2) -> str:
        """
        Generate a response from Ollama.

        Args:
            prompt: Input prompt
            max_retries: Maximum number of attempts for transient failures

        Returns:
            Generated text response

        Raises:
            PrivacyBlockedError: Privacy mode denied the request
            RuntimeError: If the API call fails
        """
        if not self.privacy.request_access("Local model inference", self.base_url):
            raise PrivacyBlockedError("Local model inference", self.base_url)

        options = {"temperature": self.temperature}
        if self.seed is not None:
            options["seed"] = self.seed

        for attempt in range(max_retries):
            try:
                response = self.client.generate(
                    model=self.model,
                    prompt=prompt,
                    options=options,
                    stream=False,
                )
                return response["response"] or ""
            except ResponseError as e:
                if e.status_code == 404:
                    raise RuntimeError(
                        f"Model '{self.model}' not found. "
                        f"Pull it with 'ollama pull {self.model}' or choose another model."
                    ) from e
                if attempt == max_retries - 1:
                    raise RuntimeError(f"Ollama request failed after {max_retries} attempts: {e}") from e
            except (ConnectionError, httpx.HTTPError) as e:
                if attempt == max_retries - 1:
                    raise RuntimeError(f"Could not reach Ollama at {self.base_url}: {e}") from e

            self.logger.debug("Retrying Ollama request", context={"attempt": attempt + 1, "model": self.model})

        raise RuntimeError(f"Failed to generate response after {max_retries} attempts")

    def extract_json(self, text: str) -> dict:
        """
        Extract JSON from a model response, handling markdown code blocks.

        Args:
            text: Raw response text that may contain JSON

        Returns:
            Parsed JSON as dictionary

        Raises:
            ValueError: If no valid JSON object is found
        """
        candidates = []

        match = re.search(r"```(?:json)?\s*(\{.*?\})\s*```", text, re.DOTALL)
        if match:
            candidates.append(match.group(1))

        match = re.search(r"\{.*\}", text, re.DOTALL)
        if match:
            candidates.append(match.group(0))

        candidates.append(text.strip())

        for candidate in candidates:
            try:
                data = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            if isinstance(data, dict):
                return data

        raise ValueError(f"Could not extract valid JSON from response: {text[:200]}...")
