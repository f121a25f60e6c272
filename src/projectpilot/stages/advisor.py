"""Optional model review of the rule-based architecture proposal."""

from pathlib import Path

from pydantic import ValidationError

from projectpilot.core.llm_client import LLMClientBase
from projectpilot.schemas.ai_model import AIModel
from projectpilot.schemas.architecture import ArchitectureReview, ProjectArchitecture
from projectpilot.schemas.specification import ProjectSpecification
from projectpilot.schemas.stack import TechStack


class ArchitectureAdvisor:
    """Asks a local model to review a stack and architecture proposal.

    The advisor never changes the proposal; its output is shown to the user
    as notes. :class:`PrivacyBlockedError` from the client propagates.
    """

    def __init__(self, llm_client: LLMClientBase):
        """
        Initialize architecture advisor.

        Args:
            llm_client: LLM client for API calls
        """
        self.llm_client = llm_client
        self.prompt_template = self._load_template()

    @property
    def ai_model(self) -> AIModel:
        """Model the reviews come from, recorded on each session."""
        return self.llm_client.ai_model

    def _load_template(self) -> str:
        """Load prompt template from file."""
        template_path = Path(__file__).parent.parent / "prompts" / "architecture_review.txt"
        return template_path.read_text(encoding="utf-8")

    def build_prompt(
        self,
        spec: ProjectSpecification,
        stack: TechStack,
        architecture: ProjectArchitecture,
    ) -> str:
        requirements = spec.summary().split("\n", 1)[-1]
        return self.prompt_template.format(
            purpose=spec.purpose,
            requirements=requirements,
            kind=stack.kind.value,
            language=stack.language.value,
            framework=stack.framework,
            build_system=stack.build_system.value,
            pattern=architecture.pattern.value,
            modules=", ".join(m.name for m in architecture.modules),
            testing_strategy=architecture.testing_strategy.value,
        )

    def review(
        self,
        spec: ProjectSpecification,
        stack: TechStack,
        architecture: ProjectArchitecture,
    ) -> ArchitectureReview:
        """
        Review a proposal.

        Returns:
            Validated ArchitectureReview model

        Raises:
            PrivacyBlockedError: Privacy mode denied the model request
            ValueError: If the response is not a valid review
        """
        prompt = self.build_prompt(spec, stack, architecture)
        response = self.llm_client.generate(prompt)
        json_data = self.llm_client.extract_json(response)

        try:
            return ArchitectureReview.model_validate(json_data)
        except ValidationError as e:
            raise ValueError(f"Model returned an invalid architecture review: {e}") from e

    @staticmethod
    def render(review: ArchitectureReview) -> str:
        lines = [review.summary]
        if review.risks:
            lines.append("")
            lines.append("Risks:")
            lines.extend(f"- {risk}" for risk in review.risks)
        if review.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            lines.extend(f"- {suggestion}" for suggestion in review.suggestions)
        return "\n".join(lines)
