"""Co-Pilot engine: the "idea to project" session state machine."""

import threading
import time
from typing import Callable, Optional

from projectpilot.core.errors import GenerationError, PrivacyBlockedError
from projectpilot.core.logging import StructuredLogger, get_logger
from projectpilot.core.privacy import PrivacyManager
from projectpilot.generator.project_generator import ProjectGenerator
from projectpilot.schemas.session import Phase, Role, Session
from projectpilot.schemas.specification import ProjectSpecification
from projectpilot.stages.advisor import ArchitectureAdvisor
from projectpilot.stages.architecture import propose_architecture
from projectpilot.stages.dialogue import CONFIRM_WORDS, PROCEED_WORDS, DialogueManager, contains_any
from projectpilot.stages.stack_decider import decide_stack_for


class CoPilotEngine:
    """
    Drives one Co-Pilot session at a time.

    ``process_user_input`` is the only entry point that mutates the session.
    Calls that arrive while another call is still running are dropped.
    """

    def __init__(
        self,
        generator: ProjectGenerator,
        dialogue: Optional[DialogueManager] = None,
        advisor: Optional[ArchitectureAdvisor] = None,
        privacy: Optional[PrivacyManager] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize the engine.

        Args:
            generator: Writes the project once the user approves the proposal
            dialogue: Parser and message formatter
            advisor: Optional model review of each proposal
            privacy: Privacy gate (shown in status output; the advisor's client
                enforces it)
            logger: Structured logger
        """
        self.generator = generator
        self.dialogue = dialogue or DialogueManager()
        self.advisor = advisor
        self.logger = logger or get_logger()
        self.privacy = privacy or PrivacyManager(logger=self.logger)

        self.session = Session()
        self.error: Optional[Exception] = None
        self._busy = threading.Lock()
        self._handlers: dict[Phase, Callable[[str], None]] = {
            Phase.INTRODUCTION: self._handle_introduction,
            Phase.DISCOVERY: self._handle_discovery,
            Phase.REFINEMENT: self._handle_refinement,
            Phase.ARCHITECTURE: self._handle_architecture,
            Phase.GENERATION: self._handle_generation,
        }

    @classmethod
    def from_services(cls, services) -> "CoPilotEngine":
        """Build an engine from process-wide :class:`Services`."""
        return cls(
            generator=services.project_generator(),
            advisor=services.advisor(),
            privacy=services.privacy,
            logger=services.logger,
        )

    @property
    def is_processing(self) -> bool:
        return self._busy.locked()

    def start_new_session(self) -> Session:
        """Discard all state and greet the user."""
        self.session = Session()
        self.error = None
        if self.advisor is not None:
            self.session.advisor_model = self.advisor.ai_model
        self._say(self.dialogue.get_introduction_message())
        self.logger.info("Co-Pilot session started", context={"session_id": str(self.session.id)})
        return self.session

    def suggestions(self) -> list[str]:
        spec = self.session.specification or ProjectSpecification()
        return self.dialogue.generate_suggestions(spec)

    def process_user_input(self, text: str) -> None:
        """
        Record ``text`` as a user turn and run the current phase handler.

        In ``completed`` and ``error`` the turn is recorded and nothing else
        happens. Any exception raised by a handler moves the session to
        ``error`` and is kept on :attr:`error`.
        """
        if not self._busy.acquire(blocking=False):
            self.logger.debug("Dropped input while busy", context={"session_id": str(self.session.id)})
            return

        try:
            self.session.add_turn(Role.USER, text)
            from_phase = self.session.phase

            self.logger.info(
                "Co-Pilot processing user input",
                context={"phase": from_phase.value, "input_length": len(text)},
            )

            if from_phase.is_terminal:
                return

            try:
                self._handlers[from_phase](text)
            except Exception as e:
                self._fail(e)

            if self.session.phase != from_phase:
                self.logger.log_phase(from_phase.value, self.session.phase.value)
        finally:
            self._busy.release()

    # ------------------------------------------------------------------
    # Phase handlers
    # ------------------------------------------------------------------

    def _handle_introduction(self, text: str) -> None:
        spec = ProjectSpecification(purpose=text.strip())
        self.session.update_specification(spec)
        self.session.advance(Phase.DISCOVERY)
        self._say(self.dialogue.get_discovery_questions(spec))

    def _handle_discovery(self, text: str) -> None:
        spec = self.dialogue.parse(text, self._specification())
        self.session.update_specification(spec)

        if spec.is_complete():
            self.session.advance(Phase.REFINEMENT)
            self._say(self.dialogue.format_confirmation(spec))
        else:
            self._say(self.dialogue.get_follow_up_questions(spec))

    def _handle_refinement(self, text: str) -> None:
        if not contains_any(text, CONFIRM_WORDS):
            self.session.advance(Phase.DISCOVERY)
            self._say(self.dialogue.get_change_prompt())
            return

        spec = self._specification()
        stack = decide_stack_for(spec)
        architecture = propose_architecture(spec, stack)

        self.session.advance(Phase.ARCHITECTURE)
        self._say(self.dialogue.format_proposal(stack, architecture))

        if self.advisor is not None:
            self._review_proposal(spec, stack, architecture)

    def _handle_architecture(self, text: str) -> None:
        if not contains_any(text, PROCEED_WORDS):
            self._say(self.dialogue.get_architecture_clarification())
            return

        self._say(self.dialogue.get_generation_started())
        self.session.advance(Phase.GENERATION)
        self._handle_generation(text)

    def _handle_generation(self, text: str) -> None:
        spec = self._specification()
        start = time.perf_counter()

        # Recomputed rather than cached so a revised spec is never stale
        stack = decide_stack_for(spec)
        architecture = propose_architecture(spec, stack)
        project = self.generator.generate(spec, stack, architecture)

        self.session.record_project(project)
        self.session.advance(Phase.COMPLETED)

        duration = time.perf_counter() - start
        self._say(self.dialogue.format_success(project, duration))
        self.logger.info(
            "Project generated successfully",
            context={
                "duration": f"{duration:.2f}",
                "path": str(project.output_path),
                "stack": stack.kind.value,
            },
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _review_proposal(self, spec, stack, architecture) -> None:
        """Append the advisor's notes. Advisor failures never change the phase."""
        try:
            review = self.advisor.review(spec, stack, architecture)
        except PrivacyBlockedError as e:
            self.logger.info("Architecture review blocked", context={"reason": str(e)})
            self._say(self.dialogue.get_privacy_blocked_message())
            return
        except (RuntimeError, ValueError) as e:
            self.logger.warning("Architecture review unavailable", context={"error": str(e)})
            self._say(f"The model review is unavailable right now ({e}). The proposal above still stands.")
            return

        self._say(self.dialogue.format_advisor_notes(self.advisor.render(review)))

    def _specification(self) -> ProjectSpecification:
        if self.session.specification is None:
            raise RuntimeError(f"No specification in phase {self.session.phase.value}")
        return self.session.specification

    def _say(self, text: str) -> None:
        self.session.add_turn(Role.ASSISTANT, text, metadata={"phase": self.session.phase.value})

    def _fail(self, error: Exception) -> None:
        self.error = error
        self.session.advance(Phase.ERROR)

        partial_path = None
        if isinstance(error, GenerationError) and error.partial_path is not None:
            partial_path = str(error.partial_path)

        self._say(self.dialogue.format_failure(error, partial_path))
        self.logger.error(
            "Co-Pilot error",
            context={"error": str(error), "error_type": type(error).__name__},
        )
