"""Decision stages: dialogue parsing, stack choice and architecture proposal."""

from projectpilot.stages.architecture import DEFAULT_MODULES, propose_architecture
from projectpilot.stages.dialogue import DialogueManager, SignalCategory
from projectpilot.stages.stack_decider import decide_stack, decide_stack_for, stack_inputs

__all__ = [
    "DEFAULT_MODULES",
    "propose_architecture",
    "DialogueManager",
    "SignalCategory",
    "decide_stack",
    "decide_stack_for",
    "stack_inputs",
]
