"""Architecture proposal."""

from projectpilot.schemas.architecture import (
    ArchitecturePattern,
    ModuleSpec,
    ProjectArchitecture,
    TestingStrategy,
)
from projectpilot.schemas.specification import ProjectSpecification
from projectpilot.schemas.stack import ProjectKind, TechStack

# Every generated project starts from this skeleton
DEFAULT_MODULES: tuple[ModuleSpec, ...] = (
    ModuleSpec(name="App", purpose="Application entry point"),
    ModuleSpec(name="Views", purpose="User interface components"),
    ModuleSpec(name="Models", purpose="Data models"),
    ModuleSpec(name="Services", purpose="Business logic"),
    ModuleSpec(name="Core", purpose="Core utilities"),
)


def propose_architecture(spec: ProjectSpecification, stack: TechStack) -> ProjectArchitecture:
    pattern = (
        ArchitecturePattern.MVVM
        if stack.kind == ProjectKind.MACOS_NATIVE
        else ArchitecturePattern.MODULAR
    )
    return ProjectArchitecture(
        pattern=pattern,
        modules=list(DEFAULT_MODULES),
        features=[],
        testing_strategy=TestingStrategy.UNIT if spec.needs_testing else TestingStrategy.MINIMAL,
    )
