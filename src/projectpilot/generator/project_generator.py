"""Project generator: turns a decided stack and architecture into files on disk."""

import keyword
import re
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from projectpilot.core.errors import GenerationError, VCSError
from projectpilot.core.logging import StructuredLogger, get_logger
from projectpilot.generator.gitignore import gitignore_for
from projectpilot.generator.licenses import license_text
from projectpilot.generator.templates import (
    TemplateContext,
    UnsupportedStackError,
    render_readme,
    render_sources,
)
from projectpilot.generator.vcs import GitRepository
from projectpilot.schemas.architecture import ProjectArchitecture
from projectpilot.schemas.project import GeneratedProject, ProjectMetadata
from projectpilot.schemas.specification import ProjectSpecification
from projectpilot.schemas.stack import ProjectKind, TechStack

FILLER_WORDS = {
    "i", "im", "we", "me", "my", "our", "want", "wanna", "need", "would", "like",
    "to", "build", "make", "create", "write", "develop", "a", "an", "the",
    "some", "something", "that", "which", "for", "with", "and", "of", "please",
    "can", "you", "help", "app", "application",
}
MAX_NAME_WORDS = 4
DEFAULT_NAME = "NewProject"
MAX_DIRECTORY_ATTEMPTS = 1000


@dataclass(frozen=True)
class ProjectNames:
    """Identifier forms of the project name."""

    name: str  # PascalCase, used for the directory and Swift types
    package: str  # snake_case, Python import name
    crate: str  # kebab-case, Cargo/npm package name


def derive_names(purpose: str) -> ProjectNames:
    """
    Derive a project name from the first meaningful words of ``purpose``.

    "I want to build a todo list for my Mac" gives ``TodoListMac``.
    """
    tokens = (w.replace("'", "").lower() for w in re.findall(r"[A-Za-z0-9']+", purpose))
    words = [w for w in tokens if w and w not in FILLER_WORDS][:MAX_NAME_WORDS]

    if not words:
        return ProjectNames(name=DEFAULT_NAME, package="new_project", crate="new-project")

    if words[0][0].isdigit():
        words.insert(0, "project")

    package = "_".join(words)
    if keyword.iskeyword(package):
        package += "_app"

    return ProjectNames(
        name="".join(w[:1].upper() + w[1:] for w in words),
        package=package,
        crate="-".join(words),
    )


class ProjectGenerator:
    """Writes a project skeleton into a fresh directory under ``output_root``."""

    def __init__(
        self,
        output_root: Path,
        vcs: Optional[GitRepository] = None,
        init_vcs: bool = True,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize project generator.

        Args:
            output_root: Directory new projects are created under
            vcs: Repository helper (defaults to the git CLI)
            init_vcs: Whether to create a repository and initial commit
            logger: Structured logger
        """
        self.output_root = Path(output_root)
        self.logger = logger or get_logger()
        self.vcs = vcs or GitRepository(logger=self.logger)
        self.init_vcs = init_vcs

    def generate(
        self,
        spec: ProjectSpecification,
        stack: TechStack,
        architecture: ProjectArchitecture,
    ) -> GeneratedProject:
        """
        Generate a project skeleton.

        Args:
            spec: Confirmed specification
            stack: Decided technology stack
            architecture: Proposed architecture

        Returns:
            Record of the generated project

        Raises:
            GenerationError: Any filesystem or template failure. ``partial_path``
                is set once the project directory exists.
        """
        start = time.perf_counter()
        names = derive_names(spec.purpose)
        description = spec.purpose.strip() or f"{names.name} project"

        self.logger.info(
            "Starting project generation",
            context={"project": names.name, "stack": stack.kind.value},
        )

        try:
            self.output_root.mkdir(parents=True, exist_ok=True)
            project_path = self._create_fresh_directory(names.name)
        except OSError as e:
            self.logger.log_generation_stage("directory", "failed", error=str(e))
            raise GenerationError(f"Could not create project directory: {e}") from e

        ctx = TemplateContext(
            name=names.name,
            package=names.package,
            crate=names.crate,
            description=_template_safe(description),
            version="0.1.0",
            license_id=spec.license.value,
        )

        files: dict[str, str] = {}
        stage = "sources"
        try:
            files.update(render_sources(stack, architecture, ctx))
            stage = "readme"
            files["README.md"] = render_readme(stack, architecture, ctx)
            stage = "license"
            files["LICENSE"] = license_text(
                spec.license,
                project=names.name,
                holder=f"The {names.name} Authors",
                year=datetime.now().year,
            )
            stage = "gitignore"
            files[".gitignore"] = gitignore_for(
                stack.language,
                tauri=stack.kind == ProjectKind.CROSS_PLATFORM_GUI,
            )
            stage = "write"
            stage_start = time.perf_counter()
            for relative, content in files.items():
                self._write(project_path, relative, content)
            self.logger.log_generation_stage(
                "write",
                "completed",
                duration_ms=(time.perf_counter() - stage_start) * 1000,
                file_count=len(files),
            )
        except (OSError, UnsupportedStackError, KeyError, ValueError) as e:
            self.logger.log_generation_stage(stage, "failed", error=str(e))
            raise GenerationError(f"Failed to generate {stage}: {e}", partial_path=project_path) from e

        warnings: list[str] = []
        vcs_initialized = False
        if self.init_vcs:
            stage_start = time.perf_counter()
            try:
                self.vcs.init_and_commit(project_path, f"Initial commit: {names.name} scaffold")
                vcs_initialized = True
                self.logger.log_generation_stage(
                    "vcs", "completed", duration_ms=(time.perf_counter() - stage_start) * 1000
                )
            except VCSError as e:
                warnings.append(f"Git repository was not initialized: {e}")
                self.logger.warning("VCS initialization failed", context={"error": str(e)})

        project = GeneratedProject(
            name=names.name,
            description=description,
            stack=stack,
            architecture=architecture,
            output_path=project_path,
            metadata=ProjectMetadata(license=spec.license),
            files=sorted(files),
            vcs_initialized=vcs_initialized,
            warnings=warnings,
        )

        self.logger.log_generation_stage(
            "project",
            "completed",
            duration_ms=(time.perf_counter() - start) * 1000,
            path=str(project_path),
        )
        return project

    def _create_fresh_directory(self, name: str) -> Path:
        """Create ``<root>/<name>``, or ``<name>-2``, ``<name>-3``, ... if taken."""
        for attempt in range(1, MAX_DIRECTORY_ATTEMPTS + 1):
            candidate = self.output_root / (name if attempt == 1 else f"{name}-{attempt}")
            try:
                candidate.mkdir(exist_ok=False)
            except FileExistsError:
                continue
            return candidate
        raise FileExistsError(f"No free directory name for {name} under {self.output_root}")

    @staticmethod
    def _write(root: Path, relative: str, content: str) -> None:
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def _template_safe(text: str) -> str:
    """Flatten text so it can sit inside a quoted manifest string."""
    return " ".join(text.split()).replace("\\", "/").replace('"', "'")
