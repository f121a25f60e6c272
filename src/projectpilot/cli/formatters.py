"""Terminal output for the ProjectPilot CLI (rich)."""

import sys
from typing import Any, Optional

import yaml
from rich.console import Console
from rich.markup import escape
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from projectpilot.core.privacy import PrivacyStatus
from projectpilot.schemas.session import Role, Session, Turn


class OutputFormatter:
    """Formats conversation turns, tables and status lines."""

    def __init__(self, force_color: bool = False, console: Optional[Console] = None):
        """Initialize formatter."""
        self.console = console or Console(force_terminal=force_color or None, file=sys.stdout)
        self.err_console = Console(stderr=True, force_terminal=force_color or None)

    def status(self, message: str):
        """Spinner context manager shown while the engine works."""
        return self.console.status(f"[dim]{message}[/dim]", spinner="dots")

    def print_turn(self, turn: Turn) -> None:
        if turn.role == Role.ASSISTANT:
            self.console.print(Panel(Markdown(turn.text), title="Co-Pilot", title_align="left", border_style="cyan"))
        elif turn.role == Role.USER:
            self.console.print(f"[bold green]You:[/bold green] {escape(turn.text)}")
        else:
            self.console.print(f"[dim]{escape(turn.text)}[/dim]")

    def print_phase(self, session: Session) -> None:
        self.console.print(f"[dim]Phase: {session.phase.label}[/dim]")

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def print_error(self, message: str) -> None:
        self.err_console.print(f"[red]✗[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def print_info(self, message: str) -> None:
        self.console.print(f"[blue]ℹ[/blue] {escape(message)}")

    def print_suggestions(self, suggestions: list[str]) -> None:
        for suggestion in suggestions:
            self.console.print(f"[dim]Tip: {escape(suggestion)}[/dim]")

    def print_privacy_status(self, status: PrivacyStatus) -> None:
        state = "[green]ON[/green]" if status.enabled else "[yellow]OFF[/yellow]"
        self.console.print(f"Privacy Mode: {state}")
        if status.enabled:
            self.console.print("[dim]All outbound network requests are blocked, including the local model advisor.[/dim]")
        else:
            self.console.print("[dim]Network requests are allowed (the model advisor may contact Ollama).[/dim]")

    def print_config(self, data: dict[str, Any]) -> None:
        self.console.print(yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip())

    def print_sessions(self, sessions: list[Session]) -> None:
        if not sessions:
            self.print_info("No saved sessions.")
            return

        table = Table(title="Saved Sessions", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Phase")
        table.add_column("Purpose")
        table.add_column("Project")
        table.add_column("Updated", style="green")

        for session in sessions:
            purpose = session.specification.purpose if session.specification else ""
            project = str(session.generated_project.output_path) if session.generated_project else ""
            table.add_row(
                str(session.id),
                session.phase.label,
                Text(purpose),
                Text(project),
                session.updated_at.strftime("%Y-%m-%d %H:%M"),
            )

        self.console.print(table)

    def print_transcript(self, session: Session) -> None:
        self.console.print(f"[bold]Session {session.id}[/bold] ({session.phase.label})")
        for turn in session.turns:
            self.print_turn(turn)
