"""CLI interface for ProjectPilot."""

import sys
from typing import Optional

import click

from projectpilot.cli.formatters import OutputFormatter
from projectpilot.core.config import USER_CONFIG_PATH, Config
from projectpilot.core.engine import CoPilotEngine
from projectpilot.core.errors import ProjectPilotError
from projectpilot.core.privacy import PrivacyManager
from projectpilot.core.services import Services
from projectpilot.core.session_store import SessionStore
from projectpilot.schemas.session import Role

EXIT_WORDS = ("exit", "quit")
NEW_SESSION_WORDS = ("new", "restart")


def _load_config(cli_args: Optional[dict] = None) -> Config:
    return Config.load(cli_args=cli_args, user_config_path=USER_CONFIG_PATH)


def _load_user_config() -> Config:
    """Only the user config file, so saving it never copies project settings."""
    config = Config()
    if USER_CONFIG_PATH.exists():
        config._load_file(USER_CONFIG_PATH)
    return config


@click.group()
@click.version_option(package_name="projectpilot")
def main():
    """
    ProjectPilot - Turn a project idea into a runnable scaffold.

    Describe what you want to build in plain language. The co-pilot asks a
    few questions, proposes a stack and architecture, and writes a project
    skeleton with a README, LICENSE, .gitignore and a git repository.

    Everything runs locally. Privacy Mode is on by default and blocks all
    outbound network requests.
    """
    pass


@main.command()
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory new projects are created under (default: ~/ProjectPilot/Projects)",
)
@click.option(
    "--privacy/--no-privacy",
    default=None,
    help="Override Privacy Mode for this session",
)
@click.option(
    "--advisor/--no-advisor",
    default=None,
    help="Ask a local Ollama model to review each proposal (needs Privacy Mode off)",
)
@click.option(
    "--model",
    "-m",
    default=None,
    help="Ollama model for the advisor (default: llama3.2)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Log level (default: WARNING)",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Emit JSON-formatted logs",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append JSON-lines logs to this file",
)
@click.option(
    "--save/--no-save",
    default=True,
    help="Save the session transcript (default: enabled)",
)
@click.option(
    "--color/--no-color",
    default=None,
    help="Force colored output (default: auto-detect)",
)
def chat(
    output_dir: Optional[str],
    privacy: Optional[bool],
    advisor: Optional[bool],
    model: Optional[str],
    log_level: Optional[str],
    json_logs: Optional[bool],
    log_file: Optional[str],
    save: bool,
    color: Optional[bool],
):
    """
    Start an interactive Co-Pilot session.

    Type 'exit' or 'quit' to leave, 'new' to start over.
    """
    config = _load_config(
        {
            "output_dir": output_dir,
            "privacy_mode": privacy,
            "use_advisor": advisor,
            "ollama_model": model,
            "log_level": log_level.upper() if log_level else None,
            "json_logging": json_logs,
            "log_file": log_file,
        }
    )
    formatter = OutputFormatter(force_color=bool(color))

    services = Services.from_config(config)
    engine = CoPilotEngine.from_services(services)
    store: Optional[SessionStore] = services.session_store() if save else None

    if config.use_advisor and services.privacy.enabled:
        formatter.print_warning("The model advisor is enabled but Privacy Mode will block it.")

    session = engine.start_new_session()
    for turn in session.turns:
        formatter.print_turn(turn)

    while True:
        try:
            text = click.prompt(click.style("You", fg="green", bold=True), prompt_suffix="> ")
        except click.Abort:
            click.echo()
            break

        command = text.strip().lower()
        if not command:
            continue
        if command in EXIT_WORDS:
            break
        if command in NEW_SESSION_WORDS:
            session = engine.start_new_session()
            formatter.print_turn(session.turns[-1])
            continue

        seen = len(engine.session.turns)
        phase = engine.session.phase
        with formatter.status("Working..."):
            engine.process_user_input(text)

        for turn in engine.session.turns[seen:]:
            if turn.role == Role.ASSISTANT:
                formatter.print_turn(turn)

        if engine.session.phase != phase:
            formatter.print_phase(engine.session)

        if store is not None:
            store.save(engine.session)

        if engine.session.phase.is_terminal:
            formatter.print_info("This session is finished. Type 'new' to start another or 'exit' to leave.")
        else:
            formatter.print_suggestions(engine.suggestions())

    if store is not None and len(engine.session.turns) > 1:
        path = store.save(engine.session)
        formatter.print_success(f"Session saved to {path}")


@main.group()
def privacy():
    """Privacy Mode commands."""
    pass


@privacy.command("status")
def privacy_status():
    """Show whether Privacy Mode is on."""
    config = _load_config()
    manager = PrivacyManager(enabled=config.privacy_mode)
    OutputFormatter().print_privacy_status(manager.status())


@privacy.command("on")
def privacy_on():
    """Turn Privacy Mode on (blocks all network access)."""
    config = _load_user_config()
    config.privacy_mode = True
    config.save(USER_CONFIG_PATH)
    OutputFormatter().print_success("Privacy Mode enabled")


@privacy.command("off")
def privacy_off():
    """Turn Privacy Mode off (allows the model advisor to reach Ollama)."""
    config = _load_user_config()
    config.privacy_mode = False
    config.save(USER_CONFIG_PATH)
    OutputFormatter().print_warning("Privacy Mode disabled; network requests are now allowed")


@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command("show")
def config_show():
    """Show the effective configuration."""
    OutputFormatter().print_config(_load_config().to_dict())


@config.command("init")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file")
def config_init(force: bool):
    """Write a default user configuration file."""
    formatter = OutputFormatter()
    if USER_CONFIG_PATH.exists() and not force:
        formatter.print_error(f"{USER_CONFIG_PATH} already exists (use --force to overwrite)")
        sys.exit(1)

    Config().save(USER_CONFIG_PATH)
    formatter.print_success(f"Configuration written to: {USER_CONFIG_PATH}")


@main.group()
def sessions():
    """Saved session commands."""
    pass


@sessions.command("list")
def sessions_list():
    """List saved sessions, newest first."""
    services = Services.from_config(_load_config())
    formatter = OutputFormatter()
    try:
        saved = services.session_store().list_sessions()
    except ProjectPilotError as e:
        formatter.print_error(str(e))
        sys.exit(1)
    formatter.print_sessions(saved)


@sessions.command("show")
@click.argument("session_id")
def sessions_show(session_id: str):
    """Print the transcript of a saved session."""
    services = Services.from_config(_load_config())
    formatter = OutputFormatter()
    try:
        session = services.session_store().load(session_id)
    except FileNotFoundError:
        formatter.print_error(f"No saved session with id {session_id}")
        sys.exit(1)
    except ProjectPilotError as e:
        formatter.print_error(f"Could not load session {session_id}: {e}")
        sys.exit(1)
    formatter.print_transcript(session)


if __name__ == "__main__":
    main()
