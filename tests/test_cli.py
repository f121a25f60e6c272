"""Tests for the command-line interface."""

import io
import json

import pytest
import yaml
from click.testing import CliRunner
from rich.console import Console

from projectpilot.cli import main as cli_main
from projectpilot.cli.formatters import OutputFormatter
from projectpilot.cli.main import main
from projectpilot.schemas.session import Role, Session, Turn
from projectpilot.schemas.specification import ProjectSpecification


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Isolated home directory, user config and working directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(cli_main, "USER_CONFIG_PATH", home / ".projectpilot" / "config.yaml")
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def runner():
    return CliRunner()


class TestPrivacyCommands:
    """privacy status/on/off."""

    def test_status_default_on(self, runner, home):
        result = runner.invoke(main, ["privacy", "status"])
        assert result.exit_code == 0
        assert "Privacy Mode: ON" in result.output

    def test_off_then_on(self, runner, home):
        config_path = cli_main.USER_CONFIG_PATH

        result = runner.invoke(main, ["privacy", "off"])
        assert result.exit_code == 0
        assert yaml.safe_load(config_path.read_text())["privacy_mode"] is False
        assert "OFF" in runner.invoke(main, ["privacy", "status"]).output

        result = runner.invoke(main, ["privacy", "on"])
        assert result.exit_code == 0
        assert yaml.safe_load(config_path.read_text())["privacy_mode"] is True


class TestConfigCommands:
    """config init/show."""

    def test_init_writes_defaults(self, runner, home):
        result = runner.invoke(main, ["config", "init"])
        assert result.exit_code == 0
        data = yaml.safe_load(cli_main.USER_CONFIG_PATH.read_text())
        assert data["privacy_mode"] is True
        assert data["log_level"] == "WARNING"

    def test_init_refuses_overwrite(self, runner, home):
        runner.invoke(main, ["config", "init"])
        result = runner.invoke(main, ["config", "init"])
        assert result.exit_code == 1

        result = runner.invoke(main, ["config", "init", "--force"])
        assert result.exit_code == 0

    def test_show(self, runner, home):
        result = runner.invoke(main, ["config", "show"])
        assert result.exit_code == 0
        assert "privacy_mode: true" in result.output
        assert "ollama_model: llama3.2" in result.output


class TestChat:
    """Interactive sessions."""

    def test_greets_and_exits(self, runner, home, tmp_path):
        result = runner.invoke(
            main,
            ["chat", "--no-save", "-o", str(tmp_path / "projects")],
            input="a todo list for my mac\nexit\n",
        )
        assert result.exit_code == 0, result.output
        assert "Co-Pilot" in result.output
        assert "Platform(s)" in result.output
        assert "Session saved" not in result.output

    def test_session_saved(self, runner, home, tmp_path):
        result = runner.invoke(
            main,
            ["chat", "-o", str(tmp_path / "projects")],
            input="a todo list for my mac\nquit\n",
        )
        assert result.exit_code == 0, result.output
        assert "Session saved to" in result.output

        files = list((home / ".projectpilot" / "sessions").glob("*.json"))
        assert len(files) == 1
        assert json.loads(files[0].read_text())["format"] == "encrypted"

        listing = runner.invoke(main, ["sessions", "list"])
        assert listing.exit_code == 0
        assert "Saved Sessions" in listing.output

        shown = runner.invoke(main, ["sessions", "show", files[0].stem])
        assert shown.exit_code == 0
        assert "a todo list for my mac" in shown.output

    def test_full_generation(self, runner, home, tmp_path):
        answers = [
            "I want to build a macOS productivity app",
            "macOS, needs a GUI, must work offline, prefer swift, include tests",
            "yes",
            "yes, proceed",
            "exit",
        ]
        result = runner.invoke(
            main,
            ["chat", "--no-save", "-o", str(tmp_path / "projects")],
            input="\n".join(answers) + "\n",
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "projects" / "MacosProductivity" / "Package.swift").is_file()
        assert "This session is finished" in result.output

    def test_end_of_input_leaves_cleanly(self, runner, home, tmp_path):
        result = runner.invoke(main, ["chat", "--no-save", "-o", str(tmp_path / "projects")], input="")
        assert result.exit_code == 0


class TestSessionsCommands:
    def test_list_empty(self, runner, home):
        result = runner.invoke(main, ["sessions", "list"])
        assert result.exit_code == 0
        assert "No saved sessions" in result.output

    def test_show_missing(self, runner, home):
        result = runner.invoke(main, ["sessions", "show", "does-not-exist"])
        assert result.exit_code == 1


class TestBracketedText:
    """User text that looks like console markup is printed as-is."""

    def test_saved_session_with_brackets(self, runner, home, tmp_path):
        result = runner.invoke(
            main,
            ["chat", "-o", str(tmp_path / "projects")],
            input="parse [/b] tags in my docs\nconvert [/link] markdown\nexit\n",
        )
        assert result.exit_code == 0, result.output

        listing = runner.invoke(main, ["sessions", "list"])
        assert listing.exit_code == 0, listing.output

        (saved,) = (home / ".projectpilot" / "sessions").glob("*.json")
        shown = runner.invoke(main, ["sessions", "show", saved.stem])
        assert shown.exit_code == 0, shown.output
        assert "parse [/b] tags in my docs" in shown.output
        assert "convert [/link] markdown" in shown.output

    def test_missing_bracketed_id(self, runner, home):
        result = runner.invoke(main, ["sessions", "show", "[/b]"])
        assert result.exit_code == 1

    def test_user_turn_not_restyled(self):
        console = Console(file=io.StringIO(), width=200, force_terminal=False)
        formatter = OutputFormatter(console=console)
        formatter.print_turn(Turn(role=Role.USER, text="make the title [red]bold[/red]"))
        assert "make the title [red]bold[/red]" in console.file.getvalue()

    def test_table_cells_literal(self):
        console = Console(file=io.StringIO(), width=300, force_terminal=False)
        session = Session(specification=ProjectSpecification(purpose="parse [/b] tags"))
        OutputFormatter(console=console).print_sessions([session])
        assert "parse [/b] tags" in console.file.getvalue()


class TestPhaseOutput:
    def test_phase_change_announced(self, runner, home, tmp_path):
        result = runner.invoke(
            main,
            ["chat", "--no-save", "-o", str(tmp_path / "projects")],
            input="a todo list for my mac\nexit\n",
        )
        assert result.exit_code == 0, result.output
        assert "Phase: Discovery" in result.output
