"""Configuration management for ProjectPilot."""

import json
from pathlib import Path
from typing import Any, Optional

import yaml

USER_CONFIG_PATH = Path.home() / ".projectpilot" / "config.yaml"
PROJECT_CONFIG_NAME = ".projectpilot.yaml"


class Config:
    """Configuration manager with hierarchy: CLI args > project config > user config > defaults."""

    def __init__(self):
        """Initialize configuration with default values."""
        self.output_dir: Optional[str] = None
        self.data_dir: Optional[str] = None
        self.privacy_mode: bool = True
        self.ollama_base_url: str = "http://localhost:11434"
        self.ollama_model: str = "llama3.2"
        self.use_advisor: bool = False
        self.log_level: str = "WARNING"
        self.json_logging: bool = False
        self.log_file: Optional[str] = None
        self.encrypt_sessions: bool = True
        self.git_author_name: str = "ProjectPilot"
        self.git_author_email: str = "projectpilot@localhost"

    @classmethod
    def load(
        cls,
        cli_args: Optional[dict[str, Any]] = None,
        user_config_path: Optional[Path] = None,
        project_dir: Optional[Path] = None,
    ) -> "Config":
        """
        Load configuration from hierarchy: CLI args > project config > user config > defaults.

        Args:
            cli_args: Dictionary of CLI arguments to override config
            user_config_path: Override for ~/.projectpilot/config.yaml
            project_dir: Directory to look for .projectpilot.yaml in (default: cwd)

        Returns:
            Config instance with loaded values
        """
        config = cls()

        user_path = user_config_path or USER_CONFIG_PATH
        if user_path.exists():
            config._load_file(user_path)

        project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
        if project_path.exists():
            config._load_file(project_path)

        if cli_args:
            for key, value in cli_args.items():
                if value is not None and hasattr(config, key):
                    setattr(config, key, value)

        return config

    def _load_file(self, config_path: Path) -> None:
        """Load configuration from a YAML or JSON file."""
        try:
            content = config_path.read_text(encoding="utf-8")
            if config_path.suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(content)
            elif config_path.suffix == ".json":
                data = json.loads(content)
            else:
                return
        except (OSError, yaml.YAMLError, json.JSONDecodeError):
            # Unreadable config files fall back to defaults
            return

        if not isinstance(data, dict):
            return

        for key, value in data.items():
            if hasattr(self, key) and value is not None:
                setattr(self, key, value)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "output_dir": self.output_dir,
            "data_dir": self.data_dir,
            "privacy_mode": self.privacy_mode,
            "ollama_base_url": self.ollama_base_url,
            "ollama_model": self.ollama_model,
            "use_advisor": self.use_advisor,
            "log_level": self.log_level,
            "json_logging": self.json_logging,
            "log_file": self.log_file,
            "encrypt_sessions": self.encrypt_sessions,
            "git_author_name": self.git_author_name,
            "git_author_email": self.git_author_email,
        }

    def save(self, path: Path, format: str = "yaml") -> None:
        """
        Save configuration to file.

        Args:
            path: Path to save config file
            format: Format to save as ('yaml' or 'json')
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {k: v for k, v in self.to_dict().items() if v is not None}

        if format == "yaml":
            content = yaml.dump(data, default_flow_style=False, sort_keys=False)
        else:
            content = json.dumps(data, indent=2)

        path.write_text(content, encoding="utf-8")

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        if self.data_dir:
            dir_path = Path(self.data_dir).expanduser()
        else:
            dir_path = Path.home() / ".projectpilot"
        dir_path.mkdir(parents=True, exist_ok=True)
        return dir_path

    def get_output_dir(self) -> Path:
        """Get the root directory generated projects are written under."""
        if self.output_dir:
            dir_path = Path(self.output_dir).expanduser()
        else:
            dir_path = Path.home() / "ProjectPilot" / "Projects"
        dir_path.mkdir(parents=True, exist_ok=True)
        return dir_path

    def get_sessions_dir(self) -> Path:
        """Get the session transcript directory, creating it if needed."""
        dir_path = self.get_data_dir() / "sessions"
        dir_path.mkdir(parents=True, exist_ok=True)
        return dir_path

    def get_key_file(self) -> Path:
        """Location of the encryption key file."""
        return self.get_data_dir() / "keys.json"
