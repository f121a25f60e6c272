"""Wiring of the collaborators the engine and CLI share."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from projectpilot.core.config import Config
from projectpilot.core.llm_client import OllamaClient
from projectpilot.core.logging import StructuredLogger, configure_logging
from projectpilot.core.privacy import PrivacyManager
from projectpilot.core.session_store import SessionStore
from projectpilot.generator.project_generator import ProjectGenerator
from projectpilot.generator.vcs import GitRepository
from projectpilot.security.encryption import EncryptionManager
from projectpilot.security.key_store import FileKeyStore
from projectpilot.stages.advisor import ArchitectureAdvisor


@dataclass
class Services:
    """Long-lived collaborators, created once per process."""

    config: Config
    logger: StructuredLogger
    privacy: PrivacyManager
    encryption: EncryptionManager

    @classmethod
    def from_config(cls, config: Config) -> "Services":
        logger = configure_logging(
            level=config.log_level,
            json_output=config.json_logging,
            log_file=config.log_file,
        )
        privacy = PrivacyManager(enabled=config.privacy_mode, logger=logger)
        encryption = EncryptionManager(key_store=FileKeyStore(config.get_key_file()), logger=logger)
        return cls(config=config, logger=logger, privacy=privacy, encryption=encryption)

    def session_store(self, directory: Optional[Path] = None) -> SessionStore:
        return SessionStore(
            directory or self.config.get_sessions_dir(),
            encryption=self.encryption if self.config.encrypt_sessions else None,
            logger=self.logger,
        )

    def project_generator(self) -> ProjectGenerator:
        vcs = GitRepository(
            author_name=self.config.git_author_name,
            author_email=self.config.git_author_email,
            logger=self.logger,
        )
        return ProjectGenerator(self.config.get_output_dir(), vcs=vcs, logger=self.logger)

    def advisor(self) -> Optional[ArchitectureAdvisor]:
        if not self.config.use_advisor:
            return None
        client = OllamaClient(
            privacy=self.privacy,
            base_url=self.config.ollama_base_url,
            model=self.config.ollama_model,
            logger=self.logger,
        )
        return ArchitectureAdvisor(client)
