"""Privacy mode and the network access gate."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from projectpilot.core.logging import StructuredLogger, get_logger
from projectpilot.schemas.ai_model import AIModel


@dataclass(frozen=True)
class NetworkRequest:
    """A single request for outbound network access."""

    purpose: str
    destination: str
    timestamp: datetime = field(default_factory=datetime.now)
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class PrivacyStatus:
    """Snapshot of the gate for display."""

    enabled: bool
    blocked_count: int
    last_request: Optional[NetworkRequest]


class PrivacyManager:
    """
    Single chokepoint for outbound network access.

    Every collaborator that wants to touch the network calls
    :meth:`request_access` first. While privacy mode is on (the default) the
    answer is always ``False`` and the blocked counter goes up by one.
    """

    def __init__(self, enabled: bool = True, logger: Optional[StructuredLogger] = None):
        self._enabled = enabled
        self.blocked_count = 0
        self.last_request: Optional[NetworkRequest] = None
        self.logger = logger or get_logger()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._set(True)

    def disable(self) -> None:
        self._set(False)

    def toggle(self) -> bool:
        """Flip privacy mode and return the new state."""
        self._set(not self._enabled)
        return self._enabled

    def _set(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        self.logger.info(
            "Privacy mode changed",
            context={"enabled": str(enabled), "timestamp": datetime.now().isoformat()},
        )

    def request_access(self, purpose: str, destination: str) -> bool:
        """
        Ask for permission to reach ``destination``.

        Args:
            purpose: Why the caller needs the network
            destination: URL or host the caller wants to reach

        Returns:
            True if the request may proceed, False if privacy mode blocked it
        """
        request = NetworkRequest(purpose=purpose, destination=destination)
        self.last_request = request

        self.logger.info(
            "Network access requested",
            context={
                "purpose": purpose,
                "destination": destination,
                "privacy_mode": str(self._enabled),
            },
        )

        if self._enabled:
            self.blocked_count += 1
            self.logger.warning(
                "Network request blocked by Privacy Mode",
                context={"purpose": purpose, "destination": destination},
            )
            return False

        return True

    def model_requires_network(self, model: AIModel) -> bool:
        return model.requires_network

    def status(self) -> PrivacyStatus:
        return PrivacyStatus(
            enabled=self._enabled,
            blocked_count=self.blocked_count,
            last_request=self.last_request,
        )
