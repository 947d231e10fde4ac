"""Advisor Registry: advisor id to constructor and config.

Usage:
    from ymca_advisory.advisors.registry import build_default_registry

    registry = build_default_registry()
    registry.list()                              # ["financial", "staff-retention", ...]
    advisor = registry.get("financial", client)
"""

import logging
from typing import Callable, Optional

from ..errors import ConfigurationError
from ..llm.completion_client import CompletionClient
from .advisor import Advisor
from .profiles import ADVISOR_CONFIGS, AdvisorConfig, AdvisorKind

logger = logging.getLogger(__name__)

AdvisorConstructor = Callable[[AdvisorConfig, Optional[CompletionClient]], Advisor]


class AdvisorRegistry:
    """Ordered mapping of advisor ids; registration order is analysis order."""

    def __init__(self):
        self._entries: dict[str, tuple[AdvisorConstructor, AdvisorConfig]] = {}

    def register(self, advisor_id: str, constructor: AdvisorConstructor, config: AdvisorConfig) -> None:
        if advisor_id in self._entries:
            raise ConfigurationError(f"Advisor '{advisor_id}' is already registered")
        self._entries[advisor_id] = (constructor, config)
        logger.debug(f"Registered advisor {advisor_id} ({config.display_name})")

    def get(self, advisor_id: str, client: Optional[CompletionClient] = None) -> Advisor:
        """Build the advisor registered under `advisor_id`.

        Raises:
            ConfigurationError: no advisor with that id
        """
        constructor, config = self._lookup(advisor_id)
        return constructor(config, client)

    def config(self, advisor_id: str) -> AdvisorConfig:
        return self._lookup(advisor_id)[1]

    def list(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, advisor_id: object) -> bool:
        return advisor_id in self._entries

    def _lookup(self, advisor_id: str) -> tuple[AdvisorConstructor, AdvisorConfig]:
        try:
            return self._entries[advisor_id]
        except KeyError:
            available = ", ".join(self._entries) or "none"
            raise ConfigurationError(f"Unknown advisor: {advisor_id} (available: {available})") from None


def build_default_registry() -> AdvisorRegistry:
    """Registry with the four built-in advisors."""
    registry = AdvisorRegistry()
    for kind in AdvisorKind:
        config = ADVISOR_CONFIGS[kind]
        registry.register(config.id, Advisor, config)
    return registry
