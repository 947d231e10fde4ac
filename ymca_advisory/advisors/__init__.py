"""Specialized advisors, their registry and the manager that runs them."""

from .advisor import Advisor
from .manager import AdvisorManager
from .profiles import ADVISOR_CONFIGS, AdvisorConfig, AdvisorKind
from .registry import AdvisorRegistry, build_default_registry

__all__ = [
    "ADVISOR_CONFIGS",
    "Advisor",
    "AdvisorConfig",
    "AdvisorKind",
    "AdvisorManager",
    "AdvisorRegistry",
    "build_default_registry",
]
