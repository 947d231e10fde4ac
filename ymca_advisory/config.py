"""
Central configuration for the advisory engine.

Values are read from the environment (a local .env file is loaded first):
  - ENABLE_AI_ADVISORS (default: true). When false, every advisor uses fallback rules
  - AZURE_OPENAI_ENDPOINT, AZURE_OPENAI_API_KEY, AZURE_OPENAI_DEPLOYMENT
  - AZURE_OPENAI_API_VERSION (default: 2024-02-15-preview)
  - ADVISOR_MODEL: LiteLLM model string used when no Azure deployment is set
  - MAX_TOKENS (default: 2000), TEMPERATURE (default: 0.3)
  - AI_REQUEST_TIMEOUT_SECONDS (default: 60)
  - ENABLE_AI_CACHING (default: true), ANALYSIS_CACHE_TTL_SECONDS (default: 300)
  - AI_LOG_LEVEL (default: INFO)
  - METRIC_RUBRIC_PATH: optional override for the bundled metric rubric
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .constants import (
    CACHE_TTL_SECONDS,
    COMPLETION_TIMEOUT_SECONDS,
    DEFAULT_API_VERSION,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
)
from .errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_number(name: str, default: float, cast=float):
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return cast(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be numeric, got {value!r}") from e


@dataclass(frozen=True)
class AdvisorySettings:
    """Resolved runtime settings for scoring, advisors and caching."""

    enable_ai_advisors: bool = True
    azure_endpoint: Optional[str] = None
    azure_api_key: Optional[str] = None
    azure_deployment: Optional[str] = None
    azure_api_version: str = DEFAULT_API_VERSION
    advisor_model: Optional[str] = None
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    request_timeout_seconds: float = COMPLETION_TIMEOUT_SECONDS
    enable_caching: bool = True
    cache_ttl_seconds: float = CACHE_TTL_SECONDS
    log_level: str = "INFO"
    rubric_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "AdvisorySettings":
        rubric_path = os.environ.get("METRIC_RUBRIC_PATH")
        return cls(
            enable_ai_advisors=_env_bool("ENABLE_AI_ADVISORS", True),
            azure_endpoint=os.environ.get("AZURE_OPENAI_ENDPOINT") or None,
            azure_api_key=os.environ.get("AZURE_OPENAI_API_KEY") or None,
            # Older deployments used the _NAME suffix
            azure_deployment=(
                os.environ.get("AZURE_OPENAI_DEPLOYMENT") or os.environ.get("AZURE_OPENAI_DEPLOYMENT_NAME") or None
            ),
            azure_api_version=os.environ.get("AZURE_OPENAI_API_VERSION") or DEFAULT_API_VERSION,
            advisor_model=os.environ.get("ADVISOR_MODEL") or None,
            max_tokens=_env_number("MAX_TOKENS", DEFAULT_MAX_TOKENS, int),
            temperature=_env_number("TEMPERATURE", DEFAULT_TEMPERATURE),
            request_timeout_seconds=_env_number("AI_REQUEST_TIMEOUT_SECONDS", COMPLETION_TIMEOUT_SECONDS),
            enable_caching=_env_bool("ENABLE_AI_CACHING", True),
            cache_ttl_seconds=_env_number("ANALYSIS_CACHE_TTL_SECONDS", CACHE_TTL_SECONDS),
            log_level=(os.environ.get("AI_LOG_LEVEL") or "INFO").upper(),
            rubric_path=Path(rubric_path).expanduser() if rubric_path else None,
        )

    @property
    def uses_azure(self) -> bool:
        return bool(self.azure_endpoint or self.azure_deployment)

    @property
    def litellm_model(self) -> Optional[str]:
        """Model string passed to LiteLLM, or None when nothing is configured."""
        if self.uses_azure:
            return f"azure/{self.azure_deployment}" if self.azure_deployment else None
        return self.advisor_model

    def missing_credentials(self) -> list[str]:
        """Names of environment variables required for AI advisors but unset."""
        if not self.uses_azure:
            return [] if self.advisor_model else ["AZURE_OPENAI_ENDPOINT or ADVISOR_MODEL"]
        missing = []
        if not self.azure_endpoint:
            missing.append("AZURE_OPENAI_ENDPOINT")
        if not self.azure_api_key:
            missing.append("AZURE_OPENAI_API_KEY")
        if not self.azure_deployment:
            missing.append("AZURE_OPENAI_DEPLOYMENT")
        return missing

    def validate(self) -> None:
        """Fail fast on settings that cannot work.

        Raises:
            ConfigurationError: AI advisors enabled without credentials, or
                out-of-range numeric values
        """
        if self.enable_ai_advisors:
            missing = self.missing_credentials()
            if missing:
                raise ConfigurationError(
                    f"AI advisors enabled but not configured, missing: {', '.join(missing)}. "
                    "Set ENABLE_AI_ADVISORS=false to run on fallback rules only."
                )
        if self.request_timeout_seconds <= 0:
            raise ConfigurationError("AI_REQUEST_TIMEOUT_SECONDS must be positive")
        if self.cache_ttl_seconds <= 0:
            raise ConfigurationError("ANALYSIS_CACHE_TTL_SECONDS must be positive")
        if self.max_tokens <= 0:
            raise ConfigurationError("MAX_TOKENS must be positive")


def load_settings(env_file: Optional[str] = None) -> AdvisorySettings:
    """Load .env (if present) and build settings from the environment."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()
    return AdvisorySettings.from_env()
