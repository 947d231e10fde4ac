"""
Completion client for the hosted text-completion service.

Wraps a single LiteLLM `acompletion` call (Azure OpenAI deployment by
default). The client fails closed: transport errors, timeouts, non-success
statuses and malformed bodies all come back as a failure CompletionResult.
It never retries; a failed call simply sends the advisor to fallback rules.

Usage:
    from ymca_advisory.llm.completion_client import CompletionClient, CompletionPrompt

    client = CompletionClient(model="azure/gpt-4o", api_base=..., api_key=...)
    result = await client.generate_analysis(CompletionPrompt(system="...", user="..."))
    if result.success:
        print(result.content)
"""

import asyncio
import hashlib
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import litellm
from litellm import acompletion
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..config import AdvisorySettings
from ..constants import COMPLETION_TIMEOUT_SECONDS, DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from ..errors import AnalysisCancelled, ConfigurationError
from ..utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

litellm.suppress_debug_info = True
litellm.drop_params = True


# =============================================================================
# WIRE CONTRACT
# =============================================================================


class CompletionPrompt(BaseModel):
    """The `{system, user}` pair sent to the completion service."""

    system: str = Field(min_length=1)
    user: str = Field(min_length=1)

    @field_validator("system", "user")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt text must not be blank")
        return value


class CompletionRequest(BaseModel):
    """Request body: `{prompt: {system, user}, context}`."""

    prompt: CompletionPrompt
    context: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class CompletionResult:
    """Either `{success, content, usage, model}` or `{success: False, error, status}`."""

    success: bool
    content: str = ""
    usage: dict[str, int] = field(default_factory=dict)
    model: str = ""
    error: Optional[str] = None
    status: Optional[int] = None

    @classmethod
    def failure(cls, error: str, status: Optional[int] = None) -> "CompletionResult":
        return cls(success=False, error=error, status=status)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "content": self.content, "usage": dict(self.usage), "model": self.model}
        return {"success": False, "error": self.error, "status": self.status}


# =============================================================================
# CLIENT
# =============================================================================


class CompletionClient:
    """
    One-shot async completion client.

    Every call to `generate_analysis` makes exactly one network request,
    bounded by `timeout` seconds. A CancellationToken, when given, aborts
    the request and raises AnalysisCancelled.
    """

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: float = COMPLETION_TIMEOUT_SECONDS,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        if not model:
            raise ConfigurationError("CompletionClient requires a model")
        self.model = model
        self.api_key = api_key
        self.api_base = api_base
        self.api_version = api_version
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        logger.debug(f"Completion client initialized: {self.model}")

    @property
    def provider_name(self) -> str:
        return self.model.split("/", 1)[0] if "/" in self.model else "openai"

    def _compute_prompt_hash(self, prompt: CompletionPrompt) -> str:
        return hashlib.sha256(f"{prompt.system}|||{prompt.user}".encode()).hexdigest()[:16]

    def _build_kwargs(self, request: CompletionRequest) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.prompt.system},
                {"role": "user", "content": request.prompt.user},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "timeout": self.timeout,
            "num_retries": 0,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if self.api_version:
            kwargs["api_version"] = self.api_version
        if request.context:
            kwargs["metadata"] = {"context": request.context}
        return kwargs

    async def generate_analysis(
        self,
        prompt: "CompletionPrompt | dict[str, str]",
        context: Optional[dict[str, Any]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CompletionResult:
        """Send one prompt and return the completion or a failure.

        Raises:
            AnalysisCancelled: `cancel_token` fired before the response arrived
        """
        try:
            request = CompletionRequest(prompt=prompt, context=context or {})
        except ValidationError as e:
            return CompletionResult.failure(f"Invalid completion request: {e.errors()[0]['msg']}", status=400)

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        prompt_hash = self._compute_prompt_hash(request.prompt)
        call = acompletion(**self._build_kwargs(request))
        bounded = asyncio.wait_for(call, timeout=self.timeout)

        try:
            if cancel_token is not None:
                response = await cancel_token.run(bounded)
            else:
                response = await bounded
        except AnalysisCancelled:
            logger.info(f"Completion request {prompt_hash} cancelled")
            raise
        except asyncio.TimeoutError:
            logger.warning(f"Completion request {prompt_hash} timed out after {self.timeout}s")
            return CompletionResult.failure(f"Request timed out after {self.timeout}s", status=408)
        except Exception as e:
            status = getattr(e, "status_code", None)
            logger.warning(f"Completion request {prompt_hash} failed ({type(e).__name__}): {e}")
            return CompletionResult.failure(str(e) or type(e).__name__, status=status)

        return self._parse_response(response, prompt_hash)

    def _parse_response(self, response: Any, prompt_hash: str) -> CompletionResult:
        choices = getattr(response, "choices", None)
        if not choices:
            logger.warning(f"Completion request {prompt_hash} returned no choices")
            return CompletionResult.failure("Invalid response format: no choices", status=502)

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            logger.warning(f"Completion request {prompt_hash} returned empty content")
            return CompletionResult.failure("Invalid response format: empty content", status=502)

        usage: dict[str, int] = {}
        raw_usage = getattr(response, "usage", None)
        if raw_usage is not None:
            for key in ("prompt_tokens", "completion_tokens", "total_tokens"):
                usage[key] = getattr(raw_usage, key, 0) or 0

        model = getattr(response, "model", None) or self.model
        logger.debug(f"Completion request {prompt_hash} succeeded: {usage.get('total_tokens', 0)} tokens")
        return CompletionResult(success=True, content=content, usage=usage, model=model)


def build_completion_client(settings: AdvisorySettings) -> Optional[CompletionClient]:
    """Create the client described by `settings`.

    Returns:
        None when AI advisors are disabled (every advisor uses fallback rules)

    Raises:
        ConfigurationError: AI advisors are enabled but credentials are missing
    """
    if not settings.enable_ai_advisors:
        logger.info("AI advisors disabled, using rule-based fallback analysis")
        return None
    settings.validate()
    return CompletionClient(
        model=settings.litellm_model,
        api_key=settings.azure_api_key,
        api_base=settings.azure_endpoint,
        api_version=settings.azure_api_version if settings.uses_azure else None,
        timeout=settings.request_timeout_seconds,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )
