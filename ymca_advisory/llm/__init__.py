"""Completion service client and advisor response parsing."""

from .completion_client import (
    CompletionClient,
    CompletionPrompt,
    CompletionRequest,
    CompletionResult,
    build_completion_client,
)
from .response_parser import ParsedSections, parse_advisor_response

__all__ = [
    "CompletionClient",
    "CompletionPrompt",
    "CompletionRequest",
    "CompletionResult",
    "ParsedSections",
    "build_completion_client",
    "parse_advisor_response",
]
