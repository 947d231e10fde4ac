"""Shared fixtures for advisory engine tests.

The completion service is never called: advisor tests use FakeCompletionClient
and completion client tests monkeypatch `acompletion`.
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Add the repository root so tests can import ymca_advisory without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from ymca_advisory.llm.completion_client import CompletionResult  # noqa: E402
from ymca_advisory.models.analysis import OrganizationContext  # noqa: E402
from ymca_advisory.models.survey import Submission  # noqa: E402
from ymca_advisory.scorers.performance_aggregator import score_submission  # noqa: E402
from ymca_advisory.scorers.rubric_registry import clear_cache, load_rubric  # noqa: E402

WELL_FORMED_RESPONSE = """Executive Summary:
The association is financially stable but staff turnover is slowing program growth.

Key Insights:
- Leadership turnover in aquatics has disrupted program delivery
- Training budgets are below peer associations
- Liquidity covers four months of expenses

Recommended Actions:
Immediate:
- Conduct stay interviews with aquatics staff
- Review the training calendar
Short-term:
- Launch a supervisor development cohort
Long-term:
- Build a leadership pipeline for branch directors

Success Metrics:
- Full-time staff retention above 80%
- Training hours per employee

Special Considerations:
- Seasonal staff need separate retention tactics
"""


class FakeCompletionClient:
    """Stands in for CompletionClient; replies from a queue or a fixed result."""

    provider_name = "fake"

    def __init__(self, result=None, error=None, delay=0.0):
        self.result = result if result is not None else CompletionResult(
            success=True, content=WELL_FORMED_RESPONSE, usage={"total_tokens": 100}, model="fake-model"
        )
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate_analysis(self, prompt, context=None, cancel_token=None):
        self.calls.append({"prompt": prompt, "context": context})
        if self.delay:
            if cancel_token is not None:
                await cancel_token.run(asyncio.sleep(self.delay))
            else:
                await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def fresh_rubric_cache():
    """Each test starts with an empty rubric cache."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def rubric():
    return load_rubric()


@pytest.fixture
def all_yes_responses(rubric):
    """Every rubric question answered Yes."""
    return {code: "Yes" for code in rubric.questions()}


def make_context(responses, organization_id="Y001", name="Downtown YMCA", period="2024-Q4"):
    submission = Submission(organization_id=organization_id, responses=responses, period=period)
    return OrganizationContext(
        organization_id=organization_id,
        snapshot=score_submission(submission),
        organization_name=name,
        period=period,
    )


@pytest.fixture
def low_context():
    """Organization with no qualifying answers (0%)."""
    return make_context({})


@pytest.fixture
def high_context(all_yes_responses):
    """Organization answering Yes everywhere (100%)."""
    return make_context(all_yes_responses)
