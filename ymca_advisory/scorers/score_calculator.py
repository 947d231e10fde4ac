"""Score Calculator: raw survey responses to per-metric scores.

Pure and deterministic. Each metric sums the points of its satisfied
qualifying rules and is clamped to [0, max_points]. Missing, blank or
unexpected answers contribute nothing; they are never an error.
"""

from typing import Any, Mapping, Optional

from ..models.performance import MetricDefinition, MetricScore
from ..models.survey import QuestionFilter
from .rubric_registry import MetricRubric, load_rubric, rule_in_scope


def score_metric(
    metric: MetricDefinition,
    responses: Mapping[str, Any],
    question_filter: QuestionFilter = QuestionFilter.ALL,
) -> MetricScore:
    """Score a single metric against one set of responses."""
    raw = sum(
        rule.points for rule in metric.rules if rule_in_scope(rule, question_filter) and rule.is_satisfied(responses)
    )
    points = max(0, min(raw, metric.max_points))
    percentage = points / metric.max_points * 100
    return MetricScore(
        metric_id=metric.id,
        points=points,
        max_points=metric.max_points,
        tier=metric.thresholds.classify(percentage),
    )


def compute_metric_scores(
    responses: Optional[Mapping[str, Any]],
    rubric: Optional[MetricRubric] = None,
    question_filter: QuestionFilter = QuestionFilter.ALL,
) -> list[MetricScore]:
    """Score every rubric metric, in rubric order.

    Args:
        responses: Question code -> answer. None or empty scores zero everywhere
        rubric: Metric catalog (bundled rubric by default)
        question_filter: Restricts scoring to the questions asked under this filter

    Returns:
        One MetricScore per rubric metric
    """
    rubric = rubric or load_rubric()
    responses = responses if isinstance(responses, Mapping) else {}
    question_filter = QuestionFilter.parse(question_filter)
    return [score_metric(metric, responses, question_filter) for metric in rubric.metrics]
