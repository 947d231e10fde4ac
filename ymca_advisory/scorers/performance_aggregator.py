"""Performance Aggregator: metric scores to a PerformanceSnapshot.

Tier and support designation both come from one TierThresholds table:

    percentage < 40   -> low       -> "Y-USA Support"
    40 <= pct < 70    -> moderate  -> "Independent Improvement"
    percentage >= 70  -> high      -> "Independent Improvement"
"""

import logging
from types import MappingProxyType
from typing import Iterable, Optional

from ..models.performance import (
    CANONICAL_THRESHOLDS,
    MetricCategory,
    MetricScore,
    PerformanceSnapshot,
    PerformanceTier,
    TierThresholds,
)
from ..models.survey import QuestionFilter, Submission
from .rubric_registry import MetricRubric, load_rubric
from .score_calculator import compute_metric_scores

logger = logging.getLogger(__name__)


def lookup_tier(percentage: float, thresholds: TierThresholds = CANONICAL_THRESHOLDS) -> PerformanceTier:
    return thresholds.classify(percentage)


def lookup_designation(percentage: float, thresholds: TierThresholds = CANONICAL_THRESHOLDS) -> str:
    return thresholds.designation(percentage)


def aggregate(
    metric_scores: Iterable[MetricScore],
    rubric: Optional[MetricRubric] = None,
    organization_id: str = "",
) -> PerformanceSnapshot:
    """Roll metric scores up into category totals, percentage, tier and designation.

    Rubric metrics missing from `metric_scores` count as zero. Scores for
    metric ids the rubric does not know are ignored.
    """
    rubric = rubric or load_rubric()
    by_id: dict[str, MetricScore] = {}
    for score in metric_scores:
        definition = rubric.get(score.metric_id)
        if definition is None:
            logger.debug(f"Ignoring score for unknown metric {score.metric_id}")
            continue
        # Clamp again so hand-built scores cannot break the total invariant
        points = max(0, min(score.points, definition.max_points))
        if points != score.points:
            tier = definition.thresholds.classify(points / definition.max_points * 100)
            score = MetricScore(score.metric_id, points, definition.max_points, tier)
        by_id[score.metric_id] = score

    ordered: list[MetricScore] = []
    category_totals = {category.value: 0 for category in MetricCategory}
    for definition in rubric.metrics:
        score = by_id.get(definition.id)
        if score is None:
            score = MetricScore(definition.id, 0, definition.max_points, definition.thresholds.classify(0))
        ordered.append(score)
        category_totals[definition.category.value] += score.points

    total_points = sum(score.points for score in ordered)
    max_points = rubric.max_points
    percentage = total_points / max_points * 100 if max_points else 0.0

    return PerformanceSnapshot(
        organization_id=organization_id,
        category_totals=MappingProxyType(category_totals),
        total_points=total_points,
        max_points=max_points,
        percentage=percentage,
        performance_tier=lookup_tier(percentage, rubric.thresholds),
        support_designation=lookup_designation(percentage, rubric.thresholds),
        metric_scores=tuple(ordered),
    )


def score_submission(
    submission: Submission,
    rubric: Optional[MetricRubric] = None,
    question_filter: QuestionFilter = QuestionFilter.ALL,
) -> PerformanceSnapshot:
    """Score a submission end to end."""
    rubric = rubric or load_rubric()
    scores = compute_metric_scores(submission.responses, rubric, question_filter)
    snapshot = aggregate(scores, rubric, organization_id=submission.organization_id)
    logger.debug(
        f"Scored {submission.organization_id}: {snapshot.total_points}/{snapshot.max_points} "
        f"({snapshot.percentage:.1f}%, {snapshot.performance_tier.value})"
    )
    return snapshot
