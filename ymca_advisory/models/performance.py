"""Scoring records: rubric definitions, metric scores and the performance snapshot."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from ..constants import (
    DESIGNATION_INDEPENDENT_IMPROVEMENT,
    DESIGNATION_YUSA_SUPPORT,
    HIGH_TIER_MIN_PERCENT,
    MODERATE_TIER_MIN_PERCENT,
)


class MetricCategory(str, Enum):
    OPERATIONAL = "operational"
    FINANCIAL = "financial"


class PerformanceTier(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class RuleAccess(str, Enum):
    """Whether a question is only shown to restricted-access respondents."""

    RESTRICTED = "restricted"
    UNRESTRICTED = "unrestricted"


DESIGNATION_BY_TIER = {
    PerformanceTier.LOW: DESIGNATION_YUSA_SUPPORT,
    PerformanceTier.MODERATE: DESIGNATION_INDEPENDENT_IMPROVEMENT,
    PerformanceTier.HIGH: DESIGNATION_INDEPENDENT_IMPROVEMENT,
}


@dataclass(frozen=True)
class TierThresholds:
    """Lower bounds (inclusive, in percent) of the moderate and high tiers.

    This is the only place a percentage becomes a tier. Support designation
    is derived from the tier, so both always move together.
    """

    moderate_min: float = MODERATE_TIER_MIN_PERCENT
    high_min: float = HIGH_TIER_MIN_PERCENT

    def __post_init__(self):
        if not 0 <= self.moderate_min <= self.high_min <= 100:
            raise ValueError(f"Invalid tier thresholds: moderate={self.moderate_min}, high={self.high_min}")

    def classify(self, percentage: float) -> PerformanceTier:
        if percentage >= self.high_min:
            return PerformanceTier.HIGH
        if percentage >= self.moderate_min:
            return PerformanceTier.MODERATE
        return PerformanceTier.LOW

    def designation(self, percentage: float) -> str:
        return DESIGNATION_BY_TIER[self.classify(percentage)]


CANONICAL_THRESHOLDS = TierThresholds()


def _normalize_answer(answer: Any) -> Optional[str]:
    if answer is None:
        return None
    if isinstance(answer, bool):
        return "yes" if answer else "no"
    text = str(answer).strip().casefold()
    return text or None


@dataclass(frozen=True)
class QualifyingRule:
    """Awards `points` when `question` was answered with one of `answers`."""

    question: str
    points: float
    answers: tuple[str, ...] = ("Yes",)
    access: RuleAccess = RuleAccess.UNRESTRICTED

    def is_satisfied(self, responses: Mapping[str, Any]) -> bool:
        answer = _normalize_answer(responses.get(self.question))
        if answer is None:
            return False
        return answer in {a.strip().casefold() for a in self.answers}


@dataclass(frozen=True)
class MetricDefinition:
    """Static rubric entry for one metric."""

    id: str
    name: str
    category: MetricCategory
    max_points: float
    rules: tuple[QualifyingRule, ...] = ()
    description: str = ""
    thresholds: TierThresholds = CANONICAL_THRESHOLDS

    @property
    def questions(self) -> list[str]:
        return [rule.question for rule in self.rules]


@dataclass(frozen=True)
class MetricScore:
    metric_id: str
    points: float
    max_points: float
    tier: PerformanceTier

    @property
    def percentage(self) -> float:
        return self.points / self.max_points * 100 if self.max_points else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "metricId": self.metric_id,
            "points": self.points,
            "maxPoints": self.max_points,
            "tier": self.tier.value,
        }


@dataclass(frozen=True)
class PerformanceSnapshot:
    """Aggregated score for one organization.

    totalPoints is always the sum of metric points and percentage is always
    totalPoints / maxPoints * 100. Tier and designation are derived from the
    percentage through one threshold table.
    """

    organization_id: str
    category_totals: Mapping[str, float]
    total_points: float
    max_points: float
    percentage: float
    performance_tier: PerformanceTier
    support_designation: str
    metric_scores: tuple[MetricScore, ...] = field(default_factory=tuple)

    def metric(self, metric_id: str) -> Optional[MetricScore]:
        for score in self.metric_scores:
            if score.metric_id == metric_id:
                return score
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "organizationId": self.organization_id,
            "categoryTotals": dict(self.category_totals),
            "totalPoints": self.total_points,
            "maxPoints": self.max_points,
            "percentage": self.percentage,
            "performanceTier": self.performance_tier.value,
            "supportDesignation": self.support_designation,
            "metricScores": [score.to_dict() for score in self.metric_scores],
        }
