"""Metric Rubric Registry: the catalog of scored metrics.

Loads metric definitions (category, max points, qualifying rules, tier
thresholds) from `rubrics/metric_rubric.yaml`. Operational and financial
metrics each sum to 40 points, 80 in total.

Usage:
    from ymca_advisory.scorers.rubric_registry import load_rubric

    rubric = load_rubric()
    rubric.max_points                      # 80
    rubric.get("months_of_liquidity")      # MetricDefinition(max_points=12, ...)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from ..models.performance import (
    CANONICAL_THRESHOLDS,
    MetricCategory,
    MetricDefinition,
    QualifyingRule,
    RuleAccess,
    TierThresholds,
)
from ..models.survey import QuestionFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricRubric:
    """Ordered, read-only set of metric definitions."""

    metrics: tuple[MetricDefinition, ...]
    thresholds: TierThresholds = CANONICAL_THRESHOLDS
    version: str = ""

    @property
    def max_points(self) -> float:
        return sum(m.max_points for m in self.metrics)

    def get(self, metric_id: str) -> Optional[MetricDefinition]:
        for metric in self.metrics:
            if metric.id == metric_id:
                return metric
        return None

    def category_max(self, category: MetricCategory) -> float:
        return sum(m.max_points for m in self.metrics if m.category == category)

    def questions(self, question_filter: QuestionFilter = QuestionFilter.ALL) -> list[str]:
        """Distinct question codes in scope for a filter, in rubric order."""
        seen: dict[str, None] = {}
        for metric in self.metrics:
            for rule in metric.rules:
                if rule_in_scope(rule, question_filter):
                    seen.setdefault(rule.question, None)
        return list(seen)


def rule_in_scope(rule: QualifyingRule, question_filter: QuestionFilter) -> bool:
    """Whether a rule's question was asked under the given filter."""
    if question_filter == QuestionFilter.RESTRICTED_ACCESS_ONLY:
        return rule.access == RuleAccess.RESTRICTED
    if question_filter == QuestionFilter.UNRESTRICTED_ACCESS_ONLY:
        return rule.access == RuleAccess.UNRESTRICTED
    return True


# Module-level cache keyed by resolved path
_rubric_cache: dict[Path, MetricRubric] = {}


def _get_default_path() -> Path:
    return Path(__file__).parent.parent / "rubrics" / "metric_rubric.yaml"


def _parse_thresholds(raw: Optional[dict[str, Any]], default: TierThresholds, where: str) -> TierThresholds:
    if not raw:
        return default
    try:
        return TierThresholds(
            moderate_min=float(raw.get("moderate_min", default.moderate_min)),
            high_min=float(raw.get("high_min", default.high_min)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid tier_thresholds for {where}: {e}") from e


def _parse_rule(metric_id: str, raw: dict[str, Any]) -> QualifyingRule:
    question = raw.get("question")
    if not question:
        raise ConfigurationError(f"Metric {metric_id} has a rule without a question code")
    points = raw.get("points", 0)
    if not isinstance(points, (int, float)) or points < 0:
        raise ConfigurationError(f"Metric {metric_id} rule {question} has invalid points: {points!r}")
    answers = raw.get("answers", ["Yes"])
    if isinstance(answers, str):
        answers = [answers]
    try:
        access = RuleAccess(raw.get("access", RuleAccess.UNRESTRICTED.value))
    except ValueError as e:
        raise ConfigurationError(f"Metric {metric_id} rule {question} has invalid access: {e}") from e
    return QualifyingRule(question=str(question), points=points, answers=tuple(str(a) for a in answers), access=access)


def parse_rubric(raw: dict[str, Any]) -> MetricRubric:
    """Build and validate a MetricRubric from its YAML mapping.

    Raises:
        ConfigurationError: duplicate ids, unknown category, bad points, or
            metric maxima that do not sum to `total_points`
    """
    if not isinstance(raw, dict) or not raw.get("metrics"):
        raise ConfigurationError("Metric rubric must define a non-empty 'metrics' list")

    thresholds = _parse_thresholds(raw.get("tier_thresholds"), CANONICAL_THRESHOLDS, "rubric")
    metrics: list[MetricDefinition] = []
    seen_ids: set[str] = set()

    for entry in raw["metrics"]:
        metric_id = entry.get("id")
        if not metric_id:
            raise ConfigurationError(f"Metric entry missing id: {entry!r}")
        if metric_id in seen_ids:
            raise ConfigurationError(f"Duplicate metric id: {metric_id}")
        seen_ids.add(metric_id)

        try:
            category = MetricCategory(entry.get("category"))
        except ValueError as e:
            raise ConfigurationError(f"Metric {metric_id} has invalid category: {entry.get('category')!r}") from e

        max_points = entry.get("max_points")
        if not isinstance(max_points, (int, float)) or max_points <= 0:
            raise ConfigurationError(f"Metric {metric_id} has invalid max_points: {max_points!r}")

        metrics.append(
            MetricDefinition(
                id=metric_id,
                name=entry.get("name", metric_id),
                category=category,
                max_points=max_points,
                rules=tuple(_parse_rule(metric_id, r) for r in entry.get("rules", [])),
                description=entry.get("description", ""),
                thresholds=_parse_thresholds(entry.get("tier_thresholds"), thresholds, metric_id),
            )
        )

    rubric = MetricRubric(metrics=tuple(metrics), thresholds=thresholds, version=str(raw.get("version", "")))

    declared_total = raw.get("total_points")
    if declared_total is not None and rubric.max_points != declared_total:
        raise ConfigurationError(f"Metric max_points sum to {rubric.max_points}, expected {declared_total}")
    return rubric


def load_rubric(path: Optional[Path] = None) -> MetricRubric:
    """Load and cache the metric rubric (bundled file unless `path` is given)."""
    config_path = Path(path).resolve() if path else _get_default_path().resolve()
    cached = _rubric_cache.get(config_path)
    if cached is not None:
        return cached

    if not config_path.exists():
        raise ConfigurationError(f"Metric rubric not found at {config_path}")

    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Metric rubric at {config_path} is not valid YAML: {e}") from e

    rubric = parse_rubric(raw)
    _rubric_cache[config_path] = rubric
    logger.info(f"Loaded metric rubric v{rubric.version}: {len(rubric.metrics)} metrics, {rubric.max_points} points")
    return rubric


def clear_cache():
    """Clear the rubric cache (for testing)."""
    _rubric_cache.clear()
