"""Deterministic scoring: rubric, per-metric scores and aggregation."""

from .performance_aggregator import aggregate, lookup_designation, lookup_tier, score_submission
from .rubric_registry import MetricRubric, clear_cache, load_rubric
from .score_calculator import compute_metric_scores

__all__ = [
    "MetricRubric",
    "aggregate",
    "clear_cache",
    "compute_metric_scores",
    "load_rubric",
    "lookup_designation",
    "lookup_tier",
    "score_submission",
]
