"""Data records shared by the scoring engine and the advisory layer."""

from .analysis import (
    AdvisorFailure,
    AdvisorInsight,
    AdvisorResult,
    AnalysisSummary,
    ComprehensiveAnalysis,
    CrossCuttingTheme,
    InsightSource,
    MasterActionPlan,
    OrganizationContext,
    OverallAssessment,
    RecommendedActions,
)
from .performance import (
    CANONICAL_THRESHOLDS,
    DESIGNATION_BY_TIER,
    MetricCategory,
    MetricDefinition,
    MetricScore,
    PerformanceSnapshot,
    PerformanceTier,
    QualifyingRule,
    RuleAccess,
    TierThresholds,
)
from .survey import QuestionFilter, Submission, latest_submission

__all__ = [
    "AdvisorFailure",
    "AdvisorInsight",
    "AdvisorResult",
    "AnalysisSummary",
    "CANONICAL_THRESHOLDS",
    "ComprehensiveAnalysis",
    "CrossCuttingTheme",
    "DESIGNATION_BY_TIER",
    "InsightSource",
    "MasterActionPlan",
    "MetricCategory",
    "MetricDefinition",
    "MetricScore",
    "OrganizationContext",
    "OverallAssessment",
    "PerformanceSnapshot",
    "PerformanceTier",
    "QualifyingRule",
    "QuestionFilter",
    "RecommendedActions",
    "RuleAccess",
    "Submission",
    "TierThresholds",
    "latest_submission",
]
