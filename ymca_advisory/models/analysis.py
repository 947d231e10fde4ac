"""Advisory records: advisor insights and the comprehensive analysis.

All records are frozen; list-valued fields are tuples so a finished
ComprehensiveAnalysis can be cached and shared without copying.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .performance import PerformanceSnapshot
from .survey import QuestionFilter


class InsightSource(str, Enum):
    """Where an advisor entry came from."""

    COMPLETION_SERVICE = "completion-service"
    FALLBACK_RULES = "fallback-rules"
    ERROR = "error"


@dataclass(frozen=True)
class OrganizationContext:
    """Everything an analysis needs about the organization being advised."""

    organization_id: str
    snapshot: PerformanceSnapshot
    organization_name: str = ""
    period: Optional[str] = None
    question_filter: QuestionFilter = QuestionFilter.ALL

    @property
    def display_name(self) -> str:
        return self.organization_name or self.organization_id


@dataclass(frozen=True)
class RecommendedActions:
    immediate: tuple[str, ...] = ()
    short_term: tuple[str, ...] = ()
    long_term: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "immediate": list(self.immediate),
            "shortTerm": list(self.short_term),
            "longTerm": list(self.long_term),
        }


@dataclass(frozen=True)
class AdvisorInsight:
    advisor_id: str
    advisor_name: str
    category: str
    executive_summary: str
    key_insights: tuple[str, ...]
    recommended_actions: RecommendedActions
    success_metrics: tuple[str, ...]
    special_considerations: tuple[str, ...]
    source: InsightSource
    model: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "advisorId": self.advisor_id,
            "advisor": self.advisor_name,
            "category": self.category,
            "timestamp": self.timestamp.isoformat(),
            "executiveSummary": self.executive_summary,
            "keyInsights": list(self.key_insights),
            "recommendedActions": self.recommended_actions.to_dict(),
            "successMetrics": list(self.success_metrics),
            "specialConsiderations": list(self.special_considerations),
            "source": self.source.value,
        }
        if self.model:
            result["model"] = self.model
        return result


@dataclass(frozen=True)
class AdvisorFailure:
    """An advisor raised instead of producing an insight."""

    advisor_id: str
    error: str

    source = InsightSource.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "source": self.source.value}


AdvisorResult = Union[AdvisorInsight, AdvisorFailure]


@dataclass(frozen=True)
class OverallAssessment:
    score: float
    max_score: float
    percentage: int
    performance_level: str
    support_needed: str
    support_designation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "maxScore": self.max_score,
            "percentage": self.percentage,
            "performanceLevel": self.performance_level,
            "supportNeeded": self.support_needed,
            "supportDesignation": self.support_designation,
        }


@dataclass(frozen=True)
class CrossCuttingTheme:
    theme: str
    frequency: int
    priority: str

    def to_dict(self) -> dict[str, Any]:
        return {"theme": self.theme, "frequency": self.frequency, "priority": self.priority}


@dataclass(frozen=True)
class MasterActionPlan:
    immediate: tuple[str, ...]
    short_term: tuple[str, ...]
    long_term: tuple[str, ...]
    priority: str
    support_channels: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "immediate": list(self.immediate),
            "shortTerm": list(self.short_term),
            "longTerm": list(self.long_term),
            "priority": self.priority,
            "supportChannels": list(self.support_channels),
        }


@dataclass(frozen=True)
class AnalysisSummary:
    total_advisors: int
    successful_analyses: int
    fallback_analyses: int
    failed_analyses: int
    ai_provider: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAdvisors": self.total_advisors,
            "successfulAnalyses": self.successful_analyses,
            "fallbackAnalyses": self.fallback_analyses,
            "failedAnalyses": self.failed_analyses,
            "aiProvider": self.ai_provider,
        }


@dataclass(frozen=True)
class ComprehensiveAnalysis:
    organization_id: str
    organization_name: str
    overall_assessment: OverallAssessment
    advisor_insights: Mapping[str, AdvisorResult]
    cross_cutting_themes: tuple[CrossCuttingTheme, ...]
    master_action_plan: MasterActionPlan
    summary: AnalysisSummary
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        object.__setattr__(self, "advisor_insights", MappingProxyType(dict(self.advisor_insights)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "organizationId": self.organization_id,
            "organizationName": self.organization_name,
            "timestamp": self.timestamp.isoformat(),
            "overallAssessment": self.overall_assessment.to_dict(),
            "advisorInsights": {key: value.to_dict() for key, value in self.advisor_insights.items()},
            "crossCuttingThemes": [theme.to_dict() for theme in self.cross_cutting_themes],
            "masterActionPlan": self.master_action_plan.to_dict(),
            "summary": self.summary.to_dict(),
        }
