"""
Advisor Manager: runs every registered advisor for one organization.

Advisors run as concurrent asyncio tasks. A failure in one advisor is
recorded as an error entry and never affects the others; only cancellation
stops the whole run. The merged result adds an overall assessment,
cross-cutting themes and a master action plan.

Usage:
    manager = AdvisorManager(build_default_registry(), client)
    analysis = await manager.generate_comprehensive_analysis(context)
"""

import asyncio
import logging
from collections import Counter
from typing import Iterable, Optional

from ..constants import (
    DESIGNATION_INDEPENDENT_IMPROVEMENT,
    DESIGNATION_YUSA_SUPPORT,
    THEME_HIGH_PRIORITY_FREQUENCY,
    THEME_KEYWORDS,
    THEME_MIN_FREQUENCY,
)
from ..errors import AnalysisCancelled
from ..llm.completion_client import CompletionClient
from ..models.analysis import (
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
)
from ..models.performance import CANONICAL_THRESHOLDS, PerformanceTier, TierThresholds
from ..utils.cancellation import CancellationToken
from .registry import AdvisorRegistry

logger = logging.getLogger(__name__)

PERFORMANCE_LEVELS = {
    PerformanceTier.HIGH: "High",
    PerformanceTier.MODERATE: "Moderate",
    PerformanceTier.LOW: "Low",
}

SUPPORT_NEEDED = {
    PerformanceTier.HIGH: "Low",
    PerformanceTier.MODERATE: "Medium",
    PerformanceTier.LOW: "High",
}

SUPPORT_CHANNELS = {
    DESIGNATION_YUSA_SUPPORT: (
        "Network Supported: Learning Centers, Innovation Teams, Thought Leader and Activation, Cohorts, "
        "Peer Communities",
        "Direct Delivery: Y-USA, Alliances, Service Delivery Partners, Third-party Partners",
        "Shared Services: Y-USA, YESS",
    ),
    DESIGNATION_INDEPENDENT_IMPROVEMENT: (
        "Network Supported: Learning Centers, Innovation Teams, Thought Leader and Activation, Cohorts, "
        "Peer Communities",
        "Self Directed: Resources, Activation Guides, Tools, On-demand Training",
    ),
}

MASTER_PLAN_IMMEDIATE = (
    "Review current performance data",
    "Identify critical improvement areas",
    "Schedule leadership team meeting",
)
MASTER_PLAN_SHORT_TERM = (
    "Develop comprehensive improvement plan",
    "Set measurable goals and timelines",
    "Implement quick-win initiatives",
)
MASTER_PLAN_LONG_TERM = (
    "Build sustainable improvement framework",
    "Establish monitoring and reporting systems",
    "Create continuous improvement culture",
)


def assess_overall_performance(
    score: float, max_score: float, thresholds: TierThresholds = CANONICAL_THRESHOLDS
) -> OverallAssessment:
    """Level, support need and designation from one score, via the shared threshold table."""
    percentage = score / max_score * 100 if max_score else 0.0
    tier = thresholds.classify(percentage)
    return OverallAssessment(
        score=score,
        max_score=max_score,
        percentage=round(percentage),
        performance_level=PERFORMANCE_LEVELS[tier],
        support_needed=SUPPORT_NEEDED[tier],
        support_designation=thresholds.designation(percentage),
    )


def identify_cross_cutting_themes(insights: Iterable[AdvisorResult]) -> list[CrossCuttingTheme]:
    """Keywords mentioned in the key insights of at least two advisors.

    Each advisor counts once per keyword. Error entries are skipped. Sorted
    by frequency, most frequent first; ties keep vocabulary order.
    """
    counts: Counter = Counter()
    for insight in insights:
        if not isinstance(insight, AdvisorInsight):
            continue
        text = " ".join(insight.key_insights).lower()
        for keyword in THEME_KEYWORDS:
            if keyword in text:
                counts[keyword] += 1

    themes = [
        CrossCuttingTheme(
            theme=keyword.capitalize(),
            frequency=counts[keyword],
            priority="high" if counts[keyword] >= THEME_HIGH_PRIORITY_FREQUENCY else "medium",
        )
        for keyword in THEME_KEYWORDS
        if counts[keyword] >= THEME_MIN_FREQUENCY
    ]
    return sorted(themes, key=lambda t: t.frequency, reverse=True)


def build_master_action_plan(assessment: OverallAssessment) -> MasterActionPlan:
    return MasterActionPlan(
        immediate=MASTER_PLAN_IMMEDIATE,
        short_term=MASTER_PLAN_SHORT_TERM,
        long_term=MASTER_PLAN_LONG_TERM,
        priority="Critical" if assessment.support_needed == "High" else "Standard",
        support_channels=SUPPORT_CHANNELS.get(assessment.support_designation, ()),
    )


class AdvisorManager:
    """Fans an analysis out to every registered advisor and merges the results."""

    def __init__(
        self,
        registry: AdvisorRegistry,
        client: Optional[CompletionClient] = None,
        thresholds: TierThresholds = CANONICAL_THRESHOLDS,
    ):
        self.registry = registry
        self.client = client
        self.thresholds = thresholds

    @property
    def ai_provider(self) -> str:
        if self.client is None:
            return InsightSource.FALLBACK_RULES.value
        return self.client.provider_name

    async def _run_advisor(
        self,
        advisor_id: str,
        context: OrganizationContext,
        cancel_token: Optional[CancellationToken],
    ) -> AdvisorResult:
        try:
            advisor = self.registry.get(advisor_id, self.client)
            return await advisor.analyze(context, cancel_token=cancel_token)
        except AnalysisCancelled:
            raise
        except Exception as e:
            logger.error(f"Advisor {advisor_id} failed for {context.organization_id}: {e}", exc_info=True)
            return AdvisorFailure(advisor_id=advisor_id, error=f"Advisor execution failed: {e}")

    async def generate_comprehensive_analysis(
        self,
        context: OrganizationContext,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ComprehensiveAnalysis:
        """Run all advisors for one organization.

        Raises:
            AnalysisCancelled: the run was cancelled; no partial result is returned
        """
        snapshot = context.snapshot
        assessment = assess_overall_performance(snapshot.total_points, snapshot.max_points, self.thresholds)

        advisor_ids = self.registry.list()
        tasks = [asyncio.ensure_future(self._run_advisor(a, context, cancel_token)) for a in advisor_ids]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        insights: dict[str, AdvisorResult] = dict(zip(advisor_ids, results))
        summary = AnalysisSummary(
            total_advisors=len(advisor_ids),
            successful_analyses=sum(1 for r in results if r.source == InsightSource.COMPLETION_SERVICE),
            fallback_analyses=sum(1 for r in results if r.source == InsightSource.FALLBACK_RULES),
            failed_analyses=sum(1 for r in results if r.source == InsightSource.ERROR),
            ai_provider=self.ai_provider,
        )

        analysis = ComprehensiveAnalysis(
            organization_id=context.organization_id,
            organization_name=context.display_name,
            overall_assessment=assessment,
            advisor_insights=insights,
            cross_cutting_themes=tuple(identify_cross_cutting_themes(results)),
            master_action_plan=build_master_action_plan(assessment),
            summary=summary,
        )
        logger.info(
            f"Analysis for {context.organization_id}: {summary.successful_analyses} AI, "
            f"{summary.fallback_analyses} fallback, {summary.failed_analyses} failed "
            f"of {summary.total_advisors} advisors"
        )
        return analysis
