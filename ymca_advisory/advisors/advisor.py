"""Advisor: one specialized analysis of an organization's performance.

An advisor builds a role-specific prompt from the PerformanceSnapshot,
calls the completion service and parses the reply. When the service is not
configured, fails, or returns unreadable text, the advisor produces a
deterministic fallback insight instead, so analyze() only raises on
cancellation.
"""

import json
import logging
from typing import Any, Optional

from ..llm.completion_client import CompletionClient, CompletionPrompt
from ..llm.response_parser import ParsedSections, parse_advisor_response
from ..models.analysis import AdvisorInsight, InsightSource, OrganizationContext, RecommendedActions
from ..utils.cancellation import CancellationToken
from .fallbacks import get_fallback_copy
from .profiles import RESPONSE_FORMAT, USER_PROMPT_TEMPLATE, AdvisorConfig

logger = logging.getLogger(__name__)


def format_prompt(template: str, substitutions: dict[str, Any]) -> str:
    """Replace `{key}` placeholders; other braces (e.g. JSON) are left alone."""
    result = template
    for key, value in substitutions.items():
        result = result.replace(f"{{{key}}}", str(value))
    return result


class Advisor:
    """Analysis driven entirely by an AdvisorConfig.

    Args:
        config: Which advisor this is (prompt, category, focus metrics)
        client: Completion client, or None to always use fallback rules
    """

    def __init__(self, config: AdvisorConfig, client: Optional[CompletionClient] = None):
        self.config = config
        self.client = client

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.display_name

    def build_prompt(self, context: OrganizationContext) -> CompletionPrompt:
        snapshot = context.snapshot
        focus_scores = [s for s in (snapshot.metric(m) for m in self.config.focus_metrics) if s is not None]
        focus_metrics = {
            s.metric_id: {"points": s.points, "maxPoints": s.max_points, "tier": s.tier.value} for s in focus_scores
        }

        user = format_prompt(
            USER_PROMPT_TEMPLATE,
            {
                "organization_name": context.display_name,
                "focus_label": f"{self.config.category.title()} Focus Score",
                "focus_points": sum(s.points for s in focus_scores),
                "focus_max": sum(s.max_points for s in focus_scores),
                "total_points": snapshot.total_points,
                "max_points": snapshot.max_points,
                "percentage": round(snapshot.percentage),
                "performance_tier": snapshot.performance_tier.value,
                "support_designation": snapshot.support_designation,
                "period": context.period or "Current",
                "focus_metrics": json.dumps(focus_metrics, indent=2),
                "snapshot": json.dumps(snapshot.to_dict(), indent=2),
            },
        )
        return CompletionPrompt(system=f"{self.config.system_prompt}\n\n{RESPONSE_FORMAT}", user=user)

    async def analyze(
        self,
        context: OrganizationContext,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AdvisorInsight:
        """Produce an insight for one organization.

        Raises:
            AnalysisCancelled: `cancel_token` fired while the request was in flight
        """
        if self.client is None:
            logger.debug(f"{self.name}: no completion client configured, using fallback rules")
            return self.fallback(context)

        prompt = self.build_prompt(context)
        result = await self.client.generate_analysis(
            prompt,
            context={"advisorId": self.id, "organizationId": context.organization_id},
            cancel_token=cancel_token,
        )
        if not result.success:
            logger.warning(
                f"{self.name}: completion failed for {context.organization_id} ({result.error}), using fallback"
            )
            return self.fallback(context)

        sections = parse_advisor_response(result.content)
        if not sections.has_content:
            logger.warning(f"{self.name}: unparseable response for {context.organization_id}, using fallback")
            return self.fallback(context)

        return self._insight_from_sections(sections, model=result.model)

    def _insight_from_sections(self, sections: ParsedSections, model: Optional[str]) -> AdvisorInsight:
        return AdvisorInsight(
            advisor_id=self.id,
            advisor_name=self.name,
            category=self.config.category,
            executive_summary=sections.executive_summary,
            key_insights=tuple(sections.key_insights),
            recommended_actions=RecommendedActions(
                immediate=tuple(sections.immediate),
                short_term=tuple(sections.short_term),
                long_term=tuple(sections.long_term),
            ),
            success_metrics=tuple(sections.success_metrics),
            special_considerations=tuple(sections.special_considerations),
            source=InsightSource.COMPLETION_SERVICE,
            model=model,
        )

    def fallback(self, context: OrganizationContext) -> AdvisorInsight:
        """Deterministic insight from static copy for this category and tier."""
        snapshot = context.snapshot
        copy = get_fallback_copy(self.config.category, snapshot.performance_tier)
        summary = format_prompt(
            copy.summary,
            {
                "organization_name": context.display_name,
                "percentage": round(snapshot.percentage),
                "advisor_name": self.name,
            },
        )
        return AdvisorInsight(
            advisor_id=self.id,
            advisor_name=self.name,
            category=self.config.category,
            executive_summary=summary,
            key_insights=copy.key_insights,
            recommended_actions=RecommendedActions(
                immediate=copy.immediate,
                short_term=copy.short_term,
                long_term=copy.long_term,
            ),
            success_metrics=copy.success_metrics,
            special_considerations=copy.special_considerations,
            source=InsightSource.FALLBACK_RULES,
        )

