"""
Advisory service: the entry point presentation layers talk to.

Wires Submission -> PerformanceSnapshot -> AdvisorManager -> cache and owns
cache invalidation:
  - switching to another organization drops the previous one's entry
  - a new submission for an organization drops that organization's entry
  - force_refresh bypasses and replaces the entry
  - a run that finishes after a newer submission was recorded is not cached

Usage:
    from ymca_advisory.config import load_settings
    from ymca_advisory.service import AdvisoryService

    service = AdvisoryService.from_settings(load_settings())
    analysis = await service.analyze(submission, organization_name="Downtown YMCA")
"""

import logging
from typing import Optional

from .advisors.manager import AdvisorManager
from .advisors.registry import AdvisorRegistry, build_default_registry
from .config import AdvisorySettings
from .llm.completion_client import build_completion_client
from .models.analysis import ComprehensiveAnalysis, OrganizationContext
from .models.performance import PerformanceSnapshot
from .models.survey import QuestionFilter, Submission
from .scorers.performance_aggregator import score_submission
from .scorers.rubric_registry import MetricRubric, load_rubric
from .utils.analysis_cache import AnalysisCache, cache_key
from .utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class AdvisoryService:
    def __init__(
        self,
        manager: AdvisorManager,
        cache: Optional[AnalysisCache] = None,
        rubric: Optional[MetricRubric] = None,
        cache_enabled: bool = True,
    ):
        self.manager = manager
        self.cache = cache if cache is not None else AnalysisCache()
        self.rubric = rubric or load_rubric()
        self.cache_enabled = cache_enabled
        self.current_organization_id: Optional[str] = None
        self._seen_revisions: dict[str, tuple] = {}

    @classmethod
    def from_settings(
        cls,
        settings: AdvisorySettings,
        registry: Optional[AdvisorRegistry] = None,
    ) -> "AdvisoryService":
        """Build the full stack from settings.

        Raises:
            ConfigurationError: AI advisors enabled without credentials, or bad rubric
        """
        client = build_completion_client(settings)
        rubric = load_rubric(settings.rubric_path)
        manager = AdvisorManager(registry or build_default_registry(), client, thresholds=rubric.thresholds)
        return cls(
            manager=manager,
            cache=AnalysisCache(ttl_seconds=settings.cache_ttl_seconds),
            rubric=rubric,
            cache_enabled=settings.enable_caching,
        )

    def score(
        self,
        submission: Submission,
        question_filter: QuestionFilter = QuestionFilter.ALL,
    ) -> PerformanceSnapshot:
        return score_submission(submission, self.rubric, QuestionFilter.parse(question_filter))

    def switch_organization(self, organization_id: str) -> None:
        """Make `organization_id` current, dropping the previous organization's cached analysis."""
        previous = self.current_organization_id
        if previous is not None and previous != organization_id:
            self.cache.invalidate(cache_key(previous))
            logger.debug(f"Switched organization {previous} -> {organization_id}")
        self.current_organization_id = organization_id

    def record_submission(
        self,
        submission: Submission,
        question_filter: QuestionFilter = QuestionFilter.ALL,
    ) -> bool:
        """Note a submission; invalidates the cache if it (or its filter) differs from the last one seen.

        Returns:
            True when the submission was new for its organization
        """
        organization_id = submission.organization_id
        revision = (submission.revision, QuestionFilter.parse(question_filter))
        previous = self._seen_revisions.get(organization_id)
        self._seen_revisions[organization_id] = revision
        if previous is not None and previous != revision:
            self.cache.invalidate(cache_key(organization_id))
            logger.info(f"New submission for {organization_id}, cached analysis dropped")
            return True
        return previous is None

    async def analyze(
        self,
        submission: Submission,
        organization_name: str = "",
        question_filter: QuestionFilter = QuestionFilter.ALL,
        cancel_token: Optional[CancellationToken] = None,
        force_refresh: bool = False,
    ) -> ComprehensiveAnalysis:
        """Score a submission and return its comprehensive analysis, cached when possible.

        A cached analysis is reused only for the same organization name; a
        different name runs a fresh analysis and replaces the entry. A run that
        finishes after a newer submission (or another organization) was
        recorded is returned but not cached.

        Raises:
            AnalysisCancelled: the run was cancelled; nothing is cached
        """
        organization_id = submission.organization_id
        question_filter = QuestionFilter.parse(question_filter)
        self.switch_organization(organization_id)
        self.record_submission(submission, question_filter)
        revision = self._seen_revisions[organization_id]
        key = cache_key(organization_id)

        if self.cache_enabled and not force_refresh:
            cached = self.cache.get(key)
            if cached is not None and cached.organization_name == (organization_name or organization_id):
                logger.debug(f"Serving cached analysis for {organization_id}")
                return cached

        context = OrganizationContext(
            organization_id=organization_id,
            snapshot=self.score(submission, question_filter),
            organization_name=organization_name,
            period=submission.period,
            question_filter=question_filter,
        )
        analysis = await self.manager.generate_comprehensive_analysis(context, cancel_token=cancel_token)

        if not self.cache_enabled:
            return analysis
        if self.current_organization_id != organization_id or self._seen_revisions.get(organization_id) != revision:
            logger.info(f"Analysis for {organization_id} finished after a newer submission, not caching")
            return analysis
        self.cache.put(key, analysis)
        return analysis
