"""Tests for the advisory service: scoring, caching and invalidation."""

import asyncio
from datetime import datetime, timezone

import pytest
from conftest import FakeCompletionClient
from ymca_advisory.advisors.manager import AdvisorManager
from ymca_advisory.advisors.registry import build_default_registry
from ymca_advisory.config import AdvisorySettings
from ymca_advisory.errors import AnalysisCancelled
from ymca_advisory.models.performance import PerformanceTier
from ymca_advisory.models.survey import QuestionFilter, Submission
from ymca_advisory.service import AdvisoryService
from ymca_advisory.utils.analysis_cache import AnalysisCache, cache_key
from ymca_advisory.utils.cancellation import CancellationToken

JAN = datetime(2024, 1, 15, tzinfo=timezone.utc)
FEB = datetime(2024, 2, 15, tzinfo=timezone.utc)


def _submission(organization_id="Y001", timestamp=JAN, responses=None):
    return Submission(organization_id=organization_id, responses=responses or {}, timestamp=timestamp)


@pytest.fixture
def client():
    return FakeCompletionClient()


@pytest.fixture
def service(client):
    return AdvisoryService(AdvisorManager(build_default_registry(), client))


class TestScore:
    def test_score_uses_rubric(self, service, all_yes_responses):
        snapshot = service.score(_submission(responses=all_yes_responses))
        assert snapshot.total_points == 78
        assert snapshot.performance_tier == PerformanceTier.HIGH

    def test_filter_accepts_string(self, service, all_yes_responses):
        restricted = service.score(_submission(responses=all_yes_responses), "restricted-access-only")
        everything = service.score(_submission(responses=all_yes_responses), QuestionFilter.ALL)
        assert restricted.total_points < everything.total_points


class TestAnalyzeCaching:
    def test_second_call_served_from_cache(self, service, client):
        first = asyncio.run(service.analyze(_submission(), organization_name="Downtown YMCA"))
        second = asyncio.run(service.analyze(_submission(), organization_name="Downtown YMCA"))
        assert second is first
        assert len(client.calls) == 4

    def test_force_refresh_replaces_entry(self, service, client):
        first = asyncio.run(service.analyze(_submission()))
        refreshed = asyncio.run(service.analyze(_submission(), force_refresh=True))
        assert refreshed is not first
        assert service.cache.get(cache_key("Y001")) is refreshed
        assert len(client.calls) == 8

    def test_switching_organization_drops_previous_entry(self, service):
        asyncio.run(service.analyze(_submission("Y001")))
        asyncio.run(service.analyze(_submission("Y002")))
        assert cache_key("Y001") not in service.cache
        assert cache_key("Y002") in service.cache
        assert service.current_organization_id == "Y002"

    def test_new_submission_drops_entry(self, service, client):
        first = asyncio.run(service.analyze(_submission(timestamp=JAN)))
        second = asyncio.run(service.analyze(_submission(timestamp=FEB)))
        assert second is not first
        assert len(client.calls) == 8

    def test_filter_change_drops_entry(self, service, client):
        asyncio.run(service.analyze(_submission()))
        analysis = asyncio.run(service.analyze(_submission(), question_filter="unrestricted-access-only"))
        assert len(client.calls) == 8
        assert service.cache.get(cache_key("Y001")) is analysis

    def test_expired_entry_recomputed(self, client):
        now = [0.0]
        cache = AnalysisCache(ttl_seconds=300, clock=lambda: now[0])
        service = AdvisoryService(AdvisorManager(build_default_registry(), client), cache=cache)
        asyncio.run(service.analyze(_submission()))
        now[0] = 301.0
        asyncio.run(service.analyze(_submission()))
        assert len(client.calls) == 8

    def test_caching_disabled(self, client):
        service = AdvisoryService(AdvisorManager(build_default_registry(), client), cache_enabled=False)
        asyncio.run(service.analyze(_submission()))
        asyncio.run(service.analyze(_submission()))
        assert len(client.calls) == 8
        assert len(service.cache) == 0

    def test_cancelled_run_caches_nothing(self):
        service = AdvisoryService(AdvisorManager(build_default_registry(), FakeCompletionClient(delay=5)))

        async def run():
            token = CancellationToken()
            task = asyncio.ensure_future(service.analyze(_submission(), cancel_token=token))
            await asyncio.sleep(0.01)
            token.cancel()
            return await task

        with pytest.raises(AnalysisCancelled):
            asyncio.run(run())
        assert len(service.cache) == 0


class SlowFirstRunManager(AdvisorManager):
    """Delays only its first analysis, so a later one can finish first."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.runs = 0

    async def generate_comprehensive_analysis(self, context, cancel_token=None):
        self.runs += 1
        if self.runs == 1:
            await asyncio.sleep(0.2)
        return await super().generate_comprehensive_analysis(context, cancel_token=cancel_token)


class TestOverlappingRuns:
    def test_superseded_run_is_not_cached(self, all_yes_responses):
        service = AdvisoryService(SlowFirstRunManager(build_default_registry()))
        old = _submission(timestamp=JAN)
        new = _submission(timestamp=FEB, responses=all_yes_responses)

        async def run():
            slow = asyncio.ensure_future(service.analyze(old))
            await asyncio.sleep(0.01)
            fresh = await service.analyze(new)
            stale = await slow
            again = await service.analyze(new)
            return fresh, stale, again

        fresh, stale, again = asyncio.run(run())
        assert stale.overall_assessment.score == 0
        assert again is fresh
        assert again.overall_assessment.score == 78
        assert service.manager.runs == 2

    def test_run_for_previous_organization_is_not_cached(self):
        service = AdvisoryService(SlowFirstRunManager(build_default_registry()))

        async def run():
            slow = asyncio.ensure_future(service.analyze(_submission("Y001")))
            await asyncio.sleep(0.01)
            await service.analyze(_submission("Y002"))
            await slow

        asyncio.run(run())
        assert cache_key("Y001") not in service.cache
        assert cache_key("Y002") in service.cache


class TestOrganizationName:
    def test_cached_analysis_reused_for_same_name(self, service, client):
        asyncio.run(service.analyze(_submission(), organization_name="Downtown YMCA"))
        cached = asyncio.run(service.analyze(_submission(), organization_name="Downtown YMCA"))
        assert cached.organization_name == "Downtown YMCA"
        assert len(client.calls) == 4

    def test_new_name_runs_fresh_analysis(self, service, client):
        asyncio.run(service.analyze(_submission(), organization_name="Downtown YMCA"))
        renamed = asyncio.run(service.analyze(_submission(), organization_name="Downtown Family YMCA"))
        assert renamed.organization_name == "Downtown Family YMCA"
        assert service.cache.get(cache_key("Y001")) is renamed
        assert len(client.calls) == 8


class TestRecordSubmission:
    def test_first_submission_is_new(self, service):
        assert service.record_submission(_submission()) is True

    def test_same_submission_is_not_new(self, service):
        service.record_submission(_submission())
        assert service.record_submission(_submission()) is False

    def test_later_submission_is_new(self, service):
        service.record_submission(_submission(timestamp=JAN))
        assert service.record_submission(_submission(timestamp=FEB)) is True


class TestFromSettings:
    def test_ai_disabled_uses_fallback(self, all_yes_responses):
        settings = AdvisorySettings(enable_ai_advisors=False, cache_ttl_seconds=60)
        service = AdvisoryService.from_settings(settings)
        assert service.manager.client is None
        assert service.cache.ttl_seconds == 60
        analysis = asyncio.run(service.analyze(_submission(responses=all_yes_responses)))
        assert analysis.summary.fallback_analyses == 4
        assert analysis.summary.ai_provider == "fallback-rules"
        assert analysis.overall_assessment.support_designation == "Independent Improvement"
