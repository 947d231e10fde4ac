"""Tests for advisors, fallback copy and the advisor registry."""

import asyncio

import pytest
from conftest import FakeCompletionClient
from ymca_advisory.advisors.advisor import Advisor, format_prompt
from ymca_advisory.advisors.fallbacks import FALLBACK_TABLES, GENERIC_FALLBACK, get_fallback_copy
from ymca_advisory.advisors.profiles import ADVISOR_CONFIGS, RESPONSE_FORMAT, AdvisorConfig, AdvisorKind
from ymca_advisory.advisors.registry import AdvisorRegistry, build_default_registry
from ymca_advisory.errors import AnalysisCancelled, ConfigurationError
from ymca_advisory.llm.completion_client import CompletionResult
from ymca_advisory.models.analysis import InsightSource
from ymca_advisory.models.performance import PerformanceTier
from ymca_advisory.utils.cancellation import CancellationToken


def _advisor(kind=AdvisorKind.FINANCIAL, client=None) -> Advisor:
    return Advisor(ADVISOR_CONFIGS[kind], client)


class TestFormatPrompt:
    def test_replaces_known_keys_only(self):
        assert format_prompt("{a} {b} {json}", {"a": 1, "b": "x"}) == "1 x {json}"


class TestBuildPrompt:
    """Role-specific prompts built from the snapshot."""

    def test_system_prompt_has_role_and_format(self, high_context):
        prompt = _advisor(AdvisorKind.STAFF_RETENTION).build_prompt(high_context)
        assert prompt.system.startswith("You are an expert HR consultant")
        assert prompt.system.endswith(RESPONSE_FORMAT)

    def test_user_prompt_has_scores(self, high_context):
        prompt = _advisor(AdvisorKind.FINANCIAL).build_prompt(high_context)
        assert "YMCA: Downtown YMCA" in prompt.user
        assert "Overall Score: 78/80 (98%)" in prompt.user
        assert "Financial Focus Score: 40/40" in prompt.user
        assert "Support Designation: Independent Improvement" in prompt.user
        assert "Period: 2024-Q4" in prompt.user
        assert '"months_of_liquidity"' in prompt.user

    def test_every_kind_builds_a_prompt(self, low_context):
        for kind in AdvisorKind:
            prompt = _advisor(kind).build_prompt(low_context)
            assert prompt.system and prompt.user


class TestAnalyze:
    """Completion path and fallback triggers."""

    def test_completion_success(self, high_context):
        client = FakeCompletionClient()
        insight = asyncio.run(_advisor(client=client).analyze(high_context))
        assert insight.source == InsightSource.COMPLETION_SERVICE
        assert insight.model == "fake-model"
        assert insight.advisor_id == "financial"
        assert insight.category == "financial"
        assert insight.recommended_actions.short_term == ("Launch a supervisor development cohort",)
        assert client.calls[0]["context"] == {"advisorId": "financial", "organizationId": "Y001"}

    def test_no_client_uses_fallback(self, high_context):
        insight = asyncio.run(_advisor().analyze(high_context))
        assert insight.source == InsightSource.FALLBACK_RULES

    def test_transport_failure_uses_fallback(self, low_context):
        client = FakeCompletionClient(result=CompletionResult.failure("boom", status=503))
        insight = asyncio.run(_advisor(client=client).analyze(low_context))
        assert insight.source == InsightSource.FALLBACK_RULES
        assert insight.key_insights == FALLBACK_TABLES["financial"][PerformanceTier.LOW].key_insights

    def test_unparseable_response_uses_fallback(self, low_context):
        client = FakeCompletionClient(result=CompletionResult(success=True, content="Sorry, no analysis today."))
        insight = asyncio.run(_advisor(client=client).analyze(low_context))
        assert insight.source == InsightSource.FALLBACK_RULES

    def test_summary_without_lists_uses_fallback(self, low_context):
        client = FakeCompletionClient(result=CompletionResult(success=True, content="Executive Summary: Fine."))
        insight = asyncio.run(_advisor(client=client).analyze(low_context))
        assert insight.source == InsightSource.FALLBACK_RULES

    def test_response_without_actions_is_kept(self, low_context):
        content = "Executive Summary: Steady year.\nKey Insights:\n- Membership is flat\n"
        client = FakeCompletionClient(result=CompletionResult(success=True, content=content))
        insight = asyncio.run(_advisor(client=client).analyze(low_context))
        assert insight.source == InsightSource.COMPLETION_SERVICE
        assert insight.key_insights == ("Membership is flat",)
        assert insight.recommended_actions.immediate == ()

    def test_bulleted_bold_action_headings(self, low_context):
        content = (
            "Executive Summary: Thin margins.\n"
            "Recommended Actions:\n"
            "- **Immediate (0-30 days):**\n  - Freeze hiring\n"
            "- **Short-term:**\n  - Refinance debt\n"
            "- **Long-term:**\n  - Grow reserves\n"
        )
        client = FakeCompletionClient(result=CompletionResult(success=True, content=content))
        actions = asyncio.run(_advisor(client=client).analyze(low_context)).recommended_actions
        assert actions.immediate == ("Freeze hiring",)
        assert actions.short_term == ("Refinance debt",)
        assert actions.long_term == ("Grow reserves",)

    def test_cancellation_propagates(self, low_context):
        async def run():
            token = CancellationToken()
            client = FakeCompletionClient(delay=5)
            task = asyncio.ensure_future(_advisor(client=client).analyze(low_context, cancel_token=token))
            await asyncio.sleep(0.01)
            token.cancel()
            return await task

        with pytest.raises(AnalysisCancelled):
            asyncio.run(run())


class TestFallback:
    """Fallback insights are always complete."""

    @pytest.mark.parametrize("kind", list(AdvisorKind))
    @pytest.mark.parametrize("fixture_name", ["low_context", "high_context"])
    def test_every_field_populated(self, kind, fixture_name, request):
        context = request.getfixturevalue(fixture_name)
        insight = _advisor(kind).fallback(context)
        assert insight.executive_summary
        assert "{" not in insight.executive_summary
        assert insight.key_insights
        assert insight.recommended_actions.immediate
        assert insight.recommended_actions.short_term
        assert insight.recommended_actions.long_term
        assert insight.success_metrics
        assert insight.special_considerations
        assert insight.source == InsightSource.FALLBACK_RULES

    def test_tables_cover_every_category_and_tier(self):
        categories = {config.category for config in ADVISOR_CONFIGS.values()}
        assert categories <= set(FALLBACK_TABLES)
        for category in categories:
            for tier in PerformanceTier:
                copy = FALLBACK_TABLES[category][tier]
                fields = [
                    copy.summary,
                    copy.key_insights,
                    copy.immediate,
                    copy.short_term,
                    copy.long_term,
                    copy.success_metrics,
                    copy.special_considerations,
                ]
                assert all(fields)

    def test_summary_mentions_organization_and_percentage(self, low_context):
        insight = _advisor(AdvisorKind.MEMBER_ENGAGEMENT).fallback(low_context)
        assert "Downtown YMCA" in insight.executive_summary
        assert "0%" in insight.executive_summary

    def test_unknown_category_uses_generic_copy(self):
        assert get_fallback_copy("marketing", PerformanceTier.HIGH) is GENERIC_FALLBACK

    def test_tier_selects_copy(self, low_context, high_context):
        advisor = _advisor(AdvisorKind.MEMBERSHIP_GROWTH)
        assert advisor.fallback(low_context).key_insights != advisor.fallback(high_context).key_insights


class TestAdvisorRegistry:
    def test_default_registry_order(self):
        assert build_default_registry().list() == [
            "financial",
            "staff-retention",
            "membership-growth",
            "member-engagement",
        ]

    def test_get_builds_advisor_with_client(self):
        client = FakeCompletionClient()
        advisor = build_default_registry().get("member-engagement", client)
        assert isinstance(advisor, Advisor)
        assert advisor.client is client
        assert advisor.config.category == "engagement"

    def test_unknown_id_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown advisor: marketing"):
            build_default_registry().get("marketing")

    def test_duplicate_registration_raises(self):
        registry = AdvisorRegistry()
        config = ADVISOR_CONFIGS[AdvisorKind.FINANCIAL]
        registry.register("financial", Advisor, config)
        with pytest.raises(ConfigurationError, match="already registered"):
            registry.register("financial", Advisor, config)

    def test_custom_constructor(self):
        registry = AdvisorRegistry()
        config = AdvisorConfig(
            id="custom",
            category="operational",
            display_name="Custom Advisor",
            description="",
            system_prompt="You are a custom advisor.",
        )
        built = []

        def constructor(cfg, client):
            built.append(cfg)
            return Advisor(cfg, client)

        registry.register("custom", constructor, config)
        assert registry.get("custom").name == "Custom Advisor"
        assert built == [config]
        assert registry.config("custom") is config
        assert "custom" in registry
        assert len(registry) == 1
