"""Advisor catalog: the four built-in advisor kinds and their prompts.

Each AdvisorKind maps to one AdvisorConfig (category, display name, system
prompt, focus metrics). The Advisor class dispatches on this data; there is
no per-kind subclass.
"""

from dataclasses import dataclass
from enum import Enum


class AdvisorKind(str, Enum):
    FINANCIAL = "financial"
    STAFF_RETENTION = "staff-retention"
    MEMBERSHIP_GROWTH = "membership-growth"
    MEMBER_ENGAGEMENT = "member-engagement"


@dataclass(frozen=True)
class AdvisorConfig:
    """Static description of one advisor.

    Attributes:
        id: Registry key (matches an AdvisorKind value for built-ins)
        category: Fallback table key (financial, operational, growth, engagement)
        display_name: Human-readable advisor name
        description: One-line summary of what the advisor covers
        system_prompt: Role prompt; the response format block is appended to it
        focus_metrics: Metric ids quoted in the user prompt
    """

    id: str
    category: str
    display_name: str
    description: str
    system_prompt: str
    focus_metrics: tuple[str, ...] = ()


RESPONSE_FORMAT = """CRITICAL: Use EXACTLY this format with NO Markdown formatting, NO headers, NO bold text:

Executive Summary:
[Your summary here - plain text only]

Key Insights:
- [Insight 1]
- [Insight 2]

Recommended Actions:
Immediate:
- [Action 1]
- [Action 2]

Short-term:
- [Action 1]
- [Action 2]

Long-term:
- [Action 1]
- [Action 2]

Success Metrics:
- [Metric 1]
- [Metric 2]

Special Considerations:
- [Consideration 1]
- [Consideration 2]"""


USER_PROMPT_TEMPLATE = """Analyze the following YMCA performance data and provide insights:

YMCA: {organization_name}
{focus_label}: {focus_points}/{focus_max}
Overall Score: {total_points}/{max_points} ({percentage}%)
Performance Tier: {performance_tier}
Support Designation: {support_designation}
Period: {period}

Focus Metrics: {focus_metrics}

Performance Data: {snapshot}

Please provide:
1. Executive Summary (2-3 sentences)
2. Key Insights (3-5 bullet points)
3. Recommended Actions (prioritized by immediate, short-term, long-term)
4. Success Metrics
5. Special Considerations for YMCAs"""


FINANCIAL_PROMPT = """You are an expert financial consultant specializing in nonprofit financial management, particularly for YMCAs.
Analyze financial metrics, identify sustainability challenges, and provide strategic recommendations for improving financial health and mission impact.
Focus on balancing financial sustainability with mission-driven programming."""

STAFF_RETENTION_PROMPT = """You are an expert HR consultant specializing in YMCA staff retention and engagement strategies.
Analyze retention metrics, identify root causes of turnover, and provide evidence-based recommendations for improving staff satisfaction and retention.
Consider YMCA mission and values in your recommendations."""

MEMBERSHIP_GROWTH_PROMPT = """You are an expert membership development consultant specializing in YMCA growth strategies.
Analyze membership trends, identify growth opportunities, and provide strategic recommendations for expanding YMCA membership and community impact.
Focus on mission-driven growth that serves community needs."""

MEMBER_ENGAGEMENT_PROMPT = """You are the YMCA Membership Advisor. Your primary role is to support YMCA staff in building programs and practices that help members achieve, build relationships, and experience belonging.
These three pillars (Achievement, Relationships, and Belonging, or ARB) represent the YMCA's approach to transforming lives and strengthening community.
Focus on the member as the hero of their own story, with the Y as the guide."""


ADVISOR_CONFIGS: dict[AdvisorKind, AdvisorConfig] = {
    AdvisorKind.FINANCIAL: AdvisorConfig(
        id=AdvisorKind.FINANCIAL.value,
        category="financial",
        display_name="Financial Performance Advisor",
        description="Analyzes liquidity, margins, debt and revenue mix for financial sustainability",
        system_prompt=FINANCIAL_PROMPT,
        focus_metrics=(
            "months_of_liquidity",
            "operating_margin",
            "debt_ratio",
            "operating_revenue_mix",
            "charitable_revenue",
        ),
    ),
    AdvisorKind.STAFF_RETENTION: AdvisorConfig(
        id=AdvisorKind.STAFF_RETENTION.value,
        category="operational",
        display_name="Staff Retention Advisor",
        description="Analyzes retention metrics and provides HR improvement strategies",
        system_prompt=STAFF_RETENTION_PROMPT,
        focus_metrics=("staff_retention", "risk_mitigation", "governance"),
    ),
    AdvisorKind.MEMBERSHIP_GROWTH: AdvisorConfig(
        id=AdvisorKind.MEMBERSHIP_GROWTH.value,
        category="growth",
        display_name="Membership Growth Advisor",
        description="Analyzes growth patterns and provides expansion strategies",
        system_prompt=MEMBERSHIP_GROWTH_PROMPT,
        focus_metrics=("membership_growth", "operating_revenue_mix", "charitable_revenue"),
    ),
    AdvisorKind.MEMBER_ENGAGEMENT: AdvisorConfig(
        id=AdvisorKind.MEMBER_ENGAGEMENT.value,
        category="engagement",
        display_name="Member Engagement Advisor",
        description="Applies the Achievement, Relationships and Belonging framework to member experience",
        system_prompt=MEMBER_ENGAGEMENT_PROMPT,
        focus_metrics=("engagement", "grace", "membership_growth"),
    ),
}
