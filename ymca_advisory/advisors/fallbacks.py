"""Rule-based fallback copy, keyed by advisor category and performance tier.

Used whenever the completion service is unconfigured, fails, or returns
text the parser cannot read. Every entry fills every section so a fallback
insight is always complete.
"""

from dataclasses import dataclass

from ..models.performance import PerformanceTier


@dataclass(frozen=True)
class FallbackCopy:
    """Static insight copy. `summary` may use {organization_name}, {percentage} and {advisor_name}."""

    summary: str
    key_insights: tuple[str, ...]
    immediate: tuple[str, ...]
    short_term: tuple[str, ...]
    long_term: tuple[str, ...]
    success_metrics: tuple[str, ...]
    special_considerations: tuple[str, ...]


GENERIC_FALLBACK = FallbackCopy(
    summary="Analysis completed using rule-based system for {organization_name}.",
    key_insights=("AI analysis temporarily unavailable", "Using fallback analysis system"),
    immediate=("Review current performance data", "Identify immediate improvement opportunities"),
    short_term=("Develop improvement plan", "Set measurable goals"),
    long_term=("Build sustainable improvement framework", "Establish monitoring systems"),
    success_metrics=("Performance score improvement", "Support designation upgrade"),
    special_considerations=("YMCA mission alignment", "Community impact focus"),
)


FALLBACK_TABLES: dict[str, dict[PerformanceTier, FallbackCopy]] = {
    "financial": {
        PerformanceTier.LOW: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall and shows financial stress that "
                "warrants Y-USA support; liquidity and operating margin should be stabilized first."
            ),
            key_insights=(
                "Months of liquidity and operating margin are below sustainable levels",
                "Reliance on debt financing limits flexibility for mission programming",
                "Charitable revenue is not yet offsetting operating gaps",
            ),
            immediate=(
                "Build a 13-week cash flow forecast and review it weekly with the finance committee",
                "Freeze discretionary spending until operating margin is positive",
            ),
            short_term=(
                "Renegotiate debt terms or consolidate high-cost obligations",
                "Launch an annual campaign to grow unrestricted charitable revenue",
            ),
            long_term=(
                "Establish an operating reserve policy targeting three months of expenses",
                "Diversify revenue across membership, programs and philanthropy",
            ),
            success_metrics=("Months of liquidity", "Operating margin", "Debt ratio"),
            special_considerations=(
                "Protect financial assistance programs while cutting costs",
                "Engage the board treasurer and Y-USA financial resources early",
            ),
        ),
        PerformanceTier.MODERATE: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall with a workable but thin financial "
                "position; strengthening reserves and revenue mix will support independent improvement."
            ),
            key_insights=(
                "Operating results are stable but leave little room for investment",
                "Revenue mix is concentrated in a small number of sources",
            ),
            immediate=(
                "Review monthly variance reports against budget with program leaders",
                "Identify the two programs with the weakest contribution margin",
            ),
            short_term=(
                "Set a liquidity target and a plan to reach it within the fiscal year",
                "Grow charitable revenue through donor retention and major gifts",
            ),
            long_term=(
                "Adopt a multi-year financial plan tied to the strategic plan",
                "Build capital reserves ahead of facility needs",
            ),
            success_metrics=("Operating margin trend", "Charitable revenue share", "Reserve balance"),
            special_considerations=(
                "Balance sustainability goals with accessible pricing",
                "Share financial dashboards with the board quarterly",
            ),
        ),
        PerformanceTier.HIGH: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall and is financially healthy; the focus "
                "shifts to deploying strength toward mission growth."
            ),
            key_insights=(
                "Liquidity and margins support strategic investment",
                "Debt levels leave capacity for planned capital projects",
            ),
            immediate=(
                "Confirm reserve policy compliance and document it for the board",
                "Identify mission programs ready for expansion funding",
            ),
            short_term=(
                "Fund pilot programs in underserved parts of the service area",
                "Benchmark financial ratios against peer associations",
            ),
            long_term=(
                "Establish an endowment or board-designated fund",
                "Plan facility investments against long-term community needs",
            ),
            success_metrics=("Mission investment per member", "Reserve coverage", "Endowment growth"),
            special_considerations=(
                "Mentor peer associations through Y-USA networks",
                "Avoid complacency by stress-testing budgets annually",
            ),
        ),
    },
    "operational": {
        PerformanceTier.LOW: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall; staff retention and core practices "
                "need structured support to stabilize operations."
            ),
            key_insights=(
                "Turnover is disrupting program quality and member relationships",
                "Risk management and governance practices are incomplete",
                "Leadership capacity is stretched across daily operations",
            ),
            immediate=(
                "Conduct stay interviews with full-time staff in high-turnover roles",
                "Close open risk management gaps starting with child protection policies",
            ),
            short_term=(
                "Introduce onboarding and training pathways for new staff",
                "Review compensation against local market data",
            ),
            long_term=(
                "Build a leadership development pipeline for frontline supervisors",
                "Embed a culture of recognition across departments",
            ),
            success_metrics=("Full-time staff retention rate", "Open risk findings", "Time to fill roles"),
            special_considerations=(
                "Part-time and seasonal staff need tailored retention approaches",
                "Use Y-USA HR consulting resources",
            ),
        ),
        PerformanceTier.MODERATE: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall with stable operations; targeted "
                "investment in staff development will lift retention further."
            ),
            key_insights=(
                "Retention is adequate but uneven across departments",
                "Governance practices are in place but not consistently reviewed",
            ),
            immediate=(
                "Review exit interview themes from the last twelve months",
                "Confirm board policy reviews are on the annual calendar",
            ),
            short_term=(
                "Expand training and certification opportunities for staff",
                "Improve internal communication between branches and the association office",
            ),
            long_term=(
                "Formalize succession plans for key leadership roles",
                "Benchmark engagement survey results year over year",
            ),
            success_metrics=("Staff engagement survey score", "Retention by department", "Policy review completion"),
            special_considerations=(
                "Recognize staff contributions to mission outcomes",
                "Align HR processes with YMCA values",
            ),
        ),
        PerformanceTier.HIGH: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall with strong operational practices; "
                "sustain them while developing future leaders."
            ),
            key_insights=(
                "Retention and governance practices are a strength",
                "Well-established processes create capacity for innovation",
            ),
            immediate=(
                "Document practices that drive retention so they survive staff changes",
                "Celebrate retention milestones with staff",
            ),
            short_term=(
                "Offer cross-training and stretch assignments to high performers",
                "Share governance practices with peer associations",
            ),
            long_term=(
                "Invest in executive leadership development",
                "Refresh the talent strategy alongside the strategic plan",
            ),
            success_metrics=("Internal promotion rate", "Retention of high performers", "Board engagement"),
            special_considerations=(
                "Guard against burnout in high-performing teams",
                "Keep risk management current as programs expand",
            ),
        ),
    },
    "growth": {
        PerformanceTier.LOW: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall; membership and program growth needs "
                "a focused recovery plan with Y-USA support."
            ),
            key_insights=(
                "Membership and program reach are below market potential",
                "Member acquisition efforts lack consistent follow-through",
            ),
            immediate=(
                "Analyze membership cancellations from the last two quarters",
                "Reach out to lapsed members with a return offer",
            ),
            short_term=(
                "Map community needs against current program offerings",
                "Train front desk staff on membership conversations",
            ),
            long_term=(
                "Develop community partnerships that extend program reach",
                "Build a market share tracking process",
            ),
            success_metrics=("Net membership growth", "Program participation", "Market share"),
            special_considerations=(
                "Growth should reflect the diversity of the community served",
                "Protect affordability through financial assistance",
            ),
        ),
        PerformanceTier.MODERATE: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall with steady growth; sharper targeting "
                "of underserved segments can accelerate impact."
            ),
            key_insights=(
                "Growth is steady but concentrated in a few programs",
                "Community partnerships are underused as a growth channel",
            ),
            immediate=(
                "Identify the three fastest-growing programs and their drivers",
                "Review pricing and financial assistance awareness",
            ),
            short_term=(
                "Pilot outreach in underserved neighborhoods",
                "Improve member onboarding in the first ninety days",
            ),
            long_term=(
                "Align facility and program plans with population trends",
                "Establish growth targets in the strategic plan",
            ),
            success_metrics=("New member conversion rate", "Ninety-day retention", "Program enrollment growth"),
            special_considerations=(
                "Balance growth with member experience quality",
                "Coordinate growth plans with staffing capacity",
            ),
        ),
        PerformanceTier.HIGH: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall with strong growth; extend reach "
                "while keeping the member experience consistent."
            ),
            key_insights=(
                "Membership and program growth outpace peers",
                "Strong community presence supports new initiatives",
            ),
            immediate=(
                "Check facility capacity against peak usage",
                "Capture member testimonials that explain growth",
            ),
            short_term=(
                "Expand successful programs to additional branches",
                "Deepen partnerships with schools and health systems",
            ),
            long_term=(
                "Evaluate new service areas or facility investments",
                "Develop a long-term community impact measurement framework",
            ),
            success_metrics=("Community reach", "Program capacity utilization", "Member satisfaction"),
            special_considerations=(
                "Avoid growth that outpaces staffing and resources",
                "Keep mission focus as the association scales",
            ),
        ),
    },
    "engagement": {
        PerformanceTier.LOW: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall; member engagement needs rebuilding "
                "around Achievement, Relationships and Belonging."
            ),
            key_insights=(
                "Members are not consistently connected to staff or to each other",
                "Engagement practices are not yet measured",
            ),
            immediate=(
                "Greet every member by name at check-in for the next month",
                "Launch a short member belonging survey",
            ),
            short_term=(
                "Train staff on ARB conversations that help members set goals",
                "Create small-group programs that build relationships",
            ),
            long_term=(
                "Embed ARB measures in program design and evaluation",
                "Build a member ambassador program",
            ),
            success_metrics=("Member belonging score", "Visit frequency", "Program retention"),
            special_considerations=(
                "Treat the member as the hero of their story, with the Y as guide",
                "Make belonging visible for members of every background",
            ),
        ),
        PerformanceTier.MODERATE: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall with a solid engagement base; "
                "consistent ARB practices will deepen member belonging."
            ),
            key_insights=(
                "Engagement is strong in some programs and weak in others",
                "Staff understand ARB but apply it unevenly",
            ),
            immediate=(
                "Identify members at risk of lapsing from visit data",
                "Share ARB success stories in staff meetings",
            ),
            short_term=(
                "Standardize goal-setting conversations for new members",
                "Add relationship-building moments to drop-in programs",
            ),
            long_term=(
                "Track achievement, relationships and belonging in member surveys",
                "Recognize staff who model ARB practices",
            ),
            success_metrics=("Member net promoter score", "Goal attainment rate", "Renewal rate"),
            special_considerations=(
                "Engagement approaches should fit each branch's community",
                "Include volunteers in engagement training",
            ),
        ),
        PerformanceTier.HIGH: FallbackCopy(
            summary=(
                "{organization_name} scored {percentage}% overall with strong member engagement; "
                "share what works and keep innovating."
            ),
            key_insights=(
                "Members report strong belonging and relationships",
                "Engagement practices are consistent across programs",
            ),
            immediate=(
                "Document engagement practices as a playbook",
                "Thank member ambassadors and volunteers publicly",
            ),
            short_term=(
                "Mentor peer associations on ARB implementation",
                "Test new engagement formats with younger members",
            ),
            long_term=(
                "Link engagement measures to long-term health outcomes",
                "Refresh the member experience strategy every three years",
            ),
            success_metrics=("Long-term member retention", "Community impact stories", "Volunteer participation"),
            special_considerations=(
                "Keep engagement authentic as programs scale",
                "Extend belonging efforts to non-members in the community",
            ),
        ),
    },
}


def get_fallback_copy(category: str, tier: PerformanceTier) -> FallbackCopy:
    """Copy for a category and tier, or the generic copy for unknown categories."""
    return FALLBACK_TABLES.get(category, {}).get(tier, GENERIC_FALLBACK)
