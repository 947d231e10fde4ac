#!/usr/bin/env python3
"""YMCA Advisory CLI: score a survey submission and generate an advisory report.

A submission file holds one submission object or a list of them
(`{organizationId, responses, timestamp}`); with a list, the latest
submission for the chosen organization is used.

Usage:
    ymca-advisory score submission.json                      # Metric table + overall score
    ymca-advisory score submission.json --json               # Snapshot as JSON
    ymca-advisory score submissions.json --organization Y123 # Latest submission for Y123
    ymca-advisory analyze submission.json --name "Downtown YMCA"
    ymca-advisory analyze submission.json --no-ai            # Rule-based fallback only
    ymca-advisory analyze submission.json --output report.json
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import load_settings
from .errors import AnalysisCancelled, ConfigurationError
from .models.analysis import AdvisorInsight, ComprehensiveAnalysis
from .models.performance import PerformanceSnapshot
from .models.survey import QuestionFilter, Submission, latest_submission
from .scorers.rubric_registry import MetricRubric
from .service import AdvisoryService
from .utils.logger import configure_logging

console = Console()
logger = logging.getLogger(__name__)

TIER_STYLES = {"low": "red", "moderate": "yellow", "high": "green"}


def load_submission(path: Path, organization_id: Optional[str] = None) -> Submission:
    """Read a submission file and pick the effective submission.

    Raises:
        ValueError: the file holds no matching submission
    """
    with open(path) as f:
        raw = json.load(f)
    records = raw if isinstance(raw, list) else [raw]
    submissions = [Submission.from_dict(r) for r in records]
    submission = latest_submission(submissions, organization_id=organization_id)
    if submission is None:
        raise ValueError(f"No submission for organization {organization_id} in {path}")
    return submission


def display_snapshot(snapshot: PerformanceSnapshot, rubric: MetricRubric) -> None:
    table = Table(title=f"Metric Scores: {snapshot.organization_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Category")
    table.add_column("Points", justify="right")
    table.add_column("Tier", justify="center")

    for score in snapshot.metric_scores:
        definition = rubric.get(score.metric_id)
        style = TIER_STYLES.get(score.tier.value, "white")
        table.add_row(
            definition.name if definition else score.metric_id,
            definition.category.value if definition else "",
            f"{score.points:g}/{score.max_points:g}",
            f"[{style}]{score.tier.value}[/{style}]",
        )
    console.print(table)

    totals = ", ".join(f"{name}: {points:g}" for name, points in snapshot.category_totals.items())
    summary = (
        f"Total: {snapshot.total_points:g}/{snapshot.max_points:g} ({snapshot.percentage:.1f}%)\n"
        f"Categories: {totals}\n"
        f"Performance tier: {snapshot.performance_tier.value}\n"
        f"Support designation: {snapshot.support_designation}"
    )
    console.print(Panel(summary, title="Overall Performance", border_style="blue"))


def display_analysis(analysis: ComprehensiveAnalysis) -> None:
    assessment = analysis.overall_assessment
    summary = analysis.summary
    console.print(
        Panel(
            f"Score: {assessment.score:g}/{assessment.max_score:g} ({assessment.percentage}%)\n"
            f"Performance level: {assessment.performance_level}\n"
            f"Support needed: {assessment.support_needed}\n"
            f"Designation: {assessment.support_designation}\n"
            f"Advisors: {summary.successful_analyses} AI, {summary.fallback_analyses} fallback, "
            f"{summary.failed_analyses} failed ({summary.ai_provider})",
            title=f"Advisory Report: {analysis.organization_name}",
            border_style="blue",
        )
    )

    for advisor_id, insight in analysis.advisor_insights.items():
        console.print()
        if not isinstance(insight, AdvisorInsight):
            console.print(f"[bold]{advisor_id}[/bold] [red]failed: {insight.error}[/red]")
            continue
        console.print(f"[bold]{insight.advisor_name}[/bold] [dim]({insight.source.value})[/dim]")
        console.print(f"  {insight.executive_summary}")
        for item in insight.key_insights:
            console.print(f"  - {item}")
        actions = insight.recommended_actions
        sections = (
            ("Immediate", actions.immediate),
            ("Short-term", actions.short_term),
            ("Long-term", actions.long_term),
        )
        for label, items in sections:
            if items:
                console.print(f"  [cyan]{label}:[/cyan] {'; '.join(items)}")

    if analysis.cross_cutting_themes:
        console.print()
        table = Table(title="Cross-Cutting Themes")
        table.add_column("Theme", style="cyan")
        table.add_column("Advisors", justify="right")
        table.add_column("Priority", justify="center")
        for theme in analysis.cross_cutting_themes:
            table.add_row(theme.theme, str(theme.frequency), theme.priority)
        console.print(table)

    plan = analysis.master_action_plan
    console.print()
    console.print(f"[bold]Master Action Plan[/bold] (priority: {plan.priority})")
    for channel in plan.support_channels:
        console.print(f"  {channel}")


def write_output(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)
    console.print(f"\nReport saved to: {path}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Score YMCA survey submissions and generate advisory reports")
    parser.add_argument("--log-level", help="Override AI_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("score", "Score a submission"), ("analyze", "Generate a comprehensive analysis")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("submission", type=Path, help="Submission JSON file (object or list)")
        sub.add_argument("--organization", help="Organization id to select from a list of submissions")
        sub.add_argument(
            "--filter",
            default=QuestionFilter.ALL.value,
            choices=[f.value for f in QuestionFilter],
            help="Question filter applied when scoring (default: all)",
        )
        sub.add_argument("--output", type=Path, help="Save the result to a JSON file")

    parser_score = subparsers.choices["score"]
    parser_score.add_argument("--json", action="store_true", help="Print the snapshot as JSON")

    parser_analyze = subparsers.choices["analyze"]
    parser_analyze.add_argument("--name", default="", help="Organization display name")
    parser_analyze.add_argument("--no-ai", action="store_true", help="Use rule-based fallback analysis only")

    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)
    # Scoring never calls the completion service
    if args.command == "score" or args.no_ai:
        settings = dataclasses.replace(settings, enable_ai_advisors=False)

    try:
        submission = load_submission(args.submission, args.organization)
        service = AdvisoryService.from_settings(settings)
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not load submission: {e}[/red]")
        return 1
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return 1

    question_filter = QuestionFilter.parse(args.filter)

    if args.command == "score":
        snapshot = service.score(submission, question_filter)
        if args.json:
            console.print_json(json.dumps(snapshot.to_dict()))
        else:
            display_snapshot(snapshot, service.rubric)
        if args.output:
            write_output(args.output, snapshot.to_dict())
        return 0

    try:
        analysis = asyncio.run(
            service.analyze(submission, organization_name=args.name, question_filter=question_filter)
        )
    except (AnalysisCancelled, KeyboardInterrupt):
        console.print("[yellow]Analysis cancelled[/yellow]")
        return 130

    display_analysis(analysis)
    if args.output:
        write_output(args.output, analysis.to_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
