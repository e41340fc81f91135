"""CLI for the report triage pipeline using Typer and Rich."""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import pydantic
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from alerto_triage import __version__
from alerto_triage.config.logging import get_logger
from alerto_triage.config.settings import settings
from alerto_triage.data_management import (
    AnalysisStore,
    NotificationStore,
    OperatorStore,
    ReportStore,
)
from alerto_triage.data_management.dashboard import compute_dashboard_stats
from alerto_triage.data_management.schemas import Operator, Report
from alerto_triage.errors import TriageError
from alerto_triage.pipeline.ingestion_trigger import IngestionTrigger, TriageOutcome
from alerto_triage.triage.credibility_scorer import analyze_report

app = typer.Typer(
    help="Alerto report triage - credibility scoring and admin notification",
    add_completion=False,
)

console = Console()

logger = get_logger("cli")


def _load_json_records(path: Path) -> list[dict[str, Any]]:
    """Read one JSON object or a list of objects from a file."""
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]✗[/red] Cannot read {escape(str(path))}: {escape(str(e))}")
        raise typer.Exit(1)
    return data if isinstance(data, list) else [data]


@app.command()
def status() -> None:
    """Display pipeline configuration."""
    table = Table(title="Triage Pipeline Status", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", width=24)
    table.add_column("Value", style="yellow")

    table.add_row("Notify min score", f"{settings.notify_min_score:.2f}")
    table.add_row("Notify severities", ", ".join(settings.notify_severities))
    table.add_row("Fan-out concurrency", str(settings.fanout_concurrency))
    table.add_row("Logging", f"Level: {settings.log_level}, Format: {settings.log_format}")
    table.add_row("Report store", settings.report_persistence_path or "memory")
    table.add_row("Analysis store", settings.analysis_persistence_path or "memory")
    table.add_row("Notification store", settings.notification_persistence_path or "memory")

    console.print(table)


@app.command()
def analyze(
    path: Path = typer.Argument(..., help="JSON file with one report snapshot or a list"),
    trace: bool = typer.Option(False, "--trace", help="Show per-rule deltas"),
) -> None:
    """Score report snapshots without touching any store."""
    for raw in _load_json_records(path):
        try:
            analysis = analyze_report(raw)
        except TriageError as e:
            console.print(f"[red]✗[/red] {e.code}: {escape(e.message)}")
            raise typer.Exit(1)

        console.print(
            f"[bold cyan]{escape(analysis.report_id or '-')}[/bold cyan] "
            f"score=[bold]{analysis.score:.2f}[/bold] "
            f"recommendation=[bold]{analysis.recommendation.value}[/bold] "
            f"flags={', '.join(analysis.flags) or '-'}"
        )
        console.print(f"[dim]{escape(analysis.summary)}[/dim]")

        if trace:
            table = Table(show_header=True, header_style="bold magenta")
            table.add_column("Rule", style="cyan", no_wrap=True)
            table.add_column("Passed")
            table.add_column("Delta", justify="right")
            table.add_column("Flag", style="yellow")
            for outcome in analysis.rule_trace:
                table.add_row(
                    outcome.rule,
                    "✓" if outcome.passed else "✗",
                    f"{outcome.delta:+.2f}",
                    outcome.flag or "",
                )
            console.print(table)


async def _run_triage(
    reports: list[Report],
    admins: list[Operator],
) -> tuple[list[Optional[TriageOutcome]], dict[str, Any]]:
    report_store = ReportStore(settings.report_persistence_path)
    analysis_store = AnalysisStore(settings.analysis_persistence_path)
    notification_store = NotificationStore(settings.notification_persistence_path)
    operator_store = OperatorStore()

    for operator in admins:
        await operator_store.add_operator(operator)

    trigger = IngestionTrigger(report_store, analysis_store, notification_store, operator_store)

    outcomes: list[Optional[TriageOutcome]] = []
    for report in reports:
        await report_store.save_report(report)
        outcomes.append(await trigger.process_new_report(report.report_id, report))

    stats = await compute_dashboard_stats(report_store, analysis_store)
    return outcomes, stats


@app.command()
def triage(
    path: Path = typer.Argument(..., help="JSON file with one report or a list"),
    admins: Optional[Path] = typer.Option(None, "--admins", help="JSON list of operators"),
) -> None:
    """Run the full ingestion pipeline over reports against local stores."""
    records = _load_json_records(path)
    operators = _load_json_records(admins) if admins else []
    logger.info(f"Triaging {len(records)} reports with {len(operators)} operators")

    try:
        reports = [Report.model_validate(raw) for raw in records]
        admin_roster = [Operator.model_validate(raw) for raw in operators]
    except pydantic.ValidationError as e:
        console.print(f"[red]✗[/red] invalid-argument: {escape(str(e))}")
        raise typer.Exit(1)

    outcomes, stats = asyncio.run(_run_triage(reports, admin_roster))

    table = Table(title="Triage Results", show_header=True, header_style="bold magenta")
    table.add_column("Report", style="cyan", no_wrap=True)
    table.add_column("Score", justify="right", no_wrap=True)
    table.add_column("Recommendation", no_wrap=True)
    table.add_column("Status", style="green", no_wrap=True)
    table.add_column("Notified", justify="right", no_wrap=True)
    table.add_column("Flags", style="yellow")

    for report, outcome in zip(reports, outcomes):
        if outcome is None:
            table.add_row(escape(report.report_id), "-", "-", "[red]failed[/red]", "0", "")
            continue
        table.add_row(
            outcome.report_id,
            f"{outcome.analysis.score:.2f}",
            outcome.analysis.recommendation.value,
            outcome.status.value,
            str(outcome.notified),
            ", ".join(outcome.analysis.flags),
        )

    console.print(table)
    console.print(
        f"\n[bold]{stats['total_reports']}[/bold] reports, "
        f"average score {stats['average_score']}, "
        f"{stats['awaiting_review']} awaiting review"
    )


@app.command()
def version() -> None:
    """Display version information."""
    console.print("[bold]Alerto Report Triage[/bold]")
    console.print(f"Version: {__version__}")


if __name__ == "__main__":
    app()
