"""Command-line interface for CELF-P3 assessment insights."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import LOG_LEVELS, Settings
from .dashboard import AssessmentDashboard
from .errors import CelfInsightsError
from .export.text_report import format_date, render_text_report, write_text_report
from .insights.assembler import focus_report
from .insights.heuristics import format_score
from .models.report import Audience, ReportFocus
from .store.recent import JSONFileRecentStore

app = typer.Typer(
    name="celf-insights",
    help="CELF-P3 Assessment Insights - normative scores and interpretations per student",
    add_completion=False,
)

console = Console()

DataOption = typer.Option(None, "--data", "-d", help="Assessment CSV (defaults to CELF_DATA_PATH)")
RulesOption = typer.Option(None, "--rules", "-r", help="Interpretation rule table (defaults to CELF_RULES_PATH)")


def setup_logging(level: str = "WARNING"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def _load_dashboard(data: Optional[Path], rules: Optional[Path]) -> AssessmentDashboard:
    settings = Settings.load()
    try:
        return AssessmentDashboard.load(
            data or settings.data.data_path,
            rules or settings.data.rules_path,
            recent_store=JSONFileRecentStore(settings.data.recent_store_path),
            settings=settings,
        )
    except CelfInsightsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def _optional_score(value: Optional[float]) -> str:
    return "-" if value is None else format_score(value)


def _select(dashboard: AssessmentDashboard, student_id: str):
    try:
        return dashboard.select(student_id)
    except CelfInsightsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override CELF_LOG_LEVEL"),
):
    """Configure logging before any command runs."""
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        console.print(f"[red]Error: log level must be one of: {', '.join(LOG_LEVELS)}[/red]")
        raise typer.Exit(code=1)

    settings = Settings.load()
    setup_logging(log_level or settings.app.log_level)


@app.command()
def version():
    """Show version information."""
    from celf_insights import __version__

    console.print(Panel.fit(
        f"[bold blue]CELF-P3 Assessment Insights[/bold blue]\n"
        f"Version: [green]{__version__}[/green]",
        title="Version Info"
    ))


@app.command()
def students(
    search: str = typer.Option("", "--search", "-s", help="Filter by name or id"),
    data: Optional[Path] = DataOption,
    rules: Optional[Path] = RulesOption,
):
    """List students in the assessment file."""
    dashboard = _load_dashboard(data, rules)
    matches = dashboard.search_students(search)

    if not matches:
        console.print("[yellow]No students found matching the criteria.[/yellow]")
        return

    table = Table(title=f"Students ({len(matches)})")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Assessments", justify="right")
    for student in matches:
        table.add_row(student.id, student.name, str(len(dashboard.assessments_for(student.id))))
    console.print(table)


@app.command()
def report(
    student_id: str = typer.Argument(..., help="Student id"),
    audience: Optional[Audience] = typer.Option(None, "--audience", "-a", help="clinician or family"),
    focus: ReportFocus = typer.Option(ReportFocus.OVERVIEW, "--focus", "-f", help="Preset view"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    data: Optional[Path] = DataOption,
    rules: Optional[Path] = RulesOption,
):
    """Show matched interpretations for a student's latest assessment."""
    dashboard = _load_dashboard(data, rules)
    student = _select(dashboard, student_id)
    view = dashboard.view(student.id, audience)
    result = focus_report(view.report, focus)

    if as_json:
        console.print_json(result.model_dump_json())
        return

    console.print(Panel.fit(
        f"[bold]{result.student}[/bold] ({student.id})\n"
        f"Audience: {result.audience.value}  Assessment date: {result.assessment_date or 'n/a'}",
        title="Clinical Insight Report",
    ))

    if not result.test_insights and not result.comparisons:
        console.print("[yellow]No matching interpretations found.[/yellow]")
        return

    for test in result.test_insights:
        console.print(
            f"\n[bold blue]{test.test}[/bold blue] ({test.test_abbreviation}): "
            f"{format_score(test.score)}, z = {test.z_score:.2f}, {test.normative_band.value}"
        )
        for insight in test.insights:
            console.print(f"  [bold]{insight.title}[/bold] - {insight.summary}")
            for rec in insight.recommendations:
                console.print(f"    • {rec}")
            console.print(f"    [dim]Source: {insight.source}[/dim]")

    for comparison in result.comparisons:
        console.print(
            f"\n[bold magenta]Receptive vs Expressive[/bold magenta]: "
            f"{format_score(comparison.receptive_score)} vs {format_score(comparison.expressive_score)} "
            f"(z difference {comparison.z_difference:.2f})"
        )
        for insight in comparison.insights:
            console.print(f"  [bold]{insight.title}[/bold] - {insight.summary}")
            for rec in insight.recommendations:
                console.print(f"    • {rec}")

    console.print(f"\n[dim]{result.total_retrieved} interpretation(s) retrieved[/dim]")


@app.command()
def insights(
    student_id: str = typer.Argument(..., help="Student id"),
    data: Optional[Path] = DataOption,
    rules: Optional[Path] = RulesOption,
):
    """Show heuristic insights and headline scores for a student."""
    dashboard = _load_dashboard(data, rules)
    student = _select(dashboard, student_id)
    view = dashboard.view(student.id)

    if view.kpis is not None:
        kpis = view.kpis
        console.print(
            f"Tests assessed: {kpis.total_tests}  "
            f"Below average: {kpis.below_average_count}  "
            f"Above average: {kpis.above_average_count}"
        )

    if view.has_data:
        table = Table(title="Latest Scores")
        table.add_column("Test")
        table.add_column("Standard", justify="right")
        table.add_column("Percentile", justify="right")
        table.add_column("Date")
        table.add_column("Age (months)", justify="right")
        for result in view.latest_results:
            table.add_row(
                result.test_name,
                _optional_score(result.standard_score),
                _optional_score(result.percentile),
                format_date(result.date),
                _optional_score(result.age_months),
            )
        console.print(table)

    if not view.insights:
        console.print("[yellow]No significant patterns detected at this time.[/yellow]")
        return

    for insight in view.insights:
        console.print(f"\n[bold]{insight.title}[/bold]")
        for item in insight.items:
            console.print(f"  • {item}")


@app.command()
def export(
    student_id: str = typer.Argument(..., help="Student id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File or directory to write"),
    data: Optional[Path] = DataOption,
    rules: Optional[Path] = RulesOption,
):
    """Export a plain-text report for a student."""
    dashboard = _load_dashboard(data, rules)
    student = _select(dashboard, student_id)
    view = dashboard.view(student.id)

    if output is None:
        typer.echo(render_text_report(student, view.assessments, view.insights))
        return

    try:
        path = write_text_report(output, student, view.assessments, view.insights)
    except CelfInsightsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Report written to {path}[/green]")


@app.command()
def recent(
    data: Optional[Path] = DataOption,
    rules: Optional[Path] = RulesOption,
):
    """List recently viewed students."""
    dashboard = _load_dashboard(data, rules)
    entries = dashboard.recent()

    if not entries:
        console.print("[yellow]No recent students.[/yellow]")
        return

    for student in entries:
        console.print(f"  {student.initials:3} {student.name} ({student.id})")


@app.command("rules")
def rules_summary(
    test: Optional[str] = typer.Option(None, "--test", "-t", help="List rules for a test type"),
    audience: Optional[Audience] = typer.Option(None, "--audience", "-a", help="List rules for an audience"),
    rules: Optional[Path] = RulesOption,
):
    """Show interpretation rule table statistics, or list rules matching a filter."""
    from .scoring.rules import load_rule_table

    settings = Settings.load()
    try:
        table = load_rule_table(rules or settings.data.rules_path)
    except CelfInsightsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if test is None and audience is None:
        console.print(json.dumps(table.get_statistics(), indent=2))
        return

    criteria = {}
    if test is not None:
        criteria["test_type"] = test
    if audience is not None:
        criteria["audience"] = audience.value

    typer.echo(json.dumps([rule.to_dict() for rule in table.filter(**criteria)], indent=2))


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
