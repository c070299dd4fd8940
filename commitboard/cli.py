"""CLI interface for commitboard."""

import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from commitboard.analysis.engine import ContributionAnalyzer, MultiRepoMerger
from commitboard.analysis.ranking import TIE_BREAKS
from commitboard.config import (
    DEFAULT_MONTHS_BACK,
    DEFAULT_PERIOD,
    DEFAULT_TIE_BREAK,
    DEFAULT_TOP_N,
    OVERALL,
    RANKING_METRICS,
)
from commitboard.git.repository import discover_repositories
from commitboard.models import AnalysisResult, RepositoryResult
from commitboard.periods import PERIOD_STRATEGIES, DateRange


console = Console()


def parse_date(date_str: str | None) -> date | None:
    """Parse a date string into a date object.

    Args:
        date_str: Date string in YYYY-MM-DD format, or None

    Returns:
        date object or None
    """
    if not date_str:
        return None

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"Invalid date format: {date_str}. Use YYYY-MM-DD.")


def resolve_date_range(
    since: str | None, until: str | None, months: int | None
) -> DateRange:
    """Build the date range from CLI options.

    Explicit dates win; a missing end defaults to today and a missing start
    to the configured number of months before the end.
    """
    since_d = parse_date(since)
    until_d = parse_date(until) or date.today()
    if since_d is None:
        return DateRange.months_back(
            months if months is not None else DEFAULT_MONTHS_BACK, today=until_d
        )
    try:
        return DateRange(since=since_d, until=until_d)
    except ValueError as e:
        raise click.BadParameter(str(e))


def configure_logging(verbose: bool) -> None:
    """Send library logs through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def analysis_options(func):
    """Options shared by the analysis commands."""
    options = [
        click.option(
            "--period",
            type=click.Choice(list(PERIOD_STRATEGIES)),
            default=DEFAULT_PERIOD,
            show_default=True,
            help="Period granularity",
        ),
        click.option(
            "--top",
            "top_n",
            type=click.IntRange(min=0),
            default=DEFAULT_TOP_N,
            show_default=True,
            help="Number of best performers",
        ),
        click.option(
            "--tie-break",
            type=click.Choice(list(TIE_BREAKS)),
            default=DEFAULT_TIE_BREAK,
            show_default=True,
            help="Best performer tie-break policy",
        ),
        click.option(
            "--format",
            "output_format",
            type=click.Choice(["table", "json"]),
            default="table",
        ),
        click.option("-o", "--output", type=click.Path(), help="Write JSON to this file"),
        click.option("-v", "--verbose", is_flag=True, help="Verbose output"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def write_json(data: dict, output: str | None) -> None:
    text = json.dumps(data, indent=2, default=str)
    if output:
        Path(output).write_text(text)
        console.print(f"[green]JSON written to {output}[/green]")
    else:
        click.echo(text)


def print_repository(result: RepositoryResult) -> None:
    """Print author metrics and best performers for one repository."""
    if not result.authors:
        console.print(f"[yellow]No commits found for {result.name}.[/yellow]")
        return

    table = Table(title=f"Contributors: {result.name}")
    table.add_column("Author", style="cyan")
    table.add_column("Commits", justify="right")
    table.add_column("Additions", justify="right", style="green")
    table.add_column("Deletions", justify="right", style="red")
    table.add_column("Impact", justify="right")
    table.add_column("Productivity", justify="right")
    table.add_column("Combined", justify="right", style="yellow")

    for name, m in result.authors.items():
        table.add_row(
            name,
            f"{m.total_commits:,}",
            f"{m.total_additions:,}",
            f"{m.total_deletions:,}",
            f"{m.overall_impact_score:.2f}",
            f"{m.overall_productivity:.2f}",
            f"{m.combined_score:.2f}",
        )
    console.print(table)

    best = Table(title="Best Performers")
    best.add_column("#", justify="right")
    best.add_column("Author", style="cyan")
    best.add_column("Combined", justify="right", style="yellow")
    best.add_column("Most Impactful Commit")
    best.add_column("Date")
    best.add_column("+/-", justify="right")

    for position, performer in enumerate(result.best_performers, start=1):
        commit = performer.most_impactful_commit
        if commit:
            best.add_row(
                str(position),
                performer.author,
                f"{performer.combined_score:.2f}",
                commit.message,
                commit.date.isoformat(),
                f"+{commit.additions}/-{commit.deletions}",
            )
        else:
            best.add_row(
                str(position),
                performer.author,
                f"{performer.combined_score:.2f}",
                "[dim]none available[/dim]",
                "",
                "",
            )
    console.print(best)


def print_analysis(result: AnalysisResult) -> None:
    for repo_result in result.repositories.values():
        print_repository(repo_result)

    for failure in result.diagnostics:
        console.print(f"[yellow]Skipped {failure.name}: {failure.reason}[/yellow]")


@click.group()
@click.version_option(package_name="commitboard")
def cli():
    """Commitboard - contribution leaderboards from git history."""
    pass


@cli.command()
@click.argument("repo_paths", nargs=-1, type=click.Path(exists=True, file_okay=False))
@click.option(
    "--scan",
    type=click.Path(),
    help="Analyze every subdirectory of this folder",
)
@click.option("--since", help="Only commits on or after this date (YYYY-MM-DD)")
@click.option("--until", help="Only commits on or before this date (YYYY-MM-DD)")
@click.option(
    "--months",
    type=click.IntRange(min=0),
    help=f"Months back from today when --since is not given (default {DEFAULT_MONTHS_BACK})",
)
@click.option("--branch", help="Branch to analyze (default: current branch)")
@analysis_options
def analyze(
    repo_paths,
    scan,
    since,
    until,
    months,
    branch,
    period,
    top_n,
    tie_break,
    output_format,
    output,
    verbose,
):
    """Analyze one or more repositories."""
    configure_logging(verbose)
    try:
        if not repo_paths and not scan:
            raise click.UsageError("Give at least one repository path or --scan DIR.")

        date_range = resolve_date_range(since, until, months)
        if verbose:
            console.print(f"Analyzing contributions from {date_range.label}")

        merger = MultiRepoMerger(
            ContributionAnalyzer(
                period_strategy=period, top_n=top_n, tie_break=tie_break
            )
        )
        paths = list(repo_paths)
        if scan:
            paths.extend(discover_repositories(scan))
        result = merger.analyze_many(paths, date_range=date_range, branch=branch)

        if not result.repositories and not result.diagnostics:
            console.print("[yellow]No repositories found.[/yellow]")
            return

        if output_format == "json":
            write_json(result.to_dict(), output)
        else:
            print_analysis(result)

    except click.ClickException:
        raise
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


@cli.command()
@click.argument("repo_path", type=click.Path(exists=True, file_okay=False))
@click.option("--since", help="Only commits on or after this date (YYYY-MM-DD)")
@click.option("--until", help="Only commits on or before this date (YYYY-MM-DD)")
@click.option("--months", type=click.IntRange(min=0), help="Months back from today")
@click.option(
    "--period-key",
    default=OVERALL,
    show_default=True,
    help="Period to rank (e.g. 2024-05), or a selector: current, previous, quarter, overall",
)
@click.option(
    "--metric",
    type=click.Choice(RANKING_METRICS),
    help="Only show this metric",
)
@click.option(
    "--period",
    type=click.Choice(list(PERIOD_STRATEGIES)),
    default=DEFAULT_PERIOD,
    show_default=True,
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def rank(repo_path, since, until, months, period_key, metric, period, verbose):
    """Show leaderboards for one repository."""
    configure_logging(verbose)
    try:
        date_range = resolve_date_range(since, until, months)
        result = ContributionAnalyzer(period_strategy=period).analyze_repository(
            repo_path, date_range=date_range
        )

        rankings = result.rankings.get(period_key)
        if rankings is None:
            console.print(f"[yellow]No data for period {period_key}.[/yellow]")
            return

        metrics = [metric] if metric else RANKING_METRICS
        for name in metrics:
            table = Table(title=f"{name} ({period_key})")
            table.add_column("#", justify="right")
            table.add_column("Author", style="cyan")
            table.add_column("Value", justify="right", style="green")
            for position, entry in enumerate(rankings[name].entries, start=1):
                value = entry.value
                shown = f"{value:,.2f}" if isinstance(value, float) else f"{value:,}"
                table.add_row(str(position), entry.author, shown)
            console.print(table)

    except click.ClickException:
        raise
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@cli.command("parse-log")
@click.argument("log_file", type=click.File("r"))
@click.option("--name", default="repository", show_default=True, help="Repository name")
@analysis_options
def parse_log(log_file, name, period, top_n, tie_break, output_format, output, verbose):
    """Analyze a captured `git log --numstat` file ("-" for stdin)."""
    configure_logging(verbose)
    try:
        analyzer = ContributionAnalyzer(
            period_strategy=period, top_n=top_n, tie_break=tie_break
        )
        result = analyzer.analyze_text(log_file.read(), name=name)

        if output_format == "json":
            write_json(result.to_dict(), output)
        else:
            print_repository(result)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
