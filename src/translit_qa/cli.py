"""
translit-qa CLI

Command-line interface for running the scenario corpus against the
transliteration service.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from translit_qa import __version__
from translit_qa.core.config import settings
from translit_qa.core.exceptions import TranslitQAError
from translit_qa.core.state import RunReport, ScenarioKind, ScenarioStatus

app = typer.Typer(
    name="translit-qa",
    help="Black-box functional validator for web transliteration services",
    add_completion=False,
)
console = Console()

STATUS_STYLE = {
    ScenarioStatus.PASSED: "[green]PASS[/green]",
    ScenarioStatus.FAILED: "[red]FAIL[/red]",
    ScenarioStatus.ERROR: "[magenta]ERROR[/magenta]",
}


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _load(corpus_path: Optional[Path]):
    from translit_qa.core.corpus import load_corpus

    try:
        return load_corpus(corpus_path)
    except TranslitQAError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)


@app.command()
def version() -> None:
    """Show translit-qa version."""
    console.print(f"translit-qa v{__version__}")


@app.command()
def config() -> None:
    """Show current configuration."""
    console.print(
        Panel(
            f"""[bold]translit-qa Configuration[/bold]

Target URL: {settings.target_url}
Headless: {settings.headless}
Navigation Timeout: {settings.navigation_timeout_ms}ms
Settle Mode: {settings.settle_mode.value}
  Fixed Delay: {settings.settle_delay_ms}ms
  Poll: every {settings.poll_interval_ms}ms, up to {settings.poll_timeout_ms}ms
Content Scan Limit: {settings.content_scan_limit} elements
Target Script: U+{settings.target_script_start:04X}-U+{settings.target_script_end:04X}
Screenshot Dir: {settings.screenshot_dir}
Strict Exploratory: {settings.strict_exploratory}
Max Workers: {settings.max_workers}
Log Level: {settings.log_level}
""",
            title="[bold blue]translit-qa[/bold blue]",
        )
    )


@app.command("list")
def list_scenarios(
    corpus_path: Optional[Path] = typer.Option(None, "--corpus", "-c", help="Corpus YAML file"),
) -> None:
    """List the scenarios of the corpus."""
    corpus = _load(corpus_path)

    table = Table(title=f"{len(corpus)} scenarios")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Input", overflow="fold")

    for record in corpus:
        table.add_row(record.id, record.kind.value, record.display_name, record.input_text)

    console.print(table)


def _print_report(report: RunReport, verbose: bool) -> None:
    table = Table(title="Scenario Results")
    table.add_column("Status", no_wrap=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Mode")
    table.add_column("Score", justify="right")
    table.add_column("Actual Output", overflow="fold")

    for outcome in report.outcomes:
        decision = outcome.decision
        mode = decision.mode.value if decision else "-"
        score = "-"
        if decision and decision.match:
            score = f"{decision.match.similarity_score:.2f}"
        table.add_row(STATUS_STYLE[outcome.status], outcome.scenario_id, mode, score, outcome.actual_output)

        if verbose and decision:
            for warning in decision.warnings:
                table.add_row("", "", "", "", f"[yellow]{warning}[/yellow]")
        if outcome.error:
            table.add_row("", "", "", "", f"[dim]{outcome.error['message']}[/dim]")

    console.print(table)

    status_color = "green" if report.ok else "red"
    console.print(
        Panel(
            f"""[bold]Total:[/bold] {report.total} scenarios
[bold]Passed:[/bold] [{status_color}]{report.passed}[/{status_color}]
[bold]Failed:[/bold] [{status_color}]{report.failed}[/{status_color}]
[bold]Errored:[/bold] [{status_color}]{report.errored}[/{status_color}]""",
            title=f"[bold {status_color}]Run Summary[/bold {status_color}]",
        )
    )


@app.command()
def run(
    corpus_path: Optional[Path] = typer.Option(None, "--corpus", "-c", help="Corpus YAML file"),
    only: Optional[list[str]] = typer.Option(None, "--only", "-o", help="Run only these scenario ids"),
    kind: Optional[ScenarioKind] = typer.Option(None, "--kind", "-k", help="Run only strict or exploratory scenarios"),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Scenarios to run concurrently"),
    report_path: Optional[Path] = typer.Option(None, "--report", "-r", help="Write a JSON report to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """Run the scenario corpus against the target service."""
    from translit_qa.core.runner import run_corpus

    _configure_logging(verbose)
    corpus = _load(corpus_path)
    try:
        corpus = corpus.select(ids=only or None, kind=kind)
    except TranslitQAError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    console.print(
        Panel(
            f"[bold]Target:[/bold] {settings.target_url}\n"
            f"[bold]Scenarios:[/bold] {len(corpus)}\n"
            f"[bold]Settle:[/bold] {settings.settle_mode.value}",
            title="[bold blue]translit-qa Run[/bold blue]",
        )
    )

    try:
        report = asyncio.run(
            run_corpus(
                corpus,
                headless=False if headed else None,
                max_workers=workers,
            )
        )
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)

    _print_report(report, verbose)

    if report_path:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(report.to_json(), encoding="utf-8")
        console.print(f"[dim]Report written to {report_path}[/dim]")

    if not report.ok:
        raise typer.Exit(1)


@app.command()
def snapshot(
    path: Path = typer.Option(Path("test-results/debug-website.png"), "--path", "-p", help="Screenshot file"),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window"),
) -> None:
    """Screenshot the target page and show which strategy finds each surface."""
    from translit_qa.tools.browser import BrowserTool
    from translit_qa.tools.resolver import ElementResolver

    _configure_logging(False)
    tool = BrowserTool(headless=False if headed else None)
    resolver = ElementResolver(
        content_scan_limit=settings.content_scan_limit,
        script=settings.target_script,
    )

    try:
        result = asyncio.run(tool.take_snapshot(str(path), resolver=resolver))
    except TranslitQAError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    strategies = "\n".join(
        f"  {role}: {name or '[red]not found[/red]'}"
        for role, name in result["strategies"].items()
    )
    console.print(
        Panel(
            f"""[bold]URL:[/bold] {result['url']}
[bold]Title:[/bold] {result['title']}
[bold]Screenshot:[/bold] {result['path']}

[bold]Resolved surfaces:[/bold]
{strategies}""",
            title="[bold blue]Debug Snapshot[/bold blue]",
        )
    )


if __name__ == "__main__":
    app()
