"""Command-line interface for attendance reconciliation."""

import logging
import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm, Prompt
from rich.table import Table

from rollcall.errors import RollcallError, WorkflowError
from rollcall.export import default_report_name, status_label, write_json, write_xlsx
from rollcall.models import (
    AttendanceStatus,
    Classification,
    ImagePayload,
    MatchSensitivity,
    RosterSource,
)
from rollcall.oracle import OllamaOracle, OracleAdapter
from rollcall.pipeline import ReviewWorkflow

# Configure structlog for CLI
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="rollcall",
    help="Reconcile an official roster with the people seen in meeting screenshots",
    add_completion=False,
)
console = Console()

STATUS_STYLES = {
    AttendanceStatus.PRESENT: "green",
    AttendanceStatus.ABSENT: "red",
    AttendanceStatus.UNEXPECTED: "yellow",
}


@app.command()
def analyze(
    roster: Path = typer.Argument(
        ...,
        help="Official roster: an .xlsx spreadsheet or a photo of the list",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    screenshots: list[Path] = typer.Argument(
        ...,
        help="One or more meeting screenshots",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    sensitivity: MatchSensitivity = typer.Option(
        None,
        "--sensitivity",
        "-s",
        help="How aggressively differing spellings are matched (default from settings)",
    ),
    review: bool = typer.Option(
        True,
        "--review/--no-review",
        help="Review proposed matches before finalizing",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Excel report path (default: attendance_report_<date>.xlsx)",
    ),
    json_output: Path = typer.Option(
        None,
        "--json",
        help="Also write the finalized classification as JSON",
    ),
    language: str = typer.Option(
        None,
        "--language",
        "-l",
        help="Report labels: en or ar (default from settings)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Match a roster against meeting screenshots and export the attendance report."""
    from rollcall.config.settings import get_settings

    settings = get_settings()
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level.upper())
    language = language or settings.report_language
    if language not in ("en", "ar"):
        console.print(f"[red]Error:[/red] unsupported language '{language}' (use en or ar)")
        sys.exit(1)

    console.print(
        Panel.fit(
            "[bold blue]Rollcall[/bold blue]\n"
            "Matching the official roster with meeting attendance...",
            border_style="blue",
        )
    )
    console.print(f"\n[dim]Roster:[/dim] {roster}")
    console.print(f"[dim]Screenshots:[/dim] {len(screenshots)}\n")

    workflow = ReviewWorkflow(OracleAdapter(OllamaOracle()), sensitivity=sensitivity)

    try:
        workflow.set_roster_source(RosterSource.from_path(roster))
        workflow.add_observation_images(ImagePayload.from_path(p) for p in screenshots)

        with Progress(SpinnerColumn(), TextColumn("{task.description}"), console=console) as progress:
            task = progress.add_task("Starting...", total=None)
            for event in workflow.run_analysis():
                style = "yellow" if event.level == "warning" else "dim"
                progress.console.print(f"[{style}]➜ {event.message}[/{style}]")
                progress.update(task, description=event.message)

        if review:
            _review_matches(workflow)
        final = workflow.finalize()
        if review:
            _bulk_changes(workflow, language)
            final = workflow.engine.final

        _display_summary(final, language)

        output = output or Path(default_report_name())
        write_xlsx(final, output, language=language)
        console.print(f"\n[green]Report saved to:[/green] {output}")
        if json_output:
            write_json(final, json_output)
            console.print(f"[green]JSON saved to:[/green] {json_output}")

    except (RollcallError, ValueError, OSError) as e:
        console.print(f"\n[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)


@app.command()
def info() -> None:
    """Display system information and configuration."""
    from rollcall import __version__
    from rollcall.config.settings import get_settings

    settings = get_settings()

    console.print(
        Panel.fit(
            "[bold blue]Rollcall[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("Matching Model", settings.llm_model_name)
    table.add_row("Vision Model", settings.llm_vision_model_name)
    table.add_row("Ollama URL", settings.llm_ollama_base_url)
    table.add_row("Temperature", str(settings.llm_temperature))
    table.add_row("Request Timeout", f"{settings.llm_request_timeout}s")
    table.add_row("Context Window", str(settings.llm_num_ctx))
    table.add_row("Max Attempts", str(settings.llm_max_attempts))
    table.add_row("Sensitivity", settings.match_sensitivity.value)
    table.add_row("Report Language", settings.report_language)

    console.print(table)


def _review_matches(workflow: ReviewWorkflow) -> None:
    """Let the operator reject wrong matches until they finalize."""
    while True:
        session = workflow.engine.session
        if session is None or not session.present:
            return

        table = Table(title="Proposed matches", show_lines=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Roster name")
        table.add_column("Name in meeting", style="cyan")
        for i, attendee in enumerate(session.present):
            table.add_row(str(i), attendee.name, attendee.original_name or "")
        console.print(table)

        answer = Prompt.ask("Number of a wrong match to reject (Enter to finalize)", default="")
        if not answer.strip():
            return
        try:
            rejected = workflow.reject_match(int(answer))
        except ValueError:
            console.print(f"[red]Not a number:[/red] {answer}")
            continue
        except WorkflowError as e:
            console.print(f"[red]{e}[/red]")
            continue
        console.print(f"[yellow]Rejected:[/yellow] {rejected.name} ↔ {rejected.original_name or '-'}")


def _bulk_changes(workflow: ReviewWorkflow, language: str) -> None:
    """Optional bulk reclassification with an explicit confirmation step."""
    choices = [s.value for s in AttendanceStatus]
    while Confirm.ask("\nChange the status of some names?", default=False):
        raw = Prompt.ask("Names, separated by ';'")
        workflow.select(n.strip() for n in raw.split(";") if n.strip())
        if not workflow.selection:
            console.print("[yellow]None of those names are in the report.[/yellow]")
            continue

        target = AttendanceStatus(Prompt.ask("New status", choices=choices))
        workflow.request_bulk_change(target)
        label = status_label(target, language)
        if Confirm.ask(f"Move {len(workflow.selection)} name(s) to '{label}'?", default=False):
            moved = workflow.confirm_bulk_change()
            console.print(f"[green]Moved {moved} name(s).[/green]")
        else:
            workflow.cancel_bulk_change()
            console.print("[dim]Cancelled.[/dim]")


def _display_summary(final: Classification, language: str) -> None:
    """Display the finalized buckets.

    Args:
        final: The finalized classification.
        language: Label language.
    """
    console.print("\n[bold]Attendance Summary[/bold]")
    console.print("-" * 40)

    counts = Table(show_header=False, box=None)
    counts.add_column("Status", style="dim")
    counts.add_column("Count", justify="right")
    for status, count in final.counts().items():
        counts.add_row(status_label(status, language), str(count))
    console.print(counts)

    for status in AttendanceStatus:
        attendees = final.bucket(status)
        if not attendees:
            continue
        style = STATUS_STYLES[status]
        console.print(f"\n[bold {style}]{status_label(status, language)}[/bold {style}]")
        for attendee in attendees:
            suffix = f" [dim]({attendee.original_name})[/dim]" if attendee.original_name else ""
            console.print(f"  {attendee.name}{suffix}")


if __name__ == "__main__":
    app()
