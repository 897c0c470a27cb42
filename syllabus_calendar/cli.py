"""
Command-line interface for the syllabus calendar pipeline.

    syllabus-calendar extract syllabus.pdf
    syllabus-calendar extract syllabus.pdf --json --output events.json
    syllabus-calendar prompt syllabus.pdf
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from syllabus_calendar.config import get_settings
from syllabus_calendar.models import SyllabusExtractionResult, sort_events
from syllabus_calendar.pipeline import create_syllabus_pipeline
from syllabus_calendar.utils.errors import SyllabusCalendarException
from syllabus_calendar.utils.logging import setup_logging

# Initialize Typer app and Rich console
app = typer.Typer(
    name="syllabus-calendar",
    help="Extract calendar events from syllabus PDFs",
    add_completion=False,
)
console = Console()

PRIORITY_STYLES = {"high": "red", "medium": "yellow", "low": "green"}


def render_result(result: SyllabusExtractionResult) -> Table:
    """Build a table of events in display order."""
    title = result.courseName or "Syllabus"
    if result.semester:
        title += f" ({result.semester})"

    table = Table(title=title)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Time")
    table.add_column("Type")
    table.add_column("Priority")
    table.add_column("Title", style="bold")
    table.add_column("Location")

    for event in sort_events(result.events):
        style = PRIORITY_STYLES[event.priority.value]
        table.add_row(
            event.date,
            event.time or "all day",
            event.type.value,
            f"[{style}]{event.priority.value}[/{style}]",
            event.title,
            event.location or "",
        )

    return table


@app.command()
def extract(
    pdf_path: Path = typer.Argument(..., help="Path to the syllabus PDF"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON result to a file"),
):
    """Extract calendar events from a syllabus PDF."""

    async def _extract() -> SyllabusExtractionResult:
        pipeline = create_syllabus_pipeline()
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Processing {pdf_path.name}...", total=None)
            return await pipeline.process_file(pdf_path)

    if not pdf_path.exists():
        console.print(f"[red]Error:[/red] File not found: {pdf_path}")
        raise typer.Exit(1)

    try:
        result = asyncio.run(_extract())
    except SyllabusCalendarException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    if output:
        output.write_text(result.to_json(), encoding="utf-8")
        console.print(f"[green]✓[/green] Wrote {len(result.events)} events to {output}")

    if as_json:
        console.print_json(result.to_json())
    elif not output:
        console.print(render_result(result))
        console.print(f"[green]✓[/green] Successfully extracted {len(result.events)} events from syllabus")
        if result.instructor:
            console.print(f"Instructor: {result.instructor}")


@app.command()
def prompt(
    pdf_path: Path = typer.Argument(..., help="Path to the syllabus PDF"),
):
    """Show the extraction prompt for a PDF without calling a model."""
    if not pdf_path.exists():
        console.print(f"[red]Error:[/red] File not found: {pdf_path}")
        raise typer.Exit(1)

    try:
        pipeline = create_syllabus_pipeline()
        text = asyncio.run(pipeline.build_prompt(pipeline.read_pdf(pdf_path)))
    except SyllabusCalendarException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    console.print(text, markup=False, highlight=False)


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Syllabus Calendar - turn syllabus PDFs into calendar events."""
    try:
        log_level = "DEBUG" if debug else get_settings().log_level
        setup_logging(log_level=log_level)
    except SyllabusCalendarException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
