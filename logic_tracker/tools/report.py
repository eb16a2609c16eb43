from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from logic_tracker.core.engine import LocationColor, LogicEngine
from logic_tracker.core.errors import LogicDataError, UnknownLocationError
from logic_tracker.core.formatting import ItemRequirementColor, ReadableRequirements
from logic_tracker.core.loader import DEFAULT_CONTENT_DIR, load_logic
from logic_tracker.core.models import TrackerState
from logic_tracker.services.logger import configure_logging
from logic_tracker.services.options_store import load_options

app = typer.Typer(add_completion=False, help="Inspect location availability for a tracker snapshot.")
console = Console()

ITEM_STYLES: dict[ItemRequirementColor, str] = {
    ItemRequirementColor.AVAILABLE_ITEM: "bold green",
    ItemRequirementColor.INCONSEQUENTIAL_ITEM: "dim",
    ItemRequirementColor.PLAIN_TEXT: "white",
    ItemRequirementColor.UNAVAILABLE_ITEM: "bold red",
}

LOCATION_STYLES: dict[LocationColor, str] = {
    LocationColor.AVAILABLE_LOCATION: "green",
    LocationColor.CHECKED_LOCATION: "grey50",
    LocationColor.NON_PROGRESS_LOCATION: "yellow",
    LocationColor.UNAVAILABLE_LOCATION: "red",
}


def _load_state(path: Optional[Path]) -> TrackerState:
    if path is None:
        return TrackerState()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        return TrackerState.model_validate(payload)
    except FileNotFoundError:
        console.print(f"[bold red]State file not found:[/bold red] {path}")
        raise typer.Exit(1)
    except (json.JSONDecodeError, ValidationError, ValueError) as exc:
        console.print(f"[bold red]Invalid state file {path.name}:[/bold red] {exc}")
        raise typer.Exit(1) from exc


def _build_engine(
    content: Path,
    state_path: Optional[Path],
    options_path: Optional[Path],
    verbose: bool,
    logs_dir: Optional[Path],
) -> LogicEngine:
    configure_logging(logs_dir, level=logging.DEBUG if verbose else logging.WARNING)
    options = load_options(options_path)
    try:
        logic = load_logic(content, options)
    except LogicDataError as exc:
        console.print(f"[bold red]Content load failed:[/bold red] {exc}")
        raise typer.Exit(1) from exc
    state = _load_state(state_path)
    try:
        return LogicEngine.from_options(state, logic, options)
    except (LogicDataError, UnknownLocationError) as exc:
        console.print(f"[bold red]Logic evaluation failed:[/bold red] {exc}")
        raise typer.Exit(1) from exc


def render_clauses(clauses: ReadableRequirements) -> list[Text]:
    lines: list[Text] = []
    for clause in clauses:
        line = Text()
        for index, token in enumerate(clause):
            if index:
                line.append(" ")
            line.append(token.text, style=ITEM_STYLES[token.color])
        lines.append(line)
    return lines


ContentOption = typer.Option(DEFAULT_CONTENT_DIR, "--content", help="Directory holding the logic JSON files.")
StateOption = typer.Option(None, "--state", help="JSON snapshot with 'items' and 'checkedLocations'.")
OptionsOption = typer.Option(None, "--options", help="JSON tracker options file.")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Log guaranteed key inference.")
LogsDirOption = typer.Option(None, "--logs-dir", help="Also write logs to latest.log in this directory.")


@app.command()
def summary(
    content: Path = ContentOption,
    state: Optional[Path] = StateOption,
    options: Optional[Path] = OptionsOption,
    only_progress: bool = typer.Option(False, "--only-progress", help="Count progress locations only."),
    disable_logic: bool = typer.Option(False, "--disable-logic", help="Treat every unchecked location as available."),
    verbose: bool = VerboseOption,
    logs_dir: Optional[Path] = LogsDirOption,
) -> None:
    """Print location counts per general location and overall totals."""
    engine = _build_engine(content, state, options, verbose, logs_dir)

    table = Table(title="Locations")
    table.add_column("Location", style="cyan", no_wrap=True)
    table.add_column("Available", justify="right")
    table.add_column("Remaining", justify="right")
    totals = Table(title="Totals")
    totals.add_column("Field", style="cyan", no_wrap=True)
    totals.add_column("Value", style="white")

    try:
        for general_location in engine.logic.all_general_locations():
            counts = engine.location_counts(
                general_location,
                only_progress_locations=only_progress,
                disable_logic=disable_logic,
            )
            style = LOCATION_STYLES[counts.color]
            table.add_row(
                Text(general_location, style=style),
                str(counts.num_available),
                str(counts.num_remaining),
            )

        totals.add_row("Checked", str(engine.total_locations_checked(only_progress_locations=only_progress)))
        totals.add_row("Available", str(engine.total_locations_available(only_progress_locations=only_progress)))
        totals.add_row("Remaining", str(engine.total_locations_remaining(only_progress_locations=only_progress)))
        totals.add_row("Items Needed", str(engine.items_needed_to_finish_game()))
        totals.add_row("Estimated Checks Left", str(engine.estimated_locations_left_to_check()))
    except (LogicDataError, UnknownLocationError) as exc:
        console.print(f"[bold red]Logic evaluation failed:[/bold red] {exc}")
        raise typer.Exit(1) from exc

    console.print(table)
    console.print()
    console.print(totals)


@app.command()
def explain(
    location: str = typer.Argument(..., help="Location as 'General/Detailed', or an entrance name with --entrance."),
    entrance: bool = typer.Option(False, "--entrance", help="Explain an entrance instead of a location."),
    content: Path = ContentOption,
    state: Optional[Path] = StateOption,
    options: Optional[Path] = OptionsOption,
    verbose: bool = VerboseOption,
    logs_dir: Optional[Path] = LogsDirOption,
) -> None:
    """Print the colorized requirement clauses for one location or entrance."""
    engine = _build_engine(content, state, options, verbose, logs_dir)

    try:
        if entrance:
            available = engine.is_entrance_available(location)
            clauses = engine.formatted_requirements_for_entrance(location)
            remaining = None
        else:
            general_location, detailed_location = engine.logic.split_location_name(location)
            available = engine.is_location_available(general_location, detailed_location)
            clauses = engine.formatted_requirements_for_location(general_location, detailed_location)
            remaining = engine.items_remaining_for_location(general_location, detailed_location)
    except (ValueError, UnknownLocationError) as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(1) from exc

    status = "[bold green]available[/bold green]" if available else "[bold red]unavailable[/bold red]"
    console.print(f"{location}: {status}")
    if remaining is not None:
        console.print(f"Items remaining: {remaining}")
    for line in render_clauses(clauses):
        console.print(line)


if __name__ == "__main__":
    app()
