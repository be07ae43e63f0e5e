#!/usr/bin/env python3
"""
Meeting Triage - Main Entry Point

Commands:
    parse         Extract meeting details from an email
    availability  Reconcile busy times with a preferred time for one day
    triage        Parse an email and act on it against the in-memory calendar
"""
import json
import sys
from datetime import datetime

import click
from rich.console import Console
from rich.table import Table

from src.services.extraction import EmailParsingPipeline, FallbackUsed, FatalError, ParsedOk
from src.services.scheduling import (
    AvailabilityReconciler,
    BusyInterval,
    InMemoryCRM,
    InvalidTimeRangeException,
)
from src.services.triage import MeetingTriageService
from src.utils.config import load_config
from src.utils.logger import configure_from_config

console = Console()


def _read_email(source) -> str:
    text = source.read()
    if not text.strip():
        console.print("[yellow]WARNING: empty email text[/yellow]")
    return text


def _record_table(record) -> Table:
    table = Table(title="Parsed email", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in record.to_dict().items():
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(key, str(value))
    return table


@click.group()
@click.option('--config', 'config_path', default='config/config.yaml', help='Path to config YAML')
@click.pass_context
def cli(ctx, config_path: str):
    """Email meeting triage"""
    config = load_config(config_path)
    configure_from_config(config)
    ctx.obj = config


@cli.command()
@click.argument('source', type=click.File('r'), default='-')
@click.option('--require-model', is_flag=True, help='Fail instead of falling back to heuristics')
@click.option('--json', 'as_json', is_flag=True, help='Print the record as JSON')
@click.pass_obj
def parse(config, source, require_model: bool, as_json: bool):
    """Extract meeting details from an email (file or stdin)"""
    pipeline = EmailParsingPipeline.from_config(config)
    outcome = pipeline.parse_with_outcome(_read_email(source), require_model=require_model)

    if isinstance(outcome, FatalError):
        console.print(f"[bold red]Model error ({outcome.kind.value}): {outcome.message}[/bold red]")
        if outcome.record is None or require_model:
            sys.exit(1)
    elif isinstance(outcome, FallbackUsed):
        console.print(f"[yellow]Heuristic fallback: {outcome.reason}[/yellow]")
    elif isinstance(outcome, ParsedOk):
        console.print("[green]Parsed with language model[/green]")

    if as_json:
        console.print_json(json.dumps(outcome.record.to_dict()))
    else:
        console.print(_record_table(outcome.record))


@cli.command()
@click.option('--date', 'date_text', required=True, help='Target day, YYYY-MM-DD')
@click.option('--busy', multiple=True, help='Busy interval HH:MM-HH:MM (repeatable)')
@click.option('--preferred', default=None, help='Preferred time text, e.g. "at 2:00 PM"')
@click.pass_obj
def availability(config, date_text: str, busy, preferred):
    """Business-hours availability and suggested start times for one day"""
    try:
        day = datetime.strptime(date_text, '%Y-%m-%d').date()
        intervals = [BusyInterval.parse(value) for value in busy]
    except (ValueError, InvalidTimeRangeException) as e:
        raise click.BadParameter(str(e)) from e

    result = AvailabilityReconciler(config.scheduling).reconcile(day, intervals, preferred)

    table = Table(title=f"Availability {day.isoformat()}")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Available")
    for slot in result.slots:
        table.add_row(slot.start, slot.end, "[green]yes[/green]" if slot.available else "[red]no[/red]")
    console.print(table)
    console.print(f"[bold]Suggested:[/bold] {', '.join(result.suggested_times) or 'none'}")


@cli.command()
@click.argument('source', type=click.File('r'), default='-')
@click.pass_obj
def triage(config, source):
    """Parse an email and schedule/reschedule/cancel on the in-memory calendar"""
    crm = InMemoryCRM()
    service = MeetingTriageService.with_in_memory_calendar(config, crm=crm)
    result = service.triage(_read_email(source))

    console.print(_record_table(result.record))
    console.print(f"[bold]Action:[/bold] {result.action.value}")
    if result.event:
        console.print_json(json.dumps(result.event.to_dict()))
    for note in result.notes:
        console.print(f"[dim]{note}[/dim]")
    for error in result.errors:
        console.print(f"[red]{error}[/red]")
    if result.crm_synced:
        console.print(f"[dim]CRM contact synced: {result.record.email}[/dim]")


if __name__ == "__main__":
    cli()
