"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.api_client import ApiClient
from ..adapters.events_client import CalendarEventsClient
from ..adapters.mock_clients import MockEventsClient, MockWorkingHoursClient
from ..adapters.token_store import TokenStore
from ..adapters.working_hours_client import WorkingHoursClient
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import WorkhoursError
from ..domain.normalizer import WorkingHoursNormalizer
from ..domain.time_utils import IST, get_month_end_ist, get_month_start_ist, to_ist_string
from ..services.availability_service import AvailabilityService, UnavailableHoursTable

app = typer.Typer(
    name="workhours",
    help="Compute unavailable hours from provider working hours",
    add_completion=False
)

console = Console()

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled mock data, skip the API.")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Unavailable hours for calendar timelines.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path], mock: bool = False) -> AppConfig:
    config_path = config_file or get_default_config_path()
    if mock and not config_path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _build_service(config: AppConfig, mock: bool) -> tuple[AvailabilityService, Optional[MockWorkingHoursClient]]:
    normalizer = WorkingHoursNormalizer(default_timezone=config.timezone)

    if mock:
        client = MockWorkingHoursClient(normalizer=normalizer)
        service = AvailabilityService(client, config.get_fallback_unavailable_hours())
        return service, client

    api_client = ApiClient(TokenStore(), config.http)
    client = WorkingHoursClient(
        api_client,
        config.get_endpoints().business_hours,
        normalizer=normalizer,
    )
    return AvailabilityService(client, config.get_fallback_unavailable_hours()), None


def _compute_table(
    config: AppConfig,
    providers: Optional[List[str]],
    mock: bool,
) -> UnavailableHoursTable:
    service, mock_client = _build_service(config, mock)

    if mock and not providers and not config.provider_ids and not config.providers:
        provider_ids = mock_client.provider_ids()
    else:
        provider_ids = config.resolve_providers(providers or [])

    table = asyncio.run(
        service.refresh(provider_ids=provider_ids, account_id=config.account_id or None)
    )

    for warning in table.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")
    if table.used_fallback:
        console.print("[yellow]⚠ No working hours found, showing the default closed hours.[/yellow]")

    return table


def _displayable(ranges) -> list:
    # Gaps narrower than a clock hour invert to start >= end
    return [r for r in ranges if r.start < r.end]


def _format_ranges(ranges) -> str:
    ranges = _displayable(ranges)
    if not ranges:
        return "[green]available all day[/green]"
    return ", ".join(str(r) for r in ranges)


@app.command()
def unavailable(
    providers: Annotated[Optional[List[str]], typer.Argument(help="Provider ids or aliases. Defaults to the configured providers.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the weekday table as JSON.")] = False,
):
    """
    Show unavailable hours for every weekday across the given providers.

    Examples:

        workhours unavailable --mock
        workhours unavailable SEN42 priya --json
    """
    try:
        config = _load_config(config_file, mock)
        table = _compute_table(config, providers, mock)
    except (FileNotFoundError, ValueError, WorkhoursError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        payload = {
            str(weekday): [r.to_dict() for r in _displayable(ranges)]
            for weekday, ranges in table.by_day_of_week.items()
        }
        console.print_json(json.dumps(payload))
        return

    result = Table(
        title=f"Unavailable hours ({', '.join(table.provider_ids) or 'no providers'})",
        show_header=True,
        header_style="bold cyan"
    )
    result.add_column("Day", style="bold yellow")
    result.add_column("Unavailable")

    for weekday in range(7):
        result.add_row(WEEKDAY_NAMES[weekday], _format_ranges(table.by_day_of_week.get(weekday, [])))

    console.print()
    console.print(result)
    console.print()


@app.command()
def for_date(
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    providers: Annotated[Optional[List[str]], typer.Argument(help="Provider ids or aliases.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show unavailable hours for a single date.
    """
    try:
        target = pendulum.from_format(date, "YYYY-MM-DD")
    except ValueError as e:
        console.print(f"[red]Could not parse date: {e}[/red]")
        raise typer.Exit(1)

    try:
        config = _load_config(config_file, mock)
        table = _compute_table(config, providers, mock)
    except (FileNotFoundError, ValueError, WorkhoursError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    weekday = WEEKDAY_NAMES[target.isoweekday() % 7]
    console.print(f"\n[bold]{weekday}, {target.format('DD.MM.YYYY')}[/bold]: {_format_ranges(table.for_date(target))}\n")


@app.command()
def events(
    config_file: ConfigOption = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD). Defaults to the start of this month.")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD). Defaults to the end of this month.")] = None,
    mock: MockOption = False,
):
    """
    List events from the scheduling service for a date range (IST).
    """
    try:
        start_date_time = (
            to_ist_string(pendulum.from_format(start, "YYYY-MM-DD", tz=IST).start_of("day"))
            if start else get_month_start_ist()
        )
        end_date_time = (
            to_ist_string(pendulum.from_format(end, "YYYY-MM-DD", tz=IST).end_of("day"))
            if end else get_month_end_ist()
        )
    except ValueError as e:
        console.print(f"[red]Could not parse date: {e}[/red]")
        raise typer.Exit(1)

    try:
        config = _load_config(config_file, mock)

        if mock:
            client = MockEventsClient()
        else:
            client = CalendarEventsClient(
                ApiClient(TokenStore(), config.http),
                config.get_endpoints().events,
                merchant_id=config.account_id,
                brand_id=config.brand_id,
                page_limit=config.http.page_limit,
            )

        found = client.fetch_all_events(
            start_date_time,
            end_date_time,
            provider_ids=config.provider_ids or None,
            calendar_ids=config.calendar_ids or None,
        )
    except (FileNotFoundError, ValueError, WorkhoursError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not found:
        console.print("[yellow]⚠ No events found in this range.[/yellow]")
        return

    result = Table(title=f"{len(found)} event(s)", show_header=True, header_style="bold cyan")
    result.add_column("When", style="bold yellow")
    result.add_column("Title")
    result.add_column("Type", style="dim")

    for event in sorted(found, key=lambda e: e.start):
        when = f"{event.start.strftime('%d.%m.%Y %H:%M')} - {event.end.strftime('%H:%M')}"
        kind = f"{event.event_type} ({event.external_source})" if event.external_source else event.event_type
        result.add_row(when, event.title, kind)

    console.print()
    console.print(result)
    console.print()


@app.command()
def list_providers(config_file: ConfigOption = None):
    """
    List all configured providers.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    provider_ids = config.provider_ids or [p.id for p in config.providers]
    if not provider_ids:
        console.print("[yellow]No providers defined in the config file.[/yellow]")
        return

    table = Table(title="Configured providers", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="bold yellow")
    table.add_column("Name", style="dim")

    for provider_id in provider_ids:
        provider = config.find_provider(provider_id)
        table.add_row(provider_id, provider.display_name() if provider else "")

    console.print()
    console.print(table)
    console.print()


@app.command()
def set_token(token: Annotated[str, typer.Argument(help="API access token")]):
    """
    Store the API access token.
    """
    store = TokenStore()
    try:
        store.save_token(token)
    except (ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if store.insecure_storage_warning:
        console.print(f"[yellow]⚠ {store.insecure_storage_warning}[/yellow]")
    console.print(f"[green]✓ Access token saved ({store.backend}).[/green]")


@app.command()
def clear_token():
    """
    Remove the stored API access token.
    """
    TokenStore().clear()
    console.print("[green]✓ Access token removed.[/green]")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]workhours[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
