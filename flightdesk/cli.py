"""
Command line interface for the booking engine.

Examples:

  # Create tables and load the demo schedule
  flightdesk init-db
  flightdesk seed

  # Serve the REST API
  flightdesk serve --port 8000

  # Reports
  flightdesk report general
  flightdesk report sales 2026-10-01 2026-10-31

  # Fire 50 concurrent sales at one flight
  flightdesk simulate SU610 --attempts 50 --workers 16
"""

from datetime import date, datetime

import typer
import uvicorn
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .database.config import initialize_database
from .exceptions import FlightDeskError
from .seed import seed_demo_data
from .services import BookingService, BookingSimulator, FlightQueryEngine, ReportAggregator
from .utils.config import configure_logging, get_config

app = typer.Typer(help="Flight inventory and booking engine")
report_app = typer.Typer(help="Print aggregated reports")
app.add_typer(report_app, name="report")
console = Console()


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got '{value}'")


def _database():
    config = get_config()
    return initialize_database(database_url=config.database_url, lock_timeout=config.db_lock_timeout)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    config = get_config()
    configure_logging("DEBUG" if verbose else config.log_level, rich_output=True)


@app.command("init-db")
def init_db():
    """Create the plane, flight and ticket tables."""
    db = _database()
    info = db.get_connection_info()
    console.print(f"[green]✓[/green] Tables ready on [cyan]{info['database_type']}[/cyan] ({info['database_url']})")


@app.command()
def seed(
    tickets_per_flight: int = typer.Option(3, "--tickets", "-t", help="Tickets sold per flight per day"),
    days: int = typer.Option(3, "--days", "-d", help="Number of travel days to sell for"),
):
    """Load the demo fleet, schedule and ticket sales."""
    result = seed_demo_data(_database(), tickets_per_flight=tickets_per_flight, days=days)
    if result.skipped:
        console.print("[yellow]Fleet already populated, nothing to do[/yellow]")
        return
    console.print(
        f"[green]✓[/green] Loaded {result.planes} planes, {result.flights} flights, "
        f"{result.tickets} tickets"
    )


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default: API_HOST)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default: API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Serve the REST API with uvicorn."""
    config = get_config()
    uvicorn.run(
        "flightdesk.api.app:create_app",
        factory=True,
        host=host or config.api_host,
        port=port or config.api_port,
        reload=reload,
        log_level=config.log_level.lower(),
    )


@report_app.command("general")
def report_general():
    """Fleet-wide statistics and replacement candidates."""
    config = get_config()
    report = ReportAggregator(_database(), replacement_threshold=config.default_replacement_threshold).general_report()
    summary = report.summary

    table = Table(title="General Report", box=box.ROUNDED, show_lines=True)
    table.add_column("Metric", style="cyan bold")
    table.add_column("Value", style="yellow", justify="right")
    table.add_row("Total flights", str(summary.total_flights))
    table.add_row("Direct flights", str(summary.total_direct_flights))
    table.add_row("With connections", str(summary.flights_with_connections))
    table.add_row("Average price", f"{summary.average_price:,.2f}")
    table.add_row("Capacity / free", f"{summary.total_capacity:,} / {summary.total_free_seats:,}")
    table.add_row("Overall load", f"{summary.overall_load_percentage:.2f}%")
    if report.most_expensive_flight:
        flight = report.most_expensive_flight
        table.add_row("Most expensive", f"{flight.flight_number} ({flight.price:,.2f})")
    console.print(table)

    if report.flights_for_replacement:
        candidates = Table(title="Replacement Candidates", box=box.ROUNDED)
        candidates.add_column("Flight", style="cyan")
        candidates.add_column("Plane")
        candidates.add_column("Free / Seats", justify="right")
        candidates.add_column("Free %", style="green", justify="right")
        for c in report.flights_for_replacement:
            candidates.add_row(c.flight_number, c.plane_name or "", f"{c.free_seats}/{c.seats_count}", f"{c.free_seats_percentage:.2f}")
        console.print(candidates)


@report_app.command("sales")
def report_sales(
    start_date: str = typer.Argument(..., help="First sale date (YYYY-MM-DD)"),
    end_date: str = typer.Argument(..., help="Last sale date (YYYY-MM-DD)"),
):
    """Tickets sold between two dates, by counter and by flight."""
    try:
        report = ReportAggregator(_database()).sales_report(_parse_date(start_date), _parse_date(end_date))
    except FlightDeskError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(code=1)

    s = report.summary
    console.print(Panel.fit(
        f"[bold]{s.total_tickets}[/bold] tickets, revenue [bold]{s.total_revenue:,.2f}[/bold], "
        f"average [bold]{s.average_ticket_price:,.2f}[/bold]\n"
        f"[dim]{s.date_range.start_date} .. {s.date_range.end_date}[/dim]",
        title="Sales Report",
        border_style="cyan",
    ))

    counters = Table(title="By Counter", box=box.SIMPLE)
    counters.add_column("Counter", style="cyan", justify="right")
    counters.add_column("Tickets", justify="right")
    counters.add_column("Revenue", style="yellow", justify="right")
    for row in report.sales_by_counter:
        counters.add_row(str(row.counter_number), str(row.tickets_sold), f"{row.total_revenue:,.2f}")
    console.print(counters)

    flights = Table(title="By Flight", box=box.SIMPLE)
    flights.add_column("Flight", style="cyan")
    flights.add_column("Tickets", justify="right")
    flights.add_column("Revenue", style="yellow", justify="right")
    for row in report.sales_by_flight:
        flights.add_row(row.flight_number, str(row.tickets_sold), f"{row.revenue:,.2f}")
    console.print(flights)


@app.command()
def simulate(
    flight_number: str = typer.Argument(..., help="Flight to sell on"),
    attempts: int = typer.Option(50, "--attempts", "-n", help="Number of concurrent sale attempts"),
    workers: int = typer.Option(8, "--workers", "-w", help="Thread pool size"),
    counters: int = typer.Option(4, "--counters", "-c", help="Number of sale counters"),
):
    """Fire concurrent sales at one flight and verify nothing is oversold."""
    db = _database()
    simulator = BookingSimulator(BookingService(db), FlightQueryEngine(db))
    try:
        result = simulator.run(flight_number, attempts, workers=workers, counters=counters)
    except FlightDeskError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"Sale Simulation {flight_number}", box=box.ROUNDED, show_lines=True)
    table.add_column("Metric", style="cyan bold")
    table.add_column("Value", style="yellow", justify="right")
    table.add_row("Attempts", f"{result.attempts:,}")
    table.add_row("Sold", f"{result.sold:,}")
    table.add_row("Rejected (no seats)", f"{result.capacity_rejections:,}")
    table.add_row("Other failures", f"{result.other_failures:,}")
    table.add_row("Free seats before / after", f"{result.initial_free_seats} / {result.final_free_seats}")
    table.add_row("Avg response", f"{result.average_response_time_ms:.1f} ms")
    table.add_row("Duration", f"{result.simulation_duration_ms:,} ms")
    console.print(table)

    if result.is_consistent:
        console.print("[green]✓[/green] Inventory consistent: no seat sold twice")
    else:
        console.print("[red]✗ Inventory mismatch detected[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
