"""CosmoPort CLI: ship registry administration.

Commands:
  init-db  create database tables
  seed     load the demo fleet from config/sample_ships.yaml
  serve    create tables and run the HTTP API
  list     filtered, sorted, paginated ship listing
  count    number of ships matching the filters
"""
from __future__ import annotations

import typer
from datetime import datetime, timezone
from typing import Optional
from rich.console import Console
from rich.table import Table

from app.models.base import ShipTypeEnum
from app.modules.ship_query import ShipOrder


app = typer.Typer(
    name="cosmoport",
    help="Space ship registry with filtered search and derived ratings.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("init-db")
def init_database():
    """Create the ships table if it does not exist."""
    from app.database import init_db

    try:
        with console.status("[bold]Creating database..."):
            init_db()
    except Exception as e:
        console.print(f"[red]Database setup failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]Database ready.[/green]")


@app.command("seed")
def seed(
    file: Optional[str] = typer.Option(None, "--file", help="YAML file with a top-level 'ships' list"),
    force: bool = typer.Option(False, "--force", help="Insert even if ships already exist"),
):
    """Load the demo fleet."""
    from app.database import SessionLocal, init_db
    from app.modules.sample_ships import seed_sample_ships
    from app.modules.ship_errors import ShipValidationError

    init_db()
    db = SessionLocal()
    try:
        result = seed_sample_ships(db, path=file, force=force)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except ShipValidationError as e:
        db.rollback()
        console.print(f"[red]Invalid sample ship: {e}[/red]")
        raise typer.Exit(1)
    finally:
        db.close()

    if result["inserted"]:
        console.print(f"[green]Inserted {result['inserted']} ships.[/green]")
    else:
        console.print(
            f"[yellow]{result['skipped']} ships already present.[/yellow] "
            "Use [cyan]--force[/cyan] to add the demo fleet anyway."
        )


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8080, "--port"),
):
    """Run the HTTP API."""
    import uvicorn
    from app.database import init_db

    init_db()
    console.print(f"API running at [cyan]http://{host}:{port}/api/v1/ships[/cyan]. Press Ctrl+C to stop")
    uvicorn.run("app.main:app", host=host, port=port)


@app.command("list")
def list_command(
    name: Optional[str] = typer.Option(None, "--name"),
    planet: Optional[str] = typer.Option(None, "--planet"),
    ship_type: Optional[ShipTypeEnum] = typer.Option(None, "--ship-type", case_sensitive=False),
    after: Optional[int] = typer.Option(None, "--after", help="Production year lower bound"),
    before: Optional[int] = typer.Option(None, "--before", help="Production year upper bound"),
    used_only: bool = typer.Option(False, "--used-only", help="Only used ships"),
    new_only: bool = typer.Option(False, "--new-only", help="Only new ships"),
    min_speed: Optional[float] = typer.Option(None, "--min-speed"),
    max_speed: Optional[float] = typer.Option(None, "--max-speed"),
    min_crew: Optional[int] = typer.Option(None, "--min-crew"),
    max_crew: Optional[int] = typer.Option(None, "--max-crew"),
    min_rating: Optional[float] = typer.Option(None, "--min-rating"),
    max_rating: Optional[float] = typer.Option(None, "--max-rating"),
    order: ShipOrder = typer.Option(ShipOrder.ID, "--order", case_sensitive=False),
    page: int = typer.Option(0, "--page", min=0),
    size: int = typer.Option(20, "--size", min=1),
):
    """List ships matching the filters."""
    from app.database import SessionLocal
    from app.modules.ship_query import list_ships

    params = _filter_params(
        name, planet, ship_type, after, before, _usage_flag(used_only, new_only),
        min_speed, max_speed, min_crew, max_crew, min_rating, max_rating,
    )
    db = SessionLocal()
    try:
        ships = list_ships(db, params, order=order, page_number=page, page_size=size)
    finally:
        db.close()

    if not ships:
        console.print("[yellow]No ships found[/yellow]")
        return

    table = Table(title=f"Ships (page {page}, ordered by {order.value})")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Planet")
    table.add_column("Type")
    table.add_column("Year", justify="right")
    table.add_column("Used")
    table.add_column("Speed", justify="right")
    table.add_column("Crew", justify="right")
    table.add_column("Rating", justify="right")
    for s in ships:
        table.add_row(
            str(s.id), s.name, s.planet, s.ship_type.value, str(s.prod_date.year),
            "yes" if s.is_used else "no", f"{s.speed:.2f}", str(s.crew_size), f"{s.rating:.2f}",
        )
    console.print(table)


@app.command("count")
def count_command(
    name: Optional[str] = typer.Option(None, "--name"),
    planet: Optional[str] = typer.Option(None, "--planet"),
    ship_type: Optional[ShipTypeEnum] = typer.Option(None, "--ship-type", case_sensitive=False),
    after: Optional[int] = typer.Option(None, "--after", help="Production year lower bound"),
    before: Optional[int] = typer.Option(None, "--before", help="Production year upper bound"),
    used_only: bool = typer.Option(False, "--used-only", help="Only used ships"),
    new_only: bool = typer.Option(False, "--new-only", help="Only new ships"),
    min_speed: Optional[float] = typer.Option(None, "--min-speed"),
    max_speed: Optional[float] = typer.Option(None, "--max-speed"),
    min_crew: Optional[int] = typer.Option(None, "--min-crew"),
    max_crew: Optional[int] = typer.Option(None, "--max-crew"),
    min_rating: Optional[float] = typer.Option(None, "--min-rating"),
    max_rating: Optional[float] = typer.Option(None, "--max-rating"),
):
    """Count ships matching the filters."""
    from app.database import SessionLocal
    from app.modules.ship_query import count_ships

    params = _filter_params(
        name, planet, ship_type, after, before, _usage_flag(used_only, new_only),
        min_speed, max_speed, min_crew, max_crew, min_rating, max_rating,
    )
    db = SessionLocal()
    try:
        total = count_ships(db, params)
    finally:
        db.close()
    console.print(total)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _year_to_ms(year: Optional[int]) -> Optional[int]:
    """CLI takes plain years; the filter layer takes epoch milliseconds."""
    if year is None:
        return None
    from app.utils.dates import datetime_to_ms

    return datetime_to_ms(datetime(year, 1, 1, tzinfo=timezone.utc))


def _usage_flag(used_only: bool, new_only: bool) -> Optional[bool]:
    if used_only and new_only:
        raise typer.BadParameter("--used-only and --new-only are mutually exclusive")
    if used_only:
        return True
    if new_only:
        return False
    return None


def _filter_params(name, planet, ship_type, after, before, used,
                   min_speed, max_speed, min_crew, max_crew, min_rating, max_rating):
    from app.modules.ship_filter import ShipFilterParams

    return ShipFilterParams(
        name=name,
        planet=planet,
        ship_type=ship_type,
        after=_year_to_ms(after),
        before=_year_to_ms(before),
        is_used=used,
        min_speed=min_speed,
        max_speed=max_speed,
        min_crew_size=min_crew,
        max_crew_size=max_crew,
        min_rating=min_rating,
        max_rating=max_rating,
    )


if __name__ == "__main__":
    app()
