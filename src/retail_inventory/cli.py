"""Command line interface for the packaged service."""

from __future__ import annotations

import logging
from typing import Optional

import typer
import uvicorn

from .config import Settings, get_settings
from .database import SessionLocal, init_database
from .service import calculate_stock_levels, recalculate_inventory
from .sources import DataAccessError

app = typer.Typer(help="Run the retail inventory service and rebuild stock snapshots.")


def _print_header(title: str) -> None:
    typer.secho(title, bold=True, fg=typer.colors.CYAN)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_settings() -> Settings:
    settings = get_settings()
    _configure_logging(settings.log_level)
    init_database()
    return settings


@app.command()
def run(
    host: Optional[str] = typer.Option(None, help="Hostname to bind"),
    port: Optional[int] = typer.Option(None, help="Port to expose"),
    reload: Optional[bool] = typer.Option(None, help="Enable auto-reload"),
    log_level: Optional[str] = typer.Option(None, help="Uvicorn log level"),
) -> None:
    """Start the FastAPI service using Uvicorn."""

    settings = _resolve_settings()

    uvicorn.run(
        "retail_inventory.app:create_app",
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.reload if reload is None else reload,
        log_level=log_level or settings.log_level,
        factory=True,
    )


@app.command()
def init_db() -> None:
    """Create the SQLite database and tables."""

    settings = _resolve_settings()
    typer.echo(f"Database initialised at {settings.database_path}")


@app.command()
def show_paths() -> None:
    """Print out important filesystem paths."""

    settings = _resolve_settings()
    typer.echo(f"Database: {settings.database_path}")
    typer.echo(f"Config directory: {settings.database_path.parent}")


@app.command()
def recalculate(
    purchase_orders: Optional[bool] = typer.Option(
        None,
        "--purchase-orders/--no-purchase-orders",
        help="Count received purchase order lines. Defaults to the configured setting.",
    ),
) -> None:
    """Rebuild store inventory snapshots from movement history."""

    _resolve_settings()
    with SessionLocal() as session:
        try:
            result = recalculate_inventory(session, include_purchase_orders=purchase_orders)
        except DataAccessError as exc:
            typer.secho(str(exc), fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc

    _print_header(result.message)
    stats = result.stats
    typer.echo(f"Items processed: {stats.items_processed}")
    typer.echo(f"Stores processed: {stats.stores_processed}")
    typer.echo(f"Purchase order lines processed: {stats.po_items_processed}")
    typer.echo(f"Updated: {stats.inventory_entries_updated}, Inserted: {stats.inventory_entries_inserted}")
    typer.echo(f"Zero totals skipped: {stats.zero_totals_skipped}")
    for warning in result.warnings or []:
        typer.secho(f"- {warning}", fg=typer.colors.YELLOW)


@app.command("stock-levels")
def stock_levels_cmd() -> None:
    """Display stock computed from movement history without writing it."""

    _resolve_settings()
    with SessionLocal() as session:
        try:
            levels = calculate_stock_levels(session)
        except DataAccessError as exc:
            typer.secho(str(exc), fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc

    if not levels:
        typer.echo("No stock movements found.")
        return
    _print_header("Stock levels")
    for level in levels:
        typer.echo(f"- {level.item_id} @ {level.location_id or 'global'}: {level.current_stock}")


def main() -> None:
    """Entry-point for console scripts."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
