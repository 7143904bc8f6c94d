"""CLI interface for the admin store."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Awaitable, Callable, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from admin_store import __version__
from admin_store.config import Settings, get_settings
from admin_store.models import ORDER_STATUSES, PRODUCT_CATEGORIES
from admin_store.reports import analytics_csv, export_filename, inventory_alerts, stock_level
from admin_store.result import Result
from admin_store.store import AdminStore, build_store

console = Console()
err_console = Console(stderr=True)

STOCK_STYLES = {"in_stock": "green", "low_stock": "yellow", "out_of_stock": "red"}
STATUS_STYLES = {
    "active": "green",
    "inactive": "dim",
    "pending": "yellow",
    "shipped": "cyan",
    "delivered": "green",
    "cancelled": "red",
}


def setup_logging(verbose: bool = False, level_name: str = "INFO"):
    """Set up logging configuration.

    Args:
        verbose: Enable debug logging regardless of the configured level
        level_name: Configured log level name
    """
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def run_operation(settings: Settings, operation: Callable[[AdminStore], Awaitable[Result]]) -> Result:
    """Run one store operation and exit with an error if it failed."""

    async def runner() -> Result:
        async with build_store(settings) as store:
            return await operation(store)

    result = asyncio.run(runner())
    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        sys.exit(1)
    return result


def styled(value: str) -> str:
    style = STATUS_STYLES.get(value)
    return f"[{style}]{value}[/{style}]" if style else str(value)


def print_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


def list_options(func):
    """Options shared by every list command."""
    func = click.option("--json", "as_json", is_flag=True, help="Print raw JSON records")(func)
    func = click.option("--sort-order", type=click.Choice(["asc", "desc"]), default="asc", help="Sort direction")(func)
    func = click.option("--sort-by", help="Field to sort by")(func)
    func = click.option("--status", default="all", help="Filter by status")(func)
    func = click.option("--search", help="Case-insensitive substring search")(func)
    return func


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    help="Directory holding the persisted collections",
)
@click.option("--no-latency", is_flag=True, help="Skip the simulated network latency")
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[str], no_latency: bool, verbose: bool):
    """Admin Store - inspect and modify the simulated dashboard backend."""
    settings = get_settings()
    setup_logging(verbose, settings.log_level)

    overrides: dict = {"storage_backend": "file"}
    if data_dir:
        overrides["storage_dir"] = data_dir
    if no_latency:
        overrides["latency_min_ms"] = 0.0
        overrides["latency_max_ms"] = 0.0
    ctx.obj = settings.model_copy(update=overrides)


@cli.command()
@list_options
@click.option("--category", default="all", type=click.Choice(["all", *PRODUCT_CATEGORIES]), help="Filter by category")
@click.pass_obj
def products(settings: Settings, search, status, sort_by, sort_order, as_json, category):
    """List products."""
    filters = {"search": search, "category": category, "status": status, "sortBy": sort_by, "sortOrder": sort_order}
    result = run_operation(settings, lambda store: store.list_products(filters))

    if as_json:
        print_json(result.data)
        return

    table = Table(title=f"Products ({len(result.data)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Price", justify="right")
    table.add_column("Stock", justify="right")
    table.add_column("Status")

    for product in result.data:
        level = STOCK_STYLES[stock_level(product)]
        table.add_row(
            product.get("id"),
            product.get("name"),
            product.get("category"),
            f"${product.get('price', 0):.2f}",
            f"[{level}]{product.get('stock', 0)}[/{level}]",
            styled(product.get("status")),
        )
    console.print(table)


@cli.command()
@click.pass_obj
def inventory(settings: Settings):
    """Show low-stock and out-of-stock products."""
    result = run_operation(settings, lambda store: store.list_products())
    alerts = inventory_alerts(result.data)

    if not alerts["low_stock"] and not alerts["out_of_stock"]:
        console.print("[green]All products are well stocked[/green]")
        return

    for level, title in (("out_of_stock", "Out of Stock"), ("low_stock", "Low Stock")):
        style = STOCK_STYLES[level]
        console.print(f"[bold {style}]{title} ({len(alerts[level])})[/bold {style}]")
        for product in alerts[level]:
            console.print(f"  {product.get('id')}  {product.get('name')}  ({product.get('stock', 0)} left)")


@cli.command()
@list_options
@click.pass_obj
def orders(settings: Settings, search, status, sort_by, sort_order, as_json):
    """List orders, newest first."""
    filters = {"search": search, "status": status, "sortBy": sort_by, "sortOrder": sort_order}
    result = run_operation(settings, lambda store: store.list_orders(filters))

    if as_json:
        print_json(result.data)
        return

    table = Table(title=f"Orders ({len(result.data)})")
    table.add_column("ID", style="cyan")
    table.add_column("Customer")
    table.add_column("Date")
    table.add_column("Status")
    table.add_column("Total", justify="right")

    for order in result.data:
        table.add_row(
            order.get("id"),
            order.get("customerName"),
            (order.get("orderDate") or "").split("T")[0],
            styled(order.get("status")),
            f"${order.get('total', 0):.2f}",
        )
    console.print(table)


@cli.command("set-status")
@click.argument("order_id")
@click.argument("status", type=click.Choice(ORDER_STATUSES))
@click.pass_obj
def set_status(settings: Settings, order_id: str, status: str):
    """Move an order to a new status."""
    result = run_operation(settings, lambda store: store.update_order_status(order_id, status))
    console.print(f"[green]✓ Order {order_id} is now {styled(result.data['status'])}[/green]")
    if result.data.get("deliveryDate") and status == "delivered":
        console.print(f"Delivered at {result.data['deliveryDate']}")


@cli.command()
@list_options
@click.pass_obj
def customers(settings: Settings, search, status, sort_by, sort_order, as_json):
    """List customers, most recently joined first."""
    filters = {"search": search, "status": status, "sortBy": sort_by, "sortOrder": sort_order}
    result = run_operation(settings, lambda store: store.list_customers(filters))

    if as_json:
        print_json(result.data)
        return

    table = Table(title=f"Customers ({len(result.data)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Joined")
    table.add_column("Status")
    table.add_column("Orders", justify="right")
    table.add_column("Spent", justify="right")

    for customer in result.data:
        table.add_row(
            customer.get("id"),
            customer.get("name"),
            customer.get("email"),
            customer.get("joinDate"),
            styled(customer.get("status")),
            str(customer.get("totalOrders", 0)),
            f"${customer.get('totalSpent', 0):.2f}",
        )
    console.print(table)


@cli.command()
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Write daily revenue/orders CSV here")
@click.option("--json", "as_json", is_flag=True, help="Print the raw analytics document")
@click.pass_obj
def analytics(settings: Settings, csv_path: Optional[str], as_json: bool):
    """Show KPIs and category breakdown."""
    result = run_operation(settings, lambda store: store.get_analytics())
    snapshot = result.data

    if csv_path:
        Path(csv_path).write_text(analytics_csv(snapshot), encoding="utf-8")
        console.print(f"[green]✓ Analytics CSV written to {csv_path}[/green]")

    if as_json:
        print_json(snapshot)
        return

    kpis = snapshot["kpis"]
    table = Table(title="Key Performance Indicators", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Total Revenue", f"${kpis['totalRevenue']:.2f}")
    table.add_row("Total Orders", str(kpis["totalOrders"]))
    table.add_row("Active Customers", str(kpis["activeCustomers"]))
    table.add_row("Conversion Rate", f"{kpis['conversionRate']}%")
    console.print(table)

    categories = snapshot.get("categories") or []
    if categories:
        breakdown = Table(title="Sales by Category")
        breakdown.add_column("Category")
        breakdown.add_column("Share", justify="right")
        for category in categories:
            color = category.get("color") or "white"
            breakdown.add_row(f"[{color}]{category.get('name')}[/{color}]", f"{category.get('value')}%")
        console.print(breakdown)


@cli.command()
@click.option("--out", "out_path", type=click.Path(dir_okay=False), help="Output file (default: store-data-<date>.json)")
@click.pass_obj
def export(settings: Settings, out_path: Optional[str]):
    """Export every collection to a JSON file."""
    result = run_operation(settings, lambda store: store.export_all())
    path = Path(out_path or export_filename(result.data.get("exportDate")))
    path.write_text(json.dumps(result.data, indent=2), encoding="utf-8")
    console.print(f"[green]✓ Data exported to {path}[/green]")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def restore(settings: Settings, path: str):
    """Overwrite collections from an export file."""
    try:
        snapshot = json.loads(Path(path).read_text(encoding="utf-8"))
    except ValueError as e:
        console.print(f"[red]Error: {path} is not valid JSON: {e}[/red]")
        sys.exit(1)

    result = run_operation(settings, lambda store: store.restore_all(snapshot))
    console.print(f"[green]✓ Restored {', '.join(result.data) or 'nothing'} from {path}[/green]")


@cli.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def reset(settings: Settings, yes: bool):
    """Reset all collections to the seed data."""
    if not yes and not click.confirm("Reset all data? This action cannot be undone."):
        console.print("[yellow]Reset cancelled[/yellow]")
        return

    run_operation(settings, lambda store: store.reset_all())
    console.print("[green]✓ All data has been reset to default values[/green]")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
