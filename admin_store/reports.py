"""Reporting helpers used by the dashboard views and the CLI."""

import csv
import io
from typing import Optional

# Products below this many units are flagged as low stock
LOW_STOCK_THRESHOLD = 10


def stock_level(product: dict) -> str:
    """Classify a product as out_of_stock, low_stock or in_stock."""
    stock = product.get("stock") or 0
    if stock <= 0:
        return "out_of_stock"
    if stock < LOW_STOCK_THRESHOLD:
        return "low_stock"
    return "in_stock"


def inventory_alerts(products: list[dict]) -> dict[str, list[dict]]:
    """Group products needing attention.

    Returns:
        ``{"low_stock": [...], "out_of_stock": [...]}`` in input order
    """
    alerts: dict[str, list[dict]] = {"low_stock": [], "out_of_stock": []}
    for product in products:
        level = stock_level(product)
        if level in alerts:
            alerts[level].append(product)
    return alerts


def analytics_csv(snapshot: dict) -> str:
    """Render daily revenue and orders as CSV.

    One row per revenue point; the orders value is paired by position and is 0
    when the orders series is shorter.
    """
    revenue = (snapshot.get("revenue") or {}).get("daily") or []
    orders = (snapshot.get("orders") or {}).get("daily") or []

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Date", "Revenue", "Orders"])
    for index, point in enumerate(revenue):
        order_value = orders[index].get("value", 0) if index < len(orders) else 0
        writer.writerow([point.get("date"), point.get("value"), order_value])
    return buffer.getvalue()


def export_filename(export_date: Optional[str]) -> str:
    """Default file name for an export, e.g. ``store-data-2024-02-14.json``."""
    day = (export_date or "").split("T")[0] or "undated"
    return f"store-data-{day}.json"
