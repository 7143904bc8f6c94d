"""KPI aggregation over the live orders and customers collections."""

from decimal import ROUND_HALF_UP, Decimal

from admin_store.models import Kpis


def round_half_up(value: float, places: int = 2) -> float:
    """Round to ``places`` decimals with halves going up (1.005 -> 1.01)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_kpis(orders: list[dict], customers: list[dict]) -> Kpis:
    """Derive KPIs from the current collections.

    Cancelled orders count toward neither revenue nor order count. The
    conversion rate is non-cancelled orders per customer, as a percentage.
    """
    live_orders = [order for order in orders if order.get("status") != "cancelled"]
    total_revenue = sum(order.get("total") or 0 for order in live_orders)
    total_orders = len(live_orders)
    active_customers = sum(1 for customer in customers if customer.get("status") == "active")

    conversion_rate = 0.0
    if customers:
        conversion_rate = round_half_up(total_orders / len(customers) * 100)

    return Kpis(
        total_revenue=total_revenue,
        total_orders=total_orders,
        active_customers=active_customers,
        conversion_rate=conversion_rate,
    )


def merge_kpis(snapshot: dict, kpis: Kpis) -> dict:
    """Return a copy of ``snapshot`` with ``kpis`` replacing any stored value."""
    return {**snapshot, "kpis": kpis.to_record()}
