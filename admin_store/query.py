"""Pure query helpers: search, exact-match filters and sorting.

Every list operation composes these in the same order: search, then exact
filters, then sort.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from admin_store.models import ALL, ListFilters

# Fields scanned by the free-text search, per collection
SEARCH_FIELDS = {
    "products": ("name", "description", "category"),
    "orders": ("id", "customerName", "customerEmail"),
    "customers": ("name", "email"),
}

# Exact-match filters each collection honors
EXACT_FILTERS = {
    "products": ("category", "status"),
    "orders": ("status",),
    "customers": ("status",),
}

# (field, descending) used when no sort field is given
DEFAULT_SORT = {
    "orders": ("orderDate", True),
    "customers": ("joinDate", True),
}

DATE_FIELDS = {"orderDate", "joinDate", "deliveryDate", "createdAt", "updatedAt"}


def search_records(records: list[dict], term: Optional[str], fields: Iterable[str]) -> list[dict]:
    """Keep records where any of ``fields`` contains ``term``, ignoring case."""
    if not term:
        return records
    needle = term.lower()
    fields = tuple(fields)
    return [
        record
        for record in records
        if any(isinstance(record.get(f), str) and needle in record[f].lower() for f in fields)
    ]


def filter_exact(records: list[dict], field: str, value: Optional[str]) -> list[dict]:
    """Keep records whose ``field`` equals ``value``. ``"all"`` or empty is a no-op."""
    if not value or value == ALL:
        return records
    return [record for record in records if record.get(field) == value]


def _parse_date(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    # Date-only and offset-less values are taken as UTC
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sort_key(value: Any, parse_dates: bool) -> tuple:
    if isinstance(value, bool):
        return (1, str(value))
    if isinstance(value, (int, float)):
        return (0, value)
    if parse_dates and isinstance(value, str):
        parsed = _parse_date(value)
        if parsed is not None:
            return (0, parsed.timestamp())
    return (1, str(value))


def sort_records(records: list[dict], field: str, descending: bool = False) -> list[dict]:
    """Sort by ``field``, numbers numerically and everything else as text.

    Records missing the field are placed after the rest in both directions.
    """
    parse_dates = field in DATE_FIELDS
    present = [r for r in records if r.get(field) is not None]
    missing = [r for r in records if r.get(field) is None]
    present.sort(key=lambda r: _sort_key(r[field], parse_dates), reverse=descending)
    return present + missing


def apply_filters(records: list[dict], collection: str, filters: Optional[ListFilters] = None) -> list[dict]:
    """Run search, exact filters and sort for ``collection``.

    Args:
        records: Loaded collection (not modified)
        collection: products, orders or customers
        filters: Options to apply; None applies only the default sort

    Returns:
        New list with the matching records in result order
    """
    filters = filters or ListFilters()
    result = list(records)

    result = search_records(result, filters.search, SEARCH_FIELDS.get(collection, ()))

    for field in EXACT_FILTERS.get(collection, ()):
        result = filter_exact(result, field, getattr(filters, field))

    if filters.sort_by:
        result = sort_records(result, filters.sort_by, filters.descending)
    elif collection in DEFAULT_SORT:
        field, descending = DEFAULT_SORT[collection]
        result = sort_records(result, field, descending)

    return result
