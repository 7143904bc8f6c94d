"""Admin store: the simulated backend API over persisted collections.

Every public operation is a coroutine that first awaits the latency simulator
and then runs its read-modify-write synchronously. Because nothing is awaited
between reading a collection and writing it back, concurrent mutations on one
event loop cannot interleave and no update is lost.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ValidationError

from admin_store.analytics import compute_kpis, merge_kpis
from admin_store.config import Settings, get_settings
from admin_store.fixtures import COLLECTIONS, load_fixtures
from admin_store.latency import LatencySimulator
from admin_store.models import ExportSnapshot, ListFilters, OrderUpdate, ProductCreate, ProductUpdate
from admin_store.query import apply_filters
from admin_store.result import Err, ErrorCode, Ok, Result, not_found
from admin_store.stats import OperationStats
from admin_store.storage import CollectionStorage, FileBackend, KeyValueBackend, MemoryBackend

logger = logging.getLogger(__name__)

# Fields a partial update may never overwrite
PROTECTED_FIELDS = frozenset({"id", "createdAt", "updatedAt"})

Filters = Optional[Union[ListFilters, dict]]


def utc_now() -> datetime:
    """Get the current UTC time."""
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into ``field: message`` pairs."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "value"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class AdminStore:
    """Simulated admin backend over four persisted collections.

    Use as ``async with AdminStore(...) as store`` or call ``initialize()`` and
    ``close()`` explicitly. Operations seed the collections on first use if
    ``initialize()`` was not called.
    """

    def __init__(
        self,
        backend: Optional[KeyValueBackend] = None,
        latency: Optional[LatencySimulator] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
        fixtures: Optional[dict[str, Any]] = None,
    ):
        """Initialize the store.

        Args:
            backend: Key-value backend (a private MemoryBackend by default)
            latency: Latency simulator (built from settings by default)
            settings: Store settings (cached environment settings by default)
            clock: Source of the current time for ids and timestamps
            fixtures: Seed document (the bundled seed by default)
        """
        self.settings = settings or get_settings()
        self.storage = CollectionStorage(backend if backend is not None else MemoryBackend())
        self.latency = latency or LatencySimulator(self.settings.latency_min_ms, self.settings.latency_max_ms)
        self.keys = self.settings.collection_keys
        self.stats = OperationStats(slow_threshold_ms=self.settings.slow_operation_ms)
        self._clock = clock
        self._fixtures = fixtures if fixtures is not None else load_fixtures()
        self._last_id = 0
        self._initialized = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(self) -> dict[str, bool]:
        """Seed every collection that has no stored blob yet.

        Returns:
            Mapping of collection name to whether it was seeded now
        """
        seeded = {
            name: self.storage.seed_if_absent(self.keys[name], self._fixtures[name])
            for name in COLLECTIONS
        }
        self._initialized = True
        if any(seeded.values()):
            logger.info(f"Seeded collections: {', '.join(n for n, s in seeded.items() if s)}")
        return seeded

    def close(self) -> None:
        """Release the backend."""
        self.storage.backend.close()
        self._initialized = False

    async def __aenter__(self) -> "AdminStore":
        self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # =========================================================================
    # Internals
    # =========================================================================

    async def _run(self, operation: str, func: Callable[..., Result], *args) -> Result:
        """Await simulated latency, then run ``func`` and envelope any crash."""
        latency_ms = 0.0
        try:
            latency_ms = await self.latency.wait()
            if not self._initialized:
                self.initialize()
            result = func(*args)
        except Exception as e:
            logger.exception(f"Unhandled error in {operation}: {e}")
            result = Err(ErrorCode.INTERNAL, "Internal store error")
        self.stats.record(operation, latency_ms, result.success)
        return result

    def _now(self) -> str:
        return format_timestamp(self._clock())

    def _next_id(self, records: list[dict]) -> str:
        """Millisecond timestamp id, strictly increasing and unused in ``records``."""
        existing = {str(record.get("id")) for record in records}
        candidate = max(int(self._clock().timestamp() * 1000), self._last_id + 1)
        while str(candidate) in existing:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def _load(self, collection: str) -> list[dict]:
        return self.storage.read(self.keys[collection])

    def _save(self, collection: str, records: list[dict]) -> None:
        self.storage.write(self.keys[collection], records)

    def _list(self, collection: str, filters: Filters) -> Result:
        try:
            if isinstance(filters, dict):
                filters = ListFilters.model_validate(filters)
        except ValidationError as e:
            return Err(ErrorCode.INVALID, f"Invalid filters: {describe_validation_error(e)}")

        records = apply_filters(self._load(collection), collection, filters)
        logger.debug(f"Listed {len(records)} {collection}")
        return Ok(records)

    def _validate(self, model: type[BaseModel], payload: Any, entity: str, partial: bool) -> Union[dict, Err]:
        try:
            if not isinstance(payload, model):
                payload = model.model_validate(payload)
        except ValidationError as e:
            return Err(ErrorCode.INVALID, f"Invalid {entity.lower()}: {describe_validation_error(e)}")
        return payload.to_record(partial=partial)

    def _add(self, collection: str, entity: str, record: dict) -> Result:
        records = self._load(collection)
        now = self._now()
        new_record = {
            **{k: v for k, v in record.items() if k not in PROTECTED_FIELDS},
            "id": self._next_id(records),
            "createdAt": now,
            "updatedAt": now,
        }
        records.append(new_record)
        self._save(collection, records)
        logger.info(f"Added {entity.lower()} {new_record['id']}")
        return Ok(new_record)

    def _update(self, collection: str, entity: str, record_id: str, changes: dict) -> Result:
        records = self._load(collection)
        index = next((i for i, r in enumerate(records) if r.get("id") == record_id), None)
        if index is None:
            return not_found(entity)

        now = self._now()
        changes = {k: v for k, v in changes.items() if k not in PROTECTED_FIELDS}
        merged = {**records[index], **changes, "updatedAt": now}
        if collection == "orders" and changes.get("status") == "delivered":
            merged["deliveryDate"] = now

        records[index] = merged
        self._save(collection, records)
        logger.info(f"Updated {entity.lower()} {record_id}", extra={"fields": sorted(changes)})
        return Ok(merged)

    def _delete(self, collection: str, entity: str, record_id: str) -> Result:
        records = self._load(collection)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            return not_found(entity)

        self._save(collection, remaining)
        logger.info(f"Deleted {entity.lower()} {record_id}")
        return Ok()

    # =========================================================================
    # Products
    # =========================================================================

    async def list_products(self, filters: Filters = None) -> Result:
        """List products matching ``filters`` (search, category, status, sort)."""
        return await self._run("list_products", self._list, "products", filters)

    async def add_product(self, product: Union[ProductCreate, dict]) -> Result:
        """Validate and append a new product with a fresh id and timestamps."""

        def add() -> Result:
            record = self._validate(ProductCreate, product, "Product", partial=False)
            if isinstance(record, Err):
                return record
            return self._add("products", "Product", record)

        return await self._run("add_product", add)

    async def update_product(self, product_id: str, updates: Union[ProductUpdate, dict]) -> Result:
        """Shallow-merge ``updates`` into a product and refresh ``updatedAt``."""

        def update() -> Result:
            changes = self._validate(ProductUpdate, updates, "Product", partial=True)
            if isinstance(changes, Err):
                return changes
            return self._update("products", "Product", product_id, changes)

        return await self._run("update_product", update)

    async def delete_product(self, product_id: str) -> Result:
        """Remove a product by id."""
        return await self._run("delete_product", self._delete, "products", "Product", product_id)

    # =========================================================================
    # Orders
    # =========================================================================

    async def list_orders(self, filters: Filters = None) -> Result:
        """List orders, newest ``orderDate`` first unless a sort field is given."""
        return await self._run("list_orders", self._list, "orders", filters)

    async def update_order(self, order_id: str, updates: Union[OrderUpdate, dict]) -> Result:
        """Shallow-merge ``updates`` into an order.

        Setting ``status`` to ``delivered`` also stamps ``deliveryDate``; any
        other status leaves ``deliveryDate`` as it was.
        """

        def update() -> Result:
            changes = self._validate(OrderUpdate, updates, "Order", partial=True)
            if isinstance(changes, Err):
                return changes
            return self._update("orders", "Order", order_id, changes)

        return await self._run("update_order", update)

    async def update_order_status(self, order_id: str, status: str) -> Result:
        """Move an order to ``status``."""

        def update() -> Result:
            changes = self._validate(OrderUpdate, {"status": status}, "Order", partial=True)
            if isinstance(changes, Err):
                return changes
            return self._update("orders", "Order", order_id, changes)

        return await self._run("update_order_status", update)

    # =========================================================================
    # Customers
    # =========================================================================

    async def list_customers(self, filters: Filters = None) -> Result:
        """List customers, newest ``joinDate`` first unless a sort field is given."""
        return await self._run("list_customers", self._list, "customers", filters)

    # =========================================================================
    # Analytics
    # =========================================================================

    def _analytics(self) -> Result:
        snapshot = self.storage.read(self.keys["analytics"], default=dict)
        kpis = compute_kpis(self._load("orders"), self._load("customers"))
        return Ok(merge_kpis(snapshot, kpis))

    async def get_analytics(self) -> Result:
        """Get the seeded analytics snapshot with KPIs computed from live data."""
        return await self._run("get_analytics", self._analytics)

    # =========================================================================
    # Bulk utilities
    # =========================================================================

    def _reset(self) -> Result:
        for name in COLLECTIONS:
            self.storage.remove(self.keys[name])
        self.initialize()
        logger.info("Reset all collections to seed data")
        return Ok()

    def _export(self) -> Result:
        snapshot = {name: self._load(name) for name in ("products", "orders", "customers")}
        snapshot["analytics"] = self.storage.read(self.keys["analytics"], default=dict)
        snapshot["exportDate"] = self._now()
        return Ok(snapshot)

    def _restore(self, snapshot: Union[ExportSnapshot, dict]) -> Result:
        try:
            if not isinstance(snapshot, ExportSnapshot):
                snapshot = ExportSnapshot.model_validate(snapshot)
        except ValidationError as e:
            return Err(ErrorCode.INVALID, f"Invalid export snapshot: {describe_validation_error(e)}")

        restored = []
        for name in COLLECTIONS:
            value = snapshot.collection(name)
            if value is None:
                continue
            self.storage.write(self.keys[name], value)
            restored.append(name)
        logger.info(f"Restored collections: {', '.join(restored) or 'none'}")
        return Ok(restored)

    async def reset_all(self) -> Result:
        """Delete all four collections and reseed them from the fixture."""
        return await self._run("reset_all", self._reset)

    async def export_all(self) -> Result:
        """Dump every collection and the stored analytics with an ``exportDate``."""
        return await self._run("export_all", self._export)

    async def restore_all(self, snapshot: Union[ExportSnapshot, dict]) -> Result:
        """Validate an export snapshot and overwrite each collection it contains."""
        return await self._run("restore_all", self._restore, snapshot)


def build_store(settings: Optional[Settings] = None, **kwargs) -> AdminStore:
    """Assemble a store from settings.

    Args:
        settings: Store settings (cached environment settings by default)
        **kwargs: Passed through to AdminStore (clock, fixtures, latency)

    Raises:
        ValueError: If the configured storage backend is unknown
    """
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        backend: KeyValueBackend = MemoryBackend()
    elif settings.storage_backend == "file":
        backend = FileBackend(settings.storage_dir)
    else:
        raise ValueError(f"Unknown storage backend '{settings.storage_backend}'. Available: memory, file")
    return AdminStore(backend=backend, settings=settings, **kwargs)
