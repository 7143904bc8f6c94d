"""Pytest configuration and fixtures for store tests."""

from datetime import datetime, timedelta, timezone

import pytest

from admin_store.config import Settings
from admin_store.fixtures import load_fixtures
from admin_store.latency import LatencySimulator
from admin_store.storage import MemoryBackend
from admin_store.store import AdminStore

FIXED_NOW = datetime(2026, 10, 19, 8, 15, 2, 123000, tzinfo=timezone.utc)
FIXED_NOW_ISO = "2026-10-19T08:15:02.123Z"


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def settings() -> Settings:
    """Settings with latency disabled and no .env lookup."""
    return Settings(_env_file=None, latency_min_ms=0, latency_max_ms=0)


@pytest.fixture
def clock() -> FakeClock:
    """Clock pinned to FIXED_NOW."""
    return FakeClock()


@pytest.fixture
def backend() -> MemoryBackend:
    """Fresh in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def seed() -> dict:
    """Copy of the bundled seed document."""
    return load_fixtures()


def make_store(backend, settings, clock, fixtures=None) -> AdminStore:
    """Build an initialized store with no simulated latency."""
    store = AdminStore(
        backend=backend,
        latency=LatencySimulator.disabled(),
        settings=settings,
        clock=clock,
        fixtures=fixtures,
    )
    store.initialize()
    return store


@pytest.fixture
def store(backend, settings, clock):
    """Store seeded from the bundled fixture."""
    store = make_store(backend, settings, clock)
    yield store
    store.close()


@pytest.fixture
def sample_orders() -> list[dict]:
    """Three orders: $100 delivered, $50 cancelled, $30 pending."""
    return [
        {
            "id": "ORD-A",
            "customerName": "Ada Lovelace",
            "customerEmail": "ada@example.com",
            "orderDate": "2024-03-01T09:00:00.000Z",
            "status": "delivered",
            "items": [{"productName": "Widget", "quantity": 2, "price": 50}],
            "total": 100,
            "shippingAddress": "1 Analytical Way",
            "deliveryDate": "2024-03-03T12:00:00.000Z",
        },
        {
            "id": "ORD-B",
            "customerName": "Charles Babbage",
            "customerEmail": "charles@example.com",
            "orderDate": "2024-03-02T09:00:00.000Z",
            "status": "cancelled",
            "items": [{"productName": "Gear", "quantity": 1, "price": 50}],
            "total": 50,
            "shippingAddress": "2 Difference Street",
        },
        {
            "id": "ORD-C",
            "customerName": "Grace Hopper",
            "customerEmail": "grace@example.com",
            "orderDate": "2024-03-03T09:00:00.000Z",
            "status": "pending",
            "items": [{"productName": "Compiler", "quantity": 3, "price": 10}],
            "total": 30,
            "shippingAddress": "3 Cobol Court",
        },
    ]


@pytest.fixture
def sample_customers() -> list[dict]:
    """Four customers, three active."""
    return [
        {"id": "C1", "name": "Ada Lovelace", "email": "ada@example.com", "joinDate": "2023-01-01", "status": "active"},
        {"id": "C2", "name": "Charles Babbage", "email": "charles@example.com", "joinDate": "2023-02-01", "status": "inactive"},
        {"id": "C3", "name": "Grace Hopper", "email": "grace@example.com", "joinDate": "2023-03-01", "status": "active"},
        {"id": "C4", "name": "Alan Turing", "email": "alan@example.com", "joinDate": "2023-04-01", "status": "active"},
    ]


@pytest.fixture
def small_store(backend, settings, clock, sample_orders, sample_customers):
    """Store seeded with the small sample orders and customers."""
    fixtures = {
        "products": [
            {"id": "P1", "name": "Low", "description": "", "category": "Sports", "price": 10, "stock": 1, "status": "active"},
            {"id": "P2", "name": "High", "description": "", "category": "Sports", "price": 30, "stock": 1, "status": "active"},
            {"id": "P3", "name": "Mid", "description": "", "category": "Clothing", "price": 20, "stock": 1, "status": "inactive"},
        ],
        "orders": sample_orders,
        "customers": sample_customers,
        "analytics": {"revenue": {"daily": []}, "orders": {"daily": []}, "categories": []},
    }
    store = make_store(backend, settings, clock, fixtures=fixtures)
    yield store
    store.close()
