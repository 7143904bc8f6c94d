"""Tests for settings and store assembly."""

import pytest

from admin_store.config import Settings
from admin_store.storage import FileBackend, MemoryBackend
from admin_store.store import build_store


def test_settings_defaults():
    """Test default settings."""
    settings = Settings(_env_file=None)

    assert settings.storage_backend == "memory"
    assert settings.key_prefix == "admin_"
    assert settings.latency_min_ms == 200.0
    assert settings.latency_max_ms == 500.0
    assert settings.log_level == "INFO"


def test_collection_keys():
    """Test keys are derived from the prefix."""
    settings = Settings(_env_file=None, key_prefix="demo_")
    assert settings.collection_keys == {
        "products": "demo_products",
        "orders": "demo_orders",
        "customers": "demo_customers",
        "analytics": "demo_analytics",
    }


def test_settings_from_environment(monkeypatch):
    """Test environment variables override defaults."""
    monkeypatch.setenv("ADMIN_STORE_STORAGE_BACKEND", "file")
    monkeypatch.setenv("ADMIN_STORE_LATENCY_MAX_MS", "50")

    settings = Settings(_env_file=None)

    assert settings.storage_backend == "file"
    assert settings.latency_max_ms == 50.0


def test_build_store_memory():
    """Test memory backend assembly."""
    store = build_store(Settings(_env_file=None))
    assert isinstance(store.storage.backend, MemoryBackend)


def test_build_store_file(tmp_path):
    """Test file backend assembly."""
    store = build_store(Settings(_env_file=None, storage_backend="file", storage_dir=str(tmp_path / "data")))

    assert isinstance(store.storage.backend, FileBackend)
    assert (tmp_path / "data").is_dir()


def test_build_store_unknown_backend():
    """Test unknown backends are rejected."""
    with pytest.raises(ValueError, match="Unknown storage backend"):
        build_store(Settings(_env_file=None, storage_backend="redis"))


def test_separate_memory_stores_are_isolated():
    """Test two memory stores never share state."""
    first = build_store(Settings(_env_file=None))
    second = build_store(Settings(_env_file=None))
    first.initialize()

    assert len(first.storage.backend) == 4
    assert len(second.storage.backend) == 0
