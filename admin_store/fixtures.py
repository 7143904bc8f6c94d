"""Bundled seed data for the four collections."""

import copy
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

SEED_PATH = Path(__file__).parent / "data" / "seed.json"

COLLECTIONS = ("products", "orders", "customers", "analytics")


@lru_cache
def _load(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        document = json.load(f)
    missing = [name for name in COLLECTIONS if name not in document]
    if missing:
        raise ValueError(f"Seed document {path} is missing collections: {', '.join(missing)}")
    return document


def load_fixtures(path: Optional[Path] = None) -> dict[str, Any]:
    """Load the seed document.

    Args:
        path: Alternate seed document (defaults to the bundled one)

    Returns:
        A fresh deep copy keyed by collection name, safe to mutate
    """
    return copy.deepcopy(_load(str(path or SEED_PATH)))
