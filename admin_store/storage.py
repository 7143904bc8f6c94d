"""Key-value persistence for serialized collections.

Backends store raw strings by key. ``CollectionStorage`` layers JSON
serialization on top with best-effort semantics: reads recover from missing or
corrupt blobs by returning an empty value, writes log and swallow failures.
"""

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class KeyValueBackend:
    """Raw string storage addressed by key."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources."""


class MemoryBackend(KeyValueBackend):
    """Thread-safe in-memory backend, private to one store instance."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class FileBackend(KeyValueBackend):
    """Backend keeping one ``<key>.json`` file per key under a directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        # Write to a sibling file first so a crash never leaves half a blob
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class CollectionStorage:
    """JSON persistence of collections over a key-value backend."""

    def __init__(self, backend: KeyValueBackend):
        self.backend = backend

    def read(self, key: str, default: Callable[[], Any] = list) -> Any:
        """Read and deserialize the blob under ``key``.

        Args:
            key: Storage key
            default: Factory for the value returned when the blob is missing,
                unreadable, or not of the default's type

        Returns:
            The deserialized value, or ``default()`` on any recovery path
        """
        empty = default()
        try:
            raw = self.backend.get_item(key)
        except Exception as e:
            logger.warning(
                f"Error reading {key} from storage, using empty value",
                extra={"key": key, "error": str(e), "error_type": type(e).__name__},
            )
            return empty

        if raw is None:
            logger.debug(f"No {key} in storage, using empty value", extra={"key": key})
            return empty

        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(
                f"Error parsing {key} from storage, using empty value",
                extra={"key": key, "error": str(e), "error_type": type(e).__name__},
            )
            return empty

        if value is None:
            return empty
        if not isinstance(value, type(empty)):
            logger.warning(
                f"Unexpected {type(value).__name__} stored under {key}, using empty value",
                extra={"key": key},
            )
            return empty
        return value

    def write(self, key: str, value: Any) -> bool:
        """Serialize and store ``value`` under ``key``.

        Failures are logged and swallowed; the previous blob stays in place.

        Returns:
            True if the blob was written
        """
        try:
            self.backend.set_item(key, json.dumps(value))
        except Exception as e:
            logger.error(
                f"Error saving {key} to storage",
                extra={"key": key, "error": str(e), "error_type": type(e).__name__},
                exc_info=True,
            )
            return False
        return True

    def exists(self, key: str) -> bool:
        """Check whether any blob is stored under ``key``."""
        return self.backend.get_item(key) is not None

    def seed_if_absent(self, key: str, fixture: Any) -> bool:
        """Write ``fixture`` under ``key`` unless a blob already exists.

        Returns:
            True if the fixture was written
        """
        if self.exists(key):
            return False
        logger.debug(f"Seeding {key} from fixture")
        return self.write(key, copy.deepcopy(fixture))

    def remove(self, key: str) -> None:
        """Delete the blob under ``key`` if present."""
        try:
            self.backend.remove_item(key)
        except Exception as e:
            logger.error(
                f"Error removing {key} from storage",
                extra={"key": key, "error": str(e), "error_type": type(e).__name__},
            )

    def raw(self, key: str) -> Optional[str]:
        """Get the serialized blob as stored, for byte-level comparison."""
        return self.backend.get_item(key)
