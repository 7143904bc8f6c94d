"""Result envelope returned by every store operation."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Failure categories reported in an Err envelope."""

    NOT_FOUND = "not_found"
    INVALID = "invalid"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful operation carrying its data (None for a bare success)."""

    data: T = None

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON envelope shape."""
        if self.data is None:
            return {"success": True}
        return {"success": True, "data": self.data}


@dataclass(frozen=True)
class Err:
    """Failed operation carrying an error code and message."""

    code: ErrorCode
    error: str

    @property
    def success(self) -> bool:
        return False

    @property
    def data(self) -> None:
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON envelope shape."""
        return {"success": False, "error": self.error}


Result = Union[Ok[T], Err]


def not_found(entity: str) -> Err:
    """Build the not-found failure for an entity name."""
    return Err(ErrorCode.NOT_FOUND, f"{entity} not found")
