"""Per-operation statistics for the store."""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any


@dataclass
class OperationStats:
    """Track call counts and simulated latency for store operations."""

    slow_threshold_ms: float = 400.0
    total_calls: int = 0
    total_failures: int = 0
    total_latency_ms: float = 0.0
    slow_calls: int = 0
    slowest_ms: float = 0.0
    slowest_operation: str = ""
    by_operation: dict = field(
        default_factory=lambda: defaultdict(lambda: {"count": 0, "failures": 0, "total_ms": 0.0})
    )

    def record(self, operation: str, latency_ms: float, success: bool = True):
        """Record one completed operation."""
        self.total_calls += 1
        self.total_latency_ms += latency_ms
        self.by_operation[operation]["count"] += 1
        self.by_operation[operation]["total_ms"] += latency_ms
        if not success:
            self.total_failures += 1
            self.by_operation[operation]["failures"] += 1
        if latency_ms > self.slow_threshold_ms:
            self.slow_calls += 1
        if latency_ms > self.slowest_ms:
            self.slowest_ms = latency_ms
            self.slowest_operation = operation

    @property
    def avg_latency_ms(self) -> float:
        """Average simulated latency in milliseconds."""
        return self.total_latency_ms / self.total_calls if self.total_calls > 0 else 0.0

    def summary(self) -> dict[str, Any]:
        """Get summary statistics."""
        return {
            "total_calls": self.total_calls,
            "total_failures": self.total_failures,
            "avg_latency_ms": round(self.avg_latency_ms, 2),
            "slow_calls": self.slow_calls,
            "slowest_ms": round(self.slowest_ms, 2),
            "slowest_operation": self.slowest_operation,
            "by_operation": {
                op: {
                    "count": data["count"],
                    "failures": data["failures"],
                    "avg_ms": round(data["total_ms"] / data["count"], 2) if data["count"] > 0 else 0,
                }
                for op, data in self.by_operation.items()
            },
        }

    def reset(self):
        """Clear all counters."""
        self.total_calls = 0
        self.total_failures = 0
        self.total_latency_ms = 0.0
        self.slow_calls = 0
        self.slowest_ms = 0.0
        self.slowest_operation = ""
        self.by_operation.clear()
