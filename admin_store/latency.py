"""Simulated network latency for store operations."""

import asyncio
import random
from typing import Awaitable, Callable, Optional


class LatencySimulator:
    """Suspend the caller for a random duration to mimic a request round trip."""

    def __init__(
        self,
        min_ms: float = 200.0,
        max_ms: float = 500.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the simulator.

        Args:
            min_ms: Lower bound of the delay in milliseconds
            max_ms: Upper bound of the delay in milliseconds
            sleep: Coroutine used to suspend (seconds argument)
            rng: Random source, for reproducible delays
        """
        if min_ms < 0 or max_ms < min_ms:
            raise ValueError(f"Invalid latency range {min_ms}-{max_ms} ms")
        self.min_ms = min_ms
        self.max_ms = max_ms
        self._sleep = sleep
        self._rng = rng or random.Random()

    @classmethod
    def disabled(cls) -> "LatencySimulator":
        """Create a simulator that never suspends."""
        return cls(0.0, 0.0)

    @property
    def enabled(self) -> bool:
        return self.max_ms > 0

    def next_delay_ms(self) -> float:
        """Draw the next delay in milliseconds."""
        if not self.enabled:
            return 0.0
        return self._rng.uniform(self.min_ms, self.max_ms)

    async def wait(self) -> float:
        """Suspend for the next delay.

        Returns:
            The simulated delay in milliseconds
        """
        delay_ms = self.next_delay_ms()
        if delay_ms > 0:
            await self._sleep(delay_ms / 1000)
        return delay_ms
