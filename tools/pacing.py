"""
Pacing policy — delays between LLM calls to avoid provider-side throttling.
"""

import time
from typing import Callable


class Pacer:
    """
    Short delay after every call, longer delay after every Nth call.
    Nothing is waited before the first call of a run.
    """

    def __init__(
        self,
        short_delay: float = 0.5,
        long_delay: float = 2.0,
        long_every: int = 10,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.short_delay = short_delay
        self.long_delay = long_delay
        self.long_every = long_every
        self.sleep = sleep

    def delay_for(self, calls_made: int) -> float:
        """Seconds to wait before the next call, given how many calls were made."""
        if calls_made <= 0:
            return 0.0
        if self._is_long_pause(calls_made):
            return self.long_delay
        return self.short_delay

    def _is_long_pause(self, calls_made: int) -> bool:
        return self.long_every > 0 and calls_made % self.long_every == 0

    def wait(self, calls_made: int) -> float:
        delay = self.delay_for(calls_made)
        if delay <= 0:
            return 0.0
        if self._is_long_pause(calls_made):
            print(f"  ⏳ Rate limiting: Waiting {delay:g}s... ({calls_made} API calls made)")
        self.sleep(delay)
        return delay


class NoPacing(Pacer):
    """Pacing policy that never waits."""

    def __init__(self):
        super().__init__(short_delay=0.0, long_delay=0.0, long_every=0)

    def wait(self, calls_made: int) -> float:
        return 0.0
