from typing import Callable


class ListingRetryPolicy:
    """
    Exponential backoff for cycles whose listing failed.

    The first failure waits one poll interval, each following consecutive
    failure doubles the wait, capped at ``max_backoff_ms``.
    """

    def __init__(self, base_interval_ms: Callable[[], int], max_backoff_ms: int = 30000):
        if max_backoff_ms < 1:
            raise ValueError("max_backoff_ms must be positive")
        self._base_interval_ms = base_interval_ms
        self._max_backoff_ms = max_backoff_ms

    def next_delay_ms(self, consecutive_failures: int) -> int:
        base = self._base_interval_ms()
        if consecutive_failures <= 0:
            return base
        # Exponent capped at 32
        exponent = min(consecutive_failures - 1, 32)
        return max(base, min(base * (2 ** exponent), self._max_backoff_ms))

    def next_delay_seconds(self, consecutive_failures: int) -> float:
        return self.next_delay_ms(consecutive_failures) / 1000.0
