"""
Exponential backoff with jitter.

wait = base * 2^n +/- jitter, where jitter is uniform in [0, base) and the
result never drops below one base interval.
Reference: https://docs.link.getmoneytree.com/docs/faq-rate-limiting
"""

import random

import structlog

logger = structlog.get_logger(__name__)

# 2**30 base intervals is already decades; larger exponents only overflow.
MAX_EXPONENT = 30

_default_rng = random.Random()


def calculate_backoff_delay(
    base_delay: float,
    retry_count: int,
    rng: random.Random | None = None,
) -> float:
    """
    Compute the wait before retry ``retry_count + 1``.

    Args:
        base_delay: Base interval in seconds (> 0)
        retry_count: Zero-based index of the attempt that just failed
        rng: Random source; defaults to the module-level generator

    Returns:
        Delay in seconds, in [max(d, d*2^n - d), d*2^n + d)
    """
    if base_delay <= 0:
        raise ValueError("base_delay must be > 0")

    rng = rng or _default_rng
    retry_count = min(max(retry_count, 0), MAX_EXPONENT)

    delay = base_delay * (1 << retry_count)
    jitter = rng.random() * base_delay

    if rng.randrange(2) == 0:
        delay += jitter
    else:
        delay -= jitter
        if delay < base_delay:
            delay = base_delay

    return delay


class BackoffPolicy:
    """
    Backoff policy bound to a base delay and a random source.

    The random source is injectable so tests can make the jitter
    deterministic without touching process-wide random state.

    Attributes:
        base_delay: Base interval in seconds
        rng: Random source used for jitter and the add/subtract coin flip
    """

    def __init__(self, base_delay: float, rng: random.Random | None = None):
        if base_delay <= 0:
            raise ValueError("base_delay must be > 0")
        self.base_delay = base_delay
        self.rng = rng or random.Random()

    def delay(self, attempt: int) -> float:
        """Delay in seconds to wait after the given zero-based attempt."""
        delay = calculate_backoff_delay(self.base_delay, attempt, self.rng)
        logger.debug(
            "Computed backoff delay",
            attempt=attempt,
            base_delay=self.base_delay,
            delay_seconds=round(delay, 3),
        )
        return delay

    def bounds(self, attempt: int) -> tuple[float, float]:
        """Inclusive lower / exclusive upper bound of ``delay(attempt)``."""
        attempt = min(max(attempt, 0), MAX_EXPONENT)
        exponential = self.base_delay * (1 << attempt)
        return max(self.base_delay, exponential - self.base_delay), exponential + self.base_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_delay={self.base_delay}s)"
