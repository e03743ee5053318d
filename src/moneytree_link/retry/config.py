"""
Retry configuration for rate-limited requests.

RetryConfig is created once per client and never mutated afterwards. It is
the only configuration the executor reads between attempts.
"""

from dataclasses import dataclass

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 3.0  # seconds, as recommended by the LINK rate-limiting FAQ


@dataclass(frozen=True)
class RetryConfig:
    """
    Retry behaviour for HTTP 429 responses.

    Attributes:
        max_retries: Maximum number of retries after the first attempt
        base_delay: Base backoff interval in seconds
        enabled: Whether 429 responses are retried at all
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_BASE_DELAY
    enabled: bool = True

    def __post_init__(self) -> None:
        """Validate config invariants."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        if self.base_delay <= 0:
            raise ValueError("base_delay must be > 0")

    @property
    def max_attempts(self) -> int:
        """Upper bound on sends for a single call."""
        return self.max_retries + 1

    @classmethod
    def disabled(cls) -> "RetryConfig":
        return cls(max_retries=0, enabled=False)
