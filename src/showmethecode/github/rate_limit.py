"""Track the GitHub rate-limit budget reported in response headers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Remembers the most recent ``X-RateLimit-*`` headers.

    Only observes; requests are never delayed.
    """

    def __init__(self, threshold: int = 10) -> None:
        self._threshold = threshold
        self._remaining: int | None = None
        self._reset_at: datetime | None = None
        self._warned = False

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        try:
            if remaining is not None:
                self._remaining = int(remaining)
            if reset is not None:
                self._reset_at = datetime.fromtimestamp(float(reset), tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            logger.debug("Ignoring malformed rate-limit headers: %r / %r", remaining, reset)
            return

        if self.is_low and not self._warned:
            logger.warning(
                "GitHub rate limit nearly exhausted: %d requests left, resets at %s",
                self._remaining,
                self.reset_label or "unknown",
            )
            self._warned = True

    @property
    def remaining(self) -> int | None:
        return self._remaining

    @property
    def is_low(self) -> bool:
        return self._remaining is not None and self._remaining <= self._threshold

    @property
    def reset_label(self) -> str | None:
        if self._reset_at is None:
            return None
        return self._reset_at.astimezone().strftime("%H:%M:%S")
