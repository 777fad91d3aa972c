"""Wall-clock deadline passed through the pipeline stages."""

import time
from collections.abc import Callable

from .errors import Timeout


class Deadline:
    """A fixed point in monotonic time after which work must stop.

    Args:
        seconds: Budget from construction until expiry.
        clock: Monotonic clock returning seconds. Injectable for tests.
    """

    def __init__(
        self, seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._clock = clock
        self.seconds = seconds
        self.expires_at = clock() + seconds

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self._clock() >= self.expires_at

    def check(self, stage: str) -> None:
        """Raise :class:`Timeout` if the deadline has passed.

        Args:
            stage: Name of the stage about to start, used in the message.

        Raises:
            Timeout: If no time remains.
        """
        if self.expired:
            raise Timeout(f"Analysis timed out before {stage}")
