"""Per-location rate limit for delivered precipitation alerts."""

import logging
import math
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CooldownTracker:
    """Remembers when each location last received an alert.

    Only alerts that were let through are recorded; a suppressed alert
    does not extend the window.
    """

    def __init__(
        self,
        window_minutes: float = 30,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._window_sec = window_minutes * 60
        self._clock = clock
        self._last_delivered: dict[str, float] = {}

    def _remaining(self, location_id: str) -> Optional[float]:
        """Seconds left in the window, or None if not cooling down."""
        last = self._last_delivered.get(location_id)
        if last is None:
            return None
        remaining = self._window_sec - (self._clock() - last)
        return remaining if remaining > 0 else None

    def admit(self, location_id: str) -> bool:
        """Return True and start a new window, or False if still cooling down."""
        if self._remaining(location_id) is not None:
            return False
        self._last_delivered[location_id] = self._clock()
        return True

    def clear(self, location_id: str) -> None:
        self._last_delivered.pop(location_id, None)
        logger.debug("Cooldown cleared for %s", location_id)

    def status(self, location_id: str) -> dict:
        """Return ``{"in_cooldown": bool, "remaining_minutes": int}`` (minutes rounded up)."""
        remaining = self._remaining(location_id)
        if remaining is None:
            return {"in_cooldown": False}
        return {"in_cooldown": True, "remaining_minutes": math.ceil(remaining / 60)}

    def sweep(self) -> int:
        """Forget locations whose window has lapsed. Returns count removed."""
        stale = [k for k in self._last_delivered if self._remaining(k) is None]
        for key in stale:
            del self._last_delivered[key]
        return len(stale)
