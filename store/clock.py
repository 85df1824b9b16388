"""Timestamp source for created_at / updated_at fields."""

from datetime import datetime, timedelta, timezone
from typing import Optional


class MonotonicClock:
    """UTC clock that never returns the same instant twice.

    Two rows created within one tick of the system clock still get
    distinct, increasing timestamps, so listings sorted by creation
    time have a strict order.
    """

    def __init__(self) -> None:
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(microseconds=1)
        self._last = current
        return current
