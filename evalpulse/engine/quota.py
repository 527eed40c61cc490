"""Per-user daily quota counting."""

from collections.abc import Callable
from datetime import datetime, timezone, tzinfo
from typing import Protocol


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def start_of_day(now: datetime, tz: tzinfo) -> datetime:
    """Midnight of ``now``'s calendar date in ``tz``, as an aware datetime."""
    local = now.astimezone(tz)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


class RecordCountSource(Protocol):
    """Read side of the evaluation log used for quota enforcement."""

    async def count_records_since(self, user_id: str, since: datetime) -> int: ...


class QuotaCounter:
    """
    Counts a user's accepted evaluations for the current day.

    Computed from the log on every call, never cached. The window starts at
    midnight in ``tz``; there is no upper bound since records are stamped with
    the server clock and cannot lie in the future.
    """

    def __init__(
        self,
        source: RecordCountSource,
        tz: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._source = source
        self._tz = tz
        self._clock = clock

    async def count_today(self, user_id: str) -> int:
        since = start_of_day(self._clock(), self._tz)
        count = await self._source.count_records_since(user_id, since)
        return max(count or 0, 0)
