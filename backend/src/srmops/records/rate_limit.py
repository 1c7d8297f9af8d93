"""Daily submission ceiling per user.

The limiter keeps no state of its own: it counts the user's persisted
interventions and reclamations inside the current window. The check and the
subsequent insert are not atomic, so concurrent submissions at the boundary
can both pass. The ceiling is a soft administrative limit.
"""

from datetime import datetime, timedelta
from typing import Callable, Literal

from .models import utcnow
from .store import RecordStore

DEFAULT_DAILY_LIMIT = 15

WindowMode = Literal["rolling", "calendar"]


class RateLimiter:
    """Counts a user's recent submissions against a daily ceiling.

    Window modes:
        rolling: the 24 hours preceding now
        calendar: since 00:00 UTC of the current day
    """

    def __init__(
        self,
        store: RecordStore,
        limit: int = DEFAULT_DAILY_LIMIT,
        window: WindowMode = "rolling",
        clock: Callable[[], datetime] = utcnow,
    ):
        if window not in ("rolling", "calendar"):
            raise ValueError(f"Unknown rate limit window: {window}")
        self._store = store
        self.limit = limit
        self.window = window
        self._clock = clock

    def window_start(self, now: datetime | None = None) -> datetime:
        """Start of the window containing ``now``."""
        now = now or self._clock()
        if self.window == "calendar":
            return now.replace(hour=0, minute=0, second=0, microsecond=0)
        return now - timedelta(hours=24)

    async def submissions_in_window(self, user_id: str) -> int:
        return await self._store.count_created_since(user_id, self.window_start())

    async def check(self, user_id: str) -> bool:
        """Return True if the user may submit another record."""
        return await self.submissions_in_window(user_id) < self.limit
