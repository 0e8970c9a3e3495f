"""Time source used by every expiration decision."""

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current time as a naive UTC datetime (matches the stored columns)."""
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC).replace(tzinfo=None)


system_clock = SystemClock()


def get_clock() -> Clock:
    """Dependency for FastAPI endpoints to get the active clock."""
    return system_clock
