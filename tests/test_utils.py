"""Shared test utilities."""

from datetime import UTC, datetime, timedelta

START = datetime(2026, 1, 1, 12, 0, 0)


def utcnow():
    """Get current UTC time as naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.current = start or utcnow().replace(microsecond=0)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingLogger:
    """Stands in for a structlog logger and keeps every call."""

    def __init__(self):
        self.events = []

    def _log(self, level, event, **kwargs):
        self.events.append((level, event, kwargs))

    def debug(self, event, **kwargs):
        self._log("debug", event, **kwargs)

    def info(self, event, **kwargs):
        self._log("info", event, **kwargs)

    def warning(self, event, **kwargs):
        self._log("warning", event, **kwargs)

    def error(self, event, **kwargs):
        self._log("error", event, **kwargs)

    def exception(self, event, **kwargs):
        self._log("exception", event, **kwargs)

    def names(self):
        return [event for _, event, _ in self.events]

    def values(self):
        return [str(value) for _, _, kwargs in self.events for value in kwargs.values()]
