from datetime import datetime, timedelta


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"


def format_remaining(delta: timedelta) -> str:
    """
    Human description of a remaining lifetime, e.g. "2 days, 3 hours, 5 minutes".

    Seconds are only shown for lifetimes under an hour. Zero or negative
    durations are reported as "expired".
    """
    total_seconds = int(delta.total_seconds())
    if total_seconds <= 0:
        return "expired"

    days, rest = divmod(total_seconds, 86_400)
    hours, rest = divmod(rest, 3_600)
    minutes, seconds = divmod(rest, 60)

    parts = []
    if days:
        parts.append(_plural(days, "day"))
    if hours:
        parts.append(_plural(hours, "hour"))
    if minutes:
        parts.append(_plural(minutes, "minute"))
    if seconds and not days and not hours:
        parts.append(_plural(seconds, "second"))
    return ", ".join(parts)


def format_timestamp(value: datetime) -> str:
    """Operator-facing rendering of a naive UTC timestamp."""
    return value.strftime("%Y-%m-%d %H:%M:%S UTC")
