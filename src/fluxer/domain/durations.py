"""Duration rendering in the format Flux controllers store (``1m0s``)."""

from __future__ import annotations

from datetime import timedelta


def go_duration(value: timedelta) -> str:
    """Render ``value`` like Go's ``time.Duration.String``.

    >>> go_duration(timedelta(minutes=1))
    '1m0s'
    >>> go_duration(timedelta(hours=1, seconds=30))
    '1h0m30s'
    """

    total_ms = round(value.total_seconds() * 1000)
    if total_ms < 0:
        raise ValueError(f"negative duration: {value}")
    if total_ms == 0:
        return "0s"

    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    seconds, millis = divmod(remainder, 1000)

    if hours == 0 and minutes == 0 and seconds == 0:
        return f"{millis}ms"

    rendered_seconds = f"{seconds}" if millis == 0 else f"{seconds}.{millis:03d}".rstrip("0")
    if hours:
        return f"{hours}h{minutes}m{rendered_seconds}s"
    if minutes:
        return f"{minutes}m{rendered_seconds}s"
    return f"{rendered_seconds}s"
