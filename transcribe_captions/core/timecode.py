"""Caption timestamp formatting."""

from __future__ import annotations

_MS_PER_HOUR = 3_600_000
_MS_PER_MINUTE = 60_000
_MS_PER_SECOND = 1_000


def format_timestamp(seconds: float) -> str:
    """Format an offset in seconds as ``HH:MM:SS.mmm``.

    Hours are not wrapped at 24; past 99 hours the field simply grows.
    The value is rounded to the nearest millisecond before it is split,
    so 59.9996 becomes ``00:01:00.000`` rather than ``00:00:60.000``.

    >>> format_timestamp(3661.25)
    '01:01:01.250'
    """
    if seconds < 0:
        raise ValueError(f"Timestamp must be non-negative, got {seconds!r}")

    total_ms = int(round(seconds * _MS_PER_SECOND))
    hours, rest = divmod(total_ms, _MS_PER_HOUR)
    minutes, rest = divmod(rest, _MS_PER_MINUTE)
    secs, millis = divmod(rest, _MS_PER_SECOND)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"
