from __future__ import annotations

from datetime import datetime, timedelta


def parse_gtfs_time_to_seconds(raw: str) -> int:
    # GTFS time can be HH:MM:SS with HH possibly > 24.
    parts = raw.strip().split(":")
    if len(parts) != 3:
        raise ValueError(f"Invalid GTFS time: {raw!r}")
    try:
        hh, mm, ss = (int(p) for p in parts)
    except ValueError as exc:
        raise ValueError(f"Invalid GTFS time: {raw!r}") from exc
    return hh * 3600 + mm * 60 + ss


def format_gtfs_seconds(seconds: int) -> str:
    """Format service-day seconds as HH:MM:SS, keeping hours past 24."""

    seconds = int(seconds)
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


def service_datetime_from_seconds(base: datetime, seconds: int) -> datetime:
    """Convert GTFS 'seconds since midnight' into an absolute datetime.

    Supports times over 24h (e.g. 25:10) by rolling into the next day.
    The provided base datetime is treated as the service day.
    """

    day0 = base.replace(hour=0, minute=0, second=0, microsecond=0)
    return day0 + timedelta(seconds=int(seconds))


def seconds_since_midnight(dt: datetime) -> int:
    # Treat provided datetime as local service time.
    return dt.hour * 3600 + dt.minute * 60 + dt.second
