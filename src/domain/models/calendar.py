from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import IntEnum


class ExceptionType(IntEnum):
    """calendar_dates.txt exception_type values."""

    ADDED = 1
    REMOVED = 2


@dataclass(frozen=True, slots=True)
class ServiceCalendar:
    """A calendar.txt row: weekly pattern valid within a date range."""

    service_id: str
    weekdays: tuple[bool, bool, bool, bool, bool, bool, bool]  # monday..sunday
    start_date: date
    end_date: date

    def runs_on(self, day: date) -> bool:
        if not (self.start_date <= day <= self.end_date):
            return False
        return self.weekdays[day.weekday()]


@dataclass(frozen=True, slots=True)
class ServiceException:
    """A calendar_dates.txt row."""

    service_id: str
    date: date
    exception_type: ExceptionType


def parse_gtfs_date(raw: str) -> date:
    # GTFS dates are YYYYMMDD.
    value = raw.strip()
    if len(value) != 8 or not value.isdigit():
        raise ValueError(f"Invalid GTFS date: {raw!r}")
    return date(int(value[:4]), int(value[4:6]), int(value[6:]))
