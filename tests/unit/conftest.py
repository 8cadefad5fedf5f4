from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

import pytest

from src.domain.models import (
    GtfsFeed,
    GtfsRoute,
    GtfsTrip,
    ServiceCalendar,
    ServiceException,
    Stop,
    StopTime,
)


def hms(raw: str) -> int:
    hh, mm, ss = raw.split(":")
    return int(hh) * 3600 + int(mm) * 60 + int(ss)


@dataclass
class FeedBuilder:
    """Small fluent helper to assemble in-memory GTFS feeds for tests."""

    stops: dict[str, Stop] = field(default_factory=dict)
    routes: dict[str, GtfsRoute] = field(default_factory=dict)
    trips: dict[str, GtfsTrip] = field(default_factory=dict)
    stop_times: dict[str, tuple[StopTime, ...]] = field(default_factory=dict)
    calendars: dict[str, ServiceCalendar] = field(default_factory=dict)
    exceptions: dict[str, tuple[ServiceException, ...]] = field(default_factory=dict)

    def stop(self, stop_id: str, parent: str | None = None) -> FeedBuilder:
        self.stops[stop_id] = Stop(id=stop_id, name=f"Stop {stop_id}", parent_station=parent)
        return self

    def route(self, route_id: str, short_name: str | None = None) -> FeedBuilder:
        self.routes[route_id] = GtfsRoute(route_id=route_id, short_name=short_name)
        return self

    def trip(
        self,
        trip_id: str,
        route_id: str,
        calls: list[tuple[str, str]],
        *,
        direction_id: int = 0,
        service_id: str | None = None,
        short_name: str | None = None,
    ) -> FeedBuilder:
        """Add a trip calling at ``calls`` = [(stop_id, "HH:MM:SS"), ...]."""

        if route_id not in self.routes:
            self.route(route_id)
        for stop_id, _ in calls:
            if stop_id not in self.stops:
                self.stop(stop_id)
        self.trips[trip_id] = GtfsTrip(
            trip_id=trip_id,
            route_id=route_id,
            service_id=service_id,
            direction_id=direction_id,
            short_name=short_name,
        )
        self.stop_times[trip_id] = tuple(
            StopTime(
                trip_id=trip_id,
                stop_id=stop_id,
                stop_sequence=seq,
                arrival_time_s=hms(t),
                departure_time_s=hms(t),
            )
            for seq, (stop_id, t) in enumerate(calls, start=1)
        )
        return self

    def line(
        self, route_id: str, stop_ids: list[str], *, direction_id: int = 0
    ) -> FeedBuilder:
        """Add one trip visiting ``stop_ids`` ten minutes apart from 08:00."""

        calls = [
            (stop_id, f"{8 + (i * 10) // 60:02d}:{(i * 10) % 60:02d}:00")
            for i, stop_id in enumerate(stop_ids)
        ]
        trip_id = f"{route_id}-{direction_id}-{len(self.trips) + 1}"
        return self.trip(trip_id, route_id, calls, direction_id=direction_id)

    def calendar(
        self,
        service_id: str,
        weekdays: tuple[bool, bool, bool, bool, bool, bool, bool],
        start: date,
        end: date,
    ) -> FeedBuilder:
        self.calendars[service_id] = ServiceCalendar(
            service_id=service_id, weekdays=weekdays, start_date=start, end_date=end
        )
        return self

    def exception(self, exc: ServiceException) -> FeedBuilder:
        self.exceptions[exc.service_id] = self.exceptions.get(exc.service_id, ()) + (exc,)
        return self

    def build(self) -> GtfsFeed:
        return GtfsFeed(
            stops_by_id=dict(self.stops),
            routes_by_id=dict(self.routes),
            trips_by_id=dict(self.trips),
            stop_times_by_trip=dict(self.stop_times),
            calendars_by_service=dict(self.calendars),
            exceptions_by_service=dict(self.exceptions),
        )


@pytest.fixture
def builder() -> FeedBuilder:
    return FeedBuilder()


@pytest.fixture
def line_feed(builder: FeedBuilder) -> GtfsFeed:
    """Route R, direction 0: A 08:00 -> B 08:10 -> C 08:20."""

    return (
        builder.route("R", short_name="R")
        .trip(
            "T1",
            "R",
            [("A", "08:00:00"), ("B", "08:10:00"), ("C", "08:20:00")],
            short_name="101",
        )
        .build()
    )
