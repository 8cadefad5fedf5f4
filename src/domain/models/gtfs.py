from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Protocol

from src.domain.algorithms.stop_patterns import canonical_stop_sequence

from .calendar import ExceptionType, ServiceCalendar, ServiceException
from .stop import Stop


@dataclass(frozen=True, slots=True)
class StopTime:
    """A single stop_times.txt row.

    Times are seconds since service day midnight (GTFS time semantics; may exceed 24h).
    """

    trip_id: str
    stop_id: str
    stop_sequence: int
    arrival_time_s: int
    departure_time_s: int


@dataclass(frozen=True, slots=True)
class GtfsRoute:
    route_id: str
    short_name: str | None = None
    long_name: str | None = None
    color: str | None = None  # hex without '#'
    text_color: str | None = None  # hex without '#'


@dataclass(frozen=True, slots=True)
class GtfsTrip:
    trip_id: str
    route_id: str
    service_id: str | None = None
    direction_id: int = 0
    short_name: str | None = None
    headsign: str | None = None


class GtfsFeedReader(Protocol):
    """Read-only feed accessor consumed by graph building and schedule matching."""

    def get_stop(self, stop_id: str) -> Stop | None: ...

    def get_trips(
        self, *, route_id: str, direction_id: int, on: date | None
    ) -> list[str]: ...

    def get_trip(self, trip_id: str) -> GtfsTrip | None: ...

    def get_canonical_stop_sequence(self, trip_ids: Iterable[str]) -> list[str]: ...

    def get_routes(self, route_id: str | None = None) -> list[GtfsRoute]: ...

    def get_stop_times_for_trips(self, trip_ids: Iterable[str]) -> list[StopTime]: ...

    def get_child_stops(self, stop_id: str) -> list[str]: ...


@dataclass(frozen=True, slots=True)
class GtfsFeed:
    """In-memory representation of the subset of GTFS needed for itinerary search.

    ``stop_times_by_trip`` values are ordered by stop_sequence.
    """

    stops_by_id: dict[str, Stop]
    routes_by_id: dict[str, GtfsRoute]
    trips_by_id: dict[str, GtfsTrip]
    stop_times_by_trip: dict[str, tuple[StopTime, ...]]
    calendars_by_service: dict[str, ServiceCalendar] = field(default_factory=dict)
    exceptions_by_service: dict[str, tuple[ServiceException, ...]] = field(
        default_factory=dict
    )

    _children_by_parent: dict[str, tuple[str, ...]] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        children: dict[str, list[str]] = {}
        for stop in self.stops_by_id.values():
            if stop.parent_station:
                children.setdefault(stop.parent_station, []).append(stop.id)
        object.__setattr__(
            self,
            "_children_by_parent",
            {parent: tuple(ids) for parent, ids in children.items()},
        )

    # --- service calendar -------------------------------------------------

    def is_service_active(self, service_id: str | None, on: date) -> bool:
        if not self.calendars_by_service and not self.exceptions_by_service:
            # Feeds without any calendar data run every trip every day.
            return True
        if service_id is None:
            return False

        for exc in self.exceptions_by_service.get(service_id, ()):
            if exc.date == on:
                return exc.exception_type == ExceptionType.ADDED

        calendar = self.calendars_by_service.get(service_id)
        return calendar is not None and calendar.runs_on(on)

    def active_service_ids(self, on: date) -> set[str]:
        service_ids = {t.service_id for t in self.trips_by_id.values() if t.service_id}
        return {sid for sid in service_ids if self.is_service_active(sid, on)}

    # --- accessor contract ------------------------------------------------

    def get_stop(self, stop_id: str) -> Stop | None:
        return self.stops_by_id.get(stop_id)

    def get_trips(
        self, *, route_id: str, direction_id: int, on: date | None
    ) -> list[str]:
        out: list[str] = []
        for trip in self.trips_by_id.values():
            if trip.route_id != route_id or trip.direction_id != direction_id:
                continue
            if on is not None and not self.is_service_active(trip.service_id, on):
                continue
            out.append(trip.trip_id)
        return out

    def get_trip(self, trip_id: str) -> GtfsTrip | None:
        return self.trips_by_id.get(trip_id)

    def get_canonical_stop_sequence(self, trip_ids: Iterable[str]) -> list[str]:
        patterns: Counter[tuple[str, ...]] = Counter()
        for trip_id in trip_ids:
            stop_times = self.stop_times_by_trip.get(trip_id, ())
            if stop_times:
                patterns[tuple(st.stop_id for st in stop_times)] += 1
        return canonical_stop_sequence(patterns)

    def get_routes(self, route_id: str | None = None) -> list[GtfsRoute]:
        if route_id is None:
            return list(self.routes_by_id.values())
        route = self.routes_by_id.get(route_id)
        return [route] if route else []

    def get_stop_times_for_trips(self, trip_ids: Iterable[str]) -> list[StopTime]:
        out: list[StopTime] = []
        for trip_id in trip_ids:
            out.extend(self.stop_times_by_trip.get(trip_id, ()))
        return out

    def get_child_stops(self, stop_id: str) -> list[str]:
        """Return ``stop_id`` followed by every stop whose parent chain reaches it."""

        out = [stop_id]
        seen = {stop_id}
        i = 0
        while i < len(out):
            for child in self._children_by_parent.get(out[i], ()):
                if child not in seen:
                    seen.add(child)
                    out.append(child)
            i += 1
        return out
