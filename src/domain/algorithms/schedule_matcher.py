from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from itertools import islice
from typing import Iterator, Sequence

from src.domain.algorithms.path_simplifier import path_to_legs
from src.domain.algorithms.stop_resolver import StopResolver
from src.domain.exceptions import InvalidBound
from src.domain.models.gtfs import GtfsFeedReader, StopTime
from src.domain.models.itinerary import (
    PathSegment,
    ScheduledJourney,
    ScheduledLeg,
    TripLeg,
)


@dataclass(frozen=True, slots=True)
class _LegTimetable:
    """Stop times relevant to one leg, fetched once per match call."""

    leg: TripLeg
    # Stop times at the boarding stop set, by departure time.
    departures: tuple[StopTime, ...]
    # Stop times at the alighting stop set per trip, by stop_sequence.
    arrivals_by_trip: dict[str, tuple[StopTime, ...]]

    def matches(self, not_before_s: int) -> Iterator[tuple[StopTime, StopTime]]:
        """Yield (boarding, alighting) pairs departing at or after ``not_before_s``.

        The alighting stop time must come strictly later in the same trip, so
        trips passing the stops in reverse order are never matched.
        """

        for dep in self.departures:
            if dep.departure_time_s < not_before_s:
                continue
            arr = next(
                (
                    st
                    for st in self.arrivals_by_trip.get(dep.trip_id, ())
                    if st.stop_sequence > dep.stop_sequence
                ),
                None,
            )
            if arr is not None:
                yield dep, arr


@dataclass(slots=True)
class ScheduleMatcher:
    """Bind trip legs to concrete scheduled trips, greedily and leg by leg.

    Each leg takes the earliest feasible departure at or after a running cursor;
    the cursor then moves to that leg's arrival plus the minimum transfer
    duration. Earlier legs are never revisited to find a better overall arrival.
    """

    feed: GtfsFeedReader
    resolver: StopResolver | None = None

    def __post_init__(self) -> None:
        if self.resolver is None:
            self.resolver = StopResolver(self.feed)

    def match(
        self,
        legs: Sequence[TripLeg],
        *,
        on: date | None,
        departure_time_s: int,
        min_transfer_duration_s: int,
        journeys_count: int = 1,
    ) -> list[ScheduledJourney]:
        """Return up to ``journeys_count`` journeys for ``legs``, by departure time.

        Alternatives differ by their first-leg departure; later legs are matched
        greedily for each. A leg without any feasible trip drops that journey.
        """

        if journeys_count < 1:
            raise InvalidBound(f"journeys_count must be >= 1, got {journeys_count}")
        if min_transfer_duration_s < 0:
            raise InvalidBound(
                f"min_transfer_duration_s must be >= 0, got {min_transfer_duration_s}"
            )
        if not legs:
            return []

        timetables = [self._timetable(leg, on) for leg in legs]
        names: dict[tuple[str, str], str] = {}

        journeys: list[ScheduledJourney] = []
        first_matches = islice(timetables[0].matches(departure_time_s), journeys_count)
        for first in first_matches:
            scheduled = [self._scheduled_leg(timetables[0].leg, *first, names)]
            cursor = first[1].arrival_time_s + min_transfer_duration_s

            for timetable in timetables[1:]:
                match = next(timetable.matches(cursor), None)
                if match is None:
                    break
                scheduled.append(self._scheduled_leg(timetable.leg, *match, names))
                cursor = match[1].arrival_time_s + min_transfer_duration_s
            else:
                journeys.append(ScheduledJourney(legs=tuple(scheduled)))

        return sort_journeys(journeys)

    def _timetable(self, leg: TripLeg, on: date | None) -> _LegTimetable:
        trip_ids = self.feed.get_trips(
            route_id=leg.route_id, direction_id=leg.direction_id, on=on
        )
        start_ids = set(self.resolver.children(leg.start_stop))
        end_ids = set(self.resolver.children(leg.end_stop))

        departures: list[StopTime] = []
        arrivals: dict[str, list[StopTime]] = {}
        for st in self.feed.get_stop_times_for_trips(trip_ids):
            if st.stop_id in start_ids:
                departures.append(st)
            if st.stop_id in end_ids:
                arrivals.setdefault(st.trip_id, []).append(st)

        departures.sort(key=lambda st: st.departure_time_s)
        return _LegTimetable(
            leg=leg,
            departures=tuple(departures),
            arrivals_by_trip={
                trip_id: tuple(sorted(sts, key=lambda st: st.stop_sequence))
                for trip_id, sts in arrivals.items()
            },
        )

    def _scheduled_leg(
        self,
        leg: TripLeg,
        dep: StopTime,
        arr: StopTime,
        names: dict[tuple[str, str], str],
    ) -> ScheduledLeg:
        return ScheduledLeg(
            trip_id=dep.trip_id,
            trip_short_name=self._trip_short_name(dep.trip_id, names),
            route_id=leg.route_id,
            route_short_name=self._route_short_name(leg.route_id, names),
            direction_id=leg.direction_id,
            start_stop=leg.start_stop,
            end_stop=leg.end_stop,
            boarding_stop_id=dep.stop_id,
            alighting_stop_id=arr.stop_id,
            departure_time_s=dep.departure_time_s,
            arrival_time_s=arr.arrival_time_s,
        )

    def _route_short_name(self, route_id: str, names: dict[tuple[str, str], str]) -> str:
        key = ("route", route_id)
        if key not in names:
            routes = self.feed.get_routes(route_id)
            names[key] = (routes[0].short_name if routes else None) or route_id
        return names[key]

    def _trip_short_name(self, trip_id: str, names: dict[tuple[str, str], str]) -> str:
        key = ("trip", trip_id)
        if key not in names:
            trip = self.feed.get_trip(trip_id)
            names[key] = (trip.short_name if trip else None) or trip_id
        return names[key]


def sort_journeys(journeys: Sequence[ScheduledJourney]) -> list[ScheduledJourney]:
    return sorted(journeys, key=lambda j: (j.departure_time_s, j.arrival_time_s))


def find_scheduled_trips(
    feed: GtfsFeedReader,
    path: Sequence[PathSegment],
    on: date | None,
    departure_time_s: int,
    min_transfer_duration_s: int,
    journeys_count: int = 1,
    *,
    resolver: StopResolver | None = None,
) -> list[ScheduledJourney]:
    """Schedule a graph path: simplify it into legs, then match each leg to a trip."""

    matcher = ScheduleMatcher(feed=feed, resolver=resolver)
    return matcher.match(
        path_to_legs(path),
        on=on,
        departure_time_s=departure_time_s,
        min_transfer_duration_s=min_transfer_duration_s,
        journeys_count=journeys_count,
    )
