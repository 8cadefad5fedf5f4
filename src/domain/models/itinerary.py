from __future__ import annotations

from dataclasses import dataclass

# A logical stop is the id of the topmost parent station of a stop.
LogicalStop = str


@dataclass(frozen=True, slots=True)
class TransitEdge:
    """Directed graph edge between two logical stops served by one route direction."""

    from_stop: LogicalStop
    to_stop: LogicalStop
    route_id: str
    direction_id: int

    @property
    def key(self) -> tuple[str, int]:
        return (self.route_id, self.direction_id)


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One traversed edge of a path."""

    start_stop: LogicalStop
    route_id: str
    direction_id: int
    end_stop: LogicalStop


Path = tuple[PathSegment, ...]


@dataclass(frozen=True, slots=True)
class TripLeg:
    """A boarding of one route direction between two logical stops."""

    start_stop: LogicalStop
    end_stop: LogicalStop
    route_id: str
    direction_id: int


@dataclass(frozen=True, slots=True)
class SimplifiedTrip:
    """A run of same-route/direction segments collapsed into a single leg."""

    start_stop: LogicalStop
    end_stop: LogicalStop
    route_id: str
    direction_id: int
    intermediate_stops: tuple[LogicalStop, ...] = ()

    def to_leg(self) -> TripLeg:
        return TripLeg(
            start_stop=self.start_stop,
            end_stop=self.end_stop,
            route_id=self.route_id,
            direction_id=self.direction_id,
        )


@dataclass(frozen=True, slots=True)
class ScheduledLeg:
    """A trip leg bound to a concrete scheduled trip.

    Times are seconds since service day midnight (may exceed 24h).
    ``boarding_stop_id``/``alighting_stop_id`` are the feed stops (platforms)
    actually served, ``start_stop``/``end_stop`` their logical stops.
    """

    trip_id: str
    trip_short_name: str
    route_id: str
    route_short_name: str
    direction_id: int
    start_stop: LogicalStop
    end_stop: LogicalStop
    boarding_stop_id: str
    alighting_stop_id: str
    departure_time_s: int
    arrival_time_s: int

    @property
    def duration_s(self) -> int:
        return self.arrival_time_s - self.departure_time_s


@dataclass(frozen=True, slots=True)
class ScheduledJourney:
    legs: tuple[ScheduledLeg, ...]

    def __post_init__(self) -> None:
        if not self.legs:
            raise ValueError("A scheduled journey needs at least one leg")

    @property
    def departure_time_s(self) -> int:
        return self.legs[0].departure_time_s

    @property
    def arrival_time_s(self) -> int:
        return self.legs[-1].arrival_time_s

    @property
    def total_duration_s(self) -> int:
        # Wall-clock duration, so waiting at transfers is included.
        return self.arrival_time_s - self.departure_time_s

    @property
    def transfers(self) -> int:
        return len(self.legs) - 1
