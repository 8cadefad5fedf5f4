from __future__ import annotations

from typing import Sequence

from src.domain.models.itinerary import (
    LogicalStop,
    PathSegment,
    SimplifiedTrip,
    TripLeg,
)


def simplify_path(path: Sequence[PathSegment]) -> list[SimplifiedTrip]:
    """Collapse consecutive segments of the same route direction into one trip.

    Stops passed through without changing vehicle are kept, in order, in
    ``intermediate_stops``.
    """

    trips: list[SimplifiedTrip] = []
    current: SimplifiedTrip | None = None

    for seg in path:
        if current is not None and (current.route_id, current.direction_id) == (
            seg.route_id,
            seg.direction_id,
        ):
            current = SimplifiedTrip(
                start_stop=current.start_stop,
                end_stop=seg.end_stop,
                route_id=current.route_id,
                direction_id=current.direction_id,
                intermediate_stops=current.intermediate_stops + (current.end_stop,),
            )
            trips[-1] = current
            continue

        current = SimplifiedTrip(
            start_stop=seg.start_stop,
            end_stop=seg.end_stop,
            route_id=seg.route_id,
            direction_id=seg.direction_id,
        )
        trips.append(current)

    return trips


def path_to_legs(path: Sequence[PathSegment]) -> list[TripLeg]:
    return [trip.to_leg() for trip in simplify_path(path)]


def path_stops(path: Sequence[PathSegment]) -> list[LogicalStop]:
    """Node sequence visited by a path."""

    if not path:
        return []
    return [path[0].start_stop, *(seg.end_stop for seg in path)]


def trip_stops(trips: Sequence[SimplifiedTrip]) -> list[LogicalStop]:
    """Node sequence rebuilt from simplified trips (inverse of simplify_path)."""

    if not trips:
        return []
    out: list[LogicalStop] = [trips[0].start_stop]
    for trip in trips:
        out.extend(trip.intermediate_stops)
        out.append(trip.end_stop)
    return out
