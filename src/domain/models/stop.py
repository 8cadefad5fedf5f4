from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Stop:
    """A GTFS stops.txt row.

    ``parent_station`` links a platform (or entrance) to its station; the
    topmost ancestor of that chain is the stop used for routing.
    """

    id: str
    name: str
    parent_station: str | None = None
    location: GeoPoint | None = None
