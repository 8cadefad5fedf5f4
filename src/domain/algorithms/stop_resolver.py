from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.exceptions import CycleError, UnknownStopError
from src.domain.models.gtfs import GtfsFeedReader
from src.domain.models.itinerary import LogicalStop


@dataclass(slots=True)
class StopResolver:
    """Collapse platforms and entrances onto their topmost parent station.

    Stops missing from the feed are treated as already logical unless
    ``strict`` is set, in which case UnknownStopError is raised.
    """

    feed: GtfsFeedReader
    strict: bool = False

    _cache: dict[str, LogicalStop] = field(default_factory=dict, repr=False)

    def resolve(self, stop_id: str) -> LogicalStop:
        cached = self._cache.get(stop_id)
        if cached is not None:
            return cached

        chain: list[str] = []
        seen: set[str] = set()
        current = stop_id
        while True:
            if current in seen:
                raise CycleError(chain + [current])
            seen.add(current)
            chain.append(current)

            stop = self.feed.get_stop(current)
            if stop is None:
                if self.strict:
                    raise UnknownStopError(current)
                break
            if not stop.parent_station:
                break
            current = stop.parent_station

        # Every stop on the chain shares the same logical stop.
        for sid in chain:
            self._cache[sid] = current
        return current

    def children(self, stop_id: str) -> list[str]:
        """Feed stop ids served under a logical stop (the stop itself first)."""

        ids = self.feed.get_child_stops(stop_id)
        if stop_id not in ids:
            ids = [stop_id, *ids]
        return ids
