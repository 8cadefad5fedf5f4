from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from src.app.ports.output import IGtfsRepository
from src.domain.algorithms.path_simplifier import path_to_legs
from src.domain.algorithms.schedule_matcher import ScheduleMatcher, sort_journeys
from src.domain.algorithms.stop_resolver import StopResolver
from src.domain.algorithms.transit_graph import TransitGraph
from src.domain.exceptions import InvalidBound, UnknownStopError
from src.domain.models import GtfsFeed, GtfsRoute, ScheduledJourney, Stop

logger = logging.getLogger(__name__)

GraphKey = tuple[date | None, tuple[str, ...] | None]

# Lower bound of every tuning knob.
MINIMUMS = {
    "max_paths": 1,
    "max_transfers": 0,
    "min_transfer_duration_s": 0,
    "journeys_count": 1,
    "max_cached_graphs": 1,
}


@dataclass(slots=True)
class ItineraryService:
    """Application service (use case) for schedule-backed itinerary search.

    Owns the loaded feed and frozen transit graphs keyed by (date, route set).
    At most ``max_cached_graphs`` graphs are kept; the least recently used one
    is dropped first.
    """

    gtfs_repository: IGtfsRepository

    # Tuning knobs, overridable per request
    max_paths: int = 10
    max_transfers: int = 3
    min_transfer_duration_s: int = 300
    journeys_count: int = 1

    max_cached_graphs: int = 8

    _feed: GtfsFeed | None = None
    _resolver: StopResolver | None = None
    _graphs: OrderedDict[GraphKey, TransitGraph] = field(default_factory=OrderedDict)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def __post_init__(self) -> None:
        for name, minimum in MINIMUMS.items():
            value = getattr(self, name)
            if value < minimum:
                raise InvalidBound(f"{name} must be >= {minimum}, got {value}")

    def feed(self) -> GtfsFeed:
        with self._lock:
            if self._feed is None:
                self._feed = self.gtfs_repository.load_feed()
            return self._feed

    def resolver(self) -> StopResolver:
        with self._lock:
            if self._resolver is None:
                self._resolver = StopResolver(self.feed())
            return self._resolver

    def list_stops(self) -> list[Stop]:
        return list(self.feed().stops_by_id.values())

    def list_routes(self) -> list[GtfsRoute]:
        return self.feed().get_routes()

    def cached_graph_keys(self) -> list[GraphKey]:
        """Cached graph keys, least recently used first."""

        with self._lock:
            return list(self._graphs)

    def graph_for(
        self, on: date | None, route_ids: Iterable[str] | None = None
    ) -> TransitGraph:
        """Return the frozen graph for ``on`` and ``route_ids`` (all routes if None)."""

        routes = tuple(sorted(set(route_ids))) if route_ids is not None else None
        key: GraphKey = (on, routes)

        # Builds are serialised so concurrent first requests share one graph.
        with self._lock:
            graph = self._graphs.get(key)
            if graph is not None:
                self._graphs.move_to_end(key)
                return graph

            graph = TransitGraph(self.feed(), resolver=self.resolver())
            if routes is None:
                graph.build_graph(on)
            else:
                for route_id in routes:
                    graph.build_graph_for_route(route_id, on)
            self._graphs[key] = graph.freeze()

            while len(self._graphs) > self.max_cached_graphs:
                evicted, _ = self._graphs.popitem(last=False)
                logger.debug("Evicted cached graph %s", evicted)
            return graph

    def find_itineraries(
        self,
        *,
        from_stop_id: str,
        to_stop_id: str,
        on: date | None,
        departure_time_s: int,
        min_transfer_duration_s: int | None = None,
        max_paths: int | None = None,
        max_transfers: int | None = None,
        journeys_count: int | None = None,
        route_ids: Iterable[str] | None = None,
    ) -> list[ScheduledJourney]:
        feed = self.feed()
        for stop_id in (from_stop_id, to_stop_id):
            if feed.get_stop(stop_id) is None:
                raise UnknownStopError(stop_id)

        graph = self.graph_for(on, route_ids)
        paths = graph.find_all_paths(
            from_stop_id,
            to_stop_id,
            max_paths=self.max_paths if max_paths is None else max_paths,
            max_transfers=self.max_transfers if max_transfers is None else max_transfers,
        )
        if not paths:
            logger.debug("No path from %s to %s", from_stop_id, to_stop_id)
            return []

        matcher = ScheduleMatcher(feed=feed, resolver=self.resolver())
        journeys: list[ScheduledJourney] = []
        for path in paths:
            journeys.extend(
                matcher.match(
                    path_to_legs(path),
                    on=on,
                    departure_time_s=departure_time_s,
                    min_transfer_duration_s=(
                        self.min_transfer_duration_s
                        if min_transfer_duration_s is None
                        else min_transfer_duration_s
                    ),
                    journeys_count=(
                        self.journeys_count if journeys_count is None else journeys_count
                    ),
                )
            )

        logger.debug(
            "%s -> %s: %d paths, %d journeys",
            from_stop_id,
            to_stop_id,
            len(paths),
            len(journeys),
        )
        return sort_journeys(journeys)
