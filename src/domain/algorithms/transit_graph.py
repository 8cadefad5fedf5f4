from __future__ import annotations

import logging
from datetime import date
from typing import Iterator

import networkx as nx

from src.domain.algorithms.path_finder import find_all_paths
from src.domain.algorithms.stop_resolver import StopResolver
from src.domain.exceptions import GraphFrozenError
from src.domain.models.gtfs import GtfsFeedReader
from src.domain.models.itinerary import LogicalStop, Path, TransitEdge

logger = logging.getLogger(__name__)

DIRECTIONS = (0, 1)


class TransitGraph:
    """Directed multigraph of logical stops connected by route directions.

    Backed by a ``networkx.MultiDiGraph`` whose edge keys are
    ``(route_id, direction_id)``: adding the same key twice between two stops
    overwrites the edge instead of adding a parallel one.

    The graph is mutable until :meth:`freeze` is called; afterwards it is
    read-only and may be shared between callers.
    """

    def __init__(
        self, feed: GtfsFeedReader, *, resolver: StopResolver | None = None
    ) -> None:
        self.feed = feed
        self.resolver = resolver or StopResolver(feed)
        self._graph = nx.MultiDiGraph()
        self._built: set[tuple[str, int, date | None]] = set()
        self._frozen = False

    # --- build phase ------------------------------------------------------

    def build_graph_for_route(self, route_id: str, on: date | None) -> None:
        """Add both directions of ``route_id`` for trips active on ``on``.

        ``on=None`` uses every trip of the route regardless of its calendar.
        """

        for direction_id in DIRECTIONS:
            self._build_route_direction(route_id, direction_id, on)

    def build_graph(self, on: date | None) -> None:
        routes = self.feed.get_routes()
        for route in routes:
            self.build_graph_for_route(route.route_id, on)
        logger.info(
            "Transit graph built for %s: %d routes, %d nodes, %d edges",
            on.isoformat() if on else "all dates",
            len(routes),
            self._graph.number_of_nodes(),
            self._graph.number_of_edges(),
        )

    def freeze(self) -> TransitGraph:
        """End the build phase."""

        nx.freeze(self._graph)
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _build_route_direction(
        self, route_id: str, direction_id: int, on: date | None
    ) -> None:
        if self._frozen:
            raise GraphFrozenError("Transit graph is frozen; build phase has ended")

        build_key = (route_id, direction_id, on)
        if build_key in self._built:
            return

        trip_ids = self.feed.get_trips(
            route_id=route_id, direction_id=direction_id, on=on
        )
        self._built.add(build_key)
        if not trip_ids:
            return

        ordered = [
            self.resolver.resolve(stop_id)
            for stop_id in self.feed.get_canonical_stop_sequence(trip_ids)
        ]
        for stop in ordered:
            self._graph.add_node(stop)

        for from_stop, to_stop in zip(ordered, ordered[1:]):
            if from_stop == to_stop:
                # Consecutive platforms of the same station.
                continue
            self._graph.add_edge(
                from_stop,
                to_stop,
                key=(route_id, direction_id),
                route_id=route_id,
                direction_id=direction_id,
            )

        logger.debug(
            "Route %s direction %d: %d trips, %d stops",
            route_id,
            direction_id,
            len(trip_ids),
            len(ordered),
        )

    # --- queries ----------------------------------------------------------

    def has_node(self, stop: LogicalStop) -> bool:
        return self._graph.has_node(stop)

    def nodes(self) -> list[LogicalStop]:
        return list(self._graph.nodes)

    def number_of_edges(self) -> int:
        return self._graph.number_of_edges()

    def edges_from(self, stop: LogicalStop) -> list[TransitEdge]:
        """Outgoing edges of ``stop`` in insertion order."""

        if not self._graph.has_node(stop):
            return []
        return list(self._iter_edges(self._graph.out_edges(stop, data=True)))

    def all_edges(self) -> list[TransitEdge]:
        return list(self._iter_edges(self._graph.edges(data=True)))

    def edges_for_route(self, route_id: str) -> list[TransitEdge]:
        return [e for e in self.all_edges() if e.route_id == route_id]

    def _iter_edges(self, raw) -> Iterator[TransitEdge]:
        for u, v, data in raw:
            yield TransitEdge(
                from_stop=u,
                to_stop=v,
                route_id=data["route_id"],
                direction_id=int(data["direction_id"]),
            )

    def find_all_paths(
        self,
        from_stop_id: str,
        to_stop_id: str,
        max_paths: int = 10,
        max_transfers: int = 3,
    ) -> list[Path]:
        return find_all_paths(
            self,
            from_stop_id,
            to_stop_id,
            max_paths=max_paths,
            max_transfers=max_transfers,
        )
