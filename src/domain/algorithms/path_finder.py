from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.domain.exceptions import InvalidBound
from src.domain.models.itinerary import LogicalStop, Path, PathSegment

if TYPE_CHECKING:
    from src.domain.algorithms.transit_graph import TransitGraph


@dataclass(frozen=True, slots=True)
class _Branch:
    node: LogicalStop
    segments: Path
    visited: frozenset[LogicalStop]
    label: tuple[str, int] | None
    legs: int


def find_all_paths(
    graph: TransitGraph,
    from_stop_id: str,
    to_stop_id: str,
    *,
    max_paths: int,
    max_transfers: int,
) -> list[Path]:
    """Enumerate simple paths between two stops, fewest hops first.

    Breadth-first over the graph from the origin's logical stop. A branch is
    pruned once its number of legs (runs of one route direction) would exceed
    ``max_transfers + 1``; search stops after ``max_paths`` complete paths.
    Neighbours are expanded in edge insertion order, so results are stable.

    An origin equal to the destination yields no path.
    """

    if max_paths < 1:
        raise InvalidBound(f"max_paths must be >= 1, got {max_paths}")
    if max_transfers < 0:
        raise InvalidBound(f"max_transfers must be >= 0, got {max_transfers}")

    source = graph.resolver.resolve(from_stop_id)
    target = graph.resolver.resolve(to_stop_id)
    if not graph.has_node(source) or not graph.has_node(target):
        return []
    if source == target:
        return []

    max_legs = max_transfers + 1
    found: list[Path] = []
    queue: deque[_Branch] = deque(
        [_Branch(source, (), frozenset([source]), None, 0)]
    )

    while queue:
        branch = queue.popleft()
        for edge in graph.edges_from(branch.node):
            nxt = edge.to_stop
            if nxt in branch.visited:
                continue

            legs = branch.legs if edge.key == branch.label else branch.legs + 1
            if legs > max_legs:
                continue

            segments = branch.segments + (
                PathSegment(
                    start_stop=branch.node,
                    route_id=edge.route_id,
                    direction_id=edge.direction_id,
                    end_stop=nxt,
                ),
            )
            if nxt == target:
                found.append(segments)
                if len(found) >= max_paths:
                    return found
                continue

            queue.append(
                _Branch(nxt, segments, branch.visited | {nxt}, edge.key, legs)
            )

    return found
