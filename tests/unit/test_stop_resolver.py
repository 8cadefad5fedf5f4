from __future__ import annotations

import pytest

from src.domain.algorithms.stop_resolver import StopResolver
from src.domain.exceptions import CycleError, UnknownStopError


def test_platform_resolves_to_topmost_station(builder) -> None:
    feed = (
        builder.stop("STATION")
        .stop("PLATFORM", parent="STATION")
        .stop("BOARDING", parent="PLATFORM")
        .build()
    )
    resolver = StopResolver(feed)

    assert resolver.resolve("BOARDING") == "STATION"
    assert resolver.resolve("PLATFORM") == "STATION"
    assert resolver.resolve("STATION") == "STATION"


def test_resolution_is_idempotent(builder) -> None:
    feed = builder.stop("S").stop("P1", parent="S").build()
    resolver = StopResolver(feed)

    logical = resolver.resolve("P1")
    assert resolver.resolve(logical) == logical


def test_unknown_stop_resolves_to_itself_unless_strict(builder) -> None:
    feed = builder.stop("A").build()

    assert StopResolver(feed).resolve("GHOST") == "GHOST"
    with pytest.raises(UnknownStopError):
        StopResolver(feed, strict=True).resolve("GHOST")


def test_parent_missing_from_feed_is_the_logical_stop(builder) -> None:
    feed = builder.stop("P1", parent="NOT_IN_FEED").build()

    assert StopResolver(feed).resolve("P1") == "NOT_IN_FEED"


def test_self_parent_raises_cycle_error(builder) -> None:
    feed = builder.stop("LOOP", parent="LOOP").build()

    with pytest.raises(CycleError) as excinfo:
        StopResolver(feed).resolve("LOOP")

    assert excinfo.value.chain == ["LOOP", "LOOP"]


def test_longer_cycle_raises_cycle_error(builder) -> None:
    feed = builder.stop("X", parent="Y").stop("Y", parent="Z").stop("Z", parent="X").build()

    with pytest.raises(CycleError) as excinfo:
        StopResolver(feed).resolve("X")

    assert excinfo.value.chain == ["X", "Y", "Z", "X"]


def test_children_include_the_stop_itself_and_nested_children(builder) -> None:
    feed = (
        builder.stop("S")
        .stop("P1", parent="S")
        .stop("P2", parent="S")
        .stop("B1", parent="P1")
        .stop("OTHER")
        .build()
    )

    children = StopResolver(feed).children("S")

    assert children[0] == "S"
    assert set(children) == {"S", "P1", "P2", "B1"}
