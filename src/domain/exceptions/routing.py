class RoutingError(Exception):
    """Base exception for itinerary search failures."""


class CycleError(RoutingError):
    """Raised when a parent_station chain loops back onto itself."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        super().__init__("parent_station cycle: " + " -> ".join(self.chain))


class UnknownStopError(RoutingError, KeyError):
    """Raised when a stop id is not present in the feed."""

    def __init__(self, stop_id: str) -> None:
        self.stop_id = stop_id
        super().__init__(stop_id)

    def __str__(self) -> str:
        return f"Unknown stop: {self.stop_id}"


class InvalidBound(RoutingError, ValueError):
    """Raised when a search bound is out of range."""


class GraphFrozenError(RoutingError, RuntimeError):
    """Raised when building into a graph whose build phase has ended."""
