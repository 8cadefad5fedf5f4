from .routing import (
    CycleError,
    GraphFrozenError,
    InvalidBound,
    RoutingError,
    UnknownStopError,
)

__all__ = [
    "CycleError",
    "GraphFrozenError",
    "InvalidBound",
    "RoutingError",
    "UnknownStopError",
]
