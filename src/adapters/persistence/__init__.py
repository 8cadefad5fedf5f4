from .local_gtfs_repository import LocalGtfsRepository

__all__ = [
    "LocalGtfsRepository",
]
