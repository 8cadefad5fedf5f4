from __future__ import annotations

import logging
import os
from functools import lru_cache

from src.adapters.persistence.local_gtfs_repository import LocalGtfsRepository
from src.app.services.itinerary_service import MINIMUMS, ItineraryService

logger = logging.getLogger(__name__)

# Env var -> ItineraryService field.
_ENV_KNOBS = {
    "ITINERARY_MAX_PATHS": "max_paths",
    "ITINERARY_MAX_TRANSFERS": "max_transfers",
    "ITINERARY_MIN_TRANSFER_S": "min_transfer_duration_s",
    "ITINERARY_JOURNEYS_COUNT": "journeys_count",
    "ITINERARY_GRAPH_CACHE_SIZE": "max_cached_graphs",
}


def _env_overrides() -> dict[str, int]:
    overrides: dict[str, int] = {}
    for env_name, field_name in _ENV_KNOBS.items():
        raw = (os.getenv(env_name) or "").strip()
        if not raw:
            continue
        value = int(raw)
        minimum = MINIMUMS[field_name]
        if value < minimum:
            logger.warning(
                "%s=%d is below the minimum; using %d", env_name, value, minimum
            )
            value = minimum
        overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_itinerary_service() -> ItineraryService:
    # Cached so the feed and built graphs are shared across requests.
    return ItineraryService(gtfs_repository=LocalGtfsRepository(), **_env_overrides())
