from __future__ import annotations

import csv
import io
import logging
import os
import zipfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from src.app.ports.output import IGtfsRepository
from src.app.services.routing_helpers import parse_gtfs_time_to_seconds
from src.domain.models import (
    ExceptionType,
    GeoPoint,
    GtfsFeed,
    GtfsRoute,
    GtfsTrip,
    ServiceCalendar,
    ServiceException,
    Stop,
    StopTime,
)
from src.domain.models.calendar import parse_gtfs_date

logger = logging.getLogger(__name__)

_WEEKDAY_COLUMNS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def _clean(row: dict[str, str], column: str) -> str | None:
    return (row.get(column) or "").strip() or None


@dataclass(slots=True)
class LocalGtfsRepository(IGtfsRepository):
    """Loads a GTFS feed from a directory of .txt files or a .zip archive.

    Env vars:
      - GTFS_PATH: path to a directory (or zip) containing stops.txt,
        routes.txt, trips.txt, stop_times.txt and optionally calendar.txt,
        calendar_dates.txt
    """

    base_path: str | Path | None = None

    def _base(self) -> Path:
        value = self.base_path or os.getenv("GTFS_PATH") or "data/gtfs"
        return Path(value)

    @contextmanager
    def _rows(
        self, name: str, *, required: bool = True
    ) -> Iterator[Iterator[dict[str, str]]]:
        base = self._base()

        if base.is_file() and zipfile.is_zipfile(base):
            with zipfile.ZipFile(base) as zf:
                # Some producers nest the tables in a top-level folder.
                member = next(
                    (n for n in zf.namelist() if n.rsplit("/", 1)[-1] == name), None
                )
                if member is None:
                    if required:
                        raise FileNotFoundError(f"{name} not found in {base}")
                    yield iter(())
                    return
                with zf.open(member) as raw:
                    fp = io.TextIOWrapper(raw, encoding="utf-8-sig", newline="")
                    yield csv.DictReader(fp)
            return

        path = base / name
        if not path.exists():
            if required:
                raise FileNotFoundError(f"{name} not found in {base}")
            yield iter(())
            return
        with path.open("r", encoding="utf-8-sig", newline="") as fp:
            yield csv.DictReader(fp)

    def load_feed(self) -> GtfsFeed:
        stops_by_id: dict[str, Stop] = {}
        with self._rows("stops.txt") as reader:
            for row in reader:
                stop_id = _clean(row, "stop_id")
                if not stop_id:
                    continue
                stops_by_id[stop_id] = Stop(
                    id=stop_id,
                    name=_clean(row, "stop_name") or stop_id,
                    parent_station=_clean(row, "parent_station"),
                    location=GeoPoint.parse(row.get("stop_lat"), row.get("stop_lon")),
                )

        routes_by_id: dict[str, GtfsRoute] = {}
        with self._rows("routes.txt") as reader:
            for row in reader:
                route_id = _clean(row, "route_id")
                if not route_id:
                    continue
                routes_by_id[route_id] = GtfsRoute(
                    route_id=route_id,
                    short_name=_clean(row, "route_short_name"),
                    long_name=_clean(row, "route_long_name"),
                    color=_clean(row, "route_color"),
                    text_color=_clean(row, "route_text_color"),
                )

        trips_by_id: dict[str, GtfsTrip] = {}
        with self._rows("trips.txt") as reader:
            for row in reader:
                trip_id = _clean(row, "trip_id")
                route_id = _clean(row, "route_id")
                if not trip_id or not route_id:
                    continue
                trips_by_id[trip_id] = GtfsTrip(
                    trip_id=trip_id,
                    route_id=route_id,
                    service_id=_clean(row, "service_id"),
                    # direction_id is optional in GTFS; treat missing as 0.
                    direction_id=int(_clean(row, "direction_id") or 0),
                    short_name=_clean(row, "trip_short_name"),
                    headsign=_clean(row, "trip_headsign"),
                )

        stop_times: dict[str, list[StopTime]] = {}
        dropped = 0
        with self._rows("stop_times.txt") as reader:
            for row in reader:
                trip_id = _clean(row, "trip_id")
                stop_id = _clean(row, "stop_id")
                if not trip_id or not stop_id:
                    continue

                # Non-timepoint stops may leave one or both times blank.
                arr_raw = _clean(row, "arrival_time")
                dep_raw = _clean(row, "departure_time")
                if arr_raw is None and dep_raw is None:
                    dropped += 1
                    continue
                arr_s = parse_gtfs_time_to_seconds(arr_raw or dep_raw or "")
                dep_s = parse_gtfs_time_to_seconds(dep_raw or arr_raw or "")

                stop_times.setdefault(trip_id, []).append(
                    StopTime(
                        trip_id=trip_id,
                        stop_id=stop_id,
                        stop_sequence=int(_clean(row, "stop_sequence") or 0),
                        arrival_time_s=arr_s,
                        departure_time_s=dep_s,
                    )
                )

        calendars_by_service: dict[str, ServiceCalendar] = {}
        with self._rows("calendar.txt", required=False) as reader:
            for row in reader:
                service_id = _clean(row, "service_id")
                if not service_id:
                    continue
                weekdays = tuple(
                    (_clean(row, col) or "0") == "1" for col in _WEEKDAY_COLUMNS
                )
                calendars_by_service[service_id] = ServiceCalendar(
                    service_id=service_id,
                    weekdays=weekdays,  # type: ignore[arg-type]
                    start_date=parse_gtfs_date(row["start_date"]),
                    end_date=parse_gtfs_date(row["end_date"]),
                )

        exceptions: dict[str, list[ServiceException]] = {}
        with self._rows("calendar_dates.txt", required=False) as reader:
            for row in reader:
                service_id = _clean(row, "service_id")
                if not service_id:
                    continue
                exceptions.setdefault(service_id, []).append(
                    ServiceException(
                        service_id=service_id,
                        date=parse_gtfs_date(row["date"]),
                        exception_type=ExceptionType(int(row["exception_type"])),
                    )
                )

        feed = GtfsFeed(
            stops_by_id=stops_by_id,
            routes_by_id=routes_by_id,
            trips_by_id=trips_by_id,
            stop_times_by_trip={
                trip_id: tuple(sorted(entries, key=lambda st: st.stop_sequence))
                for trip_id, entries in stop_times.items()
            },
            calendars_by_service=calendars_by_service,
            exceptions_by_service={k: tuple(v) for k, v in exceptions.items()},
        )

        logger.info(
            "Loaded GTFS feed from %s: %d stops, %d routes, %d trips",
            self._base(),
            len(stops_by_id),
            len(routes_by_id),
            len(trips_by_id),
        )
        if dropped:
            logger.debug("Dropped %d stop_times rows without any time", dropped)
        return feed
