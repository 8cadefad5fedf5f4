from __future__ import annotations

from pathlib import Path

import pytest

_FEED = {
    "stops.txt": """\
stop_id,stop_name,stop_lat,stop_lon,location_type,parent_station
PORT,Puerto,28.1400,-15.4300,0,
CEN,Central,28.1200,-15.4400,1,
CEN1,Central (L1),28.1201,-15.4401,0,CEN
CEN2,Central (L60),28.1199,-15.4399,0,CEN
UNI,Universidad,28.0700,-15.4500,0,
AIR,Aeropuerto,27.9300,-15.3900,0,
""",
    "routes.txt": """\
route_id,agency_id,route_short_name,route_long_name,route_type,route_color
L1,GUAGUAS,1,Puerto - Universidad,3,FFCC00
L60,GUAGUAS,60,Central - Aeropuerto,3,0055A4
""",
    "trips.txt": """\
route_id,service_id,trip_id,trip_headsign,direction_id
L1,WK,L1-0800,Universidad,0
L1,WK,L1-0830,Universidad,0
L1,WK,L1-0900R,Puerto,1
L60,WK,L60-0820,Aeropuerto,0
L60,WK,L60-0850,Aeropuerto,0
""",
    "stop_times.txt": """\
trip_id,arrival_time,departure_time,stop_id,stop_sequence
L1-0800,08:00:00,08:00:00,PORT,1
L1-0800,08:12:00,08:12:00,CEN1,2
L1-0800,08:25:00,08:25:00,UNI,3
L1-0830,08:30:00,08:30:00,PORT,1
L1-0830,08:42:00,08:42:00,CEN1,2
L1-0830,08:55:00,08:55:00,UNI,3
L1-0900R,09:00:00,09:00:00,UNI,1
L1-0900R,09:13:00,09:13:00,CEN1,2
L1-0900R,09:25:00,09:25:00,PORT,3
L60-0820,08:20:00,08:20:00,CEN2,1
L60-0820,08:55:00,08:55:00,AIR,2
L60-0850,08:50:00,08:50:00,CEN2,1
L60-0850,09:25:00,09:25:00,AIR,2
""",
    "calendar.txt": """\
service_id,monday,tuesday,wednesday,thursday,friday,saturday,sunday,start_date,end_date
WK,1,1,1,1,1,0,0,20250101,20251231
""",
    "calendar_dates.txt": """\
service_id,date,exception_type
WK,20251208,2
""",
}


@pytest.fixture(scope="session")
def gtfs_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """A small two-line bus network sharing the Central station."""

    base = tmp_path_factory.mktemp("gtfs")
    for name, content in _FEED.items():
        (base / name).write_text(content, encoding="utf-8")
    return base
