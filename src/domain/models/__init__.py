from .calendar import ExceptionType, ServiceCalendar, ServiceException
from .geo import GeoPoint
from .gtfs import GtfsFeed, GtfsFeedReader, GtfsRoute, GtfsTrip, StopTime
from .itinerary import (
    LogicalStop,
    Path,
    PathSegment,
    ScheduledJourney,
    ScheduledLeg,
    SimplifiedTrip,
    TransitEdge,
    TripLeg,
)
from .stop import Stop

__all__ = [
    "ExceptionType",
    "GeoPoint",
    "GtfsFeed",
    "GtfsFeedReader",
    "GtfsRoute",
    "GtfsTrip",
    "LogicalStop",
    "Path",
    "PathSegment",
    "ScheduledJourney",
    "ScheduledLeg",
    "ServiceCalendar",
    "ServiceException",
    "SimplifiedTrip",
    "Stop",
    "StopTime",
    "TransitEdge",
    "TripLeg",
]
