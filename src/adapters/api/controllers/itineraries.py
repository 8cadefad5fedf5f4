from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends

from src.adapters.api.dependencies import get_itinerary_service
from src.adapters.api.schemas.itineraries import (
    ItineraryRequestSchema,
    ItineraryResponseSchema,
    ScheduledJourneySchema,
    ScheduledLegSchema,
    StopSchema,
    TransitLineSchema,
)
from src.app.services.itinerary_service import ItineraryService
from src.app.services.routing_helpers import (
    format_gtfs_seconds,
    seconds_since_midnight,
    service_datetime_from_seconds,
)
from src.domain.models import ScheduledJourney

router = APIRouter(tags=["itineraries"])


def _journey_to_schema(
    journey: ScheduledJourney, service_day: datetime
) -> ScheduledJourneySchema:
    return ScheduledJourneySchema(
        legs=[
            ScheduledLegSchema(
                trip_id=leg.trip_id,
                trip_short_name=leg.trip_short_name,
                route_id=leg.route_id,
                route_short_name=leg.route_short_name,
                direction_id=leg.direction_id,
                start_stop=leg.start_stop,
                end_stop=leg.end_stop,
                boarding_stop_id=leg.boarding_stop_id,
                alighting_stop_id=leg.alighting_stop_id,
                departure_time_s=leg.departure_time_s,
                arrival_time_s=leg.arrival_time_s,
                departure_time=format_gtfs_seconds(leg.departure_time_s),
                arrival_time=format_gtfs_seconds(leg.arrival_time_s),
                depart_at=service_datetime_from_seconds(
                    service_day, leg.departure_time_s
                ),
                arrive_at=service_datetime_from_seconds(
                    service_day, leg.arrival_time_s
                ),
            )
            for leg in journey.legs
        ],
        departure_time_s=journey.departure_time_s,
        arrival_time_s=journey.arrival_time_s,
        total_duration_s=journey.total_duration_s,
        transfers=journey.transfers,
    )


@router.get("/stops", response_model=list[StopSchema])
def list_stops(
    service: ItineraryService = Depends(get_itinerary_service),
) -> list[StopSchema]:
    return [
        StopSchema(
            stop_id=stop.id,
            name=stop.name,
            parent_station=stop.parent_station,
            lat=stop.location.lat if stop.location else None,
            lon=stop.location.lon if stop.location else None,
        )
        for stop in service.list_stops()
    ]


@router.get("/routes", response_model=list[TransitLineSchema])
def list_routes(
    service: ItineraryService = Depends(get_itinerary_service),
) -> list[TransitLineSchema]:
    return [
        TransitLineSchema(
            route_id=route.route_id,
            short_name=route.short_name,
            long_name=route.long_name,
            color=route.color,
            text_color=route.text_color,
        )
        for route in service.list_routes()
    ]


@router.post("/itineraries", response_model=ItineraryResponseSchema)
def find_itineraries(
    req: ItineraryRequestSchema,
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponseSchema:
    depart_at = req.depart_at or datetime.now()
    departure_time_s = seconds_since_midnight(depart_at)

    journeys = service.find_itineraries(
        from_stop_id=req.from_stop_id,
        to_stop_id=req.to_stop_id,
        on=depart_at.date(),
        departure_time_s=departure_time_s,
        min_transfer_duration_s=req.min_transfer_duration_s,
        max_paths=req.max_paths,
        max_transfers=req.max_transfers,
        journeys_count=req.journeys_count,
        route_ids=req.route_ids,
    )

    return ItineraryResponseSchema(
        service_date=depart_at.date().isoformat(),
        departure_time=format_gtfs_seconds(departure_time_s),
        count=len(journeys),
        journeys=[_journey_to_schema(j, depart_at) for j in journeys],
    )
