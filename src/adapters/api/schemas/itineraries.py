from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class StopSchema(BaseModel):
    stop_id: str
    name: str
    parent_station: str | None = None
    lat: float | None = None
    lon: float | None = None


class TransitLineSchema(BaseModel):
    route_id: str
    short_name: str | None = None
    long_name: str | None = None
    color: str | None = None
    text_color: str | None = None


class ItineraryRequestSchema(BaseModel):
    from_stop_id: str = Field(..., min_length=1)
    to_stop_id: str = Field(..., min_length=1)
    depart_at: datetime | None = None
    min_transfer_duration_s: int | None = Field(default=None, ge=0)
    max_paths: int | None = Field(default=None, ge=1, le=1000)
    max_transfers: int | None = Field(default=None, ge=0, le=10)
    journeys_count: int | None = Field(default=None, ge=1, le=20)
    route_ids: list[str] | None = None


class ScheduledLegSchema(BaseModel):
    trip_id: str
    trip_short_name: str
    route_id: str
    route_short_name: str
    direction_id: int
    start_stop: str
    end_stop: str
    boarding_stop_id: str
    alighting_stop_id: str
    departure_time_s: int
    arrival_time_s: int
    departure_time: str
    arrival_time: str
    depart_at: datetime
    arrive_at: datetime


class ScheduledJourneySchema(BaseModel):
    legs: list[ScheduledLegSchema] = []
    departure_time_s: int
    arrival_time_s: int
    total_duration_s: int
    transfers: int


class ItineraryResponseSchema(BaseModel):
    service_date: str
    departure_time: str
    count: int
    journeys: list[ScheduledJourneySchema] = []
