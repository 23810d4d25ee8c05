"""Pydantic v2 schemas for availability endpoints."""

import datetime

from pydantic import BaseModel, ConfigDict

from coworking.schemas.reservation import ConflictResponse


class TimeSlotResponse(BaseModel):
    """One slot, or one merged free window, of a resource's day."""

    start: str
    end: str
    duration_minutes: int
    available: bool

    model_config = ConfigDict(from_attributes=True)


class AvailabilitySummary(BaseModel):
    total_slots: int
    available_slots: int
    occupied_slots: int
    occupancy_rate: float  # percentage 0-100, two decimals


class SlotsResponse(BaseModel):
    """Slots of a resource for a day, with free blocks and a recommendation."""

    resource_id: str
    date: datetime.date
    available: bool
    slot_duration: int
    slots: list[TimeSlotResponse]
    free_blocks: list[TimeSlotResponse]
    best_block: TimeSlotResponse | None = None
    summary: AvailabilitySummary
    reason: str | None = None


class ConsecutiveSlotsResponse(BaseModel):
    resource_id: str
    date: datetime.date
    minimum_duration: int
    windows: list[TimeSlotResponse]


class IntervalCheckResponse(BaseModel):
    """Result of checking one explicit interval for conflicts."""

    resource_id: str
    date: datetime.date
    start_time: str
    end_time: str
    available: bool
    conflicts: list[ConflictResponse]
