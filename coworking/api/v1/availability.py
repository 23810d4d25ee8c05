"""Availability API router: slot grids, free windows, and interval checks."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from coworking.api.deps import get_store
from coworking.config import settings
from coworking.errors import InvalidTimeRange, ResourceNotFound
from coworking.repositories.base import ReservationStore
from coworking.scheduling.conflicts import find_conflicts
from coworking.scheduling.merging import consecutive_free_slots, free_blocks, longest_block
from coworking.scheduling.slots import TimeSlot, available_slots
from coworking.scheduling.timeutils import time_to_minutes
from coworking.schemas.availability import (
    AvailabilitySummary,
    ConsecutiveSlotsResponse,
    IntervalCheckResponse,
    SlotsResponse,
    TimeSlotResponse,
)
from coworking.schemas.reservation import ConflictResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/availability", tags=["availability"])

ALLOWED_SLOT_DURATIONS = (15, 30, 60, 120)


def _summary(slots: list[TimeSlot]) -> AvailabilitySummary:
    total = len(slots)
    free = sum(1 for slot in slots if slot.available)
    rate = round((total - free) / total * 100, 2) if total else 0.0
    return AvailabilitySummary(
        total_slots=total,
        available_slots=free,
        occupied_slots=total - free,
        occupancy_rate=rate,
    )


@router.get("/{resource_id}/slots", response_model=SlotsResponse)
async def get_slots(
    resource_id: str,
    day: date = Query(..., alias="date", description="Day to inspect (YYYY-MM-DD)"),
    slot_duration: int | None = Query(
        None, description="Slot length in minutes: 15, 30, 60 or 120 (defaults to the configured length)"
    ),
    store: ReservationStore = Depends(get_store),
) -> SlotsResponse:
    """Return the slot grid of a resource for one day.

    Inactive resources answer with no slots and ``available=False`` rather than
    an error; unknown resources are a 404.
    """
    if slot_duration is None:
        slot_duration = settings.default_slot_minutes
    elif slot_duration not in ALLOWED_SLOT_DURATIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"slot_duration must be one of {', '.join(map(str, ALLOWED_SLOT_DURATIONS))}",
        )

    resource = await store.get_resource(resource_id)
    if resource is None:
        raise ResourceNotFound(f"Resource {resource_id!r} not found")

    if not resource.active:
        return SlotsResponse(
            resource_id=resource_id,
            date=day,
            available=False,
            slot_duration=slot_duration,
            slots=[],
            free_blocks=[],
            summary=_summary([]),
            reason="Resource is not currently available",
        )

    slots = await available_slots(store, resource_id, day, slot_duration)
    blocks = free_blocks(slots)
    best = longest_block(blocks)

    reason = None
    if not slots:
        reason = "Resource is closed on this day"
    elif not blocks:
        reason = "Fully booked"

    return SlotsResponse(
        resource_id=resource_id,
        date=day,
        available=bool(blocks),
        slot_duration=slot_duration,
        slots=[TimeSlotResponse.model_validate(s) for s in slots],
        free_blocks=[TimeSlotResponse.model_validate(b) for b in blocks],
        best_block=TimeSlotResponse.model_validate(best) if best is not None else None,
        summary=_summary(slots),
        reason=reason,
    )


@router.get("/{resource_id}/consecutive", response_model=ConsecutiveSlotsResponse)
async def get_consecutive(
    resource_id: str,
    day: date = Query(..., alias="date"),
    min_duration: int = Query(60, ge=1, le=720, description="Minimum window length in minutes"),
    store: ReservationStore = Depends(get_store),
) -> ConsecutiveSlotsResponse:
    """Return every free window of at least ``min_duration`` minutes."""
    windows = await consecutive_free_slots(store, resource_id, day, min_duration)
    return ConsecutiveSlotsResponse(
        resource_id=resource_id,
        date=day,
        minimum_duration=min_duration,
        windows=[TimeSlotResponse.model_validate(w) for w in windows],
    )


@router.get("/{resource_id}/conflicts", response_model=IntervalCheckResponse)
async def check_interval(
    resource_id: str,
    day: date = Query(..., alias="date"),
    start_time: str = Query(..., description="HH:MM"),
    end_time: str = Query(..., description="HH:MM"),
    store: ReservationStore = Depends(get_store),
) -> IntervalCheckResponse:
    """Check one explicit interval against the active reservations of a day."""
    resource = await store.get_resource(resource_id)
    if resource is None:
        raise ResourceNotFound(f"Resource {resource_id!r} not found")

    if time_to_minutes(end_time) <= time_to_minutes(start_time):
        raise InvalidTimeRange(f"End time {end_time} must be after start time {start_time}")

    conflicts = await find_conflicts(store, resource_id, day, start_time, end_time)
    return IntervalCheckResponse(
        resource_id=resource_id,
        date=day,
        start_time=start_time,
        end_time=end_time,
        available=not conflicts,
        conflicts=[ConflictResponse.from_conflict(c) for c in conflicts],
    )
