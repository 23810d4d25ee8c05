"""Analytics API router: occupancy rates and recognized revenue per resource."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from coworking.api.deps import get_store
from coworking.repositories.base import ReservationStore
from coworking.scheduling.occupancy import occupancy_report, occupancy_stats
from coworking.schemas.analytics import OccupancyReportResponse, OccupancyResponse

router = APIRouter(prefix="/api/v1/analytics", tags=["analytics"])

# Longest period a single report may cover.
MAX_REPORT_DAYS = 93


@router.get("/occupancy/{resource_id}", response_model=OccupancyResponse)
async def get_resource_occupancy(
    resource_id: str,
    day: date = Query(..., alias="date", description="Day to analyse (YYYY-MM-DD)"),
    store: ReservationStore = Depends(get_store),
) -> OccupancyResponse:
    """Occupancy rate and revenue of one resource on one day."""
    stats = await occupancy_stats(store, resource_id, day)
    response = OccupancyResponse.model_validate(stats)
    response.occupancy_rate = round(stats.occupancy_rate, 2)
    return response


@router.get("/occupancy", response_model=OccupancyReportResponse)
async def get_occupancy_report(
    start: date = Query(..., description="First day of the period"),
    end: date = Query(..., description="Last day of the period, inclusive"),
    resource_id: list[str] | None = Query(None, description="Restrict to these resources"),
    store: ReservationStore = Depends(get_store),
) -> OccupancyReportResponse:
    """Daily occupancy of every requested resource over an inclusive period.

    The overall rate is weighted by slot count, so a closed day (zero slots)
    does not drag the average down.
    """
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must not be before start",
        )
    if (end - start).days + 1 > MAX_REPORT_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Report period is limited to {MAX_REPORT_DAYS} days",
        )

    report = await occupancy_report(store, start, end, resource_id)

    total_slots = sum(item.total_slots for item in report)
    occupied_slots = sum(item.occupied_slots for item in report)
    overall = round(occupied_slots / total_slots * 100, 2) if total_slots else 0.0

    items = []
    for stats in report:
        item = OccupancyResponse.model_validate(stats)
        item.occupancy_rate = round(stats.occupancy_rate, 2)
        items.append(item)

    return OccupancyReportResponse(
        period_start=start,
        period_end=end,
        items=items,
        overall_occupancy_rate=overall,
        total_revenue=sum((item.revenue for item in report), Decimal("0.00")),
    )
