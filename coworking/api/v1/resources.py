"""Resources API router: the bookable spaces, their hours, and price quotes."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from coworking.api.deps import get_store
from coworking.errors import ResourceNotFound
from coworking.repositories.base import ReservationStore
from coworking.scheduling.domain import MAX_DURATION, DurationType, Resource
from coworking.scheduling.pricing import price
from coworking.schemas.resource import (
    DayHoursResponse,
    PriceQuoteResponse,
    ResourceListResponse,
    ResourceResponse,
)

router = APIRouter(prefix="/api/v1/resources", tags=["resources"])


def _to_response(resource: Resource) -> ResourceResponse:
    return ResourceResponse(
        id=resource.id,
        name=resource.name,
        location=resource.location,
        capacity=resource.capacity,
        active=resource.active,
        price_per_hour=resource.pricing.per_hour,
        price_per_day=resource.pricing.per_day,
        price_per_week=resource.pricing.per_week,
        price_per_month=resource.pricing.per_month,
        opening_hours={
            weekday: DayHoursResponse(open=hours.open, close=hours.close, closed=hours.closed)
            for weekday, hours in resource.opening_hours.items()
        },
    )


async def _get_resource(store: ReservationStore, resource_id: str) -> Resource:
    resource = await store.get_resource(resource_id)
    if resource is None:
        raise ResourceNotFound(f"Resource {resource_id!r} not found")
    return resource


@router.get("", response_model=ResourceListResponse)
async def list_resources(
    include_inactive: bool = Query(False, description="Also list resources closed for booking"),
    store: ReservationStore = Depends(get_store),
) -> ResourceListResponse:
    resources = await store.list_resources(active_only=not include_inactive)
    return ResourceListResponse(
        items=[_to_response(r) for r in resources],
        total=len(resources),
    )


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: str,
    store: ReservationStore = Depends(get_store),
) -> ResourceResponse:
    return _to_response(await _get_resource(store, resource_id))


@router.get("/{resource_id}/price", response_model=PriceQuoteResponse)
async def get_price(
    resource_id: str,
    duration: Decimal = Query(Decimal("1"), gt=0, description="Number of duration units"),
    duration_type: DurationType = Query(DurationType.HOUR),
    store: ReservationStore = Depends(get_store),
) -> PriceQuoteResponse:
    """Quote ``duration`` units of ``duration_type`` at the resource's rate."""
    resource = await _get_resource(store, resource_id)
    limit = MAX_DURATION[duration_type]
    if duration > limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"duration must be at most {limit} for duration_type '{duration_type.value}'",
        )
    return PriceQuoteResponse(
        resource_id=resource.id,
        duration_value=duration,
        duration_type=duration_type,
        total_price=price(resource, duration, duration_type),
    )
