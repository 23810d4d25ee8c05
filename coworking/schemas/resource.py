"""Pydantic v2 schemas for resource endpoints."""

from decimal import Decimal

from pydantic import BaseModel

from coworking.scheduling.domain import DurationType


class DayHoursResponse(BaseModel):
    open: str | None = None
    close: str | None = None
    closed: bool = False


class ResourceResponse(BaseModel):
    """A bookable space with its prices and weekly opening hours."""

    id: str
    name: str
    location: str | None = None
    capacity: int
    active: bool
    price_per_hour: Decimal
    price_per_day: Decimal
    price_per_week: Decimal
    price_per_month: Decimal
    opening_hours: dict[str, DayHoursResponse]


class ResourceListResponse(BaseModel):
    items: list[ResourceResponse]
    total: int


class PriceQuoteResponse(BaseModel):
    resource_id: str
    duration_value: Decimal
    duration_type: DurationType
    total_price: Decimal
