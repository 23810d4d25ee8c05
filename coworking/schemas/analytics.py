"""Pydantic v2 schemas for analytics endpoints."""

import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class OccupancyResponse(BaseModel):
    """Occupancy statistics for a single resource on a single day."""

    resource_id: str
    resource_name: str
    date: datetime.date
    total_slots: int
    occupied_slots: int
    occupancy_rate: float  # percentage 0.00-100.00
    revenue: Decimal

    model_config = ConfigDict(from_attributes=True)


class OccupancyReportResponse(BaseModel):
    """Daily occupancy statistics across resources for a period."""

    period_start: datetime.date
    period_end: datetime.date
    items: list[OccupancyResponse]
    overall_occupancy_rate: float
    total_revenue: Decimal
