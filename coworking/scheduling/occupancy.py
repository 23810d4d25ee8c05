"""Per-resource, per-day occupancy rate and recognized revenue."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from coworking.errors import ResourceNotFound
from coworking.repositories.base import ReservationStore
from coworking.scheduling.domain import ACTIVE_STATUSES, REVENUE_STATUSES, Reservation, Resource
from coworking.scheduling.slots import TimeSlot, slots_for_resource

logger = logging.getLogger(__name__)

OCCUPANCY_SLOT_MINUTES = 60


@dataclass(frozen=True)
class OccupancyStats:
    resource_id: str
    resource_name: str
    date: date
    total_slots: int
    occupied_slots: int
    occupancy_rate: float  # percentage 0-100
    revenue: Decimal


def compute_occupancy(
    resource: Resource,
    day: date,
    slots: list[TimeSlot],
    reservations: Iterable[Reservation],
) -> OccupancyStats:
    """Aggregate slots and reservations into occupancy statistics.

    Occupancy counts slots blocked by pending/confirmed reservations, while
    revenue only sums confirmed/completed ones: a pending booking holds the
    room but has not been paid.
    """
    total_slots = len(slots)
    occupied_slots = sum(1 for slot in slots if not slot.available)
    rate = occupied_slots / total_slots * 100 if total_slots > 0 else 0.0

    revenue = sum(
        (r.total_price for r in reservations if r.status in REVENUE_STATUSES),
        Decimal("0.00"),
    )

    return OccupancyStats(
        resource_id=resource.id,
        resource_name=resource.name,
        date=day,
        total_slots=total_slots,
        occupied_slots=occupied_slots,
        occupancy_rate=rate,
        revenue=revenue,
    )


async def _stats_for(store: ReservationStore, resource: Resource, day: date) -> OccupancyStats:
    statuses = ACTIVE_STATUSES | REVENUE_STATUSES
    reservations = await store.find_reservations(resource.id, day, day, statuses)
    slots = slots_for_resource(resource, day, reservations, OCCUPANCY_SLOT_MINUTES)
    return compute_occupancy(resource, day, slots, reservations)


async def occupancy_stats(store: ReservationStore, resource_id: str, day: date) -> OccupancyStats:
    """Return the occupancy statistics of one resource on one day.

    Raises:
        ResourceNotFound: if the resource does not exist.
    """
    resource = await store.get_resource(resource_id)
    if resource is None:
        raise ResourceNotFound(f"Resource {resource_id!r} not found")
    return await _stats_for(store, resource, day)


async def occupancy_report(
    store: ReservationStore,
    start_day: date,
    end_day: date,
    resource_ids: list[str] | None = None,
) -> list[OccupancyStats]:
    """Return daily statistics over [start_day, end_day] for several resources.

    Defaults to every active resource. Unknown ids are skipped. Results are
    ordered by resource, then date.
    """
    if end_day < start_day:
        return []

    if resource_ids:
        resources = []
        for resource_id in resource_ids:
            resource = await store.get_resource(resource_id)
            if resource is None:
                logger.warning("Skipping unknown resource %s in occupancy report", resource_id)
                continue
            resources.append(resource)
    else:
        resources = await store.list_resources(active_only=True)

    report: list[OccupancyStats] = []
    for resource in resources:
        day = start_day
        while day <= end_day:
            report.append(await _stats_for(store, resource, day))
            day += timedelta(days=1)
    return report
