"""Persistence collaborator interface consumed by the scheduling engine.

Implementations must pair ``add_reservation`` with a storage-level exclusion
constraint: the engine's conflict check is only a pre-validation, and two
concurrent requests can both observe "no conflict" before either commits.
"""

import uuid
from collections.abc import Iterable
from datetime import date
from typing import Protocol

from coworking.scheduling.domain import ACTIVE_STATUSES, Reservation, ReservationStatus, Resource


class ReservationStore(Protocol):
    async def get_resource(self, resource_id: str) -> Resource | None:
        """Return the resource, or None when it does not exist."""
        ...

    async def list_resources(self, active_only: bool = True) -> list[Resource]:
        """Return resources ordered by id."""
        ...

    async def find_reservations(
        self,
        resource_id: str,
        start_day: date,
        end_day: date,
        statuses: Iterable[ReservationStatus],
    ) -> list[Reservation]:
        """Return reservations of a resource dated within [start_day, end_day].

        Results are ordered by date, then start time.
        """
        ...

    async def get_reservation(self, reservation_id: uuid.UUID) -> Reservation | None:
        ...

    async def add_reservation(self, reservation: Reservation) -> Reservation:
        """Persist a new reservation.

        Raises:
            SchedulingConflict: if the storage overlap constraint rejects it.
        """
        ...

    async def update_reservation(self, reservation: Reservation) -> Reservation:
        """Persist changed fields of an existing reservation.

        Raises:
            SchedulingConflict: if the storage overlap constraint rejects it.
            ReservationNotFound: if the reservation no longer exists.
        """
        ...


async def find_active_reservations(store: ReservationStore, resource_id: str, day: date) -> list[Reservation]:
    """Return the pending/confirmed reservations of a resource on one day."""
    return await store.find_reservations(resource_id, day, day, ACTIVE_STATUSES)
