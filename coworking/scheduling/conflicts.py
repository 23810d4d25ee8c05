"""Overlap detection between a proposed interval and existing reservations.

All intervals are half-open, ``[start, end)``: a reservation ending at 11:00
never conflicts with one starting at 11:00.

An empty result means "safe to insert" only as a pre-check. Two concurrent
requests can both see no conflict; the storage exclusion constraint is what
actually prevents the double booking.
"""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from coworking.repositories.base import ReservationStore, find_active_reservations
from coworking.scheduling.domain import Reservation
from coworking.scheduling.timeutils import minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conflict:
    """An existing reservation overlapping the proposed interval."""

    reservation: Reservation
    overlap_start: int
    overlap_end: int

    @property
    def reason(self) -> str:
        return (
            f"Overlaps reservation {self.reservation.id} "
            f"from {minutes_to_time(self.overlap_start)} to {minutes_to_time(self.overlap_end)}"
        )


def overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open overlap test of [start_a, end_a) against [start_b, end_b)."""
    return not (end_a <= start_b or start_a >= end_b)


def detect_conflicts(
    reservations: Iterable[Reservation],
    start_minutes: int,
    end_minutes: int,
    exclude_reservation_id: uuid.UUID | None = None,
) -> list[Conflict]:
    """Return conflicts of [start_minutes, end_minutes) with *reservations*.

    Inactive reservations and the excluded one (used when re-validating an
    edit) are ignored. Conflicts are ordered by the existing start time.
    """
    conflicts: list[Conflict] = []
    for existing in reservations:
        if not existing.is_active:
            continue
        if exclude_reservation_id is not None and existing.id == exclude_reservation_id:
            continue

        existing_start = existing.start_minutes
        existing_end = existing.end_minutes
        if overlaps(start_minutes, end_minutes, existing_start, existing_end):
            conflicts.append(
                Conflict(
                    reservation=existing,
                    overlap_start=max(start_minutes, existing_start),
                    overlap_end=min(end_minutes, existing_end),
                )
            )

    conflicts.sort(key=lambda c: (c.reservation.start_minutes, c.reservation.end_minutes))
    return conflicts


async def find_conflicts(
    store: ReservationStore,
    resource_id: str,
    day: date,
    start_time: str,
    end_time: str,
    exclude_reservation_id: uuid.UUID | None = None,
) -> list[Conflict]:
    """Load the active reservations of a resource/day and detect conflicts.

    Raises:
        InvalidTimeFormat: if either time is malformed.
        StorageUnavailable: if the store cannot be reached.
    """
    start_minutes = time_to_minutes(start_time)
    end_minutes = time_to_minutes(end_time)

    existing = await find_active_reservations(store, resource_id, day)
    conflicts = detect_conflicts(existing, start_minutes, end_minutes, exclude_reservation_id)
    if conflicts:
        logger.info(
            "%d conflict(s) for %s on %s %s-%s",
            len(conflicts),
            resource_id,
            day.isoformat(),
            start_time,
            end_time,
        )
    return conflicts
