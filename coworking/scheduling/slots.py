"""Discretize a resource's opening window into fixed-size time slots."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from coworking.config import settings
from coworking.errors import ResourceNotFound
from coworking.repositories.base import ReservationStore, find_active_reservations
from coworking.scheduling.calendar import DayClosure, HoursPolicy, OpeningWindow, opening_hours_for
from coworking.scheduling.conflicts import overlaps
from coworking.scheduling.domain import Reservation, Resource
from coworking.scheduling.timeutils import minutes_to_time, time_to_minutes


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str
    duration_minutes: int
    available: bool

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end)


def generate_slots(
    window: OpeningWindow,
    reservations: Iterable[Reservation],
    slot_duration_minutes: int,
) -> list[TimeSlot]:
    """Tile *window* with slots of *slot_duration_minutes*, flagging busy ones.

    The last slot is clamped to the closing time. A slot is unavailable when
    it overlaps any active reservation.
    """
    if slot_duration_minutes <= 0:
        raise ValueError(f"slot_duration_minutes must be positive, got {slot_duration_minutes}")

    busy = [(r.start_minutes, r.end_minutes) for r in reservations if r.is_active]

    slots: list[TimeSlot] = []
    for start in range(window.open_minutes, window.close_minutes, slot_duration_minutes):
        end = min(start + slot_duration_minutes, window.close_minutes)
        available = not any(overlaps(start, end, b_start, b_end) for b_start, b_end in busy)
        slots.append(
            TimeSlot(
                start=minutes_to_time(start),
                end=minutes_to_time(end),
                duration_minutes=end - start,
                available=available,
            )
        )
    return slots


def slots_for_resource(
    resource: Resource,
    day: date,
    reservations: Iterable[Reservation],
    slot_duration_minutes: int,
) -> list[TimeSlot]:
    """Generate the slots of a resource for a day; a closed day has none."""
    if slot_duration_minutes <= 0:
        raise ValueError(f"slot_duration_minutes must be positive, got {slot_duration_minutes}")
    window = opening_hours_for(resource, day, HoursPolicy.STRICT)
    if isinstance(window, DayClosure):
        return []
    return generate_slots(window, reservations, slot_duration_minutes)


async def available_slots(
    store: ReservationStore,
    resource_id: str,
    day: date,
    slot_duration_minutes: int | None = None,
) -> list[TimeSlot]:
    """Return every slot of the resource's opening window on *day*.

    Slots default to ``settings.default_slot_minutes``.

    Raises:
        ResourceNotFound: if the resource does not exist.
    """
    resource = await store.get_resource(resource_id)
    if resource is None:
        raise ResourceNotFound(f"Resource {resource_id!r} not found")

    if slot_duration_minutes is None:
        slot_duration_minutes = settings.default_slot_minutes
    reservations = await find_active_reservations(store, resource_id, day)
    return slots_for_resource(resource, day, reservations, slot_duration_minutes)
