"""Merge consecutive free slots into maximal bookable windows."""

from collections.abc import Iterable
from datetime import date

from coworking.config import settings
from coworking.repositories.base import ReservationStore
from coworking.scheduling.slots import TimeSlot, available_slots


def _close_run(run: list[TimeSlot]) -> TimeSlot:
    return TimeSlot(
        start=run[0].start,
        end=run[-1].end,
        duration_minutes=sum(s.duration_minutes for s in run),
        available=True,
    )


def merge_free_slots(slots: Iterable[TimeSlot], minimum_duration_minutes: int = 0) -> list[TimeSlot]:
    """Run-length merge available slots, keeping runs of at least the minimum.

    A run ends at an unavailable slot, at a gap between two slots, or at the
    end of the list. *slots* must be ordered by start time.
    """
    windows: list[TimeSlot] = []
    run: list[TimeSlot] = []

    for slot in slots:
        if not slot.available:
            if run:
                windows.append(_close_run(run))
            run = []
            continue
        if run and run[-1].end != slot.start:
            windows.append(_close_run(run))
            run = []
        run.append(slot)

    if run:
        windows.append(_close_run(run))

    return [w for w in windows if w.duration_minutes >= minimum_duration_minutes]


def free_blocks(slots: Iterable[TimeSlot]) -> list[TimeSlot]:
    """Every maximal free window, whatever its length."""
    return merge_free_slots(slots, 0)


def longest_block(blocks: Iterable[TimeSlot]) -> TimeSlot | None:
    """Return the longest block (the earliest one on ties), or None."""
    best: TimeSlot | None = None
    for block in blocks:
        if best is None or block.duration_minutes > best.duration_minutes:
            best = block
    return best


async def consecutive_free_slots(
    store: ReservationStore,
    resource_id: str,
    day: date,
    minimum_duration_minutes: int,
    granularity_minutes: int | None = None,
) -> list[TimeSlot]:
    """Return free windows of at least *minimum_duration_minutes*.

    Slots are generated at a fine granularity (30 minutes by default),
    independent of the caller's booking granularity, so that windows not
    aligned on the hour are still found.
    """
    granularity = granularity_minutes or settings.merge_granularity_minutes
    slots = await available_slots(store, resource_id, day, granularity)
    return merge_free_slots(slots, minimum_duration_minutes)
