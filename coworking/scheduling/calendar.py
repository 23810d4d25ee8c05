"""Resolve a resource's opening window for a given calendar day.

Two callers disagree on what an unset weekday means, so the policy is an
explicit argument rather than a default:

- ``HoursPolicy.LENIENT`` (booking validation): a missing entry, or one whose
  open/close fields are unset, imposes no restriction.
- ``HoursPolicy.STRICT`` (slot generation, occupancy): the same entry means the
  resource is closed and yields no slots.

An entry explicitly marked ``closed`` is closed under both policies.
"""

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import Enum

from coworking.scheduling.domain import Resource
from coworking.scheduling.timeutils import time_to_minutes


class HoursPolicy(str, Enum):
    LENIENT = "lenient"
    STRICT = "strict"


class DayClosure(str, Enum):
    CLOSED = "closed"
    UNRESTRICTED = "unrestricted"


@dataclass(frozen=True)
class OpeningWindow:
    """Open interval of a day, as minutes since midnight, close excluded."""

    open_minutes: int
    close_minutes: int

    @property
    def duration_minutes(self) -> int:
        return max(self.close_minutes - self.open_minutes, 0)

    def contains(self, start_minutes: int, end_minutes: int) -> bool:
        return start_minutes >= self.open_minutes and end_minutes <= self.close_minutes


def local_day(value: date | datetime, tz: tzinfo) -> date:
    """Return the resource-local calendar day of a date or datetime.

    Naive datetimes are taken as already local; aware ones are converted.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def today_local(tz: tzinfo) -> date:
    """Return today's date in the resource-local timezone."""
    return datetime.now(tz).date()


def opening_hours_for(
    resource: Resource,
    day: date,
    policy: HoursPolicy,
) -> OpeningWindow | DayClosure:
    """Resolve the opening window of *resource* on *day* under *policy*."""
    entry = resource.hours_for_weekday(day.weekday())

    if entry is not None and entry.closed:
        return DayClosure.CLOSED

    if entry is None or not entry.is_set:
        if policy is HoursPolicy.LENIENT:
            return DayClosure.UNRESTRICTED
        return DayClosure.CLOSED

    return OpeningWindow(
        open_minutes=time_to_minutes(entry.open),
        close_minutes=time_to_minutes(entry.close),
    )
