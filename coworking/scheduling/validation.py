"""Single-pass booking validation.

Every independent rule runs and contributes its own issue, so a caller sees
all the reasons a request is rejected at once. The only short-circuit is a
missing resource, which makes the remaining checks meaningless.

Each rule is a small function raising one of the ``BookingError`` kinds;
``validate_booking`` turns those into ``ValidationIssue`` entries. Storage
failures are not rules: ``StorageUnavailable`` always propagates.

The duration is optional. Without one, an hourly booking is billed for its
start/end interval. A declared hourly duration is reconciled against the
interval; day/week/month durations are not (known gap).
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from coworking.config import settings
from coworking.errors import (
    BookingError,
    CapacityExceeded,
    DateInPast,
    DurationMismatch,
    ErrorCode,
    InvalidDuration,
    InvalidTimeFormat,
    InvalidTimeRange,
    OutsideOpeningHours,
    ResourceClosedThatDay,
    ResourceInactive,
    SchedulingConflict,
    StorageUnavailable,
)
from coworking.repositories.base import ReservationStore
from coworking.scheduling.calendar import DayClosure, HoursPolicy, opening_hours_for, today_local
from coworking.scheduling.conflicts import Conflict, find_conflicts
from coworking.scheduling.domain import MAX_DURATION, DurationType, Resource
from coworking.scheduling.pricing import CENTS, price
from coworking.scheduling.timeutils import is_valid_time, minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)

# Allowed gap, in hours, between an hourly duration and its start/end times.
HOURLY_DURATION_TOLERANCE = 0.1


@dataclass(frozen=True)
class BookingRequest:
    resource_id: str
    date: date
    start_time: str
    end_time: str
    guest_count: int
    duration_value: Decimal | None = None
    duration_type: DurationType = DurationType.HOUR
    exclude_reservation_id: uuid.UUID | None = None


@dataclass(frozen=True)
class ValidationIssue:
    code: ErrorCode
    message: str

    @classmethod
    def from_error(cls, error: BookingError) -> "ValidationIssue":
        return cls(code=error.code, message=error.message)


@dataclass
class ValidationResult:
    errors: list[ValidationIssue] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)
    duration_value: Decimal | None = None
    total_price: Decimal | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def codes(self) -> list[ErrorCode]:
        return [issue.code for issue in self.errors]


def interval_hours(start_time: str, end_time: str) -> Decimal:
    """Length of a well-formed interval in hours, rounded to hundredths."""
    minutes = time_to_minutes(end_time) - time_to_minutes(start_time)
    return (Decimal(minutes) / 60).quantize(CENTS, rounding=ROUND_HALF_UP)


def billed_duration(request: BookingRequest, times_ok: bool) -> Decimal | None:
    """The duration the request is priced for, or None when it cannot be known.

    A declared value wins. Otherwise an hourly request is billed for its
    interval (when the times are usable) and any other type for one unit.
    """
    if request.duration_value is not None:
        return request.duration_value
    if request.duration_type is not DurationType.HOUR:
        return Decimal("1")
    if times_ok:
        return interval_hours(request.start_time, request.end_time)
    return None


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def check_active(resource: Resource) -> None:
    if not resource.active:
        raise ResourceInactive(f"Resource {resource.id!r} is not currently available")


def check_capacity(resource: Resource, guest_count: int) -> None:
    if guest_count > resource.capacity:
        raise CapacityExceeded(
            f"Guest count ({guest_count}) exceeds the capacity of {resource.id!r} ({resource.capacity})"
        )


def check_not_past(day: date, today: date) -> None:
    if day < today:
        raise DateInPast(f"Date {day.isoformat()} is in the past")


def check_time_format(label: str, value: str) -> None:
    if not is_valid_time(value):
        raise InvalidTimeFormat(f"Invalid {label} time {value!r} (expected HH:MM)")


def check_time_range(start_time: str, end_time: str) -> None:
    if time_to_minutes(end_time) <= time_to_minutes(start_time):
        raise InvalidTimeRange(f"End time {end_time} must be after start time {start_time}")


def check_opening_hours(resource: Resource, day: date, start_time: str, end_time: str) -> None:
    window = opening_hours_for(resource, day, HoursPolicy.LENIENT)
    if window is DayClosure.UNRESTRICTED:
        return
    if window is DayClosure.CLOSED:
        raise ResourceClosedThatDay(f"{resource.name} is closed on {day.strftime('%A')}")
    if not window.contains(time_to_minutes(start_time), time_to_minutes(end_time)):
        raise OutsideOpeningHours(
            f"Booking must be between {minutes_to_time(window.open_minutes)} "
            f"and {minutes_to_time(window.close_minutes)}"
        )


def check_duration_bounds(duration_value: Decimal, duration_type: DurationType) -> None:
    limit = MAX_DURATION[duration_type]
    if duration_value <= 0 or duration_value > limit:
        raise InvalidDuration(
            f"Duration of {duration_value} {duration_type.value}(s) must be positive and at most {limit}"
        )


def check_hourly_duration(request: BookingRequest) -> None:
    if request.duration_value is None or request.duration_type is not DurationType.HOUR:
        return
    actual_hours = (time_to_minutes(request.end_time) - time_to_minutes(request.start_time)) / 60
    if abs(actual_hours - float(request.duration_value)) > HOURLY_DURATION_TOLERANCE:
        raise DurationMismatch(
            f"Duration of {request.duration_value} hour(s) does not match {request.start_time}-{request.end_time}"
        )


def _run(result: ValidationResult, rule: Callable[..., None], *args) -> bool:
    """Apply a rule, recording its failure. Returns True when the rule passed."""
    try:
        rule(*args)
    except StorageUnavailable:
        raise
    except BookingError as e:
        result.errors.append(ValidationIssue.from_error(e))
        return False
    return True


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


async def validate_booking(
    store: ReservationStore,
    request: BookingRequest,
    today: date | None = None,
) -> ValidationResult:
    """Validate a booking request against the resource and its reservations."""
    result = ValidationResult()

    resource = await store.get_resource(request.resource_id)
    if resource is None:
        result.errors.append(
            ValidationIssue(ErrorCode.RESOURCE_NOT_FOUND, f"Resource {request.resource_id!r} not found")
        )
        return result

    if today is None:
        today = today_local(settings.tzinfo)

    _run(result, check_active, resource)
    _run(result, check_capacity, resource, request.guest_count)
    _run(result, check_not_past, request.date, today)

    start_ok = _run(result, check_time_format, "start", request.start_time)
    end_ok = _run(result, check_time_format, "end", request.end_time)
    times_ok = start_ok and end_ok and _run(result, check_time_range, request.start_time, request.end_time)

    result.duration_value = billed_duration(request, times_ok)
    duration_ok = result.duration_value is not None and _run(
        result, check_duration_bounds, result.duration_value, request.duration_type
    )

    if times_ok:
        _run(result, check_opening_hours, resource, request.date, request.start_time, request.end_time)
        _run(result, check_hourly_duration, request)

        result.conflicts = await find_conflicts(
            store,
            resource.id,
            request.date,
            request.start_time,
            request.end_time,
            exclude_reservation_id=request.exclude_reservation_id,
        )
        for conflict in result.conflicts:
            result.errors.append(ValidationIssue.from_error(SchedulingConflict(conflict.reason)))

    if duration_ok:
        try:
            result.total_price = price(resource, result.duration_value, request.duration_type)
        except ValueError:
            logger.warning("Cannot price %s for duration type %r", resource.id, request.duration_type)

    if result.errors:
        logger.info(
            "Booking request for %s on %s rejected: %s",
            resource.id,
            request.date.isoformat(),
            ", ".join(code.value for code in result.codes),
        )
    return result
