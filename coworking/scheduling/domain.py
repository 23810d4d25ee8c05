"""Plain domain structs for bookable resources and their reservations.

These are deliberately free of any ORM base class: the SQL repository maps
rows onto them, and every scheduling function works on them alone.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from coworking.scheduling.timeutils import time_to_minutes

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    PAYMENT_PENDING = "payment_pending"


class DurationType(str, Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class PaymentMethod(str, Enum):
    ONSITE = "onsite"
    CARD = "card"
    PAYPAL = "paypal"


# Reservations that block a slot.
ACTIVE_STATUSES: frozenset[ReservationStatus] = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.CONFIRMED}
)

# Reservations whose price counts as earned revenue.
REVENUE_STATUSES: frozenset[ReservationStatus] = frozenset(
    {ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED}
)

# Upper bound on duration_value per duration type.
MAX_DURATION: dict[DurationType, int] = {
    DurationType.HOUR: 12,
    DurationType.DAY: 30,
    DurationType.WEEK: 12,
    DurationType.MONTH: 12,
}


@dataclass(frozen=True)
class DayHours:
    """One weekday entry of a resource's opening-hours calendar."""

    open: str | None = None
    close: str | None = None
    closed: bool = False

    @property
    def is_set(self) -> bool:
        return bool(self.open) and bool(self.close)


@dataclass(frozen=True)
class Pricing:
    """Unit rates of a resource, one per duration type."""

    per_hour: Decimal
    per_day: Decimal
    per_week: Decimal
    per_month: Decimal

    def rate_for(self, duration_type: DurationType | str) -> Decimal:
        """Return the unit rate for a duration type ("hour", "day", ...)."""
        kind = DurationType(duration_type)
        return {
            DurationType.HOUR: self.per_hour,
            DurationType.DAY: self.per_day,
            DurationType.WEEK: self.per_week,
            DurationType.MONTH: self.per_month,
        }[kind]


@dataclass
class Resource:
    """A bookable space with capacity, pricing, and a weekly calendar."""

    id: str
    name: str
    capacity: int
    pricing: Pricing
    active: bool = True
    opening_hours: dict[str, DayHours] = field(default_factory=dict)
    location: str | None = None

    def hours_for_weekday(self, weekday: int) -> DayHours | None:
        """Return the calendar entry for ``date.weekday()`` (0 = Monday)."""
        return self.opening_hours.get(WEEKDAYS[weekday])


@dataclass
class Reservation:
    """A time-boxed claim on a resource for one calendar day."""

    resource_id: str
    date: date
    start_time: str
    end_time: str
    duration_value: Decimal
    duration_type: DurationType
    guest_count: int
    total_price: Decimal
    status: ReservationStatus = ReservationStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.ONSITE
    user_id: str | None = None
    notes: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)

    @property
    def time_range(self) -> str:
        return f"{self.start_time} - {self.end_time}"
