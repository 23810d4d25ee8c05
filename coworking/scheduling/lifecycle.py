"""Reservation lifecycle: eligibility predicates and status transitions.

All functions are pure; "now" is always passed in by the caller.
"""

from datetime import datetime, time, timedelta, tzinfo

from coworking.errors import InvalidStatusTransition
from coworking.scheduling.domain import (
    ACTIVE_STATUSES,
    PaymentMethod,
    Reservation,
    ReservationStatus,
)

CANCELLATION_LEAD = timedelta(hours=1)
MODIFICATION_LEAD = timedelta(hours=2)

# Allowed source statuses for each target status.
_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.PENDING, ReservationStatus.PAYMENT_PENDING}),
    ReservationStatus.CANCELLED: ACTIVE_STATUSES,
    ReservationStatus.COMPLETED: frozenset({ReservationStatus.CONFIRMED}),
}


def starts_at(reservation: Reservation, tz: tzinfo) -> datetime:
    """Return the reservation start as an aware datetime in *tz*."""
    hours, minutes = divmod(reservation.start_minutes, 60)
    return datetime.combine(reservation.date, time(hours, minutes), tzinfo=tz)


def ends_at(reservation: Reservation, tz: tzinfo) -> datetime:
    hours, minutes = divmod(reservation.end_minutes, 60)
    return datetime.combine(reservation.date, time(hours, minutes), tzinfo=tz)


def can_be_cancelled(
    reservation: Reservation,
    now: datetime,
    tz: tzinfo,
    lead: timedelta = CANCELLATION_LEAD,
) -> bool:
    """Active reservations may be cancelled until one hour before they start."""
    if reservation.status not in ACTIVE_STATUSES:
        return False
    return starts_at(reservation, tz) >= now + lead


def can_be_modified(
    reservation: Reservation,
    now: datetime,
    tz: tzinfo,
    lead: timedelta = MODIFICATION_LEAD,
) -> bool:
    """Pending reservations may be modified until two hours before they start."""
    if reservation.status is not ReservationStatus.PENDING:
        return False
    return starts_at(reservation, tz) >= now + lead


def initial_status(payment_method: PaymentMethod) -> ReservationStatus:
    """On-site payments start pending; online ones wait for the payment."""
    if payment_method is PaymentMethod.ONSITE:
        return ReservationStatus.PENDING
    return ReservationStatus.PAYMENT_PENDING


def _transition(reservation: Reservation, target: ReservationStatus) -> ReservationStatus:
    if reservation.status not in _TRANSITIONS[target]:
        raise InvalidStatusTransition(
            f"Cannot move reservation {reservation.id} from {reservation.status.value} to {target.value}"
        )
    return target


def confirm(reservation: Reservation) -> ReservationStatus:
    return _transition(reservation, ReservationStatus.CONFIRMED)


def cancel(reservation: Reservation, now: datetime, tz: tzinfo, lead: timedelta = CANCELLATION_LEAD) -> ReservationStatus:
    """Return the cancelled status, or raise if the reservation is not eligible."""
    target = _transition(reservation, ReservationStatus.CANCELLED)
    if not can_be_cancelled(reservation, now, tz, lead):
        raise InvalidStatusTransition(
            f"Reservation {reservation.id} starts in less than {lead} and can no longer be cancelled"
        )
    return target


def complete(reservation: Reservation, now: datetime, tz: tzinfo) -> ReservationStatus:
    """Return the completed status once the reservation has elapsed."""
    target = _transition(reservation, ReservationStatus.COMPLETED)
    if ends_at(reservation, tz) > now:
        raise InvalidStatusTransition(f"Reservation {reservation.id} has not elapsed yet")
    return target
