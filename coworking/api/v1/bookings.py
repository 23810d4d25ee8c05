"""Bookings API router: validating, creating and moving reservations through their lifecycle.

Every decision (validity, conflicts, price, cancellation eligibility) is made
by ``coworking.scheduling``; this module only maps HTTP onto it. The conflict
check here is a pre-validation: the storage overlap constraint is what turns
a racing double booking into a 409.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, status

from coworking.api.deps import get_store
from coworking.config import settings
from coworking.errors import ErrorCode, InvalidStatusTransition, ReservationNotFound
from coworking.repositories.base import ReservationStore
from coworking.scheduling import lifecycle
from coworking.scheduling.domain import DurationType, Reservation
from coworking.scheduling.validation import BookingRequest, ValidationResult, validate_booking
from coworking.schemas.reservation import (
    BookingValidate,
    ConflictResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationUpdate,
    ValidationIssueResponse,
    ValidationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now() -> datetime:
    return datetime.now(settings.tzinfo)


def _cancellation_lead() -> timedelta:
    return timedelta(hours=settings.cancellation_lead_hours)


def _modification_lead() -> timedelta:
    return timedelta(hours=settings.modification_lead_hours)


def _to_response(reservation: Reservation) -> ReservationResponse:
    """Serialize a domain reservation, including its current eligibility flags."""
    now = _now()
    response = ReservationResponse.model_validate(reservation)
    response.can_be_cancelled = lifecycle.can_be_cancelled(reservation, now, settings.tzinfo, _cancellation_lead())
    response.can_be_modified = lifecycle.can_be_modified(reservation, now, settings.tzinfo, _modification_lead())
    return response


def _validation_response(result: ValidationResult) -> ValidationResponse:
    return ValidationResponse(
        is_valid=result.is_valid,
        errors=[ValidationIssueResponse.model_validate(issue) for issue in result.errors],
        conflicts=[ConflictResponse.from_conflict(c) for c in result.conflicts],
        total_price=result.total_price,
    )


def _reject(result: ValidationResult) -> HTTPException:
    """Build the HTTP error for a failed validation.

    A request rejected only because of conflicts is a 409, anything else 400.
    """
    only_conflicts = all(code is ErrorCode.SCHEDULING_CONFLICT for code in result.codes)
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT if only_conflicts else status.HTTP_400_BAD_REQUEST,
        detail={
            "message": "Booking validation failed",
            "errors": [{"code": issue.code.value, "message": issue.message} for issue in result.errors],
        },
    )


async def _get_reservation(store: ReservationStore, reservation_id: uuid.UUID) -> Reservation:
    reservation = await store.get_reservation(reservation_id)
    if reservation is None:
        raise ReservationNotFound(f"Reservation {reservation_id} not found")
    return reservation


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/validate",
    response_model=ValidationResponse,
    summary="Validate a booking request without creating it",
)
async def validate(
    body: BookingValidate,
    store: ReservationStore = Depends(get_store),
) -> ValidationResponse:
    """Run every booking rule and return all issues at once, plus the quoted price."""
    request = BookingRequest(
        resource_id=body.resource_id,
        date=body.date,
        start_time=body.start_time,
        end_time=body.end_time,
        guest_count=body.guest_count,
        duration_value=body.duration_value,
        duration_type=body.duration_type,
    )
    result = await validate_booking(store, request)
    return _validation_response(result)


@router.post(
    "",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a reservation",
)
async def create_reservation(
    body: ReservationCreate,
    store: ReservationStore = Depends(get_store),
) -> ReservationResponse:
    """Validate, price, and persist a reservation.

    On-site payments start ``pending``; card and PayPal payments start
    ``payment_pending`` until confirmed.
    """
    request = BookingRequest(
        resource_id=body.resource_id,
        date=body.date,
        start_time=body.start_time,
        end_time=body.end_time,
        guest_count=body.guest_count,
        duration_value=body.duration_value,
        duration_type=body.duration_type,
    )
    result = await validate_booking(store, request)
    if not result.is_valid:
        raise _reject(result)

    reservation = Reservation(
        resource_id=body.resource_id,
        date=body.date,
        start_time=body.start_time,
        end_time=body.end_time,
        duration_value=result.duration_value,
        duration_type=body.duration_type,
        guest_count=body.guest_count,
        total_price=result.total_price,
        status=lifecycle.initial_status(body.payment_method),
        payment_method=body.payment_method,
        user_id=body.user_id,
        notes=body.notes,
    )
    reservation = await store.add_reservation(reservation)
    return _to_response(reservation)


@router.get(
    "/{reservation_id}",
    response_model=ReservationResponse,
    summary="Get a reservation",
)
async def get_reservation(
    reservation_id: uuid.UUID,
    store: ReservationStore = Depends(get_store),
) -> ReservationResponse:
    reservation = await _get_reservation(store, reservation_id)
    return _to_response(reservation)


@router.put(
    "/{reservation_id}",
    response_model=ReservationResponse,
    summary="Modify a pending reservation",
)
async def modify_reservation(
    reservation_id: uuid.UUID,
    body: ReservationUpdate,
    store: ReservationStore = Depends(get_store),
) -> ReservationResponse:
    """Change the date, times, guests, or duration of a pending reservation.

    Only allowed up to two hours before the start. The new values are
    re-validated with the reservation itself excluded from conflict detection,
    and the price is recomputed. An hourly reservation moved without a new
    duration is re-billed for its new interval.
    """
    reservation = await _get_reservation(store, reservation_id)
    if not lifecycle.can_be_modified(reservation, _now(), settings.tzinfo, _modification_lead()):
        raise InvalidStatusTransition(f"Reservation {reservation_id} can no longer be modified")

    update_data = body.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None:
            setattr(reservation, field, value)

    duration_value = reservation.duration_value
    if update_data.get("duration_value") is None and reservation.duration_type is DurationType.HOUR:
        duration_value = None

    result = await validate_booking(
        store,
        BookingRequest(
            resource_id=reservation.resource_id,
            date=reservation.date,
            start_time=reservation.start_time,
            end_time=reservation.end_time,
            guest_count=reservation.guest_count,
            duration_value=duration_value,
            duration_type=reservation.duration_type,
            exclude_reservation_id=reservation.id,
        ),
    )
    if not result.is_valid:
        raise _reject(result)

    reservation.duration_value = result.duration_value
    reservation.total_price = result.total_price
    reservation = await store.update_reservation(reservation)
    logger.info("Modified reservation %s", reservation.id)
    return _to_response(reservation)


@router.post(
    "/{reservation_id}/confirm",
    response_model=ReservationResponse,
    summary="Confirm a reservation once paid",
)
async def confirm_reservation(
    reservation_id: uuid.UUID,
    store: ReservationStore = Depends(get_store),
) -> ReservationResponse:
    reservation = await _get_reservation(store, reservation_id)
    reservation.status = lifecycle.confirm(reservation)
    reservation = await store.update_reservation(reservation)
    logger.info("Confirmed reservation %s", reservation.id)
    return _to_response(reservation)


@router.post(
    "/{reservation_id}/cancel",
    response_model=ReservationResponse,
    summary="Cancel a reservation",
)
async def cancel_reservation(
    reservation_id: uuid.UUID,
    store: ReservationStore = Depends(get_store),
) -> ReservationResponse:
    """Cancel a pending or confirmed reservation at least one hour before it starts."""
    reservation = await _get_reservation(store, reservation_id)
    reservation.status = lifecycle.cancel(reservation, _now(), settings.tzinfo, _cancellation_lead())
    reservation = await store.update_reservation(reservation)
    logger.info("Cancelled reservation %s", reservation.id)
    return _to_response(reservation)


@router.post(
    "/{reservation_id}/complete",
    response_model=ReservationResponse,
    summary="Mark an elapsed reservation as completed",
)
async def complete_reservation(
    reservation_id: uuid.UUID,
    store: ReservationStore = Depends(get_store),
) -> ReservationResponse:
    reservation = await _get_reservation(store, reservation_id)
    reservation.status = lifecycle.complete(reservation, _now(), settings.tzinfo)
    reservation = await store.update_reservation(reservation)
    logger.info("Completed reservation %s", reservation.id)
    return _to_response(reservation)
