"""Pydantic v2 request/response schemas for booking endpoints."""

import datetime
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from coworking.errors import ErrorCode
from coworking.scheduling.conflicts import Conflict
from coworking.scheduling.domain import (
    MAX_DURATION,
    DurationType,
    PaymentMethod,
    ReservationStatus,
)
from coworking.scheduling.timeutils import minutes_to_time

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


def _check_duration_bounds(duration_value: Decimal | None, duration_type: DurationType | None) -> None:
    if duration_value is None or duration_type is None:
        return
    limit = MAX_DURATION[duration_type]
    if duration_value > limit:
        raise ValueError(f"duration_value must be at most {limit} for duration_type '{duration_type.value}'")


class BookingValidate(BaseModel):
    """Schema for a booking validation request.

    Times are plain strings on purpose: malformed values are reported by the
    validator alongside every other issue instead of failing the request.
    Without ``duration_value`` an hourly booking is billed for its interval.
    """

    resource_id: str = Field(..., min_length=1, max_length=64)
    date: datetime.date
    start_time: str
    end_time: str
    guest_count: int = Field(1, ge=1, le=20)
    duration_value: Decimal | None = Field(None, ge=1)
    duration_type: DurationType = DurationType.HOUR

    @model_validator(mode="after")
    def check_duration(self) -> "BookingValidate":
        """Reject durations beyond the per-type maximum."""
        _check_duration_bounds(self.duration_value, self.duration_type)
        return self


class ReservationCreate(BookingValidate):
    """Schema for creating a new reservation."""

    payment_method: PaymentMethod = PaymentMethod.ONSITE
    user_id: str | None = Field(None, max_length=64)
    notes: str | None = Field(None, max_length=500)


class ReservationUpdate(BaseModel):
    """Schema for modifying a pending reservation. All fields optional."""

    date: datetime.date | None = None
    start_time: str | None = None
    end_time: str | None = None
    guest_count: int | None = Field(None, ge=1, le=20)
    duration_value: Decimal | None = Field(None, ge=1)
    duration_type: DurationType | None = None
    notes: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def check_duration(self) -> "ReservationUpdate":
        _check_duration_bounds(self.duration_value, self.duration_type)
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ValidationIssueResponse(BaseModel):
    code: ErrorCode
    message: str

    model_config = ConfigDict(from_attributes=True)


class ConflictResponse(BaseModel):
    """An existing reservation overlapping the requested interval."""

    reservation_id: uuid.UUID
    start_time: str
    end_time: str
    overlap_start: str
    overlap_end: str
    reason: str

    @classmethod
    def from_conflict(cls, conflict: Conflict) -> "ConflictResponse":
        return cls(
            reservation_id=conflict.reservation.id,
            start_time=conflict.reservation.start_time,
            end_time=conflict.reservation.end_time,
            overlap_start=minutes_to_time(conflict.overlap_start),
            overlap_end=minutes_to_time(conflict.overlap_end),
            reason=conflict.reason,
        )


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: list[ValidationIssueResponse]
    conflicts: list[ConflictResponse]
    total_price: Decimal | None = None


class ReservationResponse(BaseModel):
    """Reservation as returned by every booking endpoint."""

    id: uuid.UUID
    resource_id: str
    date: datetime.date
    start_time: str
    end_time: str
    duration_value: Decimal
    duration_type: DurationType
    guest_count: int
    total_price: Decimal
    status: ReservationStatus
    payment_method: PaymentMethod
    user_id: str | None = None
    notes: str | None = None
    can_be_cancelled: bool = False
    can_be_modified: bool = False

    model_config = ConfigDict(from_attributes=True)
