"""Error kinds raised by the reservation engine and its storage collaborator."""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable machine-readable codes, shared by exceptions and validation issues."""

    INVALID_TIME_FORMAT = "INVALID_TIME_FORMAT"
    INVALID_TIME_RANGE = "INVALID_TIME_RANGE"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_INACTIVE = "RESOURCE_INACTIVE"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    DATE_IN_PAST = "DATE_IN_PAST"
    OUTSIDE_OPENING_HOURS = "OUTSIDE_OPENING_HOURS"
    RESOURCE_CLOSED_THAT_DAY = "RESOURCE_CLOSED_THAT_DAY"
    SCHEDULING_CONFLICT = "SCHEDULING_CONFLICT"
    DURATION_MISMATCH = "DURATION_MISMATCH"
    INVALID_DURATION = "INVALID_DURATION"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    RESERVATION_NOT_FOUND = "RESERVATION_NOT_FOUND"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"


class BookingError(Exception):
    """Base class for every error raised by the reservation engine."""

    code: ErrorCode = ErrorCode.SCHEDULING_CONFLICT

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code={self.code.value}, message={self.message!r})>"


class InvalidTimeFormat(BookingError):
    code = ErrorCode.INVALID_TIME_FORMAT


class InvalidTimeRange(BookingError):
    code = ErrorCode.INVALID_TIME_RANGE


class DurationMismatch(BookingError):
    code = ErrorCode.DURATION_MISMATCH


class InvalidDuration(BookingError):
    code = ErrorCode.INVALID_DURATION


class ResourceNotFound(BookingError):
    code = ErrorCode.RESOURCE_NOT_FOUND


class ResourceInactive(BookingError):
    code = ErrorCode.RESOURCE_INACTIVE


class CapacityExceeded(BookingError):
    code = ErrorCode.CAPACITY_EXCEEDED


class DateInPast(BookingError):
    code = ErrorCode.DATE_IN_PAST


class OutsideOpeningHours(BookingError):
    code = ErrorCode.OUTSIDE_OPENING_HOURS


class ResourceClosedThatDay(BookingError):
    code = ErrorCode.RESOURCE_CLOSED_THAT_DAY


class SchedulingConflict(BookingError):
    code = ErrorCode.SCHEDULING_CONFLICT


class StorageUnavailable(BookingError):
    """The persistence collaborator could not be reached. Never retried here."""

    code = ErrorCode.STORAGE_UNAVAILABLE


class ReservationNotFound(BookingError):
    code = ErrorCode.RESERVATION_NOT_FOUND


class InvalidStatusTransition(BookingError):
    code = ErrorCode.INVALID_STATUS_TRANSITION
