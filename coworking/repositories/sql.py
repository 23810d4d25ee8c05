"""SQLAlchemy implementation of the reservation store.

Rows are mapped onto the plain domain dataclasses here and nowhere else.
"""

import logging
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from coworking.errors import ReservationNotFound, SchedulingConflict, StorageUnavailable
from coworking.models.reservation import OVERLAP_CONSTRAINT_NAME, ReservationModel
from coworking.models.resource import ResourceModel
from coworking.scheduling.domain import (
    WEEKDAYS,
    DayHours,
    DurationType,
    PaymentMethod,
    Pricing,
    Reservation,
    ReservationStatus,
    Resource,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Row <-> domain mapping
# ---------------------------------------------------------------------------


def _day_hours(raw: dict | None) -> DayHours | None:
    if raw is None:
        return None
    return DayHours(
        open=raw.get("open") or None,
        close=raw.get("close") or None,
        closed=bool(raw.get("closed", False)),
    )


def resource_from_row(row: ResourceModel) -> Resource:
    hours: dict[str, DayHours] = {}
    for weekday in WEEKDAYS:
        entry = _day_hours((row.opening_hours or {}).get(weekday))
        if entry is not None:
            hours[weekday] = entry

    return Resource(
        id=row.id,
        name=row.name,
        capacity=row.capacity,
        pricing=Pricing(
            per_hour=Decimal(row.price_per_hour),
            per_day=Decimal(row.price_per_day),
            per_week=Decimal(row.price_per_week),
            per_month=Decimal(row.price_per_month),
        ),
        active=row.available,
        opening_hours=hours,
        location=row.location,
    )


def reservation_from_row(row: ReservationModel) -> Reservation:
    return Reservation(
        id=row.id,
        resource_id=row.resource_id,
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        duration_value=Decimal(row.duration_value),
        duration_type=DurationType(row.duration_type),
        guest_count=row.guest_count,
        total_price=Decimal(row.total_price),
        status=ReservationStatus(row.status),
        payment_method=PaymentMethod(row.payment_method),
        user_id=row.user_id,
        notes=row.notes,
    )


def _apply(row: ReservationModel, reservation: Reservation) -> None:
    row.resource_id = reservation.resource_id
    row.date = reservation.date
    row.start_time = reservation.start_time
    row.end_time = reservation.end_time
    row.start_minute = reservation.start_minutes
    row.end_minute = reservation.end_minutes
    row.duration_value = reservation.duration_value
    row.duration_type = reservation.duration_type.value
    row.guest_count = reservation.guest_count
    row.total_price = reservation.total_price
    row.status = reservation.status.value
    row.payment_method = reservation.payment_method.value
    row.user_id = reservation.user_id
    row.notes = reservation.notes


@contextmanager
def _storage_errors(reservation: Reservation | None = None) -> Iterator[None]:
    """Translate driver failures into engine error kinds. Never retries."""
    try:
        yield
    except IntegrityError as e:
        if reservation is not None and OVERLAP_CONSTRAINT_NAME in str(e.orig):
            logger.warning(
                "Overlap constraint rejected reservation %s on %s %s",
                reservation.id,
                reservation.resource_id,
                reservation.time_range,
            )
            raise SchedulingConflict(
                f"{reservation.time_range} on {reservation.date.isoformat()} overlaps an active reservation"
            ) from e
        raise
    except (OperationalError, InterfaceError) as e:
        logger.error("Reservation storage unavailable: %s", e)
        raise StorageUnavailable("Reservation storage is unavailable") from e


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SqlReservationStore:
    """Reservation store backed by an ``AsyncSession``.

    The session's transaction is owned by the caller (``get_db`` commits at
    the end of the request); inserts and updates run in a savepoint so that a
    constraint violation leaves the outer transaction usable.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_resource(self, resource_id: str) -> Resource | None:
        with _storage_errors():
            row = await self._session.get(ResourceModel, resource_id)
        return resource_from_row(row) if row is not None else None

    async def list_resources(self, active_only: bool = True) -> list[Resource]:
        query = select(ResourceModel).order_by(ResourceModel.id)
        if active_only:
            query = query.where(ResourceModel.available.is_(True))
        with _storage_errors():
            result = await self._session.execute(query)
        return [resource_from_row(row) for row in result.scalars().all()]

    async def find_reservations(
        self,
        resource_id: str,
        start_day: date,
        end_day: date,
        statuses: Iterable[ReservationStatus],
    ) -> list[Reservation]:
        query = (
            select(ReservationModel)
            .where(
                ReservationModel.resource_id == resource_id,
                ReservationModel.date >= start_day,
                ReservationModel.date <= end_day,
                ReservationModel.status.in_([s.value for s in statuses]),
            )
            .order_by(ReservationModel.date, ReservationModel.start_minute)
        )
        with _storage_errors():
            result = await self._session.execute(query)
        return [reservation_from_row(row) for row in result.scalars().all()]

    async def get_reservation(self, reservation_id: uuid.UUID) -> Reservation | None:
        with _storage_errors():
            row = await self._session.get(ReservationModel, reservation_id)
        return reservation_from_row(row) if row is not None else None

    async def add_reservation(self, reservation: Reservation) -> Reservation:
        row = ReservationModel(id=reservation.id)
        _apply(row, reservation)
        with _storage_errors(reservation):
            async with self._session.begin_nested():
                self._session.add(row)
                await self._session.flush()
        logger.info(
            "Created reservation %s for %s on %s %s (%s)",
            reservation.id,
            reservation.resource_id,
            reservation.date.isoformat(),
            reservation.time_range,
            reservation.status.value,
        )
        return reservation

    async def update_reservation(self, reservation: Reservation) -> Reservation:
        with _storage_errors(reservation):
            row = await self._session.get(ReservationModel, reservation.id)
            if row is None:
                raise ReservationNotFound(f"Reservation {reservation.id} not found")
            async with self._session.begin_nested():
                _apply(row, reservation)
                await self._session.flush()
        return reservation
