"""Reservation model: time-boxed claims on a resource for one day."""

import datetime
import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import ExcludeConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coworking.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

OVERLAP_CONSTRAINT_NAME = "ex_reservations_no_overlap"


class ReservationModel(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A reservation of a resource between two wall-clock times on one date."""

    __tablename__ = "reservations"

    resource_id: Mapped[str] = mapped_column(
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    # Minute offsets mirror start_time/end_time so the overlap guard can use int4range.
    start_minute: Mapped[int] = mapped_column(Integer, nullable=False)
    end_minute: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_value: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    duration_type: Mapped[str] = mapped_column(String(10), nullable=False)  # hour, day, week, month
    guest_count: Mapped[int] = mapped_column(Integer, default=1)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default="pending",
        index=True,
    )  # pending, confirmed, cancelled, completed, payment_pending
    payment_method: Mapped[str] = mapped_column(String(10), default="onsite")  # onsite, card, paypal
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    resource: Mapped["ResourceModel"] = relationship(back_populates="reservations", lazy="noload")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        Index("ix_reservations_slot_lookup", "resource_id", "date", "start_time", "end_time"),
        Index("ix_reservations_availability", "resource_id", "date", "status"),
        CheckConstraint("start_minute < end_minute", name="start_before_end"),
        CheckConstraint("guest_count >= 1", name="positive_guest_count"),
    )

    def __repr__(self) -> str:
        return (
            f"<ReservationModel(id={self.id}, resource_id={self.resource_id!r}, "
            f"date={self.date}, {self.start_time}-{self.end_time}, status={self.status})>"
        )


# No two active reservations of a resource may overlap on the same date.
# Requires the btree_gist extension; only emitted on PostgreSQL.
_table = ReservationModel.__table__
_table.append_constraint(
    ExcludeConstraint(
        (_table.c.resource_id, "="),
        (_table.c.date, "="),
        (func.int4range(_table.c.start_minute, _table.c.end_minute), "&&"),
        name=OVERLAP_CONSTRAINT_NAME,
        using="gist",
        where=_table.c.status.in_(["pending", "confirmed"]),
    ).ddl_if(dialect="postgresql")
)
