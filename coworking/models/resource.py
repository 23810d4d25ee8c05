"""Resource model: bookable coworking spaces."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coworking.database import Base


class ResourceModel(Base):
    """A bookable space with capacity, unit prices, and weekly opening hours."""

    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # slug, e.g. "verriere"
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str | None] = mapped_column(String(200), default=None)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_hour: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price_per_week: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price_per_month: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    available: Mapped[bool] = mapped_column(Boolean, server_default="true", index=True)
    # {"monday": {"open": "08:00", "close": "20:00"}, "sunday": {"closed": true}, ...}
    opening_hours: Mapped[dict | None] = mapped_column(JSON, default=None)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    # Relationships
    reservations: Mapped[list["ReservationModel"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="resource", lazy="noload", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<ResourceModel(id={self.id!r}, name={self.name!r}, capacity={self.capacity})>"
