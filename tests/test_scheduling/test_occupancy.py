"""Tests for occupancy statistics and the multi-day report."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from coworking.errors import ResourceNotFound
from coworking.scheduling.domain import ReservationStatus
from coworking.scheduling.occupancy import compute_occupancy, occupancy_report, occupancy_stats
from coworking.scheduling.slots import slots_for_resource
from tests.factories import InMemoryReservationStore, make_reservation, make_verriere


class TestComputeOccupancy:
    def test_rate_and_revenue(self, monday: date) -> None:
        resource = make_verriere()
        reservations = [
            make_reservation(monday, "10:00", "12:00", total_price=Decimal("50.00")),
            make_reservation(monday, "14:00", "15:00", status=ReservationStatus.PENDING, total_price=Decimal("25.00")),
            make_reservation(monday, "16:00", "17:00", status=ReservationStatus.COMPLETED, total_price=Decimal("25.00")),
        ]
        slots = slots_for_resource(resource, monday, reservations, 60)
        stats = compute_occupancy(resource, monday, slots, reservations)

        assert stats.total_slots == 12
        # completed reservations no longer block a slot
        assert stats.occupied_slots == 3
        assert stats.occupancy_rate == pytest.approx(25.0)
        # pending is not revenue yet
        assert stats.revenue == Decimal("75.00")

    def test_closed_day_has_zero_rate(self, sunday: date) -> None:
        resource = make_verriere()
        stats = compute_occupancy(resource, sunday, [], [])
        assert stats.total_slots == 0
        assert stats.occupancy_rate == 0.0
        assert stats.revenue == Decimal("0.00")


class TestOccupancyStats:
    async def test_reads_from_store(self, store: InMemoryReservationStore, monday: date) -> None:
        await store.add_reservation(make_reservation(monday, "08:00", "14:00", total_price=Decimal("150.00")))
        await store.add_reservation(
            make_reservation(monday, "14:00", "16:00", status=ReservationStatus.CANCELLED, total_price=Decimal("50.00"))
        )

        stats = await occupancy_stats(store, "verriere", monday)
        assert stats.resource_name == "Salle Verrière"
        assert stats.occupied_slots == 6
        assert stats.occupancy_rate == pytest.approx(50.0)
        assert stats.revenue == Decimal("150.00")

    async def test_unknown_resource(self, store: InMemoryReservationStore, monday: date) -> None:
        with pytest.raises(ResourceNotFound):
            await occupancy_stats(store, "nowhere", monday)


class TestOccupancyReport:
    async def test_defaults_to_active_resources(self, store: InMemoryReservationStore, monday: date) -> None:
        report = await occupancy_report(store, monday, monday + timedelta(days=1))
        # archive is inactive; places and verriere, two days each, ordered by resource then date
        assert [(s.resource_id, s.date) for s in report] == [
            ("places", monday),
            ("places", monday + timedelta(days=1)),
            ("verriere", monday),
            ("verriere", monday + timedelta(days=1)),
        ]

    async def test_skips_unknown_ids(self, store: InMemoryReservationStore, monday: date) -> None:
        report = await occupancy_report(store, monday, monday, ["verriere", "nowhere"])
        assert [s.resource_id for s in report] == ["verriere"]

    async def test_reversed_range_is_empty(self, store: InMemoryReservationStore, monday: date) -> None:
        assert await occupancy_report(store, monday, monday - timedelta(days=1)) == []
