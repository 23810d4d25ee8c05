"""Tests for occupancy analytics endpoints."""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from httpx import AsyncClient

from coworking.scheduling.domain import ReservationStatus
from tests.factories import InMemoryReservationStore, make_reservation

pytestmark = pytest.mark.asyncio


class TestResourceOccupancy:
    async def test_single_day(
        self, client: AsyncClient, store: InMemoryReservationStore, monday: date
    ) -> None:
        await store.add_reservation(make_reservation(monday, "08:00", "12:00", total_price=Decimal("100.00")))
        await store.add_reservation(
            make_reservation(monday, "12:00", "13:00", status=ReservationStatus.PENDING, total_price=Decimal("25.00"))
        )

        response = await client.get(
            "/api/v1/analytics/occupancy/verriere", params={"date": monday.isoformat()}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_slots"] == 12
        assert data["occupied_slots"] == 5
        assert data["occupancy_rate"] == 41.67
        assert float(data["revenue"]) == 100.00

    async def test_no_data(self, client: AsyncClient, monday: date) -> None:
        data = (
            await client.get("/api/v1/analytics/occupancy/verriere", params={"date": monday.isoformat()})
        ).json()
        assert data["occupied_slots"] == 0
        assert data["occupancy_rate"] == 0.0

    async def test_unknown_resource(self, client: AsyncClient, monday: date) -> None:
        response = await client.get(
            "/api/v1/analytics/occupancy/nowhere", params={"date": monday.isoformat()}
        )
        assert response.status_code == 404


class TestOccupancyReport:
    async def test_weighted_overall_rate(
        self, client: AsyncClient, store: InMemoryReservationStore, monday: date
    ) -> None:
        await store.add_reservation(make_reservation(monday, "08:00", "20:00", total_price=Decimal("180.00")))
        sunday = monday + timedelta(days=6)

        response = await client.get(
            "/api/v1/analytics/occupancy",
            params={"start": monday.isoformat(), "end": sunday.isoformat(), "resource_id": "verriere"},
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 7
        # 5 weekdays x 12 slots + saturday 8 slots + closed sunday
        assert data["overall_occupancy_rate"] == round(12 / 68 * 100, 2)
        assert float(data["total_revenue"]) == 180.00

    async def test_all_active_resources_by_default(self, client: AsyncClient, monday: date) -> None:
        response = await client.get(
            "/api/v1/analytics/occupancy",
            params={"start": monday.isoformat(), "end": monday.isoformat()},
        )
        assert {item["resource_id"] for item in response.json()["items"]} == {"places", "verriere"}

    async def test_reversed_period(self, client: AsyncClient, monday: date) -> None:
        response = await client.get(
            "/api/v1/analytics/occupancy",
            params={"start": monday.isoformat(), "end": (monday - timedelta(days=1)).isoformat()},
        )
        assert response.status_code == 400

    async def test_period_too_long(self, client: AsyncClient, monday: date) -> None:
        response = await client.get(
            "/api/v1/analytics/occupancy",
            params={"start": monday.isoformat(), "end": (monday + timedelta(days=200)).isoformat()},
        )
        assert response.status_code == 400
