"""Tests for booking validation, creation, and lifecycle endpoints."""

import uuid
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from coworking.scheduling.domain import ReservationStatus
from tests.factories import InMemoryReservationStore, make_reservation

pytestmark = pytest.mark.asyncio


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _payload(day: date, start: str = "12:00", end: str = "13:00", **overrides) -> dict:
    payload = {
        "resource_id": "verriere",
        "date": day.isoformat(),
        "start_time": start,
        "end_time": end,
        "guest_count": 4,
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# POST /api/v1/bookings/validate
# ---------------------------------------------------------------------------


class TestValidateBooking:
    async def test_valid_request(self, client: AsyncClient, monday: date) -> None:
        response = await client.post("/api/v1/bookings/validate", json=_payload(monday))
        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is True
        assert data["errors"] == []
        assert data["conflicts"] == []
        assert float(data["total_price"]) == 25.00

    async def test_interval_priced_without_duration(self, client: AsyncClient, monday: date) -> None:
        response = await client.post("/api/v1/bookings/validate", json=_payload(monday, "13:00", "15:00"))
        data = response.json()
        assert data["is_valid"] is True
        assert data["errors"] == []
        assert float(data["total_price"]) == 50.00

    async def test_declared_hourly_duration_is_reconciled(self, client: AsyncClient, monday: date) -> None:
        response = await client.post(
            "/api/v1/bookings/validate",
            json=_payload(monday, "13:00", "15:00", duration_value=1, duration_type="hour"),
        )
        assert [e["code"] for e in response.json()["errors"]] == ["DURATION_MISMATCH"]

    async def test_reports_conflicts(
        self, client: AsyncClient, store: InMemoryReservationStore, monday: date
    ) -> None:
        existing = await store.add_reservation(make_reservation(monday, "10:00", "12:00"))
        response = await client.post(
            "/api/v1/bookings/validate",
            json=_payload(monday, "11:00", "12:30", duration_value=1.5),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is False
        assert [e["code"] for e in data["errors"]] == ["SCHEDULING_CONFLICT"]
        (conflict,) = data["conflicts"]
        assert conflict["reservation_id"] == str(existing.id)
        assert conflict["overlap_start"] == "11:00"
        assert conflict["overlap_end"] == "12:00"

    async def test_reports_every_issue(self, client: AsyncClient, sunday: date) -> None:
        response = await client.post(
            "/api/v1/bookings/validate",
            json=_payload(sunday, "12:00", "25:00", guest_count=12),
        )
        data = response.json()
        assert {e["code"] for e in data["errors"]} == {"CAPACITY_EXCEEDED", "INVALID_TIME_FORMAT"}

    async def test_unknown_resource(self, client: AsyncClient, monday: date) -> None:
        response = await client.post("/api/v1/bookings/validate", json=_payload(monday, resource_id="nowhere"))
        assert response.status_code == 200
        assert [e["code"] for e in response.json()["errors"]] == ["RESOURCE_NOT_FOUND"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"guest_count": 0},
            {"guest_count": 21},
            {"duration_value": 13},
            {"duration_type": "month", "duration_value": 13},
            {"duration_type": "year"},
        ],
    )
    async def test_request_bounds(self, client: AsyncClient, monday: date, overrides: dict) -> None:
        response = await client.post("/api/v1/bookings/validate", json=_payload(monday, **overrides))
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# POST /api/v1/bookings
# ---------------------------------------------------------------------------


class TestCreateBooking:
    async def test_create_onsite(
        self, client: AsyncClient, store: InMemoryReservationStore, monday: date
    ) -> None:
        response = await client.post("/api/v1/bookings", json=_payload(monday, notes="Projector please"))
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["payment_method"] == "onsite"
        assert float(data["total_price"]) == 25.00
        assert data["notes"] == "Projector please"
        assert data["can_be_cancelled"] is True
        assert data["can_be_modified"] is True
        assert uuid.UUID(data["id"]) in store.reservations

    async def test_create_stores_interval_duration(self, client: AsyncClient, monday: date) -> None:
        response = await client.post("/api/v1/bookings", json=_payload(monday, "14:00", "15:30"))
        assert response.status_code == 201
        data = response.json()
        assert data["duration_type"] == "hour"
        assert float(data["duration_value"]) == 1.5
        assert float(data["total_price"]) == 37.50

    async def test_create_card_awaits_payment(self, client: AsyncClient, monday: date) -> None:
        response = await client.post("/api/v1/bookings", json=_payload(monday, payment_method="card"))
        assert response.status_code == 201
        assert response.json()["status"] == "payment_pending"

    async def test_conflict_only_is_409(self, client: AsyncClient, monday: date) -> None:
        first = await client.post("/api/v1/bookings", json=_payload(monday))
        assert first.status_code == 201

        second = await client.post("/api/v1/bookings", json=_payload(monday))
        assert second.status_code == 409
        assert second.json()["detail"]["errors"][0]["code"] == "SCHEDULING_CONFLICT"

    async def test_adjacent_bookings_are_accepted(self, client: AsyncClient, monday: date) -> None:
        assert (await client.post("/api/v1/bookings", json=_payload(monday, "10:00", "11:00"))).status_code == 201
        assert (await client.post("/api/v1/bookings", json=_payload(monday, "11:00", "12:00"))).status_code == 201

    async def test_invalid_request_is_400(self, client: AsyncClient, monday: date) -> None:
        response = await client.post("/api/v1/bookings", json=_payload(monday, "07:00", "08:00"))
        assert response.status_code == 400
        codes = [e["code"] for e in response.json()["detail"]["errors"]]
        assert codes == ["OUTSIDE_OPENING_HOURS"]

    async def test_storage_conflict_is_409(
        self, client: AsyncClient, store: InMemoryReservationStore, monday: date
    ) -> None:
        """A concurrent insert that slips past validation is caught by the store."""
        original = store.find_reservations

        async def stale_read(*args, **kwargs):
            return []

        await store.add_reservation(make_reservation(monday, "12:00", "13:00"))
        store.find_reservations = stale_read  # type: ignore[method-assign]
        try:
            response = await client.post("/api/v1/bookings", json=_payload(monday))
        finally:
            store.find_reservations = original  # type: ignore[method-assign]

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "SCHEDULING_CONFLICT"


# ---------------------------------------------------------------------------
# GET / PUT /api/v1/bookings/{id}
# ---------------------------------------------------------------------------


class TestGetAndModifyBooking:
    async def test_get(self, client: AsyncClient, monday: date) -> None:
        created = (await client.post("/api/v1/bookings", json=_payload(monday))).json()
        response = await client.get(f"/api/v1/bookings/{created['id']}")
        assert response.status_code == 200
        assert response.json()["start_time"] == "12:00"

    async def test_get_not_found(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/bookings/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "RESERVATION_NOT_FOUND"

    async def test_modify_reprices_and_ignores_itself(self, client: AsyncClient, monday: date) -> None:
        created = (await client.post("/api/v1/bookings", json=_payload(monday))).json()

        response = await client.put(
            f"/api/v1/bookings/{created['id']}",
            json={"start_time": "12:00", "end_time": "14:00", "duration_value": 2},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["end_time"] == "14:00"
        assert float(data["total_price"]) == 50.00

    async def test_modify_into_conflict(self, client: AsyncClient, monday: date) -> None:
        await client.post("/api/v1/bookings", json=_payload(monday, "14:00", "15:00"))
        created = (await client.post("/api/v1/bookings", json=_payload(monday))).json()

        response = await client.put(
            f"/api/v1/bookings/{created['id']}",
            json={"start_time": "13:30", "end_time": "14:30"},
        )
        assert response.status_code == 409

    async def test_modify_times_rebills_interval(self, client: AsyncClient, monday: date) -> None:
        created = (await client.post("/api/v1/bookings", json=_payload(monday))).json()

        response = await client.put(
            f"/api/v1/bookings/{created['id']}",
            json={"start_time": "12:00", "end_time": "15:00"},
        )
        assert response.status_code == 200
        data = response.json()
        assert float(data["duration_value"]) == 3.0
        assert float(data["total_price"]) == 75.00

    async def test_modify_duration_beyond_maximum(
        self, client: AsyncClient, store: InMemoryReservationStore, monday: date
    ) -> None:
        created = (
            await client.post(
                "/api/v1/bookings",
                json=_payload(monday, "08:00", "20:00", duration_value=1, duration_type="day"),
            )
        ).json()
        assert float(created["total_price"]) == 180.00

        response = await client.put(f"/api/v1/bookings/{created['id']}", json={"duration_value": 100})
        assert response.status_code == 400
        assert [e["code"] for e in response.json()["detail"]["errors"]] == ["INVALID_DURATION"]

        stored = store.reservations[uuid.UUID(created["id"])]
        assert stored.duration_value == 1
        assert stored.total_price == 180

    async def test_confirmed_cannot_be_modified(
        self, client: AsyncClient, store: InMemoryReservationStore, monday: date
    ) -> None:
        existing = await store.add_reservation(make_reservation(monday, "10:00", "12:00"))
        response = await client.put(f"/api/v1/bookings/{existing.id}", json={"guest_count": 3})
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "INVALID_STATUS_TRANSITION"


# ---------------------------------------------------------------------------
# POST /api/v1/bookings/{id}/confirm|cancel|complete
# ---------------------------------------------------------------------------


class TestBookingLifecycle:
    async def test_confirm_then_cancel(
        self, client: AsyncClient, store: InMemoryReservationStore, monday: date
    ) -> None:
        created = (await client.post("/api/v1/bookings", json=_payload(monday, payment_method="paypal"))).json()

        confirmed = await client.post(f"/api/v1/bookings/{created['id']}/confirm")
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "confirmed"

        cancelled = await client.post(f"/api/v1/bookings/{created['id']}/cancel")
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"
        assert store.reservations[uuid.UUID(created["id"])].status is ReservationStatus.CANCELLED

    async def test_cancelled_slot_can_be_rebooked(self, client: AsyncClient, monday: date) -> None:
        created = (await client.post("/api/v1/bookings", json=_payload(monday))).json()
        await client.post(f"/api/v1/bookings/{created['id']}/cancel")

        response = await client.post("/api/v1/bookings", json=_payload(monday))
        assert response.status_code == 201

    async def test_cancel_twice(self, client: AsyncClient, monday: date) -> None:
        created = (await client.post("/api/v1/bookings", json=_payload(monday))).json()
        await client.post(f"/api/v1/bookings/{created['id']}/cancel")

        response = await client.post(f"/api/v1/bookings/{created['id']}/cancel")
        assert response.status_code == 409

    async def test_complete_elapsed_reservation(
        self, client: AsyncClient, store: InMemoryReservationStore
    ) -> None:
        past = await store.add_reservation(
            make_reservation(date.today() - timedelta(days=3), "10:00", "12:00")
        )
        response = await client.post(f"/api/v1/bookings/{past.id}/complete")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["can_be_cancelled"] is False

    async def test_complete_future_reservation(
        self, client: AsyncClient, store: InMemoryReservationStore, monday: date
    ) -> None:
        future = await store.add_reservation(make_reservation(monday, "10:00", "12:00"))
        response = await client.post(f"/api/v1/bookings/{future.id}/complete")
        assert response.status_code == 409
