"""Seed the database with the three default coworking spaces.

- places: open café seating on the ground floor, 12 seats
- verriere: private glass-roofed meeting room, 8 seats, closed on Sundays
- etage: quiet first-floor work area, 15 seats

Idempotent: spaces that already exist are left untouched unless ``--reset``
is passed, in which case they (and their reservations) are replaced.

Run:
    python -m scripts.seed_data [--reset]
"""

import asyncio
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from coworking.database import async_session_factory, engine
from coworking.models.reservation import ReservationModel
from coworking.models.resource import ResourceModel

logger = logging.getLogger("scripts.seed_data")

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------


def _week(weekdays: tuple[str, str], saturday: dict, sunday: dict) -> dict:
    open_, close = weekdays
    hours = {
        day: {"open": open_, "close": close}
        for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
    }
    hours["saturday"] = saturday
    hours["sunday"] = sunday
    return hours


SPACES = [
    {
        "id": "places",
        "name": "Places du café",
        "location": "Rez-de-chaussée - Zone café",
        "description": (
            "Open, friendly seating in the heart of the café, with direct access "
            "to drinks and snacks."
        ),
        "capacity": 12,
        "price_per_hour": Decimal("8.00"),
        "price_per_day": Decimal("45.00"),
        "price_per_week": Decimal("250.00"),
        "price_per_month": Decimal("900.00"),
        "opening_hours": _week(
            ("09:00", "20:00"),
            saturday={"open": "10:00", "close": "20:00"},
            sunday={"open": "10:00", "close": "20:00"},
        ),
    },
    {
        "id": "verriere",
        "name": "Salle Verrière",
        "location": "Rez-de-chaussée - Salle privée",
        "description": (
            "A bright private meeting room under a glass roof, equipped for "
            "presentations and team meetings."
        ),
        "capacity": 8,
        "price_per_hour": Decimal("25.00"),
        "price_per_day": Decimal("180.00"),
        "price_per_week": Decimal("1000.00"),
        "price_per_month": Decimal("3500.00"),
        "opening_hours": _week(
            ("08:00", "20:00"),
            saturday={"open": "10:00", "close": "18:00"},
            sunday={"closed": True},
        ),
    },
    {
        "id": "etage",
        "name": "Zone Silencieuse - Étage",
        "location": "1er étage - Zone calme",
        "description": (
            "Individual desks in a calm, studious environment for work that "
            "needs concentration."
        ),
        "capacity": 15,
        "price_per_hour": Decimal("12.00"),
        "price_per_day": Decimal("65.00"),
        "price_per_week": Decimal("350.00"),
        "price_per_month": Decimal("1200.00"),
        "opening_hours": _week(
            ("07:00", "22:00"),
            saturday={"open": "08:00", "close": "20:00"},
            sunday={"open": "10:00", "close": "20:00"},
        ),
    },
]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed(reset: bool = False) -> None:
    """Insert the default spaces that are not present yet."""
    space_ids = [space["id"] for space in SPACES]

    async with async_session_factory() as session:
        if reset:
            logger.warning("Resetting default spaces and their reservations: %s", ", ".join(space_ids))
            await session.execute(delete(ReservationModel).where(ReservationModel.resource_id.in_(space_ids)))
            await session.execute(delete(ResourceModel).where(ResourceModel.id.in_(space_ids)))
            await session.flush()

        result = await session.execute(select(ResourceModel.id).where(ResourceModel.id.in_(space_ids)))
        existing = set(result.scalars().all())

        created = 0
        for space_data in SPACES:
            if space_data["id"] in existing:
                logger.info("Space %s already exists, skipping", space_data["id"])
                continue
            session.add(ResourceModel(available=True, **space_data))
            created += 1
            logger.info(
                "Created space %s (%s, capacity %d, %s/hour)",
                space_data["id"],
                space_data["name"],
                space_data["capacity"],
                space_data["price_per_hour"],
            )

        await session.commit()

    await engine.dispose()
    logger.info("Seed complete: %d created, %d already present", created, len(existing))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(seed(reset="--reset" in sys.argv[1:]))
