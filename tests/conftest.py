"""Shared test configuration and fixtures.

The API is exercised without a database: ``get_store`` is overridden with an
in-memory ``ReservationStore`` that mirrors the storage contract, including
the overlap guard that rejects a second active reservation on the same slot.
"""

from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from coworking.api.deps import get_store
from coworking.main import app
from coworking.repositories.cache import CachedResourceStore, ResourceCache
from coworking.scheduling.domain import Resource
from tests.factories import InMemoryReservationStore, make_places, make_verriere, upcoming

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def verriere() -> Resource:
    return make_verriere()


@pytest.fixture
def monday() -> date:
    return upcoming(0)


@pytest.fixture
def sunday() -> date:
    return upcoming(6)


@pytest.fixture
def store(verriere: Resource) -> InMemoryReservationStore:
    """Store holding the verriere, the café places, and an inactive archive room."""
    archive = make_verriere(id="archive", name="Ancienne salle", active=False)
    return InMemoryReservationStore([verriere, make_places(), archive])


@pytest_asyncio.fixture
async def client(store: InMemoryReservationStore) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the in-memory store."""

    async def override_get_store() -> CachedResourceStore:
        return CachedResourceStore(store, ResourceCache())

    app.dependency_overrides[get_store] = override_get_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()
