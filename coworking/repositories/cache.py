"""Bounded, TTL-backed cache of resources in front of a reservation store.

The cache is an object owned by whoever builds the store (the FastAPI
dependency, a test), never a module-level singleton. Reservations are never
cached: availability must always reflect the latest writes.
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import date

from cachetools import TTLCache

from coworking.repositories.base import ReservationStore
from coworking.scheduling.domain import Reservation, ReservationStatus, Resource

logger = logging.getLogger(__name__)


class ResourceCache:
    """TTL cache of ``Resource`` objects keyed by id."""

    def __init__(self, maxsize: int = 256, ttl: float = 300, timer=None) -> None:
        kwargs = {"timer": timer} if timer is not None else {}
        self._resources: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, **kwargs)
        self._listings: TTLCache = TTLCache(maxsize=2, ttl=ttl, **kwargs)

    def get(self, resource_id: str) -> Resource | None:
        return self._resources.get(resource_id)

    def put(self, resource: Resource) -> None:
        self._resources[resource.id] = resource

    def get_listing(self, active_only: bool) -> list[Resource] | None:
        return self._listings.get(active_only)

    def put_listing(self, active_only: bool, resources: list[Resource]) -> None:
        self._listings[active_only] = list(resources)
        for resource in resources:
            self.put(resource)

    def invalidate(self, resource_id: str | None = None) -> None:
        """Drop one resource (and every listing), or everything when no id is given."""
        logger.debug("Invalidating resource cache entry %s", resource_id or "*")
        if resource_id is None:
            self._resources.clear()
        else:
            self._resources.pop(resource_id, None)
        self._listings.clear()

    def __len__(self) -> int:
        return len(self._resources)


class CachedResourceStore:
    """Reservation store decorator serving resource lookups from a cache."""

    def __init__(self, store: ReservationStore, cache: ResourceCache) -> None:
        self._store = store
        self._cache = cache

    async def get_resource(self, resource_id: str) -> Resource | None:
        resource = self._cache.get(resource_id)
        if resource is not None:
            return resource

        resource = await self._store.get_resource(resource_id)
        if resource is not None:
            self._cache.put(resource)
        return resource

    async def list_resources(self, active_only: bool = True) -> list[Resource]:
        resources = self._cache.get_listing(active_only)
        if resources is None:
            resources = await self._store.list_resources(active_only=active_only)
            self._cache.put_listing(active_only, resources)
        return list(resources)

    async def find_reservations(
        self,
        resource_id: str,
        start_day: date,
        end_day: date,
        statuses: Iterable[ReservationStatus],
    ) -> list[Reservation]:
        return await self._store.find_reservations(resource_id, start_day, end_day, statuses)

    async def get_reservation(self, reservation_id: uuid.UUID) -> Reservation | None:
        return await self._store.get_reservation(reservation_id)

    async def add_reservation(self, reservation: Reservation) -> Reservation:
        return await self._store.add_reservation(reservation)

    async def update_reservation(self, reservation: Reservation) -> Reservation:
        return await self._store.update_reservation(reservation)
