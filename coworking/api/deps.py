"""Shared API dependencies: single import point for all routers.

Re-exports the database session and builds the reservation store each
request works with::

    from coworking.api.deps import get_store
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from coworking.database import get_db
from coworking.repositories.base import ReservationStore
from coworking.repositories.cache import CachedResourceStore, ResourceCache
from coworking.repositories.sql import SqlReservationStore


def get_resource_cache(request: Request) -> ResourceCache:
    """Return the resource cache owned by the running application."""
    return request.app.state.resource_cache


async def get_store(
    db: AsyncSession = Depends(get_db),
    cache: ResourceCache = Depends(get_resource_cache),
) -> ReservationStore:
    """Reservation store bound to the request's session, with cached resources."""
    return CachedResourceStore(SqlReservationStore(db), cache)


__all__ = [
    "get_db",
    "get_resource_cache",
    "get_store",
]
