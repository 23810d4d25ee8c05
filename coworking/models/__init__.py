"""SQLAlchemy models for the coworking reservation service.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from coworking.models.reservation import ReservationModel
from coworking.models.resource import ResourceModel

__all__ = [
    "ReservationModel",
    "ResourceModel",
]
