"""
Work locations and geofence lookups.
"""

from app.core.clock import Clock, system_clock
from app.core.geofence import check_geofence
from app.core.logging import get_logger
from app.core.security import AuthContext, ensure_admin
from app.models import GeofenceResult, GeoLocation, WorkLocation, WorkLocationCreate
from app.repositories.base import RecordStore

logger = get_logger(__name__)


class LocationService:
    def __init__(self, store: RecordStore, clock: Clock = system_clock):
        self.store = store
        self.clock = clock

    async def list_work_locations(self) -> list[WorkLocation]:
        return await self.store.list_active_work_locations()

    async def create_work_location(
        self, auth: AuthContext, data: WorkLocationCreate
    ) -> WorkLocation:
        ensure_admin(auth)
        location = await self.store.create_work_location(
            WorkLocation(**data.model_dump(), created_at=self.clock.now())
        )
        logger.info(
            f"Work location {location.id} '{location.name}' created "
            f"(radius {location.radius}m)"
        )
        return location

    async def verify_location(self, point: GeoLocation) -> GeofenceResult:
        locations = await self.store.list_active_work_locations()
        return check_geofence(point, locations)
