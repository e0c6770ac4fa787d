from fastapi import APIRouter

from app.api.dependencies import AdminDep, AuthDep, LocationServiceDep
from app.models import (
    GeofenceResult,
    GeoLocation,
    WorkLocation,
    WorkLocationCreate,
    WorkLocationPublic,
)

router = APIRouter(
    prefix="/locations",
    tags=["locations"],
)


@router.get("", response_model=list[WorkLocationPublic])
async def list_work_locations(
    auth: AuthDep,
    service: LocationServiceDep,
) -> list[WorkLocation]:
    """Active work locations."""
    return await service.list_work_locations()


@router.post("", response_model=WorkLocationPublic, status_code=201)
async def create_work_location(
    data: WorkLocationCreate,
    auth: AdminDep,
    service: LocationServiceDep,
) -> WorkLocation:
    return await service.create_work_location(auth, data)


@router.post("/verify", response_model=GeofenceResult)
async def verify_location(
    point: GeoLocation,
    auth: AuthDep,
    service: LocationServiceDep,
) -> GeofenceResult:
    """Check whether a point lies inside any active work location."""
    return await service.verify_location(point)
