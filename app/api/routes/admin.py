from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException

from app.api.dependencies import (
    AdminDep,
    InvitationServiceDep,
    StatisticsServiceDep,
    UserServiceDep,
)
from app.core.logging import get_logger
from app.models import (
    AttendanceStats,
    AttendanceWithUser,
    EmployeeInvitation,
    EmployeeUpdate,
    InvitationCreate,
    InvitationPublic,
    User,
    UserPublic,
)

logger = get_logger(__name__)

# Every route here requires the admin role (AdminDep)
router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


@router.get("/stats", response_model=AttendanceStats)
async def get_stats(
    auth: AdminDep,
    service: StatisticsServiceDep,
) -> AttendanceStats:
    """
    Today's workforce numbers: total employees, present, late arrivals and
    absent. Served from cache (flagged degraded) while the store is down.
    """
    logger.info(f"Admin {auth.user_id} accessed attendance stats")
    return await service.get_dashboard_stats(auth)


@router.get("/attendance", response_model=list[AttendanceWithUser])
async def list_attendance(
    auth: AdminDep,
    service: UserServiceDep,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[AttendanceWithUser]:
    """All attendance records with their owners, optionally within a date range."""
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=400,
            detail="start_date must not be after end_date",
        )
    return await service.list_attendance(auth, start_date, end_date)


@router.get("/employees", response_model=list[UserPublic])
async def list_employees(auth: AdminDep, service: UserServiceDep) -> list[User]:
    return await service.list_employees(auth)


@router.put("/employees/{user_id}", response_model=UserPublic)
async def update_employee(
    user_id: str,
    changes: EmployeeUpdate,
    auth: AdminDep,
    service: UserServiceDep,
) -> User:
    """Update role, department, profile fields or the active flag of a user."""
    return await service.update_employee(auth, user_id, changes)


@router.post("/invitations", response_model=InvitationPublic, status_code=201)
async def create_invitation(
    data: InvitationCreate,
    auth: AdminDep,
    service: InvitationServiceDep,
) -> EmployeeInvitation:
    return await service.create_invitation(auth, data)


@router.get("/invitations", response_model=list[InvitationPublic])
async def list_invitations(
    auth: AdminDep,
    service: InvitationServiceDep,
) -> list[EmployeeInvitation]:
    return await service.list_invitations(auth)


@router.delete("/invitations/{invitation_id}")
async def delete_invitation(
    invitation_id: str,
    auth: AdminDep,
    service: InvitationServiceDep,
) -> dict:
    await service.delete_invitation(auth, invitation_id)
    return {"message": "Invitation deleted successfully"}
