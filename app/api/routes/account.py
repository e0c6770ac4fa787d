from typing import Optional

from fastapi import APIRouter

from app.api.dependencies import (
    AuthDep,
    InvitationServiceDep,
    PasswordResetServiceDep,
    TokenDep,
    UserServiceDep,
)
from app.core.logging import get_logger
from app.models import (
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileUpdate,
    RegistrationRequest,
    User,
    UserPublic,
)

logger = get_logger(__name__)

router = APIRouter(
    prefix="/account",
    tags=["account"],
)

RESET_REQUESTED_MESSAGE = (
    "If this email exists, you will receive a password reset link."
)


@router.post("/register", response_model=UserPublic, status_code=201)
async def register(
    token: TokenDep,
    service: InvitationServiceDep,
    request: Optional[RegistrationRequest] = None,
) -> User:
    """
    Accept the invitation addressed to the authenticated email.

    The token subject becomes the user id; role and profile come from the
    invitation, which is consumed.
    """
    logger.info(f"Registration attempt for subject {token.sub}")
    return await service.accept_invitation(token, request)


@router.get("/profile", response_model=UserPublic)
async def get_profile(auth: AuthDep, service: UserServiceDep) -> User:
    return await service.get_profile(auth)


@router.put("/profile", response_model=UserPublic)
async def update_profile(
    changes: ProfileUpdate,
    auth: AuthDep,
    service: UserServiceDep,
) -> User:
    return await service.update_profile(auth, changes)


@router.post("/password-reset")
async def request_password_reset(
    request: PasswordResetRequest,
    service: PasswordResetServiceDep,
) -> dict:
    # Same answer whether or not the email exists
    await service.request_reset(request.email)
    return {"message": RESET_REQUESTED_MESSAGE}


@router.post("/password-reset/confirm")
async def confirm_password_reset(
    request: PasswordResetConfirm,
    service: PasswordResetServiceDep,
) -> dict:
    user_id = await service.redeem(request.token)
    return {"message": "Reset token accepted", "user_id": user_id}
