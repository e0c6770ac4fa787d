"""
Employee invitation lifecycle.

Admins invite people by email with a role and profile. The invitation is
consumed exactly once when the invited identity registers, becoming a User.
At most one live invitation exists per email; an expired one is replaced.
"""

from datetime import timedelta
from typing import Optional

from app.core.clock import Clock, system_clock
from app.core.config import settings
from app.core.events import (
    EmployeeInvitedEvent,
    EmployeeRegisteredEvent,
    EventType,
    create_event,
)
from app.core.exceptions import (
    InvitationAlreadyExists,
    InvitationExpired,
    InvitationNotFound,
    RecordConflict,
    RecordNotFound,
    UserAlreadyExists,
)
from app.core.kafka import publish_event
from app.core.logging import get_logger
from app.core.security import AuthContext, TokenData, ensure_admin
from app.core.topics import KafkaTopics
from app.models import (
    EmployeeInvitation,
    InvitationCreate,
    RegistrationRequest,
    User,
    UserRole,
)
from app.models.base import normalize_email
from app.repositories.base import RecordStore

logger = get_logger(__name__)


class InvitationService:
    def __init__(
        self,
        store: RecordStore,
        clock: Clock = system_clock,
        ttl_days: Optional[int] = None,
    ):
        self.store = store
        self.clock = clock
        self.ttl = timedelta(days=ttl_days or settings.INVITATION_TTL_DAYS)

    async def create_invitation(
        self, auth: AuthContext, data: InvitationCreate
    ) -> EmployeeInvitation:
        ensure_admin(auth)
        return await self._create(data, invited_by=auth.user_id)

    async def _create(
        self, data: InvitationCreate, invited_by: Optional[str]
    ) -> EmployeeInvitation:
        now = self.clock.now()

        if await self.store.get_user_by_email(data.email):
            raise UserAlreadyExists(f"A user with email {data.email} already exists")

        existing = await self.store.get_invitation_by_email(data.email)
        if existing is not None:
            if existing.expires_at > now:
                raise InvitationAlreadyExists()
            logger.info(f"Replacing expired invitation {existing.id} for {data.email}")
            await self.store.delete_invitation(existing.id)

        invitation = EmployeeInvitation(
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            role=data.role.value,
            department=data.department,
            position=data.position,
            phone=data.phone,
            hire_date=data.hire_date,
            invited_by=invited_by,
            created_at=now,
            expires_at=now + self.ttl,
        )
        try:
            invitation = await self.store.create_invitation(invitation)
        except RecordConflict:
            raise InvitationAlreadyExists() from None

        logger.info(f"Invitation {invitation.id} created for {invitation.email}")
        event = create_event(
            EventType.EMPLOYEE_INVITED,
            EmployeeInvitedEvent(
                invitation_id=invitation.id,
                email=invitation.email,
                first_name=invitation.first_name,
                last_name=invitation.last_name,
                role=invitation.role,
                department=invitation.department,
                invited_by=invited_by,
                expires_at=invitation.expires_at,
            ),
            actor_user_id=invited_by,
        )
        await publish_event(KafkaTopics.NOTIFICATION_INVITATION, event, key=invitation.email)
        return invitation

    async def list_invitations(self, auth: AuthContext) -> list[EmployeeInvitation]:
        ensure_admin(auth)
        return await self.store.list_invitations()

    async def delete_invitation(self, auth: AuthContext, invitation_id: str) -> None:
        ensure_admin(auth)
        if not await self.store.delete_invitation(invitation_id):
            raise RecordNotFound("Invitation not found")
        logger.info(f"Invitation {invitation_id} deleted by {auth.user_id}")

    async def accept_invitation(
        self,
        identity: TokenData,
        registration: Optional[RegistrationRequest] = None,
    ) -> User:
        """
        Turn the caller's invitation into a User.

        The identity comes from the auth provider: its subject becomes the user
        id and its email selects the invitation.
        """
        if not identity.email:
            raise InvitationNotFound("Authenticated identity carries no email")
        email = identity.email

        if await self.store.get_user(identity.sub) or await self.store.get_user_by_email(
            email
        ):
            raise UserAlreadyExists()

        invitation = await self.store.get_invitation_by_email(email)
        if invitation is None:
            raise InvitationNotFound()

        now = self.clock.now()
        if invitation.expires_at <= now:
            logger.info(f"Rejected expired invitation {invitation.id} for {email}")
            raise InvitationExpired()

        registration = registration or RegistrationRequest()
        user = User(
            id=identity.sub,
            email=email,
            first_name=registration.first_name or invitation.first_name,
            last_name=registration.last_name or invitation.last_name,
            role=invitation.role,
            department=invitation.department,
            position=invitation.position,
            phone=invitation.phone,
            hire_date=invitation.hire_date or now.date(),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        try:
            user = await self.store.create_user(user)
        except RecordConflict:
            raise UserAlreadyExists() from None

        if not await self.store.delete_invitation(invitation.id):
            logger.warning(f"Invitation {invitation.id} was already consumed")

        logger.info(f"User {user.id} registered from invitation as {user.role}")
        event = create_event(
            EventType.EMPLOYEE_REGISTERED,
            EmployeeRegisteredEvent(
                user_id=user.id,
                email=user.email,
                role=user.role,
                department=user.department,
            ),
            actor_user_id=user.id,
        )
        await publish_event(KafkaTopics.EMPLOYEE_REGISTERED, event, key=user.id)
        return user

    async def ensure_bootstrap_admin(self, email: str) -> Optional[EmployeeInvitation]:
        """Invite the first administrator unless they already exist or are invited."""
        email = normalize_email(email)
        if await self.store.get_user_by_email(email):
            return None
        if await self.store.get_invitation_by_email(email):
            return None
        logger.info(f"Creating bootstrap admin invitation for {email}")
        return await self._create(
            InvitationCreate(
                email=email,
                first_name="System",
                last_name="Administrator",
                role=UserRole.ADMIN,
            ),
            invited_by=None,
        )
