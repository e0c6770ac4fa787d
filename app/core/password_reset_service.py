"""
Password reset tokens.

Tokens are random, single use and expire after a configured window. Delivery
of the reset link is left to the notification consumer of the published event;
setting the new credential belongs to the identity provider.
"""

import secrets
from datetime import timedelta
from typing import Optional

from app.core.clock import Clock, system_clock
from app.core.config import settings
from app.core.events import EventType, PasswordResetRequestedEvent, create_event
from app.core.exceptions import InvalidResetToken
from app.core.kafka import publish_event
from app.core.logging import get_logger
from app.core.topics import KafkaTopics
from app.models import PasswordResetToken
from app.repositories.base import RecordStore

logger = get_logger(__name__)


class PasswordResetService:
    def __init__(
        self,
        store: RecordStore,
        clock: Clock = system_clock,
        ttl_minutes: Optional[int] = None,
    ):
        self.store = store
        self.clock = clock
        self.ttl = timedelta(
            minutes=ttl_minutes or settings.PASSWORD_RESET_TOKEN_TTL_MINUTES
        )

    async def request_reset(self, email: str) -> Optional[PasswordResetToken]:
        """Issue a token; unknown or inactive emails are ignored without a trace."""
        user = await self.store.get_user_by_email(email)
        if user is None or not user.is_active:
            logger.info("Password reset requested for unknown or inactive email")
            return None

        now = self.clock.now()
        token = await self.store.create_reset_token(
            PasswordResetToken(
                user_id=user.id,
                token=secrets.token_hex(32),
                expires_at=now + self.ttl,
                used=False,
                created_at=now,
            )
        )
        logger.info(f"Password reset token {token.id} issued for user {user.id}")

        event = create_event(
            EventType.PASSWORD_RESET_REQUESTED,
            PasswordResetRequestedEvent(
                user_id=user.id,
                email=user.email,
                first_name=user.first_name,
                token=token.token,
                expires_at=token.expires_at,
            ),
        )
        await publish_event(KafkaTopics.NOTIFICATION_PASSWORD_RESET, event, key=user.id)
        return token

    async def redeem(self, token: str) -> str:
        """
        Consume a token and return the owning user id.

        Raises:
            InvalidResetToken: unknown, used or expired token
        """
        stored = await self.store.get_reset_token(token)
        if stored is None or not stored.is_valid(self.clock.now()):
            raise InvalidResetToken()
        if not await self.store.mark_reset_token_used(stored.id):
            raise InvalidResetToken()
        logger.info(f"Password reset token {stored.id} redeemed by user {stored.user_id}")
        return stored.user_id
