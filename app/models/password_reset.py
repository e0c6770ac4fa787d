"""
Password reset token model and schemas.

A token is valid while it is unused and not expired; once used it stays used.
"""

import datetime as dt

from pydantic import EmailStr, field_validator
from sqlmodel import Field, SQLModel

from app.models.base import new_id, normalize_email


class PasswordResetToken(SQLModel, table=True):
    __tablename__ = "password_reset_tokens"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(index=True, foreign_key="users.id", max_length=255)
    token: str = Field(index=True, unique=True, max_length=128)
    expires_at: dt.datetime = Field(nullable=False)
    used: bool = Field(default=False)
    created_at: dt.datetime = Field(default_factory=dt.datetime.now, nullable=False)

    def is_valid(self, now: dt.datetime) -> bool:
        return not self.used and now < self.expires_at


class PasswordResetRequest(SQLModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return normalize_email(value)


class PasswordResetConfirm(SQLModel):
    token: str = Field(min_length=1, max_length=128)
