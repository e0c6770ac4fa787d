"""
Tests for employee invitations and registration.
"""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from app.core.exceptions import (
    AccessDenied,
    InvitationAlreadyExists,
    InvitationExpired,
    InvitationNotFound,
    RecordNotFound,
    UserAlreadyExists,
)
from app.core.invitation_service import InvitationService
from app.core.security import TokenData
from app.models import InvitationCreate, RegistrationRequest, UserRole
from tests.factories import make_user


@pytest.fixture
def service(store, clock):
    return InvitationService(store, clock, ttl_days=7)


def _invite(email="carol@company.com", **kwargs) -> InvitationCreate:
    return InvitationCreate(
        email=email,
        first_name=kwargs.pop("first_name", "Carol"),
        last_name=kwargs.pop("last_name", "Nguyen"),
        **kwargs,
    )


async def test_admin_creates_invitation(service, admin, clock):
    invitation = await service.create_invitation(
        admin, _invite(department="Engineering", position="Developer")
    )

    assert invitation.email == "carol@company.com"
    assert invitation.role == UserRole.EMPLOYEE.value
    assert invitation.invited_by == "boss"
    assert invitation.expires_at == datetime(2024, 3, 11, 8, 30)


def test_invitation_email_is_normalized():
    assert _invite(email="Carol@Company.COM").email == "carol@company.com"


def test_invalid_email_is_rejected():
    with pytest.raises(ValidationError):
        _invite(email="not-an-email")


async def test_employee_cannot_invite(service, employee):
    with pytest.raises(AccessDenied):
        await service.create_invitation(employee, _invite())


async def test_duplicate_live_invitation_is_rejected(service, admin):
    await service.create_invitation(admin, _invite())
    with pytest.raises(InvitationAlreadyExists):
        await service.create_invitation(admin, _invite())


async def test_expired_invitation_is_replaced(service, store, admin, clock):
    first = await service.create_invitation(admin, _invite())
    clock.advance(days=8)

    second = await service.create_invitation(admin, _invite())

    assert second.id != first.id
    assert [i.id for i in await store.list_invitations()] == [second.id]


async def test_inviting_existing_user_is_rejected(service, store, admin):
    await store.create_user(make_user("carol", email="carol@company.com"))
    with pytest.raises(UserAlreadyExists):
        await service.create_invitation(admin, _invite())


async def test_accept_invitation_creates_user(service, store, admin, clock):
    await service.create_invitation(
        admin, _invite(role=UserRole.ADMIN, department="HR", hire_date=date(2024, 4, 1))
    )
    identity = TokenData(sub="idp|carol", email="carol@company.com")

    user = await service.accept_invitation(identity)

    assert user.id == "idp|carol"
    assert user.role == UserRole.ADMIN.value
    assert user.department == "HR"
    assert user.first_name == "Carol"
    assert user.hire_date == date(2024, 4, 1)
    assert user.is_active is True
    assert await store.get_invitation_by_email("carol@company.com") is None


async def test_accept_invitation_defaults_hire_date_and_applies_names(service, admin, clock):
    await service.create_invitation(admin, _invite())
    identity = TokenData(sub="carol", email="carol@company.com")

    user = await service.accept_invitation(
        identity, RegistrationRequest(first_name="Caroline")
    )

    assert user.first_name == "Caroline"
    assert user.last_name == "Nguyen"
    assert user.hire_date == clock.today()


async def test_accept_without_invitation_fails(service):
    with pytest.raises(InvitationNotFound):
        await service.accept_invitation(TokenData(sub="x", email="nobody@company.com"))


async def test_accept_without_email_claim_fails(service):
    with pytest.raises(InvitationNotFound):
        await service.accept_invitation(TokenData(sub="x"))


async def test_accept_expired_invitation_fails(service, store, admin, clock):
    await service.create_invitation(admin, _invite())
    clock.advance(days=7)

    with pytest.raises(InvitationExpired):
        await service.accept_invitation(TokenData(sub="carol", email="carol@company.com"))
    assert await store.get_user("carol") is None


async def test_accept_twice_fails(service, admin):
    await service.create_invitation(admin, _invite())
    identity = TokenData(sub="carol", email="carol@company.com")
    await service.accept_invitation(identity)

    with pytest.raises(UserAlreadyExists):
        await service.accept_invitation(identity)


async def test_delete_invitation(service, store, admin):
    invitation = await service.create_invitation(admin, _invite())

    await service.delete_invitation(admin, invitation.id)

    assert await store.list_invitations() == []
    with pytest.raises(RecordNotFound):
        await service.delete_invitation(admin, invitation.id)


async def test_bootstrap_admin_is_invited_once(service, store):
    invitation = await service.ensure_bootstrap_admin("Admin@Company.com")

    assert invitation.email == "admin@company.com"
    assert invitation.role == UserRole.ADMIN.value
    assert invitation.invited_by is None
    assert await service.ensure_bootstrap_admin("admin@company.com") is None
    assert len(await store.list_invitations()) == 1
