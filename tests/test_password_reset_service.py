"""Tests for password reset token issuance and redemption."""

import pytest

from app.core.exceptions import InvalidResetToken
from app.core.password_reset_service import PasswordResetService
from tests.factories import make_user


@pytest.fixture
def service(store, clock):
    return PasswordResetService(store, clock, ttl_minutes=60)


async def test_request_issues_token_for_active_user(service, seeded_store, clock):
    token = await service.request_reset("alice@company.com")

    assert token is not None
    assert token.user_id == "alice"
    assert len(token.token) == 64
    assert token.used is False
    assert (token.expires_at - clock.now()).total_seconds() == 3600


async def test_request_for_unknown_email_is_silent(service, store):
    assert await service.request_reset("ghost@company.com") is None
    assert store.reset_tokens == {}


async def test_request_for_inactive_user_is_silent(service, store):
    await store.create_user(make_user("gone", is_active=False))
    assert await service.request_reset("gone@company.com") is None


async def test_tokens_are_unique(service, seeded_store):
    first = await service.request_reset("alice@company.com")
    second = await service.request_reset("alice@company.com")
    assert first.token != second.token


async def test_redeem_is_single_use(service, seeded_store):
    token = await service.request_reset("alice@company.com")

    assert await service.redeem(token.token) == "alice"
    with pytest.raises(InvalidResetToken):
        await service.redeem(token.token)


async def test_expired_token_is_rejected(service, seeded_store, clock):
    token = await service.request_reset("alice@company.com")
    clock.advance(minutes=60)

    with pytest.raises(InvalidResetToken):
        await service.redeem(token.token)


async def test_unknown_token_is_rejected(service):
    with pytest.raises(InvalidResetToken):
        await service.redeem("deadbeef")
