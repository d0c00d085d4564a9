"""Tests for AuthService: login, refresh token rotation and logout."""

import pytest

from src.siteline.core.exceptions import ProfileNotFound, Unauthorized
from src.siteline.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_token,
)
from src.siteline.models import RefreshToken
from src.siteline.repositories import ProfileRepository, RefreshTokenRepository, UserRepository
from src.siteline.services.auth_service import INVALID_CREDENTIALS, AuthService
from tests.factories import DEFAULT_TEST_PASSWORD, ProfileFactory, UserFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def service(session) -> AuthService:
    return AuthService(
        UserRepository(session),
        ProfileRepository(session),
        RefreshTokenRepository(session),
        session,
    )


def _stored(refresh_token: str, user_id) -> RefreshToken:
    _, expires_at = create_refresh_token(user_id)
    return RefreshToken(
        user_id=user_id, token_hash=hash_token(refresh_token), expires_at=expires_at
    )


class TestLogin:
    async def test_success_opens_session(self, session, stub, service):
        user = UserFactory.build()
        profile = ProfileFactory.project_manager(id=user.id, email=user.email)
        stub(UserRepository, "get_by_email", return_value=user)
        stub(ProfileRepository, "get_by_id", return_value=profile)

        signed_in = await service.login(user.email, DEFAULT_TEST_PASSWORD)

        assert signed_in.user is user
        assert signed_in.profile is profile
        assert decode_token(signed_in.session.access_token)["sub"] == str(user.id)
        (stored,) = [call.args[0] for call in session.add.call_args_list]
        assert isinstance(stored, RefreshToken)
        assert stored.user_id == user.id
        assert stored.token_hash == hash_token(signed_in.session.refresh_token)
        session.commit.assert_awaited_once()

    async def test_unknown_email(self, session, stub, service):
        stub(UserRepository, "get_by_email", return_value=None)

        with pytest.raises(Unauthorized, match=INVALID_CREDENTIALS):
            await service.login("nobody@example.com", DEFAULT_TEST_PASSWORD)

        session.add.assert_not_called()
        session.rollback.assert_awaited_once()

    async def test_wrong_password(self, stub, service):
        stub(UserRepository, "get_by_email", return_value=UserFactory.build())

        with pytest.raises(Unauthorized, match=INVALID_CREDENTIALS):
            await service.login("someone@example.com", "not-the-password")

    async def test_inactive_user_gets_same_message(self, stub, service):
        stub(UserRepository, "get_by_email", return_value=UserFactory.inactive())

        with pytest.raises(Unauthorized, match=INVALID_CREDENTIALS):
            await service.login("someone@example.com", DEFAULT_TEST_PASSWORD)

    async def test_invited_user_without_password(self, stub, service):
        stub(UserRepository, "get_by_email", return_value=UserFactory.invited())

        with pytest.raises(Unauthorized, match=INVALID_CREDENTIALS):
            await service.login("someone@example.com", DEFAULT_TEST_PASSWORD)

    async def test_missing_profile(self, session, stub, service):
        user = UserFactory.build()
        stub(UserRepository, "get_by_email", return_value=user)
        stub(ProfileRepository, "get_by_id", return_value=None)

        with pytest.raises(ProfileNotFound):
            await service.login(user.email, DEFAULT_TEST_PASSWORD)

        session.commit.assert_not_awaited()


class TestRefresh:
    async def test_rotates_token(self, session, stub, service):
        user = UserFactory.build()
        old_token, _ = create_refresh_token(user.id)
        stored = _stored(old_token, user.id)
        lookup = stub(RefreshTokenRepository, "get_valid_by_hash", return_value=stored)
        stub(UserRepository, "get_by_id", return_value=user)

        new_session = await service.refresh(old_token)

        lookup.assert_awaited_once_with(hash_token(old_token), for_update=True)
        assert stored.revoked is True
        assert new_session.refresh_token != old_token
        (issued,) = [call.args[0] for call in session.add.call_args_list]
        assert issued.token_hash == hash_token(new_session.refresh_token)
        session.commit.assert_awaited_once()

    async def test_access_token_is_rejected(self, stub, service):
        lookup = stub(RefreshTokenRepository, "get_valid_by_hash")

        with pytest.raises(Unauthorized, match="Invalid refresh token"):
            await service.refresh(create_access_token(UserFactory.build().id))

        lookup.assert_not_awaited()

    async def test_revoked_or_unknown_token(self, session, stub, service):
        token, _ = create_refresh_token(UserFactory.build().id)
        stub(RefreshTokenRepository, "get_valid_by_hash", return_value=None)

        with pytest.raises(Unauthorized):
            await service.refresh(token)

        session.rollback.assert_awaited_once()

    async def test_token_of_another_user(self, stub, service):
        token, _ = create_refresh_token(UserFactory.build().id)
        stub(
            RefreshTokenRepository,
            "get_valid_by_hash",
            return_value=_stored(token, UserFactory.build().id),
        )

        with pytest.raises(Unauthorized):
            await service.refresh(token)

    async def test_inactive_user(self, stub, service):
        user = UserFactory.inactive()
        token, _ = create_refresh_token(user.id)
        stored = _stored(token, user.id)
        stub(RefreshTokenRepository, "get_valid_by_hash", return_value=stored)
        stub(UserRepository, "get_by_id", return_value=user)

        with pytest.raises(Unauthorized, match="User not found or inactive"):
            await service.refresh(token)

        assert stored.revoked is False


class TestLogout:
    async def test_revokes_token(self, session, stub, service):
        user = UserFactory.build()
        token, _ = create_refresh_token(user.id)
        stored = _stored(token, user.id)
        stub(RefreshTokenRepository, "get_by_hash", return_value=stored)

        assert await service.logout(token) is True
        assert stored.revoked is True
        session.commit.assert_awaited_once()

    async def test_unknown_token(self, session, stub, service):
        stub(RefreshTokenRepository, "get_by_hash", return_value=None)

        assert await service.logout("not-a-token") is False
        session.commit.assert_not_awaited()
