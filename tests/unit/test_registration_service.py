"""Tests for self-service sign-up."""

import pytest
from sqlalchemy.exc import IntegrityError

from src.siteline.core.exceptions import EmailAlreadyExists
from src.siteline.core.security import verify_password
from src.siteline.models import Profile, User
from src.siteline.repositories import ProfileRepository, UserRepository
from src.siteline.schemas.auth import SignupRequest
from src.siteline.services.registration_service import RegistrationService
from tests.factories import DEFAULT_TEST_PASSWORD, UserFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def service(session) -> RegistrationService:
    return RegistrationService(UserRepository(session), ProfileRepository(session), session)


def _request(**overrides) -> SignupRequest:
    fields = {
        "email": "New.Hire@Example.com",
        "password": DEFAULT_TEST_PASSWORD,
        "full_name": "  Sam Steel ",
        "role": "contractor",
        "company": "Steelworks",
    }
    return SignupRequest(**{**fields, **overrides})


async def test_creates_user_and_profile_with_same_id(session, stub, service):
    stub(UserRepository, "get_by_email", return_value=None)

    user, profile = await service.signup(_request())

    assert isinstance(user, User) and isinstance(profile, Profile)
    assert profile.id == user.id
    assert user.email == profile.email == "new.hire@example.com"
    assert verify_password(DEFAULT_TEST_PASSWORD, user.hashed_password)
    assert profile.full_name == "Sam Steel"
    assert profile.role == "contractor"
    assert profile.notification_preferences == {"push": True, "email": True}
    assert session.add.call_count == 2
    session.commit.assert_awaited_once()


async def test_duplicate_email(session, stub, service):
    stub(UserRepository, "get_by_email", return_value=UserFactory.build())

    with pytest.raises(EmailAlreadyExists):
        await service.signup(_request())

    session.add.assert_not_called()
    session.rollback.assert_awaited_once()


async def test_unique_index_race(session, stub, service):
    stub(UserRepository, "get_by_email", return_value=None)
    session.commit.side_effect = IntegrityError("INSERT", {}, Exception("users_email_key"))

    with pytest.raises(EmailAlreadyExists):
        await service.signup(_request())

    session.rollback.assert_awaited_once()
