"""Tests for ProfileService: role resolution and self-service updates."""

import pytest
from structlog.contextvars import get_contextvars

from src.siteline.core.exceptions import ProfileNotFound
from src.siteline.repositories import ProfileRepository
from src.siteline.schemas.profile import ProfileUpdate
from src.siteline.services.profile_service import ProfileService
from tests.factories import ProfileFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def service(session) -> ProfileService:
    return ProfileService(ProfileRepository(session), session)


async def test_resolve_binds_role(stub, service):
    profile = ProfileFactory.contractor()
    stub(ProfileRepository, "get_by_id", return_value=profile)

    assert await service.resolve(profile.id) is profile
    assert get_contextvars()["user_role"] == "contractor"


async def test_resolve_missing_profile(stub, service):
    profile_id = ProfileFactory.worker().id
    stub(ProfileRepository, "get_by_id", return_value=None)

    with pytest.raises(ProfileNotFound) as exc_info:
        await service.resolve(profile_id)

    assert exc_info.value.user_id == profile_id
    assert exc_info.value.status_code == 500


async def test_update_merges_preferences(session, service):
    profile = ProfileFactory.worker(notification_preferences={"push": True, "email": True})

    updated = await service.update_me(
        profile,
        ProfileUpdate(company="Acme Concrete", notification_preferences={"email": False}),
    )

    assert updated.company == "Acme Concrete"
    assert updated.notification_preferences == {"push": True, "email": False}
    session.commit.assert_awaited_once()


async def test_update_ignores_null_full_name(service):
    profile = ProfileFactory.worker(full_name="Jo Builder")

    await service.update_me(profile, ProfileUpdate(full_name=None, phone="555-0101"))

    assert profile.full_name == "Jo Builder"
    assert profile.phone == "555-0101"


async def test_update_can_clear_optional_fields(service):
    profile = ProfileFactory.worker(company="Old Co")

    await service.update_me(profile, ProfileUpdate(company=None))

    assert profile.company is None


async def test_directory_passes_filters(stub, service):
    profiles = [ProfileFactory.contractor()]
    listing = stub(ProfileRepository, "list_profiles", return_value=profiles)

    assert await service.directory(search="cas", role="contractor") == profiles
    listing.assert_awaited_once_with(search="cas", role="contractor", limit=100)
