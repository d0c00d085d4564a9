"""Authentication dependencies - the identity gate and the profile resolver."""

from typing import Annotated

from fastapi import Depends, Header

from src.siteline.api.dependencies.db import DBSession
from src.siteline.models import Profile
from src.siteline.repositories import ProfileRepository, UserRepository
from src.siteline.services.identity_service import Identity, IdentityService
from src.siteline.services.profile_service import ProfileService


async def get_current_identity(
    session: DBSession,
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """Validate the bearer token. Raises Unauthorized (401)."""
    service = IdentityService(UserRepository(session), session)
    return await service.authenticate(authorization)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


async def get_current_profile(identity: CurrentIdentity) -> Profile:
    """Resolve the caller's profile and role fresh for this request."""
    session = identity.scope.session
    return await ProfileService(ProfileRepository(session), session).resolve(identity.user_id)


CurrentProfile = Annotated[Profile, Depends(get_current_profile)]
