"""Profile/role resolution and self-service profile management."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.siteline.core.exceptions import ProfileNotFound
from src.siteline.core.logging import bind_user_context, get_logger
from src.siteline.models import Profile
from src.siteline.models.base import utc_now
from src.siteline.repositories import ProfileRepository
from src.siteline.schemas.profile import ProfileUpdate
from src.siteline.services.base import rollback_on_error

logger = get_logger(__name__)


class ProfileService:
    def __init__(self, profile_repo: ProfileRepository, session: AsyncSession):
        self.profile_repo = profile_repo
        self.session = session

    async def resolve(self, user_id: UUID) -> Profile:
        """Load the caller's profile. Read fresh on every request, never cached.

        Raises:
            ProfileNotFound: Every user has a profile, so absence is a
                data-integrity failure.
        """
        profile = await self.profile_repo.get_by_id(user_id)
        if profile is None:
            logger.error("Profile missing for authenticated user", user_id=str(user_id))
            raise ProfileNotFound(user_id)
        bind_user_context(user_id, role=profile.role)
        return profile

    async def update_me(self, profile: Profile, data: ProfileUpdate) -> Profile:
        changes = data.model_dump(exclude_unset=True)
        if changes.get("full_name", ...) is None:
            changes.pop("full_name")
        if "notification_preferences" in changes:
            prefs = changes.pop("notification_preferences")
            if prefs is not None:
                # Reassign so the JSON column is seen as dirty
                profile.notification_preferences = {**profile.notification_preferences, **prefs}

        async with rollback_on_error(self.session, "update profile"):
            for field, value in changes.items():
                setattr(profile, field, value)
            profile.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(profile)

        logger.info("Profile updated", fields=sorted(changes))
        return profile

    async def directory(
        self, search: str | None = None, role: str | None = None, limit: int = 100
    ) -> list[Profile]:
        """Profiles for member pickers. Every authenticated caller may read them."""
        return await self.profile_repo.list_profiles(search=search, role=role, limit=limit)
