"""Repositories for User and Profile entities."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import select

from src.siteline.models import Profile, User
from src.siteline.repositories.base import LIKE_ESCAPE, BaseRepository, contains_pattern


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower().strip())
        )
        return result.scalar_one_or_none()


class ProfileRepository(BaseRepository[Profile]):
    """Profiles are readable by every authenticated caller."""

    model = Profile

    async def get_by_email(self, email: str) -> Profile | None:
        result = await self.session.execute(
            select(Profile).where(func.lower(Profile.email) == email.lower().strip())
        )
        return result.scalar_one_or_none()

    async def get_many(self, ids: Iterable[UUID | None]) -> dict[UUID, Profile]:
        """Profiles keyed by id. Unknown and None ids are skipped."""
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return {}
        result = await self.session.execute(
            select(Profile).where(Profile.id.in_(wanted))  # type: ignore[attr-defined]
        )
        return {profile.id: profile for profile in result.scalars().all()}

    async def list_profiles(
        self, search: str | None = None, role: str | None = None, limit: int = 100
    ) -> list[Profile]:
        query = select(Profile)
        if role:
            query = query.where(Profile.role == role)
        if search:
            pattern = contains_pattern(search)
            query = query.where(
                or_(
                    Profile.full_name.ilike(pattern, escape=LIKE_ESCAPE),  # type: ignore[attr-defined]
                    Profile.email.ilike(pattern, escape=LIKE_ESCAPE),  # type: ignore[attr-defined]
                )
            )
        result = await self.session.execute(
            query.order_by(Profile.full_name).limit(limit)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())
