"""Repositories for refresh and invite tokens."""

from sqlmodel import select

from src.siteline.models import InviteToken, RefreshToken
from src.siteline.models.base import utc_now
from src.siteline.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    model = RefreshToken

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        result = await self.session.execute(
            select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def get_valid_by_hash(
        self, token_hash: str, for_update: bool = False
    ) -> RefreshToken | None:
        """Non-revoked, unexpired token.

        Args:
            for_update: Lock the row so two concurrent refreshes cannot both rotate it.
        """
        query = select(RefreshToken).where(
            RefreshToken.token_hash == token_hash,
            RefreshToken.revoked == False,  # noqa: E712
            RefreshToken.expires_at > utc_now(),
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()


class InviteTokenRepository(BaseRepository[InviteToken]):
    model = InviteToken

    async def get_valid_by_hash(self, token_hash: str) -> InviteToken | None:
        result = await self.session.execute(
            select(InviteToken)
            .where(
                InviteToken.token_hash == token_hash,
                InviteToken.used == False,  # noqa: E712
                InviteToken.expires_at > utc_now(),
            )
            .with_for_update()
        )
        return result.scalar_one_or_none()
