"""Identity gate - turns a bearer token into a caller identity."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.siteline.core.db import DataScope
from src.siteline.core.exceptions import Unauthorized
from src.siteline.core.logging import bind_user_context
from src.siteline.core.security import TokenType, decode_token
from src.siteline.models import User
from src.siteline.repositories import UserRepository


@dataclass(frozen=True)
class Identity:
    """The authenticated caller and a data handle scoped to them."""

    user: User
    scope: DataScope

    @property
    def user_id(self) -> UUID:
        return self.user.id


class IdentityService:
    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def authenticate(self, authorization: str | None) -> Identity:
        """Validate an ``Authorization: Bearer`` header value.

        Raises:
            Unauthorized: Header missing or malformed, token invalid or
                expired, or the user is unknown or inactive.
        """
        if not authorization or not authorization.startswith("Bearer "):
            raise Unauthorized("Missing or invalid authorization header")

        payload = decode_token(authorization[7:].strip())
        if payload is None:
            raise Unauthorized("Invalid or expired token")

        if payload.get("type") != TokenType.ACCESS:
            raise Unauthorized("Invalid token type")

        try:
            user_id = UUID(str(payload.get("sub")))
        except ValueError as e:
            raise Unauthorized("Invalid token payload") from e

        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise Unauthorized("User not found or inactive")

        bind_user_context(user.id, email=user.email)
        return Identity(user=user, scope=DataScope(self.session, viewer_id=user.id))
