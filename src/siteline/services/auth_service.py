"""Authentication service - sign in, token refresh with rotation, sign out."""

import hmac
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.siteline.core.config import get_settings
from src.siteline.core.exceptions import DomainError, ProfileNotFound, Unauthorized
from src.siteline.core.logging import get_logger
from src.siteline.core.security import (
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
    dummy_password_hash,
    hash_token,
    verify_password,
)
from src.siteline.models import Profile, RefreshToken, User
from src.siteline.repositories import ProfileRepository, RefreshTokenRepository, UserRepository
from src.siteline.schemas.auth import SessionRead

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class SignedIn:
    user: User
    session: SessionRead
    profile: Profile


def issue_session(token_repo: RefreshTokenRepository, user_id: UUID) -> SessionRead:
    """Create an access/refresh pair and stage the refresh token row.

    The caller commits.
    """
    settings = get_settings()
    refresh_token, expires_at = create_refresh_token(user_id)
    token_repo.add(
        RefreshToken(user_id=user_id, token_hash=hash_token(refresh_token), expires_at=expires_at)
    )
    return SessionRead(
        access_token=create_access_token(user_id),
        refresh_token=refresh_token,
        expires_in=settings.access_token_expire_minutes * 60,
    )


class AuthService:
    def __init__(
        self,
        user_repo: UserRepository,
        profile_repo: ProfileRepository,
        token_repo: RefreshTokenRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.profile_repo = profile_repo
        self.token_repo = token_repo
        self.session = session

    async def login(self, email: str, password: str) -> SignedIn:
        """Verify credentials and open a session.

        Raises:
            Unauthorized: Unknown email, wrong password or inactive user.
                The message is the same in every case.
        """
        try:
            user = await self.user_repo.get_by_email(email)

            # Always verify so response timing does not reveal whether the email exists
            password_hash = user.hashed_password if user else dummy_password_hash()
            password_valid = verify_password(password, password_hash)

            if user is None or not password_valid or not user.is_active:
                logger.info("Login failed")
                raise Unauthorized(INVALID_CREDENTIALS)

            profile = await self.profile_repo.get_by_id(user.id)
            if profile is None:
                raise ProfileNotFound(user.id)

            session = issue_session(self.token_repo, user.id)
            await self.session.commit()
        except DomainError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Login error", error=str(e))
            raise

        logger.info("User logged in", user_id=str(user.id))
        return SignedIn(user=user, session=session, profile=profile)

    async def refresh(self, refresh_token: str) -> SessionRead:
        """Rotate a refresh token: revoke the presented one, issue a new pair.

        Raises:
            Unauthorized: The token is malformed, expired, revoked or unknown.
        """
        payload = decode_token(refresh_token)
        if payload is None or payload.get("type") != TokenType.REFRESH:
            raise Unauthorized("Invalid refresh token")

        try:
            user_id = UUID(str(payload.get("sub")))
        except ValueError as e:
            raise Unauthorized("Invalid refresh token") from e

        token_hash = hash_token(refresh_token)
        try:
            # FOR UPDATE so parallel refreshes of one token cannot both succeed
            db_token = await self.token_repo.get_valid_by_hash(token_hash, for_update=True)
            if db_token is None or not hmac.compare_digest(token_hash, db_token.token_hash):
                raise Unauthorized("Invalid refresh token")
            if db_token.user_id != user_id:
                raise Unauthorized("Invalid refresh token")

            user = await self.user_repo.get_by_id(user_id)
            if user is None or not user.is_active:
                raise Unauthorized("User not found or inactive")

            db_token.revoked = True
            session = issue_session(self.token_repo, user_id)
            await self.session.commit()
            return session
        except DomainError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Token refresh error", error=str(e))
            raise

    async def logout(self, refresh_token: str) -> bool:
        """Revoke a refresh token. Returns False if it was not found."""
        try:
            token_hash = hash_token(refresh_token)
            db_token = await self.token_repo.get_by_hash(token_hash)
            if db_token is None or not hmac.compare_digest(token_hash, db_token.token_hash):
                return False

            db_token.revoked = True
            await self.session.commit()
            return True
        except Exception:
            await self.session.rollback()
            raise
