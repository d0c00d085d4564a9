"""User invitations - admins and project managers onboard people by email."""

import asyncio
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.siteline.core.authorization import can_invite_users, require
from src.siteline.core.config import get_settings
from src.siteline.core.exceptions import EmailAlreadyExists, ProfileNotFound, ValidationError
from src.siteline.core.logging import get_logger
from src.siteline.core.notifications import send_invite_email
from src.siteline.core.security import generate_url_token, hash_password, hash_token
from src.siteline.models import InviteToken, Profile, User
from src.siteline.models.base import utc_now
from src.siteline.repositories import (
    InviteTokenRepository,
    ProfileRepository,
    RefreshTokenRepository,
    UserRepository,
)
from src.siteline.schemas.profile import InviteUserRequest
from src.siteline.services.auth_service import SignedIn, issue_session
from src.siteline.services.base import rollback_on_error

logger = get_logger(__name__)

INVALID_INVITE = "Invalid or expired invite"


class InviteService:
    def __init__(
        self,
        user_repo: UserRepository,
        profile_repo: ProfileRepository,
        invite_repo: InviteTokenRepository,
        token_repo: RefreshTokenRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.profile_repo = profile_repo
        self.invite_repo = invite_repo
        self.token_repo = token_repo
        self.session = session

    async def invite(self, inviter: Profile, data: InviteUserRequest) -> Profile:
        """Create a password-less account and email a set-password link.

        The email is sent after commit and is best-effort: a failed send is
        logged and the invite stays valid.

        Raises:
            Forbidden: Inviter is neither admin nor project manager.
            EmailAlreadyExists: An account with that email exists.
        """
        require(can_invite_users(inviter.role))
        settings = get_settings()
        email = data.email.lower().strip()
        token = generate_url_token()

        async with rollback_on_error(self.session, "invite user"):
            if await self.user_repo.get_by_email(email) is not None:
                raise EmailAlreadyExists()

            user = User(email=email)
            self.user_repo.add(user)
            profile = Profile(
                id=user.id,
                email=email,
                full_name=data.full_name,
                role=data.role.value,
                company=data.company,
                phone=data.phone,
            )
            self.profile_repo.add(profile)
            self.invite_repo.add(
                InviteToken(
                    user_id=user.id,
                    invited_by=inviter.id,
                    token_hash=hash_token(token),
                    expires_at=utc_now() + timedelta(days=settings.invite_expire_days),
                )
            )

            try:
                await self.session.commit()
            except IntegrityError as e:
                raise EmailAlreadyExists() from e
            await self.session.refresh(profile)

        sent = await asyncio.to_thread(
            send_invite_email, email, token, profile.full_name, inviter.full_name
        )
        logger.info(
            "User invited",
            invited_user_id=str(profile.id),
            invited_by=str(inviter.id),
            role=profile.role,
            email_sent=sent,
        )
        return profile

    async def accept_invite(self, token: str, password: str) -> SignedIn:
        """Set the invited user's password and sign them in.

        Raises:
            ValidationError: Token unknown, used or expired.
        """
        async with rollback_on_error(self.session, "accept invite"):
            invite = await self.invite_repo.get_valid_by_hash(hash_token(token))
            if invite is None:
                raise ValidationError(INVALID_INVITE)

            user = await self.user_repo.get_by_id(invite.user_id)
            if user is None or not user.is_active:
                raise ValidationError(INVALID_INVITE)
            profile = await self.profile_repo.get_by_id(user.id)
            if profile is None:
                raise ProfileNotFound(user.id)

            now = utc_now()
            user.hashed_password = hash_password(password)
            user.updated_at = now
            invite.used = True
            invite.used_at = now
            session = issue_session(self.token_repo, user.id)
            await self.session.commit()

        logger.info("Invite accepted", user_id=str(user.id))
        return SignedIn(user=user, session=session, profile=profile)
