"""Registration service - self-service sign-up creating a user and profile."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.siteline.core.exceptions import EmailAlreadyExists
from src.siteline.core.logging import get_logger
from src.siteline.core.security import hash_password
from src.siteline.models import Profile, User
from src.siteline.repositories import ProfileRepository, UserRepository
from src.siteline.schemas.auth import SignupRequest
from src.siteline.services.base import rollback_on_error

logger = get_logger(__name__)


class RegistrationService:
    def __init__(
        self,
        user_repo: UserRepository,
        profile_repo: ProfileRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.profile_repo = profile_repo
        self.session = session

    async def signup(self, data: SignupRequest) -> tuple[User, Profile]:
        """Create the credentials record and its profile in one transaction.

        Raises:
            EmailAlreadyExists: The email is taken (checked up front and
                enforced by the unique index under races).
        """
        # Normalize email to lowercase to prevent case-sensitivity issues
        email = data.email.lower().strip()

        async with rollback_on_error(self.session, "register user"):
            if await self.user_repo.get_by_email(email) is not None:
                raise EmailAlreadyExists()

            user = User(email=email, hashed_password=hash_password(data.password))
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

            try:
                await self.session.commit()
            except IntegrityError as e:
                raise EmailAlreadyExists() from e

            await self.session.refresh(user)
            await self.session.refresh(profile)

        logger.info("User registered", user_id=str(user.id), role=profile.role)
        return user, profile
