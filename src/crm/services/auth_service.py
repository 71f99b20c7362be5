"""Authentication service - registration, login and password changes."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.core.logging import get_logger
from src.crm.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    hash_password,
    verify_password,
)
from src.crm.models import User, UserRole
from src.crm.models.base import utc_now
from src.crm.repositories import UserRepository
from src.crm.schemas.auth import RegisterRequest
from src.crm.schemas.common import model_values

logger = get_logger(__name__)


class AuthService:
    """Issues access tokens for users.

    Self-registration always creates a `member`; staff accounts are created
    by an admin through the users API or the `create-admin` command.
    """

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(user.id, user.role)

    async def register(self, data: RegisterRequest) -> tuple[str, User]:
        """Create a member account and return (token, user).

        Raises:
            ValueError: If the email is already registered.
        """
        if await self.user_repo.exists_by_email(data.email):
            raise ValueError("User with this email already exists")

        values = model_values(data)
        password = values.pop("password")
        user = User(**values, role=UserRole.MEMBER.value, hashed_password=hash_password(password))
        self.user_repo.add(user)

        try:
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as e:
            # Concurrent registration with the same email
            await self.session.rollback()
            raise ValueError("User with this email already exists") from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User registered", user_id=str(user.id))
        return self.issue_token(user), user

    async def authenticate(self, email: str, password: str) -> tuple[str, User] | None:
        """Check credentials and return (token, user), or None when they do not match.

        Raises:
            ValueError: If the credentials are valid but the account is deactivated.
        """
        user = await self.user_repo.get_by_email(email)

        # Always verify a hash so response time does not reveal unknown emails
        password_hash = user.hashed_password if user else DUMMY_PASSWORD_HASH
        password_valid = verify_password(password, password_hash)

        if user is None or not password_valid:
            logger.info("Login failed")
            return None

        if not user.is_active:
            raise ValueError("Account is deactivated")

        logger.info("User logged in", user_id=str(user.id))
        return self.issue_token(user), user

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.hashed_password):
            raise ValueError("Current password is incorrect")

        user.hashed_password = hash_password(new_password)
        user.updated_at = utc_now()
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Password changed", user_id=str(user.id))
