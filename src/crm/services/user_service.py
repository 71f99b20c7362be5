"""User management service."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.core.logging import get_logger
from src.crm.core.security import hash_password
from src.crm.models import User, UserRole
from src.crm.models.base import utc_now
from src.crm.repositories import UserFilters, UserRepository
from src.crm.schemas.common import model_values
from src.crm.schemas.pagination import PageParams
from src.crm.schemas.user import UserCreate, UserUpdate

logger = get_logger(__name__)

LAST_ADMIN_MESSAGE = "Cannot remove the last active admin"


class UserService:
    """User management service.

    Raises ValueError for rule violations (duplicate email, last admin) and
    PermissionError when the acting user may not perform the change.
    """

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        return await self.user_repo.get_by_id(user_id)

    async def list_users(
        self, filters: UserFilters, params: PageParams
    ) -> tuple[list[User], int]:
        return await self.user_repo.list_all(filters, params)

    async def create_user(self, data: UserCreate) -> User:
        """Create a user with any role (admin operation)."""
        if await self.user_repo.exists_by_email(data.email):
            raise ValueError("User with this email already exists")

        values = model_values(data)
        password = values.pop("password")
        user = User(**values, hashed_password=hash_password(password))
        self.user_repo.add(user)
        await self._commit(user)
        logger.info("User created", user_id=str(user.id), role=user.role)
        return user

    async def update_user(self, user: User, data: UserUpdate, actor: User) -> User:
        """Apply a partial update on behalf of `actor`.

        Members and trainers may only edit their own profile and never their
        role or active flag. Passwords are changed through the auth endpoints.
        """
        is_admin = actor.role == UserRole.ADMIN.value
        if not is_admin and actor.id != user.id:
            raise PermissionError("Not authorized to update this user")

        update_data = model_values(data, exclude_unset=True)
        if not is_admin and ({"role", "is_active"} & update_data.keys()):
            raise PermissionError("Only admins can change role or account status")

        for field in ("first_name", "last_name", "email"):
            if field in update_data and update_data[field] is None:
                raise ValueError(f"{field} cannot be null")

        new_email = update_data.get("email")
        if new_email and new_email != user.email:
            if await self.user_repo.exists_by_email(new_email):
                raise ValueError("User with this email already exists")

        new_role = update_data.get("role")
        if (new_role is not None and new_role != UserRole.ADMIN) or (
            update_data.get("is_active") is False
        ):
            await self._ensure_not_last_admin(user)

        for field, value in update_data.items():
            if field in ("role", "membership_tier", "is_active") and value is None:
                continue
            setattr(user, field, value)

        user.updated_at = utc_now()
        await self._commit(user)
        logger.info("User updated", user_id=str(user.id), fields=sorted(update_data))
        return user

    async def set_active(self, user: User, is_active: bool | None) -> User:
        """Archive or restore a user; toggles when `is_active` is None."""
        target = (not user.is_active) if is_active is None else is_active
        if not target:
            await self._ensure_not_last_admin(user)

        user.is_active = target
        user.updated_at = utc_now()
        await self._commit(user)
        logger.info("User archived" if not target else "User restored", user_id=str(user.id))
        return user

    async def delete_user(self, user: User) -> None:
        """Hard-delete a user. Users still referenced by records must be archived instead."""
        await self._ensure_not_last_admin(user)
        try:
            await self.user_repo.delete(user)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ValueError(
                "User is referenced by lessons, events or payments; archive the user instead"
            ) from e
        except Exception:
            await self.session.rollback()
            raise
        logger.info("User deleted", user_id=str(user.id))

    async def _ensure_not_last_admin(self, user: User) -> None:
        """Reject removing the only active admin.

        Read-then-write without a lock: two concurrent removals of the last
        two admins can both pass.
        """
        if user.role != UserRole.ADMIN.value or not user.is_active:
            return
        if await self.user_repo.count_active_admins(exclude_id=user.id) == 0:
            logger.warning("Last admin guard triggered", user_id=str(user.id))
            raise ValueError(LAST_ADMIN_MESSAGE)

    async def _commit(self, user: User) -> None:
        try:
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as e:
            await self.session.rollback()
            raise ValueError("User with this email already exists") from e
        except Exception:
            await self.session.rollback()
            raise
