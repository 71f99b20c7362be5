"""Repository for User entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import col, select

from src.crm.models import User, UserRole
from src.crm.repositories.base import BaseRepository
from src.crm.schemas.pagination import PageParams


@dataclass
class UserFilters:
    role: UserRole | None = None
    is_active: bool | None = None
    search: str | None = None


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by (lower-cased) email address."""
        result = await self.session.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def list_all(self, filters: UserFilters, params: PageParams) -> tuple[list[User], int]:
        """List users newest first."""
        query = select(User)
        if filters.role is not None:
            query = query.where(User.role == filters.role.value)
        if filters.is_active is not None:
            query = query.where(User.is_active == filters.is_active)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(
                or_(
                    col(User.first_name).ilike(pattern),
                    col(User.last_name).ilike(pattern),
                    col(User.email).ilike(pattern),
                )
            )
        return await self.paginate(query, params, [col(User.created_at).desc()])

    async def count_active_admins(self, exclude_id: UUID | None = None) -> int:
        """Count active admins, optionally ignoring one user."""
        query = select(func.count()).select_from(User).where(
            User.role == UserRole.ADMIN.value,
            User.is_active == True,  # noqa: E712
        )
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def count_active_members(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(User).where(
                User.role == UserRole.MEMBER.value,
                User.is_active == True,  # noqa: E712
            )
        )
        return result.scalar_one()

    async def count_created_since(self, since: datetime, role: UserRole | None = None) -> int:
        query = select(func.count()).select_from(User).where(User.created_at >= since)
        if role is not None:
            query = query.where(User.role == role.value)
        result = await self.session.execute(query)
        return result.scalar_one()
