"""Test helper functions for common request patterns."""

from datetime import datetime

from src.crm.core.security import create_access_token
from src.crm.models import User


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for `user`, minted directly instead of going through login."""
    token = create_access_token(subject=user.id, role=user.role)
    return {"Authorization": f"Bearer {token}"}


def iso(value: datetime) -> str:
    """Serialize a naive UTC datetime the way a client would send it."""
    return value.replace(microsecond=0).isoformat()
