from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdesk.core.exceptions import ProfileError
from farmdesk.db.models import Role, User


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == email))
    return result.scalar_one_or_none()


async def get_role(db: AsyncSession, role_id: int) -> Optional[Role]:
    result = await db.execute(select(Role).where(Role.id == role_id))
    return result.scalar_one_or_none()


async def get_role_by_name(db: AsyncSession, name: str) -> Optional[Role]:
    result = await db.execute(select(Role).where(Role.name == name))
    return result.scalar_one_or_none()


async def resolve_profile(db: AsyncSession, email: str) -> tuple[User, Role]:
    """User by email, then its role by id. Either missing is fatal for the session."""
    user = await get_user_by_email(db, email)
    if user is None:
        raise ProfileError(f"No user profile found for {email}.")

    role = await get_role(db, user.role_id)
    if role is None:
        raise ProfileError(f"Role {user.role_id} for {email} does not exist.")

    return user, role
