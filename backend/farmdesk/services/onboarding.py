"""
Sign-up provisioning.

Every new auth identity gets a placeholder employee record and a user
profile. The very first identity in the system becomes Admin, everyone
after that starts as Worker.
"""
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdesk.core.config import logger
from farmdesk.core.exceptions import ProfileError
from farmdesk.core.security import get_password_hash
from farmdesk.db.models import AuthIdentity, Employee, User
from farmdesk.permissions.repository import get_role_by_name
from farmdesk.permissions.role_map import ADMIN_ROLE, WORKER_ROLE

PENDING_FIRST_NAME = "New User"
PENDING_LAST_NAME = "(Pending Setup)"
PENDING_POSITION = "Awaiting Setup"


async def get_identity(db: AsyncSession, email: str):
    result = await db.execute(select(AuthIdentity).where(AuthIdentity.email == email))
    return result.scalar_one_or_none()


async def provision_profile(db: AsyncSession, identity: AuthIdentity) -> User:
    """Employee + user rows for a freshly created identity (flushed, not committed)."""
    count = await db.execute(select(func.count()).select_from(AuthIdentity))
    role_name = ADMIN_ROLE if count.scalar_one() == 1 else WORKER_ROLE

    role = await get_role_by_name(db, role_name)
    if role is None:
        raise ProfileError(f"Default role '{role_name}' is missing; seed the roles first.")

    employee = Employee(
        first_name=PENDING_FIRST_NAME,
        last_name=PENDING_LAST_NAME,
        email=identity.email,
        position=PENDING_POSITION,
        start_date=date.today(),
    )
    db.add(employee)
    await db.flush()

    user = User(username=identity.email, employee_id=employee.id, role_id=role.id)
    db.add(user)
    await db.flush()

    logger.info(f"[Onboarding] Provisioned {identity.email} as {role_name} (employee {employee.id})")
    return user


async def register_identity(db: AsyncSession, email: str, password: str) -> User:
    identity = AuthIdentity(email=email, hashed_password=get_password_hash(password))
    db.add(identity)
    await db.flush()
    return await provision_profile(db, identity)
