from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farmdesk.core.security import get_current_identity
from farmdesk.db.database import get_db
from farmdesk.permissions.constants import Action, AppModule
from farmdesk.permissions.exceptions import PermissionDenied
from farmdesk.permissions.repository import resolve_profile
from farmdesk.permissions.service import has_permission


async def get_current_role_permissions(
    db: AsyncSession = Depends(get_db),
    identity: dict = Depends(get_current_identity),
) -> dict:
    """Permissions map of the caller's role, re-read on every request."""
    _, role = await resolve_profile(db, identity["email"])
    return role.permissions or {}


def require_module_permission(module: AppModule, action: Action):
    async def dependency(
        permissions: dict = Depends(get_current_role_permissions),
    ):
        if not has_permission(permissions, module, action):
            raise PermissionDenied(f"{module.value}.{action.value}")
        return True

    return dependency
