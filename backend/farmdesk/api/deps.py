from fastapi import Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

from farmdesk.core.security import get_current_identity
from farmdesk.db.database import get_session_factory
from farmdesk.permissions.constants import Action, AppModule
from farmdesk.permissions.exceptions import PermissionDenied
from farmdesk.permissions.service import has_permission
from farmdesk.sync.loader import bootstrap, load_current_user
from farmdesk.sync.views import CurrentUser, FarmSnapshot


async def get_current_user(
    identity: dict = Depends(get_current_identity),
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> CurrentUser:
    """Profile + role permissions for the bearer token's identity."""
    return await load_current_user(session_factory, identity["email"])


async def get_snapshot(
    identity: dict = Depends(get_current_identity),
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> FarmSnapshot:
    return await bootstrap(session_factory, identity["email"])


def ensure_permission(user: CurrentUser, module: AppModule, action: Action) -> None:
    if not has_permission(user.permissions, module, action):
        raise PermissionDenied(f"{module.value}.{action.value}")
