from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from farmdesk.api.deps import get_current_user
from farmdesk.core.exceptions import RecordNotFound
from farmdesk.db.database import get_db, get_session_factory
from farmdesk.permissions.constants import Action, AppModule
from farmdesk.permissions.dependencies import require_module_permission
from farmdesk.permissions.repository import get_role
from farmdesk.permissions.service import apply_permission_change
from farmdesk.sync import dispatcher
from farmdesk.sync.tables import FarmTable, RoleWrite
from farmdesk.sync.views import CurrentUser, RoleView

router = APIRouter()


class PermissionToggle(BaseModel):
    module: AppModule
    action: Action
    value: bool


@router.post(
    "/roles/{role_id}/permissions",
    response_model=RoleView,
    dependencies=[Depends(require_module_permission(AppModule.ADMIN, Action.EDIT))],
)
async def toggle_role_permission(
    role_id: int,
    toggle: PermissionToggle,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    role = await get_role(db, role_id)
    if role is None:
        raise RecordNotFound(f"Role #{role_id} not found.")

    permissions = apply_permission_change(role.permissions, toggle.module, toggle.action, toggle.value)
    await dispatcher.save(
        session_factory,
        user.username,
        FarmTable.ROLES,
        RoleWrite(id=role.id, name=role.name, permissions=permissions),
    )
    # The reloaded snapshot omits roles when the caller lacks admin.view
    return RoleView(id=role.id, name=role.name, permissions=permissions)
