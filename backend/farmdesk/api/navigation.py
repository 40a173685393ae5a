from typing import Optional

from fastapi import APIRouter, Depends

from farmdesk.api.deps import get_current_user
from farmdesk.permissions.constants import AppModule
from farmdesk.permissions.service import resolve_active_view, visible_modules
from farmdesk.sync.views import CamelModel, CurrentUser

router = APIRouter()


class NavigationResponse(CamelModel):
    modules: list[AppModule]
    active_view: Optional[AppModule] = None
    message: Optional[str] = None


@router.get("", response_model=NavigationResponse)
async def navigation(
    active: Optional[str] = None,
    user: CurrentUser = Depends(get_current_user),
):
    resolved = resolve_active_view(user.permissions, active)
    return NavigationResponse(
        modules=visible_modules(user.permissions),
        active_view=resolved.module,
        message=resolved.message,
    )
