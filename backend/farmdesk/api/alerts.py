from fastapi import APIRouter, Depends

from farmdesk.api.deps import ensure_permission, get_snapshot
from farmdesk.permissions.constants import Action, AppModule
from farmdesk.services.alerts import derive_alerts
from farmdesk.sync.views import Alert, FarmSnapshot

router = APIRouter()


@router.get("", response_model=list[Alert])
async def list_alerts(snapshot: FarmSnapshot = Depends(get_snapshot)):
    ensure_permission(snapshot.current_user, AppModule.DASHBOARD, Action.VIEW)
    return derive_alerts(snapshot.inventory_items, snapshot.crops)
