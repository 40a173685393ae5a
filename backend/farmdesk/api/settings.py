from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

from farmdesk.api.deps import ensure_permission, get_current_user
from farmdesk.db.database import get_session_factory
from farmdesk.permissions.constants import Action, AppModule
from farmdesk.sync import dispatcher
from farmdesk.sync.tables import FarmSettingsWrite, FarmTable
from farmdesk.sync.views import CurrentUser, FarmInfo

router = APIRouter()


@router.put("/farm", response_model=FarmInfo)
async def save_farm_info(
    info: FarmInfo,
    user: CurrentUser = Depends(get_current_user),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    ensure_permission(user, AppModule.SETTINGS, Action.EDIT)
    snapshot = await dispatcher.save(
        session_factory, user.username, FarmTable.FARM_SETTINGS, FarmSettingsWrite(info=info),
    )
    return snapshot.farm_info
