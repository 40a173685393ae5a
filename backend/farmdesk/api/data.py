from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

from farmdesk.api.deps import ensure_permission, get_current_user, get_snapshot
from farmdesk.db.database import get_session_factory
from farmdesk.permissions.constants import Action
from farmdesk.sync import dispatcher
from farmdesk.sync.tables import FarmTable, get_spec
from farmdesk.sync.views import CurrentUser, FarmSnapshot

router = APIRouter()


@router.get("", response_model=FarmSnapshot)
async def load_all(snapshot: FarmSnapshot = Depends(get_snapshot)):
    return snapshot


@router.post("/{table}", response_model=FarmSnapshot)
async def save_record(
    table: FarmTable,
    record: dict[str, Any] = Body(...),
    user: CurrentUser = Depends(get_current_user),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    # create vs edit depends on whether the id is already stored
    return await dispatcher.save(
        session_factory, user.username, table, record, permissions=user.permissions,
    )


@router.delete("/{table}/{record_id}", response_model=FarmSnapshot)
async def delete_record(
    table: FarmTable,
    record_id: int,
    user: CurrentUser = Depends(get_current_user),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    ensure_permission(user, get_spec(table).module, Action.DELETE)
    return await dispatcher.delete(session_factory, user.username, table, record_id)
