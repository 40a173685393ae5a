"""
Session bootstrap: resolve the caller's profile, then read every table.

Reads fan out with asyncio.gather, one session per table. The snapshot is
all-or-nothing: a single failed read aborts the load.
"""
import asyncio
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from farmdesk.core.exceptions import BulkLoadError
from farmdesk.core.logging import log_operation, sync_logger
from farmdesk.db.models import FarmSetting
from farmdesk.permissions.constants import Action
from farmdesk.permissions.repository import resolve_profile
from farmdesk.permissions.service import has_permission
from farmdesk.sync.mappers import map_current_user, map_farm_info, to_views
from farmdesk.sync.tables import LIST_TABLES, FarmTable, get_spec
from farmdesk.sync.views import CurrentUser, FarmSnapshot


async def load_current_user(session_factory: async_sessionmaker, email: str) -> CurrentUser:
    async with session_factory() as db:
        user, role = await resolve_profile(db, email)
        return map_current_user(user, role)


async def _read_table(
    session_factory: async_sessionmaker,
    table: FarmTable,
    permissions: dict,
) -> tuple[FarmTable, list]:
    spec = get_spec(table)
    # Tables the role cannot view read as empty, not as an error
    if not has_permission(permissions, spec.module, Action.VIEW):
        return table, []

    async with session_factory() as db:
        result = await db.execute(select(spec.model).order_by(*spec.order_by))
        return table, list(result.scalars().all())


async def _read_farm_info(session_factory: async_sessionmaker) -> Optional[dict[str, Any]]:
    async with session_factory() as db:
        row = await db.get(FarmSetting, 1)
        return row.info if row is not None else None


@log_operation("bootstrap", sync_logger)
async def bootstrap(session_factory: async_sessionmaker, email: str) -> FarmSnapshot:
    current_user = await load_current_user(session_factory, email)

    results = await asyncio.gather(
        *(_read_table(session_factory, t, current_user.permissions) for t in LIST_TABLES),
        _read_farm_info(session_factory),
        return_exceptions=True,
    )

    errors = [r for r in results if isinstance(r, BaseException)]
    if errors:
        for error in errors:
            sync_logger.error("Table read failed", error=error, user=email)
        raise BulkLoadError(len(errors), errors)

    *table_results, farm_info = results
    tables = {
        table.value: to_views(get_spec(table).view, rows)
        for table, rows in table_results
    }

    sync_logger.debug(
        f"Loaded snapshot for {email}",
        rows=sum(len(rows) for rows in tables.values()),
    )

    return FarmSnapshot(
        current_user=current_user,
        farm_info=map_farm_info(farm_info),
        **tables,
    )
