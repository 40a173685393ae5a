"""
Generic save/delete over the closed table set.

Every mutation runs in its own transaction and is followed by a full reload
through farmdesk.sync.loader.bootstrap. Database errors are rolled back and
surfaced as MutationError with the backend's text.
"""
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError
from sqlalchemy import exists, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from farmdesk.core.exceptions import MutationError, ValidationFailure
from farmdesk.core.logging import sync_logger
from farmdesk.db import models
from farmdesk.permissions.constants import Action
from farmdesk.permissions.exceptions import PermissionDenied
from farmdesk.permissions.service import has_permission
from farmdesk.sync.loader import bootstrap, load_current_user
from farmdesk.sync.mappers import to_row
from farmdesk.sync.tables import FarmTable, SalesOrderWrite, WriteModel, get_spec
from farmdesk.sync.views import FarmSnapshot

# (column on the written record, table it must point at)
REFERENCES: dict[FarmTable, tuple[tuple[str, type], ...]] = {
    FarmTable.LEDGER_ENTRIES: (("crop_id", models.Crop),),
    FarmTable.PLOTS: (("current_crop_id", models.Crop),),
    FarmTable.ACTIVITY_LOGS: (("plot_id", models.Plot),),
    FarmTable.PAYROLLS: (("employee_id", models.Employee),),
    FarmTable.TIME_LOGS: (("employee_id", models.Employee),),
    FarmTable.LEAVE_REQUESTS: (("employee_id", models.Employee),),
    FarmTable.TASKS: (("employee_id", models.Employee),),
    FarmTable.SALES_ORDERS: (("customer_id", models.Customer),),
    FarmTable.USERS: (("employee_id", models.Employee), ("role_id", models.Role)),
}

CROP_IN_USE = "ไม่สามารถลบพืชผลนี้ได้ เนื่องจากมีการอ้างอิงในบัญชีฟาร์มหรือในแปลงเพาะปลูกแล้ว"
CUSTOMER_IN_USE = "ไม่สามารถลบลูกค้ารายนี้ได้ เนื่องจากมีคำสั่งซื้ออ้างอิงอยู่"
EMPLOYEE_IN_USE = "Cannot delete an employee with payroll or task records."
EMPLOYEE_IS_CALLER = "You cannot delete your own employee record."
ROLE_IN_USE = "Cannot delete a role that is assigned to users."


def _backend_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def validate_record(table: FarmTable, record: Union[Mapping[str, Any], WriteModel]) -> WriteModel:
    schema = get_spec(table).write_schema
    if isinstance(record, schema):
        return record
    try:
        return schema.model_validate(record)
    except ValidationError as e:
        raise ValidationFailure(_validation_message(e))


async def _row_exists(db: AsyncSession, model, record_id: int) -> bool:
    return await db.get(model, record_id) is not None


async def check_references(db: AsyncSession, table: FarmTable, record: WriteModel) -> None:
    for column, target in REFERENCES.get(table, ()):
        value = getattr(record, column)
        if value is not None and not await _row_exists(db, target, value):
            raise ValidationFailure(f"{column}: {target.__tablename__} #{value} does not exist")

    if isinstance(record, SalesOrderWrite):
        for item in record.items:
            if not await _row_exists(db, models.Crop, item.crop_id):
                raise ValidationFailure(f"items: crops #{item.crop_id} does not exist")


async def _any(db: AsyncSession, *clauses) -> bool:
    result = await db.execute(select(exists().where(*clauses)))
    return bool(result.scalar())


async def check_deletable(
    db: AsyncSession,
    table: FarmTable,
    record_id: int,
    caller_employee_id: Optional[int] = None,
) -> None:
    if table == FarmTable.CROPS:
        if await _any(db, models.LedgerEntry.crop_id == record_id) or await _any(
            db, models.Plot.current_crop_id == record_id
        ):
            raise ValidationFailure(CROP_IN_USE)
    elif table == FarmTable.CUSTOMERS:
        if await _any(db, models.SalesOrder.customer_id == record_id):
            raise ValidationFailure(CUSTOMER_IN_USE)
    elif table == FarmTable.EMPLOYEES:
        if caller_employee_id is not None and record_id == caller_employee_id:
            raise ValidationFailure(EMPLOYEE_IS_CALLER)
        if await _any(db, models.Payroll.employee_id == record_id) or await _any(
            db, models.Task.employee_id == record_id
        ):
            raise ValidationFailure(EMPLOYEE_IN_USE)
    elif table == FarmTable.ROLES:
        if await _any(db, models.User.role_id == record_id):
            raise ValidationFailure(ROLE_IN_USE)
    elif table == FarmTable.FARM_SETTINGS:
        raise ValidationFailure("Farm settings cannot be deleted.")


async def _sync_sequence(db: AsyncSession, model) -> None:
    # Explicit ids bypass the serial sequence on PostgreSQL
    if db.bind.dialect.name != "postgresql":
        return
    table = model.__tablename__
    await db.execute(
        text(
            f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
            f"(SELECT COALESCE(MAX(id), 1) FROM {table}))"
        )
    )


async def resolve_write_action(db: AsyncSession, table: FarmTable, record: WriteModel) -> Action:
    """EDIT when the record's id is already stored, CREATE otherwise (upsert inserts unknown ids)."""
    if record.id is None:
        return Action.CREATE
    if await _row_exists(db, get_spec(table).model, record.id):
        return Action.EDIT
    return Action.CREATE


async def upsert(db: AsyncSession, table: FarmTable, record: WriteModel) -> int:
    """Insert without id, update by id, insert-with-id when the id is unknown."""
    model = get_spec(table).model
    values = to_row(record)
    record_id = values.pop("id", None)

    if record_id is None:
        obj = model(**values)
        db.add(obj)
    else:
        obj = await db.get(model, record_id)
        if obj is None:
            obj = model(id=record_id, **values)
            db.add(obj)
            await db.flush()
            await _sync_sequence(db, model)
        else:
            for key, value in values.items():
                setattr(obj, key, value)

    await db.flush()
    return obj.id


async def save(
    session_factory: async_sessionmaker,
    email: str,
    table: Union[FarmTable, str],
    record: Union[Mapping[str, Any], WriteModel],
    permissions: Optional[Mapping[str, Any]] = None,
) -> FarmSnapshot:
    """Validate and upsert one record, then reload.

    With ``permissions`` the caller's role must hold ``create`` for an insert
    and ``edit`` for an update of an existing row.
    """
    table = FarmTable(table)
    write = validate_record(table, record)

    async with session_factory() as db:
        if permissions is not None:
            module = get_spec(table).module
            action = await resolve_write_action(db, table, write)
            if not has_permission(permissions, module, action):
                raise PermissionDenied(f"{module.value}.{action.value}")
        await check_references(db, table, write)
        try:
            record_id = await upsert(db, table, write)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            sync_logger.warning(f"Save rejected on {table.value}", error=e)
            raise MutationError("saving", table.value, _backend_message(e))

    sync_logger.info(f"Saved {table.value} #{record_id}", user=email)
    return await bootstrap(session_factory, email)


async def delete(
    session_factory: async_sessionmaker,
    email: str,
    table: Union[FarmTable, str],
    record_id: int,
) -> FarmSnapshot:
    table = FarmTable(table)
    model = get_spec(table).model
    caller = await load_current_user(session_factory, email)

    async with session_factory() as db:
        await check_deletable(db, table, record_id, caller.employee_id)
        try:
            obj = await db.get(model, record_id)
            if obj is not None:
                await db.delete(obj)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            sync_logger.warning(f"Delete rejected on {table.value}", error=e)
            raise MutationError("deleting", table.value, _backend_message(e))

    if obj is None:
        sync_logger.debug(f"Delete of missing {table.value} #{record_id} ignored")
    else:
        sync_logger.info(f"Deleted {table.value} #{record_id}", user=email)
    return await bootstrap(session_factory, email)

