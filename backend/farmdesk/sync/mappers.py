"""Row <-> record mapping. Pure functions, no I/O."""
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect

from farmdesk.sync.views import CamelModel, CurrentUser, FarmInfo, OrderItem

V = TypeVar("V", bound=BaseModel)


def row_to_mapping(row: Any) -> dict[str, Any]:
    """Column name -> value for an ORM instance; mappings pass through."""
    if isinstance(row, Mapping):
        return dict(row)
    return {attr.key: getattr(row, attr.key) for attr in inspect(row).mapper.column_attrs}


def to_view(view_cls: Type[V], row: Any) -> V:
    return view_cls.model_validate(row_to_mapping(row))


def to_views(view_cls: Type[V], rows) -> list[V]:
    return [to_view(view_cls, row) for row in rows]


def map_current_user(user: Any, role: Any) -> CurrentUser:
    mapping = row_to_mapping(user)
    role_mapping = row_to_mapping(role)
    mapping["role_name"] = role_mapping["name"]
    mapping["permissions"] = role_mapping.get("permissions") or {}
    return CurrentUser.model_validate(mapping)


def map_farm_info(info: Optional[Mapping[str, Any]]) -> FarmInfo:
    if not info:
        return FarmInfo()
    return FarmInfo.model_validate(info)


def order_total(items: list[OrderItem]) -> float:
    return round(sum(item.quantity * item.unit_price for item in items), 2)


def to_row(record: CamelModel) -> dict[str, Any]:
    """Write record -> column values, ``id`` dropped when absent.

    Embedded JSON (order items, farm info) is stored camelCase, the way the
    dashboard reads it back.
    """
    values: dict[str, Any] = {}
    for name in type(record).model_fields:
        value = getattr(record, name)
        if name == "id" and value is None:
            continue
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json", by_alias=True)
        elif isinstance(value, list) and value and isinstance(value[0], BaseModel):
            value = [item.model_dump(mode="json", by_alias=True) for item in value]
        elif isinstance(value, tuple):
            value = list(value)
        values[name] = value
    return values
