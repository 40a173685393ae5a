"""Evaluate a role's permissions map.

A permissions map is the JSON stored on ``roles.permissions``: module name to
``{view, create, edit, delete}``. Nothing here is cached; callers pass the map
of the role they just loaded.
"""
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from .constants import NAVIGATION_ORDER, NO_ACCESS_MESSAGE, WRITE_ACTIONS, Action, AppModule

PermissionsMap = dict[str, dict[str, bool]]


class PermissionSet(BaseModel):
    view: bool = False
    create: bool = False
    edit: bool = False
    delete: bool = False

    def allows(self, action: Union[Action, str]) -> bool:
        return bool(getattr(self, Action(action).value))


class ActiveView(BaseModel):
    module: Optional[AppModule] = None
    message: Optional[str] = None


def _module_key(module: Union[AppModule, str]) -> str:
    return module.value if isinstance(module, AppModule) else str(module)


def get_module_permissions(
    permissions: Optional[Mapping[str, Any]],
    module: Union[AppModule, str],
) -> PermissionSet:
    """Permission set for one module; missing or malformed entries deny everything."""
    if not isinstance(permissions, Mapping):
        return PermissionSet()
    entry = permissions.get(_module_key(module))
    if not isinstance(entry, Mapping):
        return PermissionSet()
    try:
        return PermissionSet.model_validate(
            {k: entry.get(k) is True for k in ("view", "create", "edit", "delete")}
        )
    except ValidationError:
        return PermissionSet()


def has_permission(
    permissions: Optional[Mapping[str, Any]],
    module: Union[AppModule, str],
    action: Union[Action, str],
) -> bool:
    return get_module_permissions(permissions, module).allows(action)


def visible_modules(permissions: Optional[Mapping[str, Any]]) -> list[AppModule]:
    return [m for m in NAVIGATION_ORDER if get_module_permissions(permissions, m).view]


def resolve_active_view(
    permissions: Optional[Mapping[str, Any]],
    requested: Optional[Union[AppModule, str]] = None,
) -> ActiveView:
    """Requested module if viewable, else the first viewable one, else no access."""
    visible = visible_modules(permissions)
    if requested is not None:
        for module in visible:
            if module.value == _module_key(requested):
                return ActiveView(module=module)
    if visible:
        return ActiveView(module=visible[0])
    return ActiveView(message=NO_ACCESS_MESSAGE)


def apply_permission_change(
    permissions: Optional[Mapping[str, Any]],
    module: Union[AppModule, str],
    action: Union[Action, str],
    value: bool,
) -> PermissionsMap:
    """Role editor toggle.

    Granting create/edit/delete also grants view; revoking view revokes the
    other three. Returns a new map, the input is left untouched.
    """
    action = Action(action)
    key = _module_key(module)

    updated: PermissionsMap = {}
    for name, entry in (permissions or {}).items():
        updated[name] = dict(entry) if isinstance(entry, Mapping) else {}

    current = get_module_permissions(permissions, key).model_dump()
    current[action.value] = bool(value)

    if action in WRITE_ACTIONS and value:
        current[Action.VIEW.value] = True
    if action == Action.VIEW and not value:
        for write_action in WRITE_ACTIONS:
            current[write_action.value] = False

    updated[key] = current
    return updated
