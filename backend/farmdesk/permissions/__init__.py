from .constants import Action, AppModule
from .exceptions import PermissionDenied
from .service import (
    PermissionSet,
    apply_permission_change,
    get_module_permissions,
    has_permission,
    resolve_active_view,
    visible_modules,
)

__all__ = [
    "Action",
    "AppModule",
    "PermissionDenied",
    "PermissionSet",
    "apply_permission_change",
    "get_module_permissions",
    "has_permission",
    "resolve_active_view",
    "visible_modules",
]
