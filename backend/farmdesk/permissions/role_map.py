from .constants import AppModule as M

ADMIN_ROLE = "Admin"
MANAGER_ROLE = "Farm Manager"
WORKER_ROLE = "Worker"


def _grant(view=False, create=False, edit=False, delete=False) -> dict[str, bool]:
    return {"view": view, "create": create, "edit": edit, "delete": delete}


READ_ONLY = _grant(view=True)
NONE = _grant()
FULL = _grant(True, True, True, True)

DEFAULT_ROLE_PERMISSIONS: dict[str, dict[str, dict[str, bool]]] = {
    ADMIN_ROLE: {m.value: dict(FULL) for m in M},
    MANAGER_ROLE: {
        M.DASHBOARD.value: dict(READ_ONLY),
        M.CROPS.value: dict(FULL),
        M.ENVIRONMENT.value: dict(READ_ONLY),
        M.SMARTDEVICES.value: _grant(view=True, create=True, edit=True),
        M.GAP.value: _grant(view=True, create=True, edit=True),
        M.INVENTORY.value: _grant(view=True, create=True, edit=True),
        M.SALES.value: _grant(view=True, create=True, edit=True),
        M.HR.value: _grant(view=True, create=True, edit=True),
        M.LEDGER.value: _grant(view=True, create=True),
        M.PROFITABILITY.value: dict(READ_ONLY),
        M.REPORTS.value: dict(READ_ONLY),
        M.ASSISTANT.value: dict(READ_ONLY),
        M.SETTINGS.value: _grant(view=True, edit=True),
        M.ADMIN.value: dict(NONE),
    },
    WORKER_ROLE: {
        M.DASHBOARD.value: dict(READ_ONLY),
        M.CROPS.value: dict(READ_ONLY),
        M.ENVIRONMENT.value: dict(READ_ONLY),
        M.SMARTDEVICES.value: dict(READ_ONLY),
        M.GAP.value: _grant(view=True, create=True),
        M.INVENTORY.value: dict(READ_ONLY),
        M.SALES.value: dict(NONE),
        M.HR.value: dict(NONE),
        M.LEDGER.value: dict(NONE),
        M.PROFITABILITY.value: dict(NONE),
        M.REPORTS.value: dict(NONE),
        M.ASSISTANT.value: dict(READ_ONLY),
        M.SETTINGS.value: dict(NONE),
        M.ADMIN.value: dict(NONE),
    },
}
