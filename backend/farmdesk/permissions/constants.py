from enum import Enum


class AppModule(str, Enum):
    DASHBOARD = "dashboard"
    CROPS = "crops"
    ENVIRONMENT = "environment"
    SMARTDEVICES = "smartdevices"
    GAP = "gap"
    INVENTORY = "inventory"
    SALES = "sales"
    HR = "hr"
    LEDGER = "ledger"
    PROFITABILITY = "profitability"
    REPORTS = "reports"
    ASSISTANT = "assistant"
    SETTINGS = "settings"
    ADMIN = "admin"


class Action(str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


# Sidebar order
NAVIGATION_ORDER: list[AppModule] = list(AppModule)

WRITE_ACTIONS: tuple[Action, ...] = (Action.CREATE, Action.EDIT, Action.DELETE)

NO_ACCESS_MESSAGE = "You do not have permission to view any modules."
