"""
The closed set of writable tables.

Each member of ``FarmTable`` is bound to its ORM model, its write schema,
its view record, the permission module that gates it and the ordering the
loader reads it with.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Type

from pydantic import Field, model_validator

from farmdesk.db import models
from farmdesk.permissions.constants import AppModule
from farmdesk.sync import views as v
from farmdesk.sync.mappers import order_total


class FarmTable(str, Enum):
    CROPS = "crops"
    DEVICES = "devices"
    LEDGER_ENTRIES = "ledger_entries"
    PLOTS = "plots"
    ACTIVITY_LOGS = "activity_logs"
    INVENTORY_ITEMS = "inventory_items"
    EMPLOYEES = "employees"
    PAYROLLS = "payrolls"
    TIME_LOGS = "time_logs"
    LEAVE_REQUESTS = "leave_requests"
    TASKS = "tasks"
    CUSTOMERS = "customers"
    SALES_ORDERS = "sales_orders"
    USERS = "users"
    ROLES = "roles"
    FARM_SETTINGS = "farm_settings"


class WriteModel(v.CamelModel):
    id: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _blank_optionals(cls, data: Any) -> Any:
        # Empty form inputs arrive as "" for optional columns
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for name, field in cls.model_fields.items():
            if field.is_required():
                continue
            for key in (name, field.alias):
                if key and cleaned.get(key) == "":
                    cleaned[key] = None
        return cleaned


class CropWrite(WriteModel, v.CropFields):
    pass


class DeviceWrite(WriteModel, v.DeviceFields):
    pass


class LedgerEntryWrite(WriteModel, v.LedgerEntryFields):
    pass


class PlotWrite(WriteModel, v.PlotFields):
    pass


class ActivityLogWrite(WriteModel, v.ActivityLogFields):
    pass


class InventoryItemWrite(WriteModel, v.InventoryItemFields):
    pass


class EmployeeWrite(WriteModel, v.EmployeeFields):
    pass


class PayrollWrite(WriteModel, v.PayrollFields):
    pass


class TimeLogWrite(WriteModel, v.TimeLogFields):
    pass


class LeaveRequestWrite(WriteModel, v.LeaveRequestFields):
    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class TaskWrite(WriteModel, v.TaskFields):
    pass


class CustomerWrite(WriteModel, v.CustomerFields):
    pass


class SalesOrderWrite(WriteModel, v.SalesOrderFields):
    items: list[v.OrderItem] = Field(min_length=1)
    total_amount: float = 0

    @model_validator(mode="after")
    def _compute_total(self):
        self.total_amount = order_total(self.items)
        return self


class UserWrite(WriteModel, v.UserFields):
    pass


class RoleWrite(WriteModel, v.RoleFields):
    pass


class FarmSettingsWrite(WriteModel):
    id: Optional[int] = 1
    info: v.FarmInfo

    @model_validator(mode="after")
    def _singleton(self):
        self.id = 1
        return self


@dataclass(frozen=True)
class TableSpec:
    model: Type[models.Base]
    write_schema: Type[WriteModel]
    view: Optional[Type[v.CamelModel]]
    module: AppModule
    order_by: tuple


M = models

REGISTRY: dict[FarmTable, TableSpec] = {
    FarmTable.CROPS: TableSpec(
        M.Crop, CropWrite, v.CropView, AppModule.CROPS,
        (M.Crop.created_at.desc(), M.Crop.id.desc()),
    ),
    FarmTable.DEVICES: TableSpec(
        M.Device, DeviceWrite, v.DeviceView, AppModule.SMARTDEVICES,
        (M.Device.created_at.desc(), M.Device.id.desc()),
    ),
    FarmTable.LEDGER_ENTRIES: TableSpec(
        M.LedgerEntry, LedgerEntryWrite, v.LedgerEntryView, AppModule.LEDGER,
        (M.LedgerEntry.date.desc(), M.LedgerEntry.id.desc()),
    ),
    FarmTable.PLOTS: TableSpec(
        M.Plot, PlotWrite, v.PlotView, AppModule.GAP,
        (M.Plot.created_at.desc(), M.Plot.id.desc()),
    ),
    FarmTable.ACTIVITY_LOGS: TableSpec(
        M.ActivityLog, ActivityLogWrite, v.ActivityLogView, AppModule.GAP,
        (M.ActivityLog.date.desc(), M.ActivityLog.id.desc()),
    ),
    FarmTable.INVENTORY_ITEMS: TableSpec(
        M.InventoryItem, InventoryItemWrite, v.InventoryItemView, AppModule.INVENTORY,
        (M.InventoryItem.name.asc(), M.InventoryItem.id.asc()),
    ),
    FarmTable.EMPLOYEES: TableSpec(
        M.Employee, EmployeeWrite, v.EmployeeView, AppModule.HR,
        (M.Employee.first_name.asc(), M.Employee.id.asc()),
    ),
    FarmTable.PAYROLLS: TableSpec(
        M.Payroll, PayrollWrite, v.PayrollView, AppModule.HR,
        (M.Payroll.pay_date.desc(), M.Payroll.id.desc()),
    ),
    FarmTable.TIME_LOGS: TableSpec(
        M.TimeLog, TimeLogWrite, v.TimeLogView, AppModule.HR,
        (M.TimeLog.timestamp.desc(), M.TimeLog.id.desc()),
    ),
    FarmTable.LEAVE_REQUESTS: TableSpec(
        M.LeaveRequest, LeaveRequestWrite, v.LeaveRequestView, AppModule.HR,
        (M.LeaveRequest.created_at.desc(), M.LeaveRequest.id.desc()),
    ),
    FarmTable.TASKS: TableSpec(
        M.Task, TaskWrite, v.TaskView, AppModule.HR,
        (M.Task.due_date.asc(), M.Task.id.asc()),
    ),
    FarmTable.CUSTOMERS: TableSpec(
        M.Customer, CustomerWrite, v.CustomerView, AppModule.SALES,
        (M.Customer.name.asc(), M.Customer.id.asc()),
    ),
    FarmTable.SALES_ORDERS: TableSpec(
        M.SalesOrder, SalesOrderWrite, v.SalesOrderView, AppModule.SALES,
        (M.SalesOrder.order_date.desc(), M.SalesOrder.id.desc()),
    ),
    FarmTable.USERS: TableSpec(
        M.User, UserWrite, v.UserView, AppModule.ADMIN,
        (M.User.id.asc(),),
    ),
    FarmTable.ROLES: TableSpec(
        M.Role, RoleWrite, v.RoleView, AppModule.ADMIN,
        (M.Role.id.asc(),),
    ),
    # Read separately by the loader; no list view
    FarmTable.FARM_SETTINGS: TableSpec(
        M.FarmSetting, FarmSettingsWrite, None, AppModule.SETTINGS,
        (M.FarmSetting.id.asc(),),
    ),
}

LIST_TABLES: list[FarmTable] = [t for t, spec in REGISTRY.items() if spec.view is not None]


def get_spec(table: FarmTable) -> TableSpec:
    return REGISTRY[table]
