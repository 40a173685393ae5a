"""
View records handed to the dashboard.

Rows come out of the database in snake_case; the dashboard works with
camelCase records. Field names here are the column names and the camelCase
spelling is the alias, so the same models validate ORM rows and serialize
for the UI.
"""
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from farmdesk.db.enums import (
    ActivityType, CropStatus, DeviceStatus, DeviceType, LeaveStatus, LeaveType,
    LedgerType, OrderStatus, TaskStatus, TimeLogType,
)
from farmdesk.permissions.service import PermissionsMap


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class FarmInfo(CamelModel):
    name: str = "Smile farm"
    logo_url: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    tax_id: str = ""


class OrderItem(CamelModel):
    item_id: str
    crop_id: int
    quantity: float = Field(gt=0)
    unit_price: float = Field(ge=0)


# Field sets shared by the view records and the write schemas

class CropFields(CamelModel):
    name: str = Field(min_length=1)
    status: CropStatus = CropStatus.planted
    planting_date: date
    expected_harvest: Optional[date] = None
    image_url: Optional[str] = None
    optimal_temp: Optional[tuple[float, float]] = None
    optimal_humidity: Optional[tuple[float, float]] = None


class DeviceFields(CamelModel):
    name: str = Field(min_length=1)
    type: DeviceType
    status: DeviceStatus = DeviceStatus.inactive


class LedgerEntryFields(CamelModel):
    date: date
    description: str = Field(min_length=1)
    type: LedgerType
    amount: float = Field(ge=0)
    crop_id: Optional[int] = None


class PlotFields(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    current_crop_id: Optional[int] = None


class ActivityLogFields(CamelModel):
    plot_id: int
    activity_type: ActivityType
    date: date
    description: str = Field(min_length=1)
    materials_used: Optional[str] = None
    personnel: Optional[str] = None


class InventoryItemFields(CamelModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None
    quantity: float
    unit: str = Field(min_length=1)
    low_stock_threshold: float = 0


class EmployeeFields(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    nickname: Optional[str] = None
    date_of_birth: Optional[date] = None
    national_id: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    start_date: date
    position: str = Field(min_length=1)
    salary: Optional[float] = None
    contract_url: Optional[str] = None
    training_history: Optional[list[str]] = None


class PayrollFields(CamelModel):
    employee_id: int
    period: str = Field(min_length=1)
    pay_date: date
    gross_pay: float
    deductions: float
    net_pay: float


class TimeLogFields(CamelModel):
    employee_id: int
    timestamp: datetime
    type: TimeLogType


class LeaveRequestFields(CamelModel):
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str = Field(min_length=1)
    status: LeaveStatus = LeaveStatus.pending


class TaskFields(CamelModel):
    employee_id: int
    task_description: str = Field(min_length=1)
    assigned_date: date
    due_date: Optional[date] = None
    status: TaskStatus = TaskStatus.todo


class CustomerFields(CamelModel):
    name: str = Field(min_length=1)
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None


class SalesOrderFields(CamelModel):
    customer_id: int
    order_date: date
    status: OrderStatus = OrderStatus.quote
    items: list[OrderItem] = Field(default_factory=list)


class UserFields(CamelModel):
    username: str = Field(min_length=1)
    employee_id: int
    role_id: int


class RoleFields(CamelModel):
    name: str = Field(min_length=1)
    permissions: PermissionsMap = Field(default_factory=dict)


class CropView(CropFields):
    id: int


class DeviceView(DeviceFields):
    id: int


class LedgerEntryView(LedgerEntryFields):
    id: int


class PlotView(PlotFields):
    id: int


class ActivityLogView(ActivityLogFields):
    id: int


class InventoryItemView(InventoryItemFields):
    id: int


class EmployeeView(EmployeeFields):
    id: int


class PayrollView(PayrollFields):
    id: int


class TimeLogView(TimeLogFields):
    id: int


class LeaveRequestView(LeaveRequestFields):
    id: int


class TaskView(TaskFields):
    id: int


class CustomerView(CustomerFields):
    id: int


class SalesOrderView(SalesOrderFields):
    id: int
    total_amount: float


class UserView(UserFields):
    id: int


class RoleView(RoleFields):
    id: int


class CurrentUser(UserView):
    """A user row merged with its role's permissions."""
    role_name: str
    permissions: PermissionsMap


class Alert(CamelModel):
    id: str
    type: Literal["task", "warning"]
    message: str


class TraceabilityResult(CamelModel):
    activity_log: ActivityLogView
    plot: PlotView
    crop: CropView


class FarmSnapshot(CamelModel):
    """Everything the dashboard renders, rebuilt wholesale by the loader."""
    current_user: CurrentUser
    farm_info: FarmInfo
    crops: list[CropView] = Field(default_factory=list)
    devices: list[DeviceView] = Field(default_factory=list)
    ledger_entries: list[LedgerEntryView] = Field(default_factory=list)
    plots: list[PlotView] = Field(default_factory=list)
    activity_logs: list[ActivityLogView] = Field(default_factory=list)
    inventory_items: list[InventoryItemView] = Field(default_factory=list)
    employees: list[EmployeeView] = Field(default_factory=list)
    payrolls: list[PayrollView] = Field(default_factory=list)
    time_logs: list[TimeLogView] = Field(default_factory=list)
    leave_requests: list[LeaveRequestView] = Field(default_factory=list)
    tasks: list[TaskView] = Field(default_factory=list)
    customers: list[CustomerView] = Field(default_factory=list)
    sales_orders: list[SalesOrderView] = Field(default_factory=list)
    users: list[UserView] = Field(default_factory=list)
    roles: list[RoleView] = Field(default_factory=list)
