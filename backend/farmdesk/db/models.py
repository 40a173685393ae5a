from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.sql import func

from farmdesk.db.database import Base
from farmdesk.db.enums import (
    ActivityType, CropStatus, DeviceStatus, DeviceType, LeaveStatus, LeaveType,
    LedgerType, OrderStatus, TaskStatus, TimeLogType,
)


def _enum(enum_cls, name: str) -> SAEnum:
    # Store the enum *values* ("Harvest Ready", "เก็บเกี่ยว"), not the member names.
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        validate_strings=True,
        values_callable=lambda members: [m.value for m in members],
    )


class AuthIdentity(Base):
    """Email/password credentials. Profiles live in ``users``."""
    __tablename__ = "auth_identities"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Crop(Base):
    __tablename__ = "crops"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    status = Column(_enum(CropStatus, "crop_status"), default=CropStatus.planted.value, nullable=False)
    planting_date = Column(Date, nullable=False)
    expected_harvest = Column(Date)
    image_url = Column(Text)
    optimal_temp = Column(JSON)
    optimal_humidity = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Device(Base):
    __tablename__ = "devices"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    type = Column(_enum(DeviceType, "device_type"), nullable=False)
    status = Column(_enum(DeviceStatus, "device_status"), default=DeviceStatus.inactive.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    nickname = Column(String(100))
    date_of_birth = Column(Date)
    national_id = Column(String(50))
    address = Column(Text)
    phone = Column(String(50))
    email = Column(String(255), unique=True)
    start_date = Column(Date, nullable=False)
    position = Column(String(100), nullable=False)
    salary = Column(Float)
    contract_url = Column(Text)
    training_history = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    permissions = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class User(Base):
    """Profile row for an auth identity, keyed by email (``username``)."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, index=True, nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class LedgerEntry(Base):
    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=False)
    type = Column(_enum(LedgerType, "ledger_type"), nullable=False)
    amount = Column(Float, nullable=False)
    crop_id = Column(Integer, ForeignKey("crops.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Plot(Base):
    __tablename__ = "plots"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    current_crop_id = Column(Integer, ForeignKey("crops.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    plot_id = Column(Integer, ForeignKey("plots.id", ondelete="CASCADE"), nullable=False)
    activity_type = Column(_enum(ActivityType, "activity_type"), nullable=False)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=False)
    materials_used = Column(Text)
    personnel = Column(String(200))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    category = Column(String(100))
    quantity = Column(Float, nullable=False)
    unit = Column(String(50), nullable=False)
    low_stock_threshold = Column(Float, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Payroll(Base):
    __tablename__ = "payrolls"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    period = Column(String(50), nullable=False)
    pay_date = Column(Date, nullable=False)
    gross_pay = Column(Float, nullable=False)
    deductions = Column(Float, nullable=False)
    net_pay = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TimeLog(Base):
    __tablename__ = "time_logs"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    type = Column(_enum(TimeLogType, "time_log_type"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    leave_type = Column(_enum(LeaveType, "leave_request_type"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(_enum(LeaveStatus, "leave_request_status"), default=LeaveStatus.pending.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    task_description = Column(Text, nullable=False)
    assigned_date = Column(Date, nullable=False)
    due_date = Column(Date)
    status = Column(_enum(TaskStatus, "task_status"), default=TaskStatus.todo.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    contact_person = Column(String(200))
    phone = Column(String(50))
    email = Column(String(255))
    address = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class SalesOrder(Base):
    __tablename__ = "sales_orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False)
    order_date = Column(Date, nullable=False)
    status = Column(_enum(OrderStatus, "order_status"), default=OrderStatus.quote.value, nullable=False)
    # Line items are embedded on the order row, not stored as separate rows
    items = Column(JSON, nullable=False, default=list)
    total_amount = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class FarmSetting(Base):
    __tablename__ = "farm_settings"
    __table_args__ = (
        CheckConstraint("id = 1", name="single_row_check"),
    )

    id = Column(Integer, primary_key=True, default=1)
    info = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
