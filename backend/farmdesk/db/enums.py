import enum


class CropStatus(str, enum.Enum):
    planted = "Planted"
    growing = "Growing"
    harvest_ready = "Harvest Ready"


class DeviceType(str, enum.Enum):
    sensor = "Sensor"
    pump = "Pump"
    light = "Light"


class DeviceStatus(str, enum.Enum):
    active = "Active"
    inactive = "Inactive"
    error = "Error"


class LedgerType(str, enum.Enum):
    income = "income"
    expense = "expense"


class ActivityType(str, enum.Enum):
    planting = "เพาะปลูก"
    fertilizing = "ให้ปุ๋ย"
    pest_control = "กำจัดศัตรูพืช"
    watering = "รดน้ำ"
    harvest = "เก็บเกี่ยว"


class TimeLogType(str, enum.Enum):
    clock_in = "clock-in"
    clock_out = "clock-out"


class LeaveType(str, enum.Enum):
    sick = "ลาป่วย"
    personal = "ลากิจ"
    vacation = "ลาพักร้อน"


class LeaveStatus(str, enum.Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"


class TaskStatus(str, enum.Enum):
    todo = "To Do"
    in_progress = "In Progress"
    done = "Done"


class OrderStatus(str, enum.Enum):
    quote = "Quote"
    confirmed = "Confirmed"
    shipped = "Shipped"
    completed = "Completed"
    cancelled = "Cancelled"
