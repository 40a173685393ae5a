from farmdesk.db.enums import CropStatus
from farmdesk.sync.views import Alert, CropView, InventoryItemView


def _qty(value: float) -> str:
    return f"{value:g}"


def derive_alerts(
    inventory_items: list[InventoryItemView],
    crops: list[CropView],
) -> list[Alert]:
    """Low-stock warnings first, then harvest-ready tasks."""
    alerts: list[Alert] = []
    for item in inventory_items:
        if item.quantity <= item.low_stock_threshold:
            alerts.append(Alert(
                id=f"stock-{item.id}",
                type="warning",
                message=f'ปัจจัยการผลิต "{item.name}" มีปริมาณต่ำ ({_qty(item.quantity)} {item.unit})',
            ))
    for crop in crops:
        if crop.status == CropStatus.harvest_ready.value:
            alerts.append(Alert(
                id=f"harvest-{crop.id}",
                type="task",
                message=f'"{crop.name}" พร้อมสำหรับการเก็บเกี่ยวแล้ว!',
            ))
    return alerts
