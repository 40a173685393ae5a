"""Sales and profitability reports computed from loaded records."""
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from farmdesk.db.enums import LedgerType
from farmdesk.sync.views import CamelModel, CropView, CustomerView, LedgerEntryView, SalesOrderView

TOP_CUSTOMER_LIMIT = 10
UNKNOWN_CUSTOMER = "Unknown Customer"


class ReportRange(str, Enum):
    ALL = "all"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    YEAR = "year"


class CropProfit(CamelModel):
    crop_id: int
    product_name: str
    total_income: float
    total_expenses: float
    net_profit: float


class MonthlySales(CamelModel):
    month: str
    total: float


class CustomerSales(CamelModel):
    customer_id: int
    name: str
    total: float
    count: int


class ReportBundle(CamelModel):
    range: ReportRange
    start_date: Optional[date] = None
    profitability: list[CropProfit]
    monthly_sales: list[MonthlySales]
    top_customers: list[CustomerSales]


def range_start(report_range: ReportRange, today: Optional[date] = None) -> Optional[date]:
    today = today or date.today()
    if report_range == ReportRange.LAST_30_DAYS:
        return today - timedelta(days=30)
    if report_range == ReportRange.LAST_90_DAYS:
        return today - timedelta(days=90)
    if report_range == ReportRange.YEAR:
        return date(today.year, 1, 1)
    return None


def filter_orders(orders: list[SalesOrderView], start: Optional[date]) -> list[SalesOrderView]:
    if start is None:
        return list(orders)
    return [o for o in orders if o.order_date >= start]


def crop_profitability(crops: list[CropView], entries: list[LedgerEntryView]) -> list[CropProfit]:
    rows = []
    for crop in crops:
        related = [e for e in entries if e.crop_id == crop.id]
        income = sum(e.amount for e in related if e.type == LedgerType.income.value)
        expenses = sum(e.amount for e in related if e.type == LedgerType.expense.value)
        rows.append(CropProfit(
            crop_id=crop.id,
            product_name=crop.name,
            total_income=income,
            total_expenses=expenses,
            net_profit=income - expenses,
        ))
    rows.sort(key=lambda r: r.net_profit, reverse=True)
    return rows


def monthly_sales(orders: list[SalesOrderView]) -> list[MonthlySales]:
    totals: dict[str, float] = {}
    for order in orders:
        month = order.order_date.strftime("%Y-%m")
        totals[month] = totals.get(month, 0) + order.total_amount
    return [MonthlySales(month=m, total=totals[m]) for m in sorted(totals)]


def top_customers(
    orders: list[SalesOrderView],
    customers: list[CustomerView],
    limit: int = TOP_CUSTOMER_LIMIT,
) -> list[CustomerSales]:
    names = {c.id: c.name for c in customers}
    by_customer: dict[int, CustomerSales] = {}
    for order in orders:
        entry = by_customer.get(order.customer_id)
        if entry is None:
            entry = CustomerSales(
                customer_id=order.customer_id,
                name=names.get(order.customer_id, UNKNOWN_CUSTOMER),
                total=0,
                count=0,
            )
            by_customer[order.customer_id] = entry
        entry.total += order.total_amount
        entry.count += 1
    return sorted(by_customer.values(), key=lambda c: c.total, reverse=True)[:limit]


def build_reports(
    report_range: ReportRange,
    *,
    crops: list[CropView],
    ledger_entries: list[LedgerEntryView],
    sales_orders: list[SalesOrderView],
    customers: list[CustomerView],
    today: Optional[date] = None,
) -> ReportBundle:
    start = range_start(report_range, today)
    orders = filter_orders(sales_orders, start)
    return ReportBundle(
        range=report_range,
        start_date=start,
        # Profitability covers the whole ledger regardless of range
        profitability=crop_profitability(crops, ledger_entries),
        monthly_sales=monthly_sales(orders),
        top_customers=top_customers(orders, customers),
    )
