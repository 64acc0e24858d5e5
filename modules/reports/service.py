"""
Sales reporting over completed orders and recorded expenses.

The aggregation helpers are pure and work on any objects exposing the same
attributes as the ORM rows; the query functions feed them from the database.
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session, selectinload

from core.errors import ValidationAppException
from core.logging import get_logger
from core.settings import end_of_day, round_money, start_of_day
from modules.expenses import models as expense_models
from modules.orders import models as order_models
from modules.products import models as product_models

logger = get_logger(__name__)

REPORTED_STATUS = "completed"


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def summarize_sales(orders: Iterable[Any], expenses: Iterable[Any], date_from: date, date_to: date) -> Dict[str, Any]:
    """Totals and a per-day breakdown; net is gross minus expenses, days sorted ascending."""
    daily: Dict[date, Dict[str, Any]] = {}

    def bucket(day: date) -> Dict[str, Any]:
        if day not in daily:
            daily[day] = {"date": day, "order_count": 0, "total_gross": 0.0, "total_expenses": 0.0, "total_net": 0.0}
        return daily[day]

    total_orders = 0
    total_gross = 0.0
    for order in orders:
        row = bucket(_as_date(order.order_date))
        row["order_count"] += 1
        row["total_gross"] += order.total or 0.0
        total_orders += 1
        total_gross += order.total or 0.0

    total_expenses = 0.0
    for expense in expenses:
        row = bucket(_as_date(expense.transaction_date))
        row["total_expenses"] += expense.total_expense or 0.0
        total_expenses += expense.total_expense or 0.0

    daily_data = []
    for day in sorted(daily):
        row = daily[day]
        row["total_gross"] = round_money(row["total_gross"])
        row["total_expenses"] = round_money(row["total_expenses"])
        row["total_net"] = round_money(row["total_gross"] - row["total_expenses"])
        daily_data.append(row)

    return {
        "period_start": date_from,
        "period_end": date_to,
        "total_orders": total_orders,
        "total_gross": round_money(total_gross),
        "total_expenses": round_money(total_expenses),
        "total_net": round_money(total_gross - total_expenses),
        "daily_data": daily_data,
    }


def aggregate_top_products(orders: Iterable[Any]) -> List[Dict[str, Any]]:
    """Order items summed per (product, variant), highest revenue first."""
    entries: Dict[tuple, Dict[str, Any]] = {}
    order_ids: Dict[tuple, set] = {}

    for order in orders:
        for item in order.items:
            key = (item.product_id, item.variant_id)
            if key not in entries:
                product = item.product
                variant = item.variant
                entries[key] = {
                    "product_id": item.product_id,
                    "product_name": product.name if product else "Unknown",
                    "product_sku": product.sku if product else None,
                    "variant_id": item.variant_id,
                    "variant_name": variant.name if variant else None,
                    "variant_sku": variant.sku if variant else None,
                    "category_name": product.category.name if product and product.category else None,
                    "total_quantity_sold": 0,
                    "total_revenue": 0.0,
                    "order_count": 0,
                }
                order_ids[key] = set()
            entry = entries[key]
            entry["total_quantity_sold"] += item.quantity or 0
            entry["total_revenue"] += item.subtotal or 0.0
            order_ids[key].add(order.id)

    for key, entry in entries.items():
        entry["order_count"] = len(order_ids[key])
        entry["total_revenue"] = round_money(entry["total_revenue"])
    return sorted(entries.values(), key=lambda e: e["total_revenue"], reverse=True)


def _check_range(date_from: date, date_to: date) -> None:
    if date_from > date_to:
        raise ValidationAppException("date_from must not be after date_to")


def _completed_orders(db: Session, date_from: date, date_to: date, with_items: bool = False):
    query = db.query(order_models.Order).filter(
        order_models.Order.status == REPORTED_STATUS,
        order_models.Order.order_date >= start_of_day(date_from),
        order_models.Order.order_date <= end_of_day(date_to),
    )
    if with_items:
        query = query.options(
            selectinload(order_models.Order.items)
            .selectinload(order_models.OrderItem.product)
            .selectinload(product_models.Product.category),
            selectinload(order_models.Order.items).selectinload(order_models.OrderItem.variant),
        )
    return query.order_by(order_models.Order.order_date.asc()).all()


def sales_report(db: Session, date_from: date, date_to: date) -> Dict[str, Any]:
    _check_range(date_from, date_to)
    orders = _completed_orders(db, date_from, date_to)
    expenses = (
        db.query(expense_models.Expense)
        .filter(
            expense_models.Expense.transaction_date >= date_from,
            expense_models.Expense.transaction_date <= date_to,
        )
        .all()
    )
    logger.debug("Sales report %s..%s: %d orders, %d expenses", date_from, date_to, len(orders), len(expenses))
    return summarize_sales(orders, expenses, date_from, date_to)


def top_products(db: Session, date_from: date, date_to: date) -> List[Dict[str, Any]]:
    _check_range(date_from, date_to)
    return aggregate_top_products(_completed_orders(db, date_from, date_to, with_items=True))
