from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from core.errors import NotFoundException, ValidationAppException
from core.logging import get_logger
from core.settings import QUEUE_STATUSES, end_of_day, round_money, start_of_day
from modules.orders import models, schemas
from modules.products import models as product_models

logger = get_logger(__name__)


def compute_totals(order_in: schemas.OrderCreate) -> Dict[str, Any]:
    """Line subtotals and the order total; the delivery fee only counts for delivery orders."""
    subtotals = [round_money(item.price * item.quantity) for item in order_in.items]
    delivery_fee = (order_in.delivery_fee or 0.0) if order_in.order_type == "delivery" else None
    total = round_money(sum(subtotals) + (delivery_fee or 0.0))
    return {"subtotals": subtotals, "delivery_fee": delivery_fee, "total": total}


def _serialize_item(item: models.OrderItem) -> Dict[str, Any]:
    product = item.product
    variant = item.variant
    return {
        "id": item.id,
        "product_id": item.product_id,
        "variant_id": item.variant_id,
        "quantity": item.quantity,
        "price": item.price,
        "subtotal": item.subtotal,
        "product_name": product.name if product else None,
        "product_sku": product.sku if product else None,
        "variant_name": variant.name if variant else None,
        "variant_sku": variant.sku if variant else None,
        "category_name": product.category.name if product and product.category else None,
    }


def _serialize_order(order: models.Order) -> Dict[str, Any]:
    return {
        "id": order.id,
        "customer_name": order.customer_name,
        "status": order.status,
        "order_date": order.order_date,
        "order_type": order.order_type,
        "delivery_fee": order.delivery_fee,
        "payment_method": order.payment_method,
        "notes": order.notes,
        "total": order.total,
        "items": [_serialize_item(item) for item in order.items],
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def _order_query(db: Session):
    return db.query(models.Order).options(
        selectinload(models.Order.items)
        .selectinload(models.OrderItem.product)
        .selectinload(product_models.Product.category),
        selectinload(models.Order.items).selectinload(models.OrderItem.variant),
    )


def _get_order_model(db: Session, order_id: int) -> models.Order:
    order = _order_query(db).filter(models.Order.id == order_id).first()
    if not order:
        raise NotFoundException("Order not found")
    return order


def _build_items(order_in: schemas.OrderCreate, subtotals: List[float]) -> List[models.OrderItem]:
    return [
        models.OrderItem(
            product_id=item.product_id,
            variant_id=item.variant_id,
            quantity=item.quantity,
            price=item.price,
            subtotal=subtotal,
        )
        for item, subtotal in zip(order_in.items, subtotals)
    ]


def _ensure_products(db: Session, order_in: schemas.OrderCreate) -> None:
    product_ids = {item.product_id for item in order_in.items}
    found = {
        row.id
        for row in db.query(product_models.Product.id).filter(product_models.Product.id.in_(product_ids)).all()
    }
    if product_ids - found:
        raise NotFoundException("Product not found")


def list_orders(
    db: Session,
    status: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    customer_name: Optional[str] = None,
    product_name: Optional[str] = None,
    category_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    query = _order_query(db)
    if status:
        query = query.filter(models.Order.status == status)
    if date_from:
        query = query.filter(models.Order.order_date >= start_of_day(date_from))
    if date_to:
        query = query.filter(models.Order.order_date <= end_of_day(date_to))
    if customer_name:
        query = query.filter(models.Order.customer_name.ilike(f"%{customer_name}%"))
    orders = query.order_by(models.Order.order_date.desc(), models.Order.created_at.desc()).all()

    if product_name:
        needle = product_name.lower()
        orders = [
            o for o in orders if any(i.product and needle in i.product.name.lower() for i in o.items)
        ]
    if category_id is not None:
        orders = [o for o in orders if any(i.product and i.product.category_id == category_id for i in o.items)]
    return [_serialize_order(o) for o in orders]


def list_queue_orders(db: Session) -> List[Dict[str, Any]]:
    orders = (
        _order_query(db)
        .filter(models.Order.status.in_(QUEUE_STATUSES))
        .order_by(models.Order.created_at.asc(), models.Order.id.asc())
        .all()
    )
    return [_serialize_order(o) for o in orders]


def list_pending_orders(db: Session, since: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Pending orders newest first, optionally only those created after `since` (for polling)."""
    query = _order_query(db).filter(models.Order.status == "pending")
    if since is not None:
        query = query.filter(models.Order.created_at > since)
    orders = query.order_by(models.Order.created_at.desc(), models.Order.id.desc()).all()
    return [_serialize_order(o) for o in orders]


def get_order(db: Session, order_id: int) -> Dict[str, Any]:
    return _serialize_order(_get_order_model(db, order_id))


def create_order(db: Session, order_in: schemas.OrderCreate) -> Dict[str, Any]:
    _ensure_products(db, order_in)
    totals = compute_totals(order_in)
    order = models.Order(
        customer_name=order_in.customer_name,
        status=order_in.status,
        order_date=order_in.order_date,
        total=totals["total"],
        order_type=order_in.order_type,
        delivery_fee=totals["delivery_fee"],
        payment_method=order_in.payment_method,
        notes=order_in.notes or None,
        items=_build_items(order_in, totals["subtotals"]),
    )
    db.add(order)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationAppException(f"Order could not be saved: {exc.orig}") from exc
    logger.info("Created order %s for %s (total %.2f)", order.id, order.customer_name, order.total)
    return get_order(db, order.id)


def update_order(db: Session, order_id: int, order_in: schemas.OrderUpdate) -> Dict[str, Any]:
    order = _get_order_model(db, order_id)
    _ensure_products(db, order_in)
    totals = compute_totals(order_in)
    order.customer_name = order_in.customer_name
    order.status = order_in.status
    order.order_date = order_in.order_date
    order.total = totals["total"]
    order.order_type = order_in.order_type
    order.delivery_fee = totals["delivery_fee"]
    order.payment_method = order_in.payment_method
    order.notes = order_in.notes or None
    # Items are replaced wholesale
    order.items = _build_items(order_in, totals["subtotals"])
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationAppException(f"Order could not be saved: {exc.orig}") from exc
    return get_order(db, order_id)


def update_order_status(db: Session, order_id: int, status: str) -> Dict[str, Any]:
    order = _get_order_model(db, order_id)
    previous = order.status
    order.status = status
    db.commit()
    logger.info("Order %s moved from %s to %s", order_id, previous, status)
    return get_order(db, order_id)


def delete_order(db: Session, order_id: int) -> None:
    order = _get_order_model(db, order_id)
    db.delete(order)
    db.commit()
    logger.info("Deleted order %s", order_id)
