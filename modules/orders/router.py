from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from modules.orders import schemas, service

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=schemas.OrderRead)
def create_order_endpoint(order_in: schemas.OrderCreate, db: Session = Depends(get_db)):
    return service.create_order(db, order_in)


@router.get("", response_model=list[schemas.OrderRead])
def list_orders_endpoint(
    status: Optional[schemas.OrderStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    customer_name: Optional[str] = None,
    product_name: Optional[str] = None,
    category_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return service.list_orders(
        db,
        status=status,
        date_from=date_from,
        date_to=date_to,
        customer_name=customer_name,
        product_name=product_name,
        category_id=category_id,
    )


@router.get("/queue", response_model=list[schemas.OrderRead])
def list_queue_orders_endpoint(db: Session = Depends(get_db)):
    return service.list_queue_orders(db)


@router.get("/pending", response_model=list[schemas.OrderRead])
def list_pending_orders_endpoint(since: Optional[datetime] = None, db: Session = Depends(get_db)):
    return service.list_pending_orders(db, since=since)


@router.get("/{order_id}", response_model=schemas.OrderRead)
def get_order_endpoint(order_id: int, db: Session = Depends(get_db)):
    return service.get_order(db, order_id)


@router.put("/{order_id}", response_model=schemas.OrderRead)
def update_order_endpoint(order_id: int, order_in: schemas.OrderUpdate, db: Session = Depends(get_db)):
    return service.update_order(db, order_id, order_in)


@router.patch("/{order_id}/status", response_model=schemas.OrderRead)
def update_order_status_endpoint(order_id: int, status_in: schemas.OrderStatusUpdate, db: Session = Depends(get_db)):
    return service.update_order_status(db, order_id, status_in.status)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order_endpoint(order_id: int, db: Session = Depends(get_db)):
    service.delete_order(db, order_id)
