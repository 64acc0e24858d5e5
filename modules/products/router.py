from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from modules.products import schemas, service

router = APIRouter(prefix="/products", tags=["products"])
menu_router = APIRouter(prefix="/menu", tags=["products"])


@router.post("", response_model=schemas.ProductRead)
def create_product_endpoint(product_in: schemas.ProductCreate, db: Session = Depends(get_db)):
    return service.create_product(db, product_in)


@router.get("", response_model=list[schemas.ProductSummary])
def list_products_endpoint(
    category_id: Optional[int] = None, active_only: bool = False, db: Session = Depends(get_db)
):
    return service.list_products(db, category_id=category_id, active_only=active_only)


@router.get("/{product_id}", response_model=schemas.ProductRead)
def get_product_endpoint(product_id: int, db: Session = Depends(get_db)):
    return service.get_product(db, product_id)


@router.put("/{product_id}", response_model=schemas.ProductRead)
def update_product_endpoint(product_id: int, product_in: schemas.ProductUpdate, db: Session = Depends(get_db)):
    return service.update_product(db, product_id, product_in)


@router.patch("/{product_id}/status", response_model=schemas.ProductRead)
def set_product_status_endpoint(
    product_id: int, status_in: schemas.ProductStatusUpdate, db: Session = Depends(get_db)
):
    return service.set_product_status(db, product_id, status_in.is_active)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product_endpoint(product_id: int, db: Session = Depends(get_db)):
    service.delete_product(db, product_id)


@router.post("/{product_id}/clone", response_model=schemas.ProductRead)
def clone_product_endpoint(product_id: int, db: Session = Depends(get_db)):
    return service.clone_product(db, product_id)


@router.post("/{product_id}/variants/{variant_id}/clone", response_model=schemas.ProductRead)
def clone_variant_endpoint(product_id: int, variant_id: int, db: Session = Depends(get_db)):
    return service.clone_variant(db, product_id, variant_id)


@menu_router.get("", response_model=list[schemas.MenuCategory])
def get_menu_endpoint(db: Session = Depends(get_db)):
    return service.get_menu(db)
