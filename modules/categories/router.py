from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from modules.categories import schemas, service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("", response_model=schemas.CategoryRead)
def create_category_endpoint(category_in: schemas.CategoryCreate, db: Session = Depends(get_db)):
    return service.create_category(db, category_in)


@router.get("", response_model=list[schemas.CategoryRead])
def list_categories_endpoint(active_only: bool = False, db: Session = Depends(get_db)):
    return service.list_categories(db, active_only=active_only)


@router.get("/{category_id}", response_model=schemas.CategoryRead)
def get_category_endpoint(category_id: int, db: Session = Depends(get_db)):
    return service.get_category(db, category_id)


@router.put("/{category_id}", response_model=schemas.CategoryRead)
def update_category_endpoint(category_id: int, category_in: schemas.CategoryUpdate, db: Session = Depends(get_db)):
    return service.update_category(db, category_id, category_in)


@router.patch("/{category_id}/status", response_model=schemas.CategoryRead)
def set_category_status_endpoint(
    category_id: int, status_in: schemas.CategoryStatusUpdate, db: Session = Depends(get_db)
):
    return service.set_category_status(db, category_id, status_in.is_active)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category_endpoint(category_id: int, db: Session = Depends(get_db)):
    service.delete_category(db, category_id)
