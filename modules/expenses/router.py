from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from modules.expenses import schemas, service

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post("", response_model=schemas.ExpenseRead)
def create_expense_endpoint(expense_in: schemas.ExpenseCreate, db: Session = Depends(get_db)):
    return service.create_expense(db, expense_in)


@router.get("", response_model=list[schemas.ExpenseRead])
def list_expenses_endpoint(
    date_from: Optional[date] = None, date_to: Optional[date] = None, db: Session = Depends(get_db)
):
    return service.list_expenses(db, date_from=date_from, date_to=date_to)


@router.get("/{expense_id}", response_model=schemas.ExpenseRead)
def get_expense_endpoint(expense_id: int, db: Session = Depends(get_db)):
    return service.get_expense(db, expense_id)


@router.put("/{expense_id}", response_model=schemas.ExpenseRead)
def update_expense_endpoint(expense_id: int, expense_in: schemas.ExpenseUpdate, db: Session = Depends(get_db)):
    return service.update_expense(db, expense_id, expense_in)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense_endpoint(expense_id: int, db: Session = Depends(get_db)):
    service.delete_expense(db, expense_id)
