from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from core.errors import NotFoundException
from core.logging import get_logger
from core.settings import round_money
from modules.expenses import models, schemas

logger = get_logger(__name__)


def _apply(expense: models.Expense, expense_in: schemas.ExpenseCreate) -> None:
    expense.transaction_date = expense_in.transaction_date
    expense.remarks = expense_in.remarks or None
    expense.items = [models.ExpenseItem(item_name=item.item_name, cost=item.cost) for item in expense_in.items]
    # Totals are always derived from the items, never taken from the client
    expense.total_expense = round_money(sum(item.cost for item in expense_in.items))
    expense.items_count = len(expense_in.items)


def list_expenses(
    db: Session, date_from: Optional[date] = None, date_to: Optional[date] = None
) -> List[models.Expense]:
    query = db.query(models.Expense).options(selectinload(models.Expense.items))
    if date_from:
        query = query.filter(models.Expense.transaction_date >= date_from)
    if date_to:
        query = query.filter(models.Expense.transaction_date <= date_to)
    return query.order_by(models.Expense.transaction_date.desc(), models.Expense.id.desc()).all()


def get_expense(db: Session, expense_id: int) -> models.Expense:
    expense = (
        db.query(models.Expense)
        .options(selectinload(models.Expense.items))
        .filter(models.Expense.id == expense_id)
        .first()
    )
    if not expense:
        raise NotFoundException("Expense not found")
    return expense


def create_expense(db: Session, expense_in: schemas.ExpenseCreate) -> models.Expense:
    expense = models.Expense()
    _apply(expense, expense_in)
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info("Created expense %s (%.2f, %d items)", expense.id, expense.total_expense, expense.items_count)
    return expense


def update_expense(db: Session, expense_id: int, expense_in: schemas.ExpenseUpdate) -> models.Expense:
    expense = get_expense(db, expense_id)
    _apply(expense, expense_in)
    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense_id: int) -> None:
    expense = get_expense(db, expense_id)
    db.delete(expense)
    db.commit()
    logger.info("Deleted expense %s", expense_id)
