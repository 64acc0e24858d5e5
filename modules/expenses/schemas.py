from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExpenseItemCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    item_name: str = Field(..., min_length=1, max_length=200)
    cost: float = Field(..., ge=0.01)


class ExpenseItemRead(ExpenseItemCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    expense_id: int


class ExpenseBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    transaction_date: date
    remarks: Optional[str] = Field(None, max_length=1000)


class ExpenseCreate(ExpenseBase):
    items: List[ExpenseItemCreate] = Field(..., min_length=1)


class ExpenseUpdate(ExpenseCreate):
    pass


class ExpenseRead(ExpenseBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    total_expense: float
    items_count: int
    items: List[ExpenseItemRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None
