from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from core.models import Base, TimestampMixin


class Expense(Base, TimestampMixin):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    transaction_date = Column(Date, nullable=False, index=True)
    total_expense = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    items_count = Column(Integer, nullable=False, default=0)
    remarks = Column(Text, nullable=True)

    items = relationship(
        "ExpenseItem",
        cascade="all, delete-orphan",
        back_populates="expense",
        order_by="ExpenseItem.id",
        passive_deletes=True,
    )


class ExpenseItem(Base, TimestampMixin):
    __tablename__ = "expense_items"

    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    item_name = Column(String(200), nullable=False)
    cost = Column(Numeric(12, 2, asdecimal=False), nullable=False)

    expense = relationship("Expense", back_populates="items")

    __table_args__ = (CheckConstraint("cost > 0", name="ck_expense_items_cost_positive"),)
