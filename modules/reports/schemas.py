import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class DailySales(BaseModel):
    date: datetime.date
    order_count: int = 0
    total_gross: float = 0.0
    total_expenses: float = 0.0
    total_net: float = 0.0


class SalesReport(BaseModel):
    period_start: datetime.date
    period_end: datetime.date
    total_orders: int
    total_gross: float
    total_expenses: float
    total_net: float
    daily_data: List[DailySales] = Field(default_factory=list)


class TopProduct(BaseModel):
    product_id: int
    product_name: str
    product_sku: Optional[str] = None
    variant_id: Optional[int] = None
    variant_name: Optional[str] = None
    variant_sku: Optional[str] = None
    category_name: Optional[str] = None
    total_quantity_sold: int = 0
    total_revenue: float = 0.0
    order_count: int = 0
