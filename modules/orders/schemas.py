from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

OrderStatus = Literal["pending", "processing", "completed", "cancelled", "refunded"]
OrderType = Literal["pickup", "delivery", "dine_in"]
PaymentMethod = Literal["cash", "gcash"]


class OrderItemCreate(BaseModel):
    product_id: int
    variant_id: Optional[int] = None
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0.01)


class OrderItemRead(OrderItemCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    subtotal: float
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    variant_name: Optional[str] = None
    variant_sku: Optional[str] = None
    category_name: Optional[str] = None


class OrderBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_name: str = Field(..., min_length=2, max_length=100)
    status: OrderStatus = "pending"
    order_date: datetime
    order_type: Optional[OrderType] = None
    delivery_fee: Optional[float] = Field(None, ge=0)
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = Field(None, max_length=500)


class OrderCreate(OrderBase):
    items: List[OrderItemCreate] = Field(..., min_length=1)

    @field_validator("items")
    @classmethod
    def check_unique_lines(cls, items: List[OrderItemCreate]) -> List[OrderItemCreate]:
        keys = [(item.product_id, item.variant_id) for item in items]
        if len(set(keys)) != len(keys):
            raise ValueError("Duplicate products with the same variant are not allowed")
        return items


class OrderUpdate(OrderCreate):
    pass


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderRead(OrderBase):
    model_config = ConfigDict(from_attributes=True)

    customer_name: str
    id: int
    total: float
    items: List[OrderItemRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None
