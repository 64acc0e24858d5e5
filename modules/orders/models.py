from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from core.models import Base, TimestampMixin, utcnow
from modules.products.models import Product, ProductVariant


class Order(Base, TimestampMixin):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String(100), nullable=False, default="Guest", index=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    total = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    order_date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    order_type = Column(String(20), nullable=True, index=True)
    delivery_fee = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    payment_method = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)

    items = relationship(
        "OrderItem",
        cascade="all, delete-orphan",
        back_populates="order",
        order_by="OrderItem.id",
        passive_deletes=True,
    )


class OrderItem(Base, TimestampMixin):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id", ondelete="SET NULL"), nullable=True, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    subtotal = Column(Numeric(10, 2, asdecimal=False), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship(Product)
    variant = relationship(ProductVariant)

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),)
