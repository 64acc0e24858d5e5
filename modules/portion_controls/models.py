from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint, text
from sqlalchemy.orm import relationship

from core.models import Base, TimestampMixin
from modules.products.models import Product, ProductVariant


class PortionControl(Base, TimestampMixin):
    """A recipe attached to one product (variant_id NULL) or one product variant."""

    __tablename__ = "portion_controls"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    serving_size = Column(String(100), nullable=True)

    product = relationship(Product)
    variant = relationship(ProductVariant)
    items = relationship(
        "PortionControlItem",
        back_populates="portion_control",
        cascade="all, delete-orphan",
        order_by="PortionControlItem.id",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("product_id", "variant_id", name="unique_product_recipe"),
        # NULLs are distinct in a plain unique constraint, so base-product recipes need their own index
        Index(
            "unique_product_base_recipe",
            "product_id",
            unique=True,
            sqlite_where=text("variant_id IS NULL"),
            postgresql_where=text("variant_id IS NULL"),
        ),
    )


class PortionControlItem(Base, TimestampMixin):
    __tablename__ = "portion_control_items"

    id = Column(Integer, primary_key=True, index=True)
    portion_control_id = Column(
        Integer, ForeignKey("portion_controls.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=True, index=True)
    ingredient_variant_id = Column(
        Integer, ForeignKey("product_variants.id", ondelete="SET NULL"), nullable=True, index=True
    )
    ingredient_name = Column(String(200), nullable=False)
    quantity = Column(Numeric(10, 3, asdecimal=False), nullable=False)
    unit = Column(String(20), nullable=False, default="pcs")
    notes = Column(Text, nullable=True)

    portion_control = relationship("PortionControl", back_populates="items")
    ingredient_product = relationship(Product, foreign_keys=[ingredient_product_id])
    ingredient_variant = relationship(ProductVariant, foreign_keys=[ingredient_variant_id])

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_portion_control_items_quantity_positive"),)
