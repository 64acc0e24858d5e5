from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from core.models import Base, TimestampMixin
from modules.categories.models import Category


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=True, index=True)
    sku = Column(String(50), nullable=True, index=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    stock = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    category = relationship(Category)
    variants = relationship(
        "ProductVariant",
        cascade="all, delete-orphan",
        back_populates="product",
        order_by="ProductVariant.id",
    )


class ProductVariant(Base, TimestampMixin):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    stock = Column(Integer, nullable=True)
    sku = Column(String(50), nullable=True)

    product = relationship("Product", back_populates="variants")
    options = relationship(
        "ProductVariantOption",
        cascade="all, delete-orphan",
        back_populates="variant",
        order_by="ProductVariantOption.id",
    )


class ProductVariantOption(Base, TimestampMixin):
    __tablename__ = "product_variant_options"

    id = Column(Integer, primary_key=True, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    value = Column(String(100), nullable=False)

    variant = relationship("ProductVariant", back_populates="options")
