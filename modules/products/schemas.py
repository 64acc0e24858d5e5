from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VariantOptionBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50, description="Option name, e.g. Size")
    value: str = Field(..., min_length=1, max_length=100, description="Option value, e.g. Large")


class VariantOptionCreate(VariantOptionBase):
    pass


class VariantOptionRead(VariantOptionBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class VariantBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Variant name")
    price: Optional[float] = Field(None, gt=0, description="Variant price")
    stock: Optional[int] = Field(None, ge=0, description="Variant stock")
    sku: Optional[str] = Field(None, max_length=50)


class VariantCreate(VariantBase):
    options: List[VariantOptionCreate] = Field(default_factory=list)


class VariantRead(VariantBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    options: List[VariantOptionRead] = Field(default_factory=list)


class ProductBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100, description="Product name")
    description: Optional[str] = Field(None, max_length=1000)
    category_id: int
    sku: Optional[str] = Field(None, max_length=50)
    price: Optional[float] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)


class ProductCreate(ProductBase):
    variants: List[VariantCreate] = Field(default_factory=list)


class ProductUpdate(ProductCreate):
    pass


class ProductStatusUpdate(BaseModel):
    is_active: bool


class ProductSummary(ProductBase):
    """List row: product with its category name and variant count."""

    model_config = ConfigDict(from_attributes=True)

    category_id: Optional[int] = None
    id: int
    is_active: bool
    category_name: Optional[str] = None
    variants_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProductRead(ProductSummary):
    variants: List[VariantRead] = Field(default_factory=list)


class MenuVariant(BaseModel):
    id: int
    name: str
    price: Optional[float] = None


class MenuProduct(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    category_name: str
    price: Optional[float] = None
    variants: List[MenuVariant] = Field(default_factory=list)


class MenuCategory(BaseModel):
    id: Optional[int] = None
    name: str
    products: List[MenuProduct] = Field(default_factory=list)
