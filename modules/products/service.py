from collections import Counter
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from core.errors import ConflictException, NotFoundException
from core.logging import get_logger
from core.settings import get_settings
from modules.categories import models as category_models
from modules.products import models, schemas

logger = get_logger(__name__)

COPY_SUFFIX = " (Copy)"


def _serialize_variant(variant: models.ProductVariant) -> Dict[str, Any]:
    return {
        "id": variant.id,
        "product_id": variant.product_id,
        "name": variant.name,
        "price": variant.price,
        "stock": variant.stock,
        "sku": variant.sku,
        "options": [{"id": o.id, "name": o.name, "value": o.value} for o in variant.options],
    }


def _serialize_product(
    product: models.Product, variants_count: Optional[int] = None, with_variants: bool = False
) -> Dict[str, Any]:
    payload = {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "category_id": product.category_id,
        "category_name": product.category.name if product.category else None,
        "sku": product.sku,
        "price": product.price,
        "stock": product.stock,
        "is_active": product.is_active,
        "variants_count": variants_count if variants_count is not None else len(product.variants),
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }
    if with_variants:
        payload["variants"] = [_serialize_variant(v) for v in product.variants]
    return payload


def _build_variants(variants_in: List[schemas.VariantCreate]) -> List[models.ProductVariant]:
    variants = []
    for variant_in in variants_in:
        variant = models.ProductVariant(
            name=variant_in.name,
            price=variant_in.price,
            stock=variant_in.stock,
            sku=variant_in.sku or None,
        )
        for option in variant_in.options:
            variant.options.append(models.ProductVariantOption(name=option.name, value=option.value))
        variants.append(variant)
    return variants


def _ensure_category(db: Session, category_id: int) -> None:
    exists = db.query(category_models.Category.id).filter(category_models.Category.id == category_id).first()
    if not exists:
        raise NotFoundException("Category not found")


def _get_product_model(db: Session, product_id: int) -> models.Product:
    product = (
        db.query(models.Product)
        .options(selectinload(models.Product.variants).selectinload(models.ProductVariant.options))
        .filter(models.Product.id == product_id)
        .first()
    )
    if not product:
        raise NotFoundException("Product not found")
    return product


def list_products(db: Session, category_id: Optional[int] = None, active_only: bool = False) -> List[Dict[str, Any]]:
    query = db.query(models.Product)
    if category_id is not None:
        query = query.filter(models.Product.category_id == category_id)
    if active_only:
        query = query.filter(models.Product.is_active.is_(True))
    products = query.order_by(models.Product.name.asc()).all()

    product_ids = [p.id for p in products]
    counts: Counter = Counter()
    if product_ids:
        rows = (
            db.query(models.ProductVariant.product_id)
            .filter(models.ProductVariant.product_id.in_(product_ids))
            .all()
        )
        counts.update(row.product_id for row in rows)
    return [_serialize_product(p, variants_count=counts.get(p.id, 0)) for p in products]


def get_product(db: Session, product_id: int) -> Dict[str, Any]:
    return _serialize_product(_get_product_model(db, product_id), with_variants=True)


def create_product(db: Session, product_in: schemas.ProductCreate) -> Dict[str, Any]:
    _ensure_category(db, product_in.category_id)
    product = models.Product(
        name=product_in.name,
        description=product_in.description or None,
        category_id=product_in.category_id,
        sku=product_in.sku or None,
        price=product_in.price,
        stock=product_in.stock,
        is_active=True,
        variants=_build_variants(product_in.variants),
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Created product %s (%s) with %d variants", product.id, product.name, len(product.variants))
    return _serialize_product(product, with_variants=True)


def update_product(db: Session, product_id: int, product_in: schemas.ProductUpdate) -> Dict[str, Any]:
    product = _get_product_model(db, product_id)
    if product_in.category_id != product.category_id:
        _ensure_category(db, product_in.category_id)

    product.name = product_in.name
    product.description = product_in.description or None
    product.category_id = product_in.category_id
    product.sku = product_in.sku or None
    product.price = product_in.price
    product.stock = product_in.stock
    # Variants are replaced wholesale; orphaned rows and their options are deleted
    product.variants = _build_variants(product_in.variants)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictException(f"Product variants could not be replaced: {exc.orig}") from exc
    db.refresh(product)
    return _serialize_product(product, with_variants=True)


def set_product_status(db: Session, product_id: int, is_active: bool) -> Dict[str, Any]:
    product = _get_product_model(db, product_id)
    product.is_active = is_active
    db.commit()
    db.refresh(product)
    return _serialize_product(product, with_variants=True)


def delete_product(db: Session, product_id: int) -> None:
    product = _get_product_model(db, product_id)
    db.delete(product)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Refused to delete product %s: still referenced", product_id)
        raise ConflictException(f"Product is still referenced: {exc.orig}") from exc
    logger.info("Deleted product %s", product_id)


def clone_product(db: Session, product_id: int) -> Dict[str, Any]:
    """Create a copy of a product with its variants and options; the product SKU is cleared."""
    source = _get_product_model(db, product_id)
    clone = models.Product(
        name=f"{source.name}{COPY_SUFFIX}",
        description=source.description,
        category_id=source.category_id,
        sku=None,
        price=source.price,
        stock=source.stock,
        is_active=True,
    )
    for variant in source.variants:
        clone.variants.append(_copy_variant(variant, name=variant.name, sku=variant.sku))
    db.add(clone)
    db.commit()
    db.refresh(clone)
    logger.info("Cloned product %s into %s", source.id, clone.id)
    return _serialize_product(clone, with_variants=True)


def clone_variant(db: Session, product_id: int, variant_id: int) -> Dict[str, Any]:
    """Append a copy of one variant to its own product; the copy gets no SKU."""
    product = _get_product_model(db, product_id)
    source = next((v for v in product.variants if v.id == variant_id), None)
    if source is None:
        raise NotFoundException("Variant not found")
    product.variants.append(_copy_variant(source, name=f"{source.name or 'Variant'}{COPY_SUFFIX}", sku=None))
    db.commit()
    db.refresh(product)
    return _serialize_product(product, with_variants=True)


def _copy_variant(variant: models.ProductVariant, name: str, sku: Optional[str]) -> models.ProductVariant:
    copy = models.ProductVariant(name=name, price=variant.price, stock=variant.stock, sku=sku)
    for option in variant.options:
        copy.options.append(models.ProductVariantOption(name=option.name, value=option.value))
    return copy


def get_menu(db: Session) -> List[Dict[str, Any]]:
    """Active products grouped by category, categories sorted by name."""
    uncategorized = get_settings().uncategorized_label
    products = (
        db.query(models.Product)
        .options(selectinload(models.Product.variants))
        .filter(models.Product.is_active.is_(True))
        .order_by(models.Product.name.asc())
        .all()
    )

    menu: Dict[Optional[int], Dict[str, Any]] = {}
    for product in products:
        category_name = product.category.name if product.category else uncategorized
        bucket = menu.setdefault(
            product.category_id, {"id": product.category_id, "name": category_name, "products": []}
        )
        bucket["products"].append(
            {
                "id": product.id,
                "name": product.name,
                "description": product.description,
                "category_id": product.category_id,
                "category_name": category_name,
                "price": product.price,
                "variants": [{"id": v.id, "name": v.name, "price": v.price} for v in product.variants],
            }
        )
    return sorted(menu.values(), key=lambda c: c["name"].lower())
