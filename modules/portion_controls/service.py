from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from core.errors import ConflictException, NotFoundException, ValidationAppException, is_unique_violation
from core.logging import get_logger
from core.settings import get_settings
from modules.categories import models as category_models
from modules.portion_controls import grouping, models, schemas
from modules.products import models as product_models

logger = get_logger(__name__)


def _duplicate_recipe_message(variant_id: Optional[int], updating: bool = False) -> str:
    target = "this product variant" if variant_id is not None else "this product"
    if updating:
        return f"A recipe already exists for {target}. Please choose a different product/variant."
    return (
        f"A recipe already exists for {target}. "
        "Please update the existing recipe or choose a different product/variant."
    )


def recipe_exists(db: Session, product_id: int, variant_id: Optional[int]) -> bool:
    query = db.query(models.PortionControl.id).filter(models.PortionControl.product_id == product_id)
    if variant_id is not None:
        query = query.filter(models.PortionControl.variant_id == variant_id)
    else:
        query = query.filter(models.PortionControl.variant_id.is_(None))
    return query.first() is not None


def _ensure_target(db: Session, product_id: int, variant_id: Optional[int]) -> None:
    product = db.query(product_models.Product.id).filter(product_models.Product.id == product_id).first()
    if not product:
        raise NotFoundException("Product not found")
    if variant_id is None:
        # Products with variants take recipes per variant only, matching the target picker
        has_variants = (
            db.query(product_models.ProductVariant.id)
            .filter(product_models.ProductVariant.product_id == product_id)
            .first()
        )
        if has_variants:
            raise ValidationAppException("This product has variants; choose a variant for the recipe")
        return
    variant = (
        db.query(product_models.ProductVariant.product_id)
        .filter(product_models.ProductVariant.id == variant_id)
        .first()
    )
    if not variant:
        raise NotFoundException("Variant not found")
    if variant.product_id != product_id:
        raise ValidationAppException("Variant does not belong to the selected product")


def _build_items(items_in: List[schemas.PortionControlItemCreate], portion_control_id: int):
    return [
        models.PortionControlItem(
            portion_control_id=portion_control_id,
            ingredient_product_id=item.ingredient_product_id,
            ingredient_variant_id=item.ingredient_variant_id,
            ingredient_name=item.ingredient_name,
            quantity=item.quantity,
            unit=item.unit,
            notes=item.notes or None,
        )
        for item in items_in
    ]


def _serialize_item(item: models.PortionControlItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "portion_control_id": item.portion_control_id,
        "ingredient_product_id": item.ingredient_product_id,
        "ingredient_variant_id": item.ingredient_variant_id,
        "ingredient_product_name": item.ingredient_product.name if item.ingredient_product else None,
        "ingredient_variant_name": item.ingredient_variant.name if item.ingredient_variant else None,
        "ingredient_name": item.ingredient_name,
        "quantity": item.quantity,
        "unit": item.unit,
        "notes": item.notes,
    }


def _serialize_portion_control(
    pc: models.PortionControl, items_count: Optional[int] = None, with_items: bool = False
) -> Dict[str, Any]:
    product = pc.product
    category = product.category if product else None
    payload = {
        "id": pc.id,
        "product_id": pc.product_id,
        "variant_id": pc.variant_id,
        "name": pc.name,
        "description": pc.description,
        "serving_size": pc.serving_size,
        "created_at": pc.created_at,
        "updated_at": pc.updated_at,
        "product_name": product.name if product else None,
        "variant_name": pc.variant.name if pc.variant else None,
        "category_id": category.id if category else None,
        "category_name": category.name if category else None,
        "items_count": items_count if items_count is not None else len(pc.items),
    }
    if with_items:
        payload["items"] = [_serialize_item(item) for item in pc.items]
    return payload


def _get_portion_control_model(db: Session, portion_control_id: int) -> models.PortionControl:
    pc = (
        db.query(models.PortionControl)
        .options(selectinload(models.PortionControl.items))
        .filter(models.PortionControl.id == portion_control_id)
        .first()
    )
    if not pc:
        raise NotFoundException("Recipe not found")
    return pc


def list_portion_controls(db: Session) -> List[Dict[str, Any]]:
    recipes = (
        db.query(models.PortionControl)
        .options(
            selectinload(models.PortionControl.product).selectinload(product_models.Product.category),
            selectinload(models.PortionControl.variant),
        )
        .order_by(models.PortionControl.name.asc())
        .all()
    )
    counts = dict(
        db.query(models.PortionControlItem.portion_control_id, func.count(models.PortionControlItem.id))
        .group_by(models.PortionControlItem.portion_control_id)
        .all()
    )
    return [_serialize_portion_control(pc, items_count=counts.get(pc.id, 0)) for pc in recipes]


def list_portion_controls_by_category(db: Session) -> List[schemas.PortionControlGroup]:
    recipes = [schemas.PortionControlSummary(**row) for row in list_portion_controls(db)]
    return grouping.group_by_category(recipes, get_settings().uncategorized_label)


def get_portion_control(db: Session, portion_control_id: int) -> Dict[str, Any]:
    return _serialize_portion_control(_get_portion_control_model(db, portion_control_id), with_items=True)


def create_portion_control(db: Session, pc_in: schemas.PortionControlCreate) -> Dict[str, Any]:
    _ensure_target(db, pc_in.product_id, pc_in.variant_id)
    if recipe_exists(db, pc_in.product_id, pc_in.variant_id):
        logger.warning("Duplicate recipe rejected for %s", grouping.recipe_key(pc_in.product_id, pc_in.variant_id))
        raise ConflictException(_duplicate_recipe_message(pc_in.variant_id))

    pc = models.PortionControl(
        product_id=pc_in.product_id,
        variant_id=pc_in.variant_id,
        name=pc_in.name,
        description=pc_in.description or None,
        serving_size=pc_in.serving_size or None,
    )
    db.add(pc)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            # Another writer got there between the check and the insert
            logger.warning("Recipe unique constraint hit for product %s", pc_in.product_id)
            raise ConflictException(_duplicate_recipe_message(pc_in.variant_id)) from exc
        raise

    # Recipe row and items commit together; a failing item leaves no recipe behind
    db.add_all(_build_items(pc_in.items, pc.id))
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Recipe items rejected, recipe for product %s not saved: %s", pc_in.product_id, exc.orig)
        raise ValidationAppException(f"Recipe items could not be saved: {exc.orig}") from exc

    logger.info("Created recipe %s for %s", pc.id, grouping.recipe_key(pc.product_id, pc.variant_id))
    return get_portion_control(db, pc.id)


def update_portion_control(
    db: Session, portion_control_id: int, pc_in: schemas.PortionControlUpdate
) -> Dict[str, Any]:
    pc = _get_portion_control_model(db, portion_control_id)
    changing_target = pc.product_id != pc_in.product_id or pc.variant_id != pc_in.variant_id
    if changing_target:
        _ensure_target(db, pc_in.product_id, pc_in.variant_id)
        if recipe_exists(db, pc_in.product_id, pc_in.variant_id):
            logger.warning(
                "Recipe %s cannot move to %s: taken",
                pc.id,
                grouping.recipe_key(pc_in.product_id, pc_in.variant_id),
            )
            raise ConflictException(_duplicate_recipe_message(pc_in.variant_id, updating=True))

    # Items are replaced wholesale, never diffed
    db.query(models.PortionControlItem).filter(
        models.PortionControlItem.portion_control_id == portion_control_id
    ).delete(synchronize_session=False)
    db.expire(pc, ["items"])

    pc.product_id = pc_in.product_id
    pc.variant_id = pc_in.variant_id
    pc.name = pc_in.name
    pc.description = pc_in.description or None
    pc.serving_size = pc_in.serving_size or None
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            raise ConflictException(_duplicate_recipe_message(pc_in.variant_id, updating=True)) from exc
        raise

    db.add_all(_build_items(pc_in.items, portion_control_id))
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationAppException(f"Recipe items could not be saved: {exc.orig}") from exc

    logger.info("Updated recipe %s with %d items", portion_control_id, len(pc_in.items))
    return get_portion_control(db, portion_control_id)


def delete_portion_control(db: Session, portion_control_id: int) -> None:
    _get_portion_control_model(db, portion_control_id)
    # Items go with the recipe through ON DELETE CASCADE
    db.query(models.PortionControl).filter(models.PortionControl.id == portion_control_id).delete(
        synchronize_session=False
    )
    db.commit()
    logger.info("Deleted recipe %s", portion_control_id)


def _target_sources(db: Session):
    settings = get_settings()
    categories = db.query(category_models.Category).all()
    addons_category_id = grouping.find_addons_category_id(categories, settings.addons_category_name)
    products = (
        db.query(product_models.Product)
        .filter(product_models.Product.is_active.is_(True))
        .order_by(product_models.Product.name.asc())
        .all()
    )
    variants = db.query(product_models.ProductVariant).order_by(product_models.ProductVariant.name.asc()).all()
    taken = grouping.existing_recipe_keys(
        db.query(models.PortionControl.product_id, models.PortionControl.variant_id).all()
    )
    return products, variants, taken, addons_category_id


def list_recipe_targets(db: Session) -> List[schemas.RecipeTarget]:
    products, variants, taken, addons_category_id = _target_sources(db)
    return grouping.build_recipe_targets(products, variants, taken, addons_category_id)


def list_grouped_recipe_targets(db: Session) -> List[schemas.GroupedRecipeTarget]:
    products, variants, taken, addons_category_id = _target_sources(db)
    return grouping.build_grouped_targets(products, variants, taken, addons_category_id)
