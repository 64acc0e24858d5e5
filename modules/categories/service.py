from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ConflictException, NotFoundException
from core.logging import get_logger
from modules.categories import models, schemas

logger = get_logger(__name__)


def list_categories(db: Session, active_only: bool = False) -> List[models.Category]:
    query = db.query(models.Category)
    if active_only:
        query = query.filter(models.Category.is_active.is_(True))
    return query.order_by(models.Category.name.asc()).all()


def get_category(db: Session, category_id: int) -> models.Category:
    category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if not category:
        raise NotFoundException("Category not found")
    return category


def create_category(db: Session, category_in: schemas.CategoryCreate) -> models.Category:
    category = models.Category(
        name=category_in.name,
        description=category_in.description or None,
        is_active=True,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Created category %s (%s)", category.id, category.name)
    return category


def update_category(db: Session, category_id: int, category_in: schemas.CategoryUpdate) -> models.Category:
    category = get_category(db, category_id)
    category.name = category_in.name
    category.description = category_in.description or None
    db.commit()
    db.refresh(category)
    return category


def set_category_status(db: Session, category_id: int, is_active: bool) -> models.Category:
    category = get_category(db, category_id)
    category.is_active = is_active
    db.commit()
    db.refresh(category)
    logger.info("Category %s is now %s", category.id, "active" if is_active else "inactive")
    return category


def delete_category(db: Session, category_id: int) -> None:
    get_category(db, category_id)
    # Products reference categories with ON DELETE RESTRICT; the database decides
    try:
        db.query(models.Category).filter(models.Category.id == category_id).delete(synchronize_session=False)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Refused to delete category %s: still referenced", category_id)
        raise ConflictException(f"Category is still used by products: {exc.orig}") from exc
    logger.info("Deleted category %s", category_id)
