from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ConflictException, NotFoundException, is_unique_violation
from core.logging import get_logger
from modules.events import models, schemas

logger = get_logger(__name__)


def _slug_taken(db: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(models.Event.id).filter(models.Event.slug == slug)
    if exclude_id is not None:
        query = query.filter(models.Event.id != exclude_id)
    return query.first() is not None


def _apply(event: models.Event, event_in: schemas.EventCreate) -> None:
    event.title = event_in.title
    event.slug = event_in.slug
    event.location = event_in.location
    event.pax = event_in.pax
    event.description = event_in.description
    event.images = list(event_in.images)
    event.featured_image_index = event_in.featured_image_index
    event.event_date = event_in.event_date
    event.category = event_in.category
    event.flavors = list(event_in.flavors)


def _commit(db: Session, slug: str) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            raise ConflictException(f"An event with slug '{slug}' already exists") from exc
        raise


def list_events(db: Session) -> List[models.Event]:
    return db.query(models.Event).order_by(models.Event.event_date.desc(), models.Event.created_at.desc()).all()


def get_event(db: Session, event_id: int) -> models.Event:
    event = db.query(models.Event).filter(models.Event.id == event_id).first()
    if not event:
        raise NotFoundException("Event not found")
    return event


def get_event_by_slug(db: Session, slug: str) -> models.Event:
    event = db.query(models.Event).filter(models.Event.slug == slug).first()
    if not event:
        raise NotFoundException("Event not found")
    return event


def create_event(db: Session, event_in: schemas.EventCreate) -> models.Event:
    if _slug_taken(db, event_in.slug):
        raise ConflictException(f"An event with slug '{event_in.slug}' already exists")
    event = models.Event()
    _apply(event, event_in)
    db.add(event)
    _commit(db, event_in.slug)
    db.refresh(event)
    logger.info("Created event %s (%s)", event.id, event.slug)
    return event


def update_event(db: Session, event_id: int, event_in: schemas.EventUpdate) -> models.Event:
    event = get_event(db, event_id)
    if event.slug != event_in.slug and _slug_taken(db, event_in.slug, exclude_id=event_id):
        raise ConflictException(f"An event with slug '{event_in.slug}' already exists")
    _apply(event, event_in)
    _commit(db, event_in.slug)
    db.refresh(event)
    return event


def delete_event(db: Session, event_id: int) -> None:
    event = get_event(db, event_id)
    db.delete(event)
    db.commit()
    logger.info("Deleted event %s", event_id)
