from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from modules.events import schemas, service

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=schemas.EventRead)
def create_event_endpoint(event_in: schemas.EventCreate, db: Session = Depends(get_db)):
    return service.create_event(db, event_in)


@router.get("", response_model=list[schemas.EventRead])
def list_events_endpoint(db: Session = Depends(get_db)):
    return service.list_events(db)


@router.get("/slug/{slug}", response_model=schemas.EventRead)
def get_event_by_slug_endpoint(slug: str, db: Session = Depends(get_db)):
    return service.get_event_by_slug(db, slug)


@router.get("/{event_id}", response_model=schemas.EventRead)
def get_event_endpoint(event_id: int, db: Session = Depends(get_db)):
    return service.get_event(db, event_id)


@router.put("/{event_id}", response_model=schemas.EventRead)
def update_event_endpoint(event_id: int, event_in: schemas.EventUpdate, db: Session = Depends(get_db)):
    return service.update_event(db, event_id, event_in)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event_endpoint(event_id: int, db: Session = Depends(get_db)):
    service.delete_event(db, event_id)
