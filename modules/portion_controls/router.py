from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from modules.portion_controls import schemas, service

router = APIRouter(prefix="/portion-controls", tags=["portion_controls"])


@router.post("", response_model=schemas.PortionControlRead)
def create_portion_control_endpoint(pc_in: schemas.PortionControlCreate, db: Session = Depends(get_db)):
    return service.create_portion_control(db, pc_in)


@router.get("", response_model=list[schemas.PortionControlSummary])
def list_portion_controls_endpoint(db: Session = Depends(get_db)):
    return service.list_portion_controls(db)


@router.get("/by-category", response_model=list[schemas.PortionControlGroup])
def list_portion_controls_by_category_endpoint(db: Session = Depends(get_db)):
    return service.list_portion_controls_by_category(db)


@router.get("/targets", response_model=list[schemas.RecipeTarget])
def list_recipe_targets_endpoint(db: Session = Depends(get_db)):
    return service.list_recipe_targets(db)


@router.get("/targets/grouped", response_model=list[schemas.GroupedRecipeTarget])
def list_grouped_recipe_targets_endpoint(db: Session = Depends(get_db)):
    return service.list_grouped_recipe_targets(db)


@router.get("/{portion_control_id}", response_model=schemas.PortionControlRead)
def get_portion_control_endpoint(portion_control_id: int, db: Session = Depends(get_db)):
    return service.get_portion_control(db, portion_control_id)


@router.put("/{portion_control_id}", response_model=schemas.PortionControlRead)
def update_portion_control_endpoint(
    portion_control_id: int, pc_in: schemas.PortionControlUpdate, db: Session = Depends(get_db)
):
    return service.update_portion_control(db, portion_control_id, pc_in)


@router.delete("/{portion_control_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_portion_control_endpoint(portion_control_id: int, db: Session = Depends(get_db)):
    service.delete_portion_control(db, portion_control_id)
