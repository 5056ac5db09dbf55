from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..services import assignments, chart_store
from ..services.permissions import Caller, Capability, require

router = APIRouter(tags=["positions"])


@router.post("/depth-charts/{chart_id}/positions", response_model=schemas.PositionOut, status_code=201)
def add_position(
    chart_id: int,
    body: schemas.PositionIn,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.MANAGE_POSITIONS)),
):
    return chart_store.add_position(db, chart_id, body.model_dump(), actor=caller.user_id)


@router.patch("/positions/{position_id}", response_model=schemas.PositionOut)
def update_position(
    position_id: int,
    body: schemas.PositionUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.MANAGE_POSITIONS)),
):
    return chart_store.update_position(db, position_id, body.model_dump(exclude_unset=True), actor=caller.user_id)


@router.delete("/positions/{position_id}")
def remove_position(
    position_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.MANAGE_POSITIONS)),
):
    return chart_store.remove_position(db, position_id, actor=caller.user_id)


# ====== Assignments ======
@router.post("/positions/{position_id}/assignments", response_model=schemas.AssignmentOut, status_code=201)
def assign_player(
    position_id: int,
    body: schemas.AssignmentIn,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.ASSIGN_PLAYER)),
):
    return assignments.assign_player(
        db,
        position_id,
        body.player_id,
        depth_order=body.depth_order,
        notes=body.notes,
        actor=caller.user_id,
    )


@router.patch("/assignments/{assignment_id}/order", response_model=list[schemas.AssignmentOut])
def reorder_assignment(
    assignment_id: int,
    body: schemas.ReorderIn,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.ASSIGN_PLAYER)),
):
    """Move a player within their position; returns the position's new ranking."""
    return assignments.reorder(db, assignment_id, body.depth_order, actor=caller.user_id)


@router.delete("/assignments/{assignment_id}")
def unassign_player(
    assignment_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.UNASSIGN_PLAYER)),
):
    return assignments.unassign_player(db, assignment_id, actor=caller.user_id)
