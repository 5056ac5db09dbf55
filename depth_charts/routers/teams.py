from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db import get_db
from ..errors import ConflictError, NotFoundError
from ..services.permissions import require_dev_seed

# Minimal team records so charts and rosters have an owner; creation is a dev/test seeding route.
router = APIRouter(tags=["teams"])


@router.get("/teams", response_model=List[schemas.TeamOut])
def list_teams(db: Session = Depends(get_db)):
    return db.query(models.Team).order_by(models.Team.id.asc()).all()


@router.post(
    "/teams/",
    response_model=schemas.TeamOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_dev_seed)],
)
def create_team(body: schemas.TeamCreate, db: Session = Depends(get_db)):
    name = body.name.strip()
    existing = db.query(models.Team).filter(models.Team.name == name).first()
    if existing:
        raise ConflictError("Team name already exists")

    team = models.Team(name=name)
    db.add(team)
    db.commit()
    db.refresh(team)
    return team


@router.get("/teams/{team_id}/players", response_model=List[schemas.PlayerOut])
def list_team_players(team_id: int, db: Session = Depends(get_db)):
    if not db.get(models.Team, team_id):
        raise NotFoundError(f"Team {team_id} not found")
    return (
        db.query(models.Player)
        .filter(models.Player.team_id == team_id)
        .order_by(models.Player.last_name.asc(), models.Player.first_name.asc(), models.Player.id.asc())
        .all()
    )
