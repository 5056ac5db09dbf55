from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db import get_db
from ..errors import NotFoundError
from ..services.permissions import require_dev_seed

router = APIRouter(prefix="/players", tags=["players"])


def _code(s: str | None) -> str | None:
    return s.strip().upper() if s and s.strip() else None


def _codes(s: str | None) -> str | None:
    if not s:
        return None
    parts = [p.strip().upper() for p in s.split(",") if p.strip()]
    return ",".join(parts) or None


@router.post("/seed", response_model=list[schemas.PlayerOut], dependencies=[Depends(require_dev_seed)])
def seed_players(items: list[schemas.PlayerIn], db: Session = Depends(get_db)):
    """
    Insert roster players for dev/test. The engine itself only reads players.
    """
    team_ids = {it.team_id for it in items}
    for tid in team_ids:
        if not db.get(models.Team, tid):
            raise NotFoundError(f"Team {tid} not found")

    rows = []
    for it in items:
        row = models.Player(
            team_id=it.team_id,
            first_name=it.first_name.strip(),
            last_name=it.last_name.strip(),
            position=_code(it.position),
            secondary_positions=_codes(it.secondary_positions),
            jersey_number=it.jersey_number,
            status=(it.status or "active").strip().lower(),
        )
        db.add(row)
        rows.append(row)
    db.commit()
    for r in rows:
        db.refresh(r)
    return rows
