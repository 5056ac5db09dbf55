# depth_charts/services/roster.py
from __future__ import annotations

from typing import List, Protocol

from sqlalchemy.orm import Session

from .. import models

INACTIVE_STATUSES = {"inactive"}


class RosterDirectory(Protocol):
    """Read-only source of candidate players for a team."""

    def players_for_team(self, team_id: int) -> List[models.Player]: ...


class SqlRosterDirectory:
    """Roster backed by the local `players` table."""

    def __init__(self, db: Session):
        self.db = db

    def players_for_team(self, team_id: int) -> List[models.Player]:
        rows = (
            self.db.query(models.Player)
            .filter(models.Player.team_id == team_id)
            .order_by(models.Player.id.asc())
            .all()
        )
        return [p for p in rows if (p.status or "").lower() not in INACTIVE_STATUSES]
