# depth_charts/services/recommendations.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..errors import ValidationError
from ..logic.position_fit import RankedCandidates, name_key
from .chart_store import get_chart_or_404, get_position_or_404
from .locks import chart_snapshot
from .roster import RosterDirectory, SqlRosterDirectory


def _roster(db: Session, roster: Optional[RosterDirectory]) -> RosterDirectory:
    return roster if roster is not None else SqlRosterDirectory(db)


def recommended_players(
    db: Session,
    chart_id: int,
    position_id: int,
    roster: Optional[RosterDirectory] = None,
) -> RankedCandidates:
    """
    Roster players not yet in `position_id`, best position fit first
    (primary match, then secondary match, then everyone else), ties by
    last name then first name. Read-only; writes no history.
    """
    with chart_snapshot(db, chart_id):
        chart = get_chart_or_404(db, chart_id)
        pos = get_position_or_404(db, position_id)
        if pos.depth_chart_id != chart.id:
            raise ValidationError(f"Position {position_id} does not belong to depth chart {chart_id}")

        assigned = {a.player_id for a in pos.assignments}
        players = _roster(db, roster).players_for_team(chart.team_id)
        return RankedCandidates(players, pos.position_code, exclude_ids=assigned)


def available_players(
    db: Session,
    chart_id: int,
    roster: Optional[RosterDirectory] = None,
) -> List[models.Player]:
    """Roster players with no assignment anywhere in the chart, by name."""
    with chart_snapshot(db, chart_id):
        chart = get_chart_or_404(db, chart_id)
        assigned = {a.player_id for pos in chart.positions for a in pos.assignments}
        players = _roster(db, roster).players_for_team(chart.team_id)
        return sorted((p for p in players if p.id not in assigned), key=name_key)
