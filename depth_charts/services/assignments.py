# depth_charts/services/assignments.py
from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..errors import ConflictError, NotFoundError, ValidationError
from ..logic import ordering
from . import history
from .chart_store import get_chart_or_404, get_position_or_404
from .locks import chart_transaction

A = models.HistoryAction


def get_assignment_or_404(db: Session, assignment_id: int) -> models.Assignment:
    row = db.get(models.Assignment, assignment_id)
    if not row:
        raise NotFoundError(f"Assignment {assignment_id} not found")
    return row


def _ranked(db: Session, position_id: int) -> List[models.Assignment]:
    return (
        db.query(models.Assignment)
        .filter(models.Assignment.position_id == position_id)
        .order_by(models.Assignment.depth_order.asc(), models.Assignment.id.asc())
        .all()
    )


def _orders(ranked: List[models.Assignment]) -> List[dict[str, int]]:
    return [{"player_id": a.player_id, "depth_order": a.depth_order} for a in ranked]


def _apply_ranking(db: Session, ranked: List[models.Assignment], new: Optional[models.Assignment] = None) -> None:
    """
    Persist `ranked` as depth orders 1..k. Existing rows are parked on negative
    scratch values first so the (position_id, depth_order) unique constraint
    holds after every flush; `new` (not yet in the session) is added last.
    """
    existing = [a for a in ranked if a is not new]
    for i, a in enumerate(existing, start=1):
        a.depth_order = -i
    db.flush()

    for a, order in ordering.numbered(ranked):
        a.depth_order = order
    db.flush()

    if new is not None:
        db.add(new)
        db.flush()


def _chart_id_for_position(db: Session, position_id: int) -> int:
    return get_position_or_404(db, position_id).depth_chart_id


def assign_player(
    db: Session,
    position_id: int,
    player_id: int,
    depth_order: Optional[int] = None,
    notes: Optional[str] = None,
    actor: Optional[str] = None,
) -> models.Assignment:
    """
    Put a player into a position's ranking.
      - already in this position           -> ConflictError, nothing changes
      - depth_order omitted                -> appended (max + 1, or 1 when empty)
      - depth_order within 1..count        -> players at or below it shift down one
      - depth_order beyond count + 1       -> clamped to count + 1
    The same player may hold other positions in the chart.
    """
    if depth_order is not None and depth_order < ordering.FIRST_ORDER:
        raise ValidationError(f"depth_order must be >= {ordering.FIRST_ORDER}, got {depth_order}")

    chart_id = _chart_id_for_position(db, position_id)
    with chart_transaction(db, chart_id=chart_id):
        pos = get_position_or_404(db, position_id)
        chart = get_chart_or_404(db, pos.depth_chart_id)

        player = db.get(models.Player, player_id)
        if not player:
            raise NotFoundError(f"Player {player_id} not found")
        if player.team_id != chart.team_id:
            raise ValidationError(f"Player {player_id} is not on team {chart.team_id}'s roster")

        ranked = _ranked(db, pos.id)
        if any(a.player_id == player_id for a in ranked):
            raise ConflictError(f"Player {player_id} is already assigned to {pos.position_code}")
        if pos.max_players is not None and len(ranked) >= pos.max_players:
            raise ConflictError(f"Position {pos.position_code} is full ({pos.max_players} players)")

        target = ordering.resolve_insert_order(depth_order, len(ranked))
        before = _orders(ranked)

        new = models.Assignment(
            position_id=pos.id,
            player_id=player_id,
            notes=notes,
            assigned_by=actor,
        )
        _apply_ranking(db, ordering.insert_at(ranked, new, target), new=new)

        history.append(
            db,
            chart.id,
            A.ASSIGN,
            actor,
            f"Assigned player {player_id} to {pos.position_code} at depth {target}",
            {
                "position_id": pos.id,
                "position_code": pos.position_code,
                "player_id": player_id,
                "depth_order": target,
                "requested_depth_order": depth_order,
                "before": before,
                "after": _orders(_ranked(db, pos.id)),
            },
        )

    db.refresh(new)
    return new


def unassign_player(db: Session, assignment_id: int, actor: Optional[str] = None) -> dict[str, Any]:
    """Remove an assignment; everyone ranked below it moves up one."""
    chart_id = _chart_id_for_position(db, get_assignment_or_404(db, assignment_id).position_id)
    with chart_transaction(db, chart_id=chart_id):
        row = get_assignment_or_404(db, assignment_id)
        pos = get_position_or_404(db, row.position_id)

        ranked = _ranked(db, pos.id)
        before = _orders(ranked)
        removed_order = row.depth_order
        player_id = row.player_id

        remaining = ordering.remove_at(ranked, ranked.index(row) + 1)
        db.delete(row)
        db.flush()
        _apply_ranking(db, remaining)

        after = _orders(remaining)
        history.append(
            db,
            pos.depth_chart_id,
            A.UNASSIGN,
            actor,
            f"Unassigned player {player_id} from {pos.position_code} (was depth {removed_order})",
            {
                "position_id": pos.id,
                "position_code": pos.position_code,
                "player_id": player_id,
                "depth_order": removed_order,
                "before": before,
                "after": after,
            },
        )

    return {
        "ok": True,
        "deleted_assignment_id": assignment_id,
        "position_id": pos.id,
        "remaining": after,
    }


def reorder(db: Session, assignment_id: int, depth_order: int, actor: Optional[str] = None) -> List[models.Assignment]:
    """
    Move an assignment within its own position. Orders past the last rank are
    clamped to it.
      - depth_order < 1                    -> ValidationError
      - resolves to the current rank       -> ConflictError (nothing would change)
    Returns the position's full ranking afterwards.
    """
    chart_id = _chart_id_for_position(db, get_assignment_or_404(db, assignment_id).position_id)
    with chart_transaction(db, chart_id=chart_id):
        row = get_assignment_or_404(db, assignment_id)
        pos = get_position_or_404(db, row.position_id)

        ranked = _ranked(db, pos.id)
        target = ordering.resolve_move_order(depth_order, len(ranked))
        current = ranked.index(row) + 1
        if target == current:
            raise ConflictError(f"Assignment {assignment_id} is already at depth {current}")

        before = _orders(ranked)
        moved = ordering.move(ranked, current, target)
        _apply_ranking(db, moved)

        history.append(
            db,
            pos.depth_chart_id,
            A.REORDER,
            actor,
            f"Moved player {row.player_id} in {pos.position_code} from depth {current} to {target}",
            {
                "position_id": pos.id,
                "position_code": pos.position_code,
                "player_id": row.player_id,
                "from": current,
                "to": target,
                "before": before,
                "after": _orders(moved),
            },
        )

    return _ranked(db, pos.id)
