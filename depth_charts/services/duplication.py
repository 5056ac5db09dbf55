# depth_charts/services/duplication.py
from __future__ import annotations

import time
from typing import Optional

from sqlalchemy.orm import Session

from .. import models
from ..errors import OperationTimeout
from . import history
from .chart_store import NAME_MAX, get_chart_or_404
from .locks import chart_transaction

COPY_SUFFIX = " (Copy)"


def copy_name(name: str) -> str:
    """"<name> (Copy)", trimming the original so the result still fits the name column."""
    return f"{name[: NAME_MAX - len(COPY_SUFFIX)].rstrip()}{COPY_SUFFIX}"


def _check_deadline(deadline: Optional[float], source_id: int) -> None:
    if deadline is not None and time.monotonic() > deadline:
        raise OperationTimeout(f"Duplicating depth chart {source_id} timed out; nothing was created")


def duplicate_chart(
    db: Session,
    chart_id: int,
    actor: Optional[str] = None,
    timeout_s: Optional[float] = None,
) -> models.DepthChart:
    """
    Deep-copy a chart (positions and assignments, same depth orders, fresh ids)
    into a new non-default chart of the same team.

    All-or-nothing: the shell chart and every copied row live in one
    transaction, so a failure or timeout partway through leaves no trace.
    The source chart is only read.
    """
    deadline = time.monotonic() + timeout_s if timeout_s is not None else None

    with chart_transaction(db, chart_id=chart_id):
        source = get_chart_or_404(db, chart_id)

        copy = models.DepthChart(
            team_id=source.team_id,
            name=copy_name(source.name),
            description=source.description,
            is_default=False,
            effective_date=source.effective_date,
            notes=source.notes,
            created_by=actor,
        )
        db.add(copy)
        db.flush()

        copied_assignments = 0
        for pos in source.positions:
            _check_deadline(deadline, source.id)
            new_pos = models.Position(
                depth_chart_id=copy.id,
                position_code=pos.position_code,
                position_name=pos.position_name,
                display_order=pos.display_order,
                color=pos.color,
                icon=pos.icon,
                max_players=pos.max_players,
                description=pos.description,
            )
            db.add(new_pos)
            db.flush()
            for a in pos.assignments:
                db.add(
                    models.Assignment(
                        position_id=new_pos.id,
                        player_id=a.player_id,
                        depth_order=a.depth_order,
                        notes=a.notes,
                        assigned_by=a.assigned_by,
                    )
                )
                copied_assignments += 1
            db.flush()

        _check_deadline(deadline, source.id)
        history.append(
            db,
            copy.id,
            models.HistoryAction.DUPLICATE,
            actor,
            f"Duplicated from '{source.name}'",
            {
                "source_chart_id": source.id,
                "positions": len(source.positions),
                "assignments": copied_assignments,
            },
        )

    db.refresh(copy)
    return copy
