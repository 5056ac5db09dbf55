# depth_charts/services/history.py
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from .. import models
from .locks import chart_snapshot

logger = logging.getLogger("depth_charts.history")

__all__ = ["append", "get_history"]


def append(
    db: Session,
    depth_chart_id: int,
    action: models.HistoryAction,
    actor: Optional[str],
    summary: str,
    detail: Optional[dict[str, Any]] = None,
) -> models.HistoryEntry:
    """
    Record one audit row for a mutation that has already been applied (flushed)
    in the current transaction. The row commits or rolls back with it.
    There is no update or delete path for history rows.
    """
    entry = models.HistoryEntry(
        depth_chart_id=depth_chart_id,
        action=action,
        actor=actor,
        timestamp=datetime.utcnow(),
        summary=summary[:255],
        detail=detail or {},
    )
    db.add(entry)
    db.flush()

    logger.info(
        json.dumps(
            {
                "msg": "history",
                "chart_id": depth_chart_id,
                "action": action.value,
                "actor": actor,
                "summary": entry.summary,
            },
            separators=(",", ":"),
        )
    )
    return entry


def get_history(db: Session, depth_chart_id: int, limit: Optional[int] = None) -> List[models.HistoryEntry]:
    """
    Entries for a chart, oldest first. Works for deleted charts too: history
    is kept independently of the chart's lifecycle.
    """
    with chart_snapshot(db, depth_chart_id):
        q = (
            db.query(models.HistoryEntry)
            .filter(models.HistoryEntry.depth_chart_id == depth_chart_id)
            .order_by(models.HistoryEntry.timestamp.asc(), models.HistoryEntry.id.asc())
        )
        if limit is not None:
            q = q.limit(limit)
        return q.all()
