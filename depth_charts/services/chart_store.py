# depth_charts/services/chart_store.py
from __future__ import annotations

from datetime import date
from typing import Any, Iterable, List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..errors import ConflictError, NotFoundError, ValidationError
from ..logic.templates import TEMPLATES, template_positions
from . import history
from .locks import chart_snapshot, chart_transaction

A = models.HistoryAction

NAME_MAX = 120  # depth_charts.name column width
CHART_EDITABLE = ("name", "description", "effective_date", "notes")
POSITION_EDITABLE = (
    "position_code",
    "position_name",
    "display_order",
    "color",
    "icon",
    "max_players",
    "description",
)

# ---------- Helpers ----------


def normalize_code(code: Optional[str]) -> str:
    c = (code or "").strip().upper()
    if not c:
        raise ValidationError("position_code is required")
    return c


def _clean_name(name: Optional[str]) -> str:
    n = (name or "").strip()
    if not n:
        raise ValidationError("name must not be empty")
    if len(n) > NAME_MAX:
        raise ValidationError(f"name must be at most {NAME_MAX} characters")
    return n


def _check_max_players(value: Optional[int]) -> None:
    if value is not None and value < 1:
        raise ValidationError("max_players must be >= 1 when set")


def get_team_or_404(db: Session, team_id: int) -> models.Team:
    team = db.get(models.Team, team_id)
    if not team:
        raise NotFoundError(f"Team {team_id} not found")
    return team


def get_chart_or_404(db: Session, chart_id: int) -> models.DepthChart:
    chart = db.get(models.DepthChart, chart_id)
    if not chart:
        raise NotFoundError(f"Depth chart {chart_id} not found")
    return chart


def get_position_or_404(db: Session, position_id: int) -> models.Position:
    pos = db.get(models.Position, position_id)
    if not pos:
        raise NotFoundError(f"Position {position_id} not found")
    return pos


def _position_snapshot(pos: models.Position) -> dict[str, Any]:
    return {
        "position_id": pos.id,
        "position_code": pos.position_code,
        "assignments": [
            {"player_id": a.player_id, "depth_order": a.depth_order} for a in pos.assignments
        ],
    }


def _collect_seed_rows(seed_positions: Iterable[dict], template: Optional[str]) -> List[dict]:
    rows: List[dict] = []
    if template:
        if template.strip().lower() not in TEMPLATES:
            raise ValidationError(f"Unknown position template '{template}'; expected one of {sorted(TEMPLATES)}")
        rows.extend(template_positions(template))
    rows.extend(dict(r) for r in seed_positions)

    seen: set[str] = set()
    next_order = 1
    for r in rows:
        r["position_code"] = normalize_code(r.get("position_code"))
        if r["position_code"] in seen:
            raise ValidationError(f"Duplicate position_code '{r['position_code']}' in seed positions")
        seen.add(r["position_code"])
        _check_max_players(r.get("max_players"))
        if r.get("display_order") is None:
            r["display_order"] = next_order
        next_order = max(next_order, r["display_order"]) + 1
    return rows


def _clear_other_defaults(db: Session, team_id: int, keep_id: Optional[int]) -> List[int]:
    cleared: List[int] = []
    others = (
        db.query(models.DepthChart)
        .filter(models.DepthChart.team_id == team_id, models.DepthChart.is_default.is_(True))
        .all()
    )
    for c in others:
        if c.id != keep_id:
            c.is_default = False
            cleared.append(c.id)
    return cleared


# ---------- Charts ----------


def create_chart(
    db: Session,
    *,
    team_id: int,
    name: str,
    description: Optional[str] = None,
    is_default: bool = False,
    seed_positions: Iterable[dict] = (),
    template: Optional[str] = None,
    effective_date: Optional[date] = None,
    notes: Optional[str] = None,
    actor: Optional[str] = None,
) -> models.DepthChart:
    """
    New chart for a team, optionally seeded with positions. When `is_default`
    is set, any previous default of the team is cleared in the same transaction.
    """
    clean = _clean_name(name)
    rows = _collect_seed_rows(seed_positions, template)
    get_team_or_404(db, team_id)

    with chart_transaction(db, team_id=team_id):
        chart = models.DepthChart(
            team_id=team_id,
            name=clean,
            description=description,
            is_default=bool(is_default),
            effective_date=effective_date,
            notes=notes,
            created_by=actor,
        )
        db.add(chart)
        db.flush()

        for r in rows:
            db.add(models.Position(depth_chart_id=chart.id, **{k: r.get(k) for k in POSITION_EDITABLE if k in r}))

        cleared = _clear_other_defaults(db, team_id, chart.id) if is_default else []
        db.flush()

        history.append(
            db,
            chart.id,
            A.CREATE,
            actor,
            f"Created depth chart '{chart.name}'",
            {
                "name": chart.name,
                "is_default": chart.is_default,
                "positions": [r["position_code"] for r in rows],
                "cleared_default_chart_ids": cleared,
            },
        )

    db.refresh(chart)
    return chart


def get_chart(db: Session, chart_id: int) -> models.DepthChart:
    """
    The read contract for every renderer: the chart with positions ordered by
    display_order and assignments by depth_order, loaded under one snapshot.
    """
    with chart_snapshot(db, chart_id):
        chart = get_chart_or_404(db, chart_id)
        for pos in chart.positions:
            for a in pos.assignments:
                _ = a.player
        return chart


def list_charts(db: Session, team_id: int) -> List[models.DepthChart]:
    get_team_or_404(db, team_id)
    return (
        db.query(models.DepthChart)
        .filter(models.DepthChart.team_id == team_id)
        .order_by(models.DepthChart.created_at.asc(), models.DepthChart.id.asc())
        .all()
    )


def select_chart(db: Session, team_id: int) -> models.DepthChart:
    """Auto-selection for callers without an explicit choice: default, else earliest created."""
    charts = list_charts(db, team_id)
    if not charts:
        raise NotFoundError(f"Team {team_id} has no depth charts")
    for c in charts:
        if c.is_default:
            return c
    return charts[0]


def update_chart(db: Session, chart_id: int, changes: dict[str, Any], actor: Optional[str] = None) -> models.DepthChart:
    fields = {k: v for k, v in changes.items() if k in CHART_EDITABLE}
    if not fields:
        raise ValidationError(f"Nothing to update; editable fields are {list(CHART_EDITABLE)}")
    if "name" in fields:
        fields["name"] = _clean_name(fields["name"])

    chart = get_chart_or_404(db, chart_id)
    with chart_transaction(db, chart_id=chart.id):
        chart = get_chart_or_404(db, chart_id)
        before = {k: _jsonable(getattr(chart, k)) for k in fields}
        for k, v in fields.items():
            setattr(chart, k, v)
        db.flush()
        history.append(
            db,
            chart.id,
            A.UPDATE,
            actor,
            f"Updated {', '.join(sorted(fields))}",
            {"before": before, "after": {k: _jsonable(v) for k, v in fields.items()}},
        )

    db.refresh(chart)
    return chart


def set_default(db: Session, chart_id: int, actor: Optional[str] = None) -> models.DepthChart:
    chart = get_chart_or_404(db, chart_id)
    team_id = chart.team_id

    with chart_transaction(db, team_id=team_id, chart_id=chart_id):
        chart = get_chart_or_404(db, chart_id)
        cleared = _clear_other_defaults(db, team_id, chart.id)
        chart.is_default = True
        db.flush()
        history.append(
            db,
            chart.id,
            A.SET_DEFAULT,
            actor,
            f"Set '{chart.name}' as the default depth chart",
            {"cleared_default_chart_ids": cleared},
        )

    db.refresh(chart)
    return chart


def delete_chart(db: Session, chart_id: int, actor: Optional[str] = None) -> dict[str, Any]:
    """
    Delete a chart with its positions and assignments. History rows are kept.
    The team's default chart can only go once it is the last chart left;
    otherwise the caller must pick a new default first.
    """
    chart = get_chart_or_404(db, chart_id)
    team_id = chart.team_id

    with chart_transaction(db, team_id=team_id, chart_id=chart_id):
        chart = get_chart_or_404(db, chart_id)
        if chart.is_default:
            others = (
                db.query(models.DepthChart)
                .filter(models.DepthChart.team_id == team_id, models.DepthChart.id != chart.id)
                .count()
            )
            if others:
                raise ConflictError(
                    f"Depth chart {chart.id} is the team default; set another chart as default before deleting it"
                )

        positions = [_position_snapshot(p) for p in chart.positions]
        name = chart.name
        db.delete(chart)
        db.flush()
        history.append(
            db,
            chart_id,
            A.DELETE,
            actor,
            f"Deleted depth chart '{name}'",
            {"name": name, "positions": positions},
        )

    return {"ok": True, "deleted_chart_id": chart_id}


# ---------- Positions ----------


def add_position(
    db: Session,
    chart_id: int,
    fields: dict[str, Any],
    actor: Optional[str] = None,
) -> models.Position:
    code = normalize_code(fields.get("position_code"))
    _check_max_players(fields.get("max_players"))

    with chart_transaction(db, chart_id=chart_id):
        chart = get_chart_or_404(db, chart_id)
        if any(p.position_code == code for p in chart.positions):
            raise ValidationError(f"Position '{code}' already exists in depth chart {chart.id}")

        display_order = fields.get("display_order")
        if display_order is None:
            display_order = max((p.display_order for p in chart.positions), default=0) + 1

        pos = models.Position(
            depth_chart_id=chart.id,
            position_code=code,
            position_name=fields.get("position_name"),
            display_order=display_order,
            color=fields.get("color"),
            icon=fields.get("icon"),
            max_players=fields.get("max_players"),
            description=fields.get("description"),
        )
        db.add(pos)
        db.flush()
        history.append(
            db,
            chart.id,
            A.ADD_POSITION,
            actor,
            f"Added position {code}",
            {"position_id": pos.id, "position_code": code, "display_order": display_order},
        )

    db.refresh(pos)
    return pos


def update_position(
    db: Session,
    position_id: int,
    changes: dict[str, Any],
    actor: Optional[str] = None,
) -> models.Position:
    fields = {k: v for k, v in changes.items() if k in POSITION_EDITABLE}
    if not fields:
        raise ValidationError(f"Nothing to update; editable fields are {list(POSITION_EDITABLE)}")
    if "position_code" in fields:
        fields["position_code"] = normalize_code(fields["position_code"])
    if "display_order" in fields and fields["display_order"] is None:
        raise ValidationError("display_order cannot be null")
    _check_max_players(fields.get("max_players"))

    chart_id = get_position_or_404(db, position_id).depth_chart_id
    with chart_transaction(db, chart_id=chart_id):
        pos = get_position_or_404(db, position_id)
        code = fields.get("position_code")
        if code and code != pos.position_code:
            clash = (
                db.query(models.Position)
                .filter(models.Position.depth_chart_id == pos.depth_chart_id, models.Position.position_code == code)
                .first()
            )
            if clash:
                raise ValidationError(f"Position '{code}' already exists in depth chart {pos.depth_chart_id}")
        cap = fields.get("max_players")
        if cap is not None and cap < len(pos.assignments):
            raise ConflictError(
                f"Position {pos.position_code} holds {len(pos.assignments)} players; max_players cannot drop to {cap}"
            )

        before = {k: getattr(pos, k) for k in fields}
        for k, v in fields.items():
            setattr(pos, k, v)
        db.flush()
        history.append(
            db,
            pos.depth_chart_id,
            A.UPDATE_POSITION,
            actor,
            f"Updated position {pos.position_code}",
            {"position_id": pos.id, "before": before, "after": fields},
        )

    db.refresh(pos)
    return pos


def remove_position(db: Session, position_id: int, actor: Optional[str] = None) -> dict[str, Any]:
    chart_id = get_position_or_404(db, position_id).depth_chart_id
    with chart_transaction(db, chart_id=chart_id):
        pos = get_position_or_404(db, position_id)
        snap = _position_snapshot(pos)
        db.delete(pos)
        db.flush()
        history.append(
            db,
            chart_id,
            A.REMOVE_POSITION,
            actor,
            f"Removed position {snap['position_code']}",
            snap,
        )
    return {"ok": True, "deleted_position_id": position_id, "depth_chart_id": chart_id}


def _jsonable(v: Any) -> Any:
    if isinstance(v, date):
        return v.isoformat()
    return v
