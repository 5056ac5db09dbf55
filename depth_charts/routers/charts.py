import os
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..services import chart_store, duplication, history, recommendations
from ..logic.position_fit import FIT_LABELS
from ..services.permissions import Caller, Capability, require
from ..utils.idempotency import with_idempotency

# NOTE: no prefix so we can define both /depth-charts/* and /teams/{team_id}/depth-charts
router = APIRouter(tags=["depth-charts"])


def _duplicate_timeout() -> Optional[float]:
    raw = os.getenv("DUPLICATE_TIMEOUT_SECONDS", "").strip()
    return float(raw) if raw else None


# ====== Team-scoped ======
@router.get("/teams/{team_id}/depth-charts", response_model=List[schemas.DepthChartOut])
def list_team_charts(
    team_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.VIEW)),
):
    return chart_store.list_charts(db, team_id)


@router.get("/teams/{team_id}/depth-charts/selected", response_model=schemas.DepthChartDetail)
def selected_team_chart(
    team_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.VIEW)),
):
    """Default chart, else the earliest created one."""
    chart = chart_store.select_chart(db, team_id)
    return chart_store.get_chart(db, chart.id)


# ====== Charts ======
@router.post("/depth-charts", response_model=schemas.DepthChartDetail, status_code=201)
def create_chart(
    body: schemas.DepthChartCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.CREATE)),
):
    chart = chart_store.create_chart(
        db,
        team_id=body.team_id,
        name=body.name,
        description=body.description,
        is_default=body.is_default,
        seed_positions=[p.model_dump() for p in body.positions],
        template=body.template,
        effective_date=body.effective_date,
        notes=body.notes,
        actor=caller.user_id,
    )
    return chart_store.get_chart(db, chart.id)


@router.get("/depth-charts/{chart_id}", response_model=schemas.DepthChartDetail)
def get_chart(
    chart_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.VIEW)),
):
    return chart_store.get_chart(db, chart_id)


@router.patch("/depth-charts/{chart_id}", response_model=schemas.DepthChartOut)
def update_chart(
    chart_id: int,
    body: schemas.DepthChartUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.EDIT)),
):
    return chart_store.update_chart(db, chart_id, body.model_dump(exclude_unset=True), actor=caller.user_id)


@router.delete("/depth-charts/{chart_id}")
def delete_chart(
    chart_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.DELETE)),
):
    return chart_store.delete_chart(db, chart_id, actor=caller.user_id)


@router.post("/depth-charts/{chart_id}/default", response_model=schemas.DepthChartOut)
def set_default_chart(
    chart_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.EDIT)),
):
    return chart_store.set_default(db, chart_id, actor=caller.user_id)


@router.post("/depth-charts/{chart_id}/duplicate", response_model=schemas.DepthChartDetail, status_code=201)
@with_idempotency("duplicate")
def duplicate_chart(
    request: Request,
    chart_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.CREATE)),
):
    copy = duplication.duplicate_chart(db, chart_id, actor=caller.user_id, timeout_s=_duplicate_timeout())
    return schemas.DepthChartDetail.model_validate(chart_store.get_chart(db, copy.id))


@router.get("/depth-charts/{chart_id}/history", response_model=List[schemas.HistoryEntryOut])
def chart_history(
    chart_id: int,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.VIEW)),
):
    return history.get_history(db, chart_id, limit=limit)


@router.get("/depth-charts/{chart_id}/available-players", response_model=List[schemas.PlayerOut])
def available_players(
    chart_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.VIEW)),
):
    return recommendations.available_players(db, chart_id)


@router.get(
    "/depth-charts/{chart_id}/positions/{position_id}/recommended-players",
    response_model=List[schemas.RecommendedPlayerOut],
)
def recommended_players(
    chart_id: int,
    position_id: int,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require(Capability.VIEW)),
):
    ranked = recommendations.recommended_players(db, chart_id, position_id)
    out: list[schemas.RecommendedPlayerOut] = []
    for player, fit in ranked.with_fit():
        if limit is not None and len(out) >= limit:
            break
        out.append(
            schemas.RecommendedPlayerOut(
                **schemas.PlayerOut.model_validate(player).model_dump(),
                fit=FIT_LABELS[fit],
            )
        )
    return out