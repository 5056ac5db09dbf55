from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import DepthChartError

route = APIRouter(prefix="/health", tags=["health"])


class StorageUnavailable(DepthChartError):
    kind = "unavailable"
    status_code = 503


@route.get("/ping")
def ping():
    return {"ok": True, "ping": "pong"}


@route.get("/db")
def db_ready(db: Session = Depends(get_db)):
    """Readiness: the chart store answers a trivial query."""
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        raise StorageUnavailable("Depth chart storage is not reachable") from exc
    return {"ok": True, "db": "up"}
