# depth_charts/services/locks.py
from __future__ import annotations

import logging
import threading
import weakref
from contextlib import ExitStack, contextmanager
from typing import Hashable, Iterator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import ConflictError, DepthChartError

logger = logging.getLogger("depth_charts.tx")

# One re-entrant lock per scope key. Entries disappear once nobody holds them.
_registry_guard = threading.Lock()
_scope_locks: "weakref.WeakValueDictionary[Hashable, threading.RLock]" = weakref.WeakValueDictionary()


def _lock_for(key: Hashable):
    with _registry_guard:
        lock = _scope_locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _scope_locks[key] = lock
        return lock


def _keys(team_id: int | None, chart_id: int | None) -> list[tuple[str, int]]:
    # Team before chart, always, so two scopes never deadlock.
    keys = []
    if team_id is not None:
        keys.append(("team", team_id))
    if chart_id is not None:
        keys.append(("chart", chart_id))
    return keys


@contextmanager
def scope_lock(*, team_id: int | None = None, chart_id: int | None = None) -> Iterator[None]:
    """
    Serialize work on one chart (and its positions/assignments), or on a team's
    set of charts when the default flag moves. Distinct charts never contend;
    there is no global lock.
    """
    with ExitStack() as stack:
        for key in _keys(team_id, chart_id):
            stack.enter_context(_lock_for(key))
        yield


@contextmanager
def chart_snapshot(db: Session, chart_id: int) -> Iterator[None]:
    """Read under the chart lock so a reader never sees a half-applied mutation."""
    with scope_lock(chart_id=chart_id):
        db.expire_all()
        yield


@contextmanager
def chart_transaction(db: Session, *, team_id: int | None = None, chart_id: int | None = None) -> Iterator[None]:
    """
    Lock the scope, refresh the session from committed state, then commit on
    success or roll everything back (shifted orders, copied rows, history) on
    any failure.
    """
    with scope_lock(team_id=team_id, chart_id=chart_id):
        db.expire_all()
        try:
            yield
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.info("rolled back team=%s chart=%s: integrity error", team_id, chart_id)
            raise ConflictError("Concurrent change conflicts with this request; reload and retry") from exc
        except DepthChartError as exc:
            db.rollback()
            logger.info("rolled back team=%s chart=%s: %s", team_id, chart_id, exc.kind)
            raise
        except Exception:
            db.rollback()
            logger.exception("rolled back team=%s chart=%s: unexpected error", team_id, chart_id)
            raise
