import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from depth_charts import models
from depth_charts.db import Base
from depth_charts.errors import ConflictError
from depth_charts.logic.ordering import is_contiguous
from depth_charts.services import assignments, chart_store


@pytest.fixture()
def file_sessions(tmp_path):
    # one connection per session, like separate requests against a real database
    engine = create_engine(
        f"sqlite:///{tmp_path / 'concurrency.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def _seed(Session, n_players):
    with Session() as db:
        team = models.Team(name="Threads")
        db.add(team)
        db.commit()
        players = [
            models.Player(team_id=team.id, first_name=f"T{i}", last_name=f"Runner{i}", position="SS")
            for i in range(n_players)
        ]
        db.add_all(players)
        db.commit()
        chart = chart_store.create_chart(
            db, team_id=team.id, name="Race", seed_positions=[{"position_code": "SS"}], actor="seed"
        )
        return team.id, chart.id, chart.positions[0].id, [p.id for p in players]


def _run_all(workers):
    start = threading.Barrier(len(workers))
    errors = []

    def _wrap(fn):
        def _target():
            start.wait()
            try:
                fn()
            except Exception as exc:  # collected for assertions below
                errors.append(exc)

        return _target

    threads = [threading.Thread(target=_wrap(w)) for w in workers]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return errors


def test_parallel_inserts_at_top_stay_gap_free(file_sessions):
    Session = file_sessions
    _team_id, chart_id, position_id, player_ids = _seed(Session, 8)

    def _assign(pid):
        def _go():
            with Session() as db:
                assignments.assign_player(db, position_id, pid, depth_order=1, actor=f"u{pid}")

        return _go

    errors = _run_all([_assign(pid) for pid in player_ids])
    assert errors == []

    with Session() as db:
        rows = db.query(models.Assignment).filter(models.Assignment.position_id == position_id).all()
        assert sorted(r.player_id for r in rows) == sorted(player_ids)
        assert is_contiguous([r.depth_order for r in rows])
        n_assign = (
            db.query(models.HistoryEntry)
            .filter(
                models.HistoryEntry.depth_chart_id == chart_id,
                models.HistoryEntry.action == models.HistoryAction.ASSIGN,
            )
            .count()
        )
        assert n_assign == len(player_ids)


def test_racing_same_player_exactly_one_wins(file_sessions):
    Session = file_sessions
    _team_id, _chart_id, position_id, (pid,) = _seed(Session, 1)

    def _go():
        with Session() as db:
            assignments.assign_player(db, position_id, pid, actor="racer")

    errors = _run_all([_go, _go, _go])
    assert len(errors) == 2
    assert all(isinstance(e, ConflictError) for e in errors)

    with Session() as db:
        rows = db.query(models.Assignment).filter(models.Assignment.position_id == position_id).all()
        assert [(r.player_id, r.depth_order) for r in rows] == [(pid, 1)]


def test_parallel_set_default_keeps_one_default(file_sessions):
    Session = file_sessions
    team_id, first_id, _pos, _players = _seed(Session, 0)
    with Session() as db:
        ids = [first_id] + [chart_store.create_chart(db, team_id=team_id, name=f"C{i}").id for i in range(4)]

    def _make_default(cid):
        def _go():
            with Session() as db:
                chart_store.set_default(db, cid, actor="race")

        return _go

    errors = _run_all([_make_default(cid) for cid in ids])
    assert errors == []

    with Session() as db:
        defaults = (
            db.query(models.DepthChart)
            .filter(models.DepthChart.team_id == team_id, models.DepthChart.is_default.is_(True))
            .count()
        )
        assert defaults == 1
