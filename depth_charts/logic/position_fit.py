# depth_charts/logic/position_fit.py
from __future__ import annotations

from typing import Iterable, Iterator, Protocol

# Lower rank sorts first.
FIT_PRIMARY = 0
FIT_SECONDARY = 1
FIT_UNRANKED = 2

FIT_LABELS = {
    FIT_PRIMARY: "primary",
    FIT_SECONDARY: "secondary",
    FIT_UNRANKED: "unranked",
}


class Candidate(Protocol):
    id: int
    first_name: str
    last_name: str
    position: str | None
    secondary_positions: str | None


def _code(s: str | None) -> str:
    return (s or "").strip().upper()


def secondary_codes(raw: str | None) -> set[str]:
    """'2b, 3B,,SS' -> {'2B', '3B', 'SS'}"""
    return {_code(p) for p in (raw or "").split(",") if _code(p)}


def fit_rank(player: Candidate, position_code: str) -> int:
    code = _code(position_code)
    if code and _code(player.position) == code:
        return FIT_PRIMARY
    if code and code in secondary_codes(player.secondary_positions):
        return FIT_SECONDARY
    return FIT_UNRANKED


def name_key(player: Candidate) -> tuple[str, str, int]:
    return ((player.last_name or "").lower(), (player.first_name or "").lower(), player.id)


def rank_key(player: Candidate, position_code: str) -> tuple[int, str, str, int]:
    return (fit_rank(player, position_code), *name_key(player))


class RankedCandidates:
    """
    Lazy, finite and restartable ranking of a candidate snapshot for one slot.

    Nothing is sorted until the first iteration; every `iter()` starts over
    from the same snapshot, so callers can page through it more than once.
    """

    def __init__(self, players: Iterable[Candidate], position_code: str, exclude_ids: Iterable[int] = ()):
        self._players = list(players)
        self._position_code = position_code
        self._exclude = set(exclude_ids)
        self._ranked: list[Candidate] | None = None

    def _ordered(self) -> list[Candidate]:
        if self._ranked is None:
            pool = [p for p in self._players if p.id not in self._exclude]
            self._ranked = sorted(pool, key=lambda p: rank_key(p, self._position_code))
        return self._ranked

    def __iter__(self) -> Iterator[Candidate]:
        for p in self._ordered():
            yield p

    def __len__(self) -> int:
        return len(self._ordered())

    def with_fit(self) -> Iterator[tuple[Candidate, int]]:
        for p in self:
            yield p, fit_rank(p, self._position_code)
