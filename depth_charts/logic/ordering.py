# depth_charts/logic/ordering.py
from __future__ import annotations

from typing import List, Optional, Sequence, TypeVar

from ..errors import ValidationError

T = TypeVar("T")

# Depth orders are 1-based and gap-free within a position: {1, 2, ..., k}.
FIRST_ORDER = 1


def is_contiguous(orders: Sequence[int]) -> bool:
    """True when `orders` is exactly {1..k} with no repeats."""
    return sorted(orders) == list(range(FIRST_ORDER, len(orders) + FIRST_ORDER))


def resolve_insert_order(requested: Optional[int], count: int) -> int:
    """
    Where a new assignment lands in a position that currently holds `count` players.
      - None           -> appended at count + 1
      - 1..count       -> taken as-is (others shift down)
      - beyond count+1 -> clamped to count + 1
      - < 1            -> ValidationError (nothing meaningful to clamp to)
    """
    if requested is None:
        return count + 1
    if requested < FIRST_ORDER:
        raise ValidationError(f"depth_order must be >= {FIRST_ORDER}, got {requested}")
    return min(requested, count + 1)


def resolve_move_order(requested: int, count: int) -> int:
    """Target order for moving an existing assignment; clamped to the last rank."""
    if requested < FIRST_ORDER:
        raise ValidationError(f"depth_order must be >= {FIRST_ORDER}, got {requested}")
    return min(requested, count)


def insert_at(ranked: List[T], item: T, order: int) -> List[T]:
    """Return a new ranking with `item` at 1-based `order`; later items shift down one."""
    out = list(ranked)
    out.insert(order - FIRST_ORDER, item)
    return out


def remove_at(ranked: List[T], order: int) -> List[T]:
    """Return a new ranking without the item at `order`; later items shift up one."""
    out = list(ranked)
    del out[order - FIRST_ORDER]
    return out


def move(ranked: List[T], from_order: int, to_order: int) -> List[T]:
    out = list(ranked)
    item = out.pop(from_order - FIRST_ORDER)
    out.insert(to_order - FIRST_ORDER, item)
    return out


def numbered(ranked: Sequence[T]) -> List[tuple[T, int]]:
    """Pair each item with its 1-based depth order."""
    return [(item, i) for i, item in enumerate(ranked, start=FIRST_ORDER)]
