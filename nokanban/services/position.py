"""Integer position assignment for ordered siblings (columns in a board, cards in a column).

Positions only carry relative order. Gaps are left alone after deletes and duplicates are
tolerated; readers break ties by id, which is time-ordered.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from nokanban.schemas.board import PositionUpdate


class Positioned(Protocol):
    id: str
    position: int


def append_position(sibling_count: int) -> int:
    """Position for an item added after every existing sibling."""
    return max(sibling_count, 0)


def clamp_position(position: int, sibling_count: int) -> int:
    """Fit a requested position into the valid run ``0..sibling_count``."""
    return min(max(position, 0), max(sibling_count, 0))


def sort_siblings(items: Iterable[Positioned]) -> list[Positioned]:
    return sorted(items, key=lambda item: (item.position, item.id))


def positions_for_order(ordered_ids: Sequence[str]) -> list[PositionUpdate]:
    """One {id, position} pair per id, numbered by its index."""
    return [PositionUpdate(id=item_id, position=index) for index, item_id in enumerate(ordered_ids)]


def move_to_index(ordered_ids: Sequence[str], item_id: str, index: int) -> list[PositionUpdate]:
    """Place ``item_id`` at ``index`` among ``ordered_ids`` and renumber the whole run.

    ``item_id`` may or may not already be in the sequence (reorder vs. insert from another
    parent); the relative order of every other id is kept.
    """
    remaining = [i for i in ordered_ids if i != item_id]
    remaining.insert(clamp_position(index, len(remaining)), item_id)
    return positions_for_order(remaining)
