"""
Ranking helpers.

Rankings are "highest average first". Python's sort is stable, also with
reverse=True, so items with equal averages keep their input order
(i.e. the order in which they were first added to the store).
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Tuple, TypeVar

T = TypeVar("T")


def rank_descending(items: Iterable[T], key: Callable[[T], float]) -> List[T]:
    return sorted(items, key=key, reverse=True)


def with_positions(items: Iterable[T], top: int | None = None) -> List[Tuple[int, T]]:
    """
    Number a ranking starting at 1. top <= 0 or None means "all".
    """
    ranked = list(items)
    if top is not None and top > 0:
        ranked = ranked[:top]
    return list(enumerate(ranked, start=1))
