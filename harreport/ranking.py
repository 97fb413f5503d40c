"""Deterministic, length-capped orderings for report lists."""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, Mapping, Sequence, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def top_n(items: Sequence[T] | None, n: int) -> list[T]:
    """Return the first ``n`` items unchanged in order.

    Upstream order is trusted; nothing is compared here.
    """
    if not items or n <= 0:
        return []
    return list(items[:n])


def rank_distribution(dist: Mapping[K, float] | None) -> list[tuple[K, float]]:
    """Order a count distribution by count, highest first.

    Equal counts keep the mapping's insertion order, so the same input
    always renders in the same order.
    """
    if not dist:
        return []
    # sorted() stays stable with reverse=True
    return sorted(dist.items(), key=lambda item: item[1], reverse=True)


def rank_by(
    items: Iterable[T] | None,
    key: Callable[[T], float],
    n: int | None = None,
) -> list[T]:
    """Stable descending sort by ``key``, optionally capped at ``n``."""
    ranked = sorted(items or (), key=key, reverse=True)
    if n is None:
        return ranked
    return top_n(ranked, n)
