from collections import Counter
from typing import Hashable, Iterable, Sequence, TypeVar

from doubleminer.core.types import Color

T = TypeVar('T', bound=Hashable)


def plurality(votes: Iterable[T], order: Sequence[T] | None = None) -> tuple[T | None, int]:
    """Most frequent vote and its count.

    Without `order`, ties go to the first value to reach the winning count
    while scanning `votes`. With `order`, ties go to the earliest value in
    `order`.
    """
    counts: Counter = Counter()
    if order is not None:
        counts.update(votes)
        if not counts:
            return None, 0
        best = max(order, key=lambda v: counts[v])
        return best, counts[best]
    best, n = None, 0
    for v in votes:
        counts[v] += 1
        if counts[v] > n:
            best, n = v, counts[v]
    return best, n


def color_frequency(colors: Sequence[Color]) -> dict[str, dict[str, float]]:
    counts = Counter(colors)
    total = len(colors)
    return {
        c.value: {'count': counts[c], 'percentage': (counts[c] / total * 100) if total else 0.0}
        for c in Color
    }


def gaps(colors: Sequence[Color], target: Color) -> dict:
    """Gaps (rounds without `target`) between its appearances."""
    out = []
    cur = 0
    for c in colors:
        if c == target:
            if cur > 0:
                out.append(cur)
            cur = 0
        else:
            cur += 1
    return {
        'gaps': out,
        'current_gap': cur,
        'average_gap': (sum(out) / len(out)) if out else 0.0,
        'max_gap': max(out) if out else 0,
    }
