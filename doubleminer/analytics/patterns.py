from collections import defaultdict
from typing import Iterable, Sequence

from doubleminer.analytics.stats import plurality
from doubleminer.core.types import Color, Outcome, Pattern

MIN_LEN = 3
MAX_LEN = 10
MIN_COUNT = 5
MIN_ACCURACY = 65.0
TOP_N = 30


def runs(colors: Iterable[Color], k: int = 3):
    """Maximal same-color segments of length >= k as (start, end, color, length)."""
    colors = list(colors)
    out = []
    if not colors:
        return out
    cur = colors[0]
    start = 0
    for i in range(1, len(colors)):
        if colors[i] == cur:
            continue
        seg_len = i - start
        if seg_len >= k:
            out.append((start, i-1, cur, seg_len))
        cur = colors[i]
        start = i
    seg_len = len(colors) - start
    if seg_len >= k:
        out.append((start, len(colors)-1, cur, seg_len))
    return out


def mine_patterns(outcomes: Sequence[Outcome],
                  min_len: int = MIN_LEN,
                  max_len: int = MAX_LEN,
                  min_count: int = MIN_COUNT,
                  min_accuracy: float = MIN_ACCURACY,
                  limit: int = TOP_N) -> list[Pattern]:
    """Mine color windows whose following color is predictable.

    Every window of `min_len`..`max_len` consecutive colors is keyed by its
    sequence; the value is the color right after it. Keys seen at least
    `min_count` times whose plurality follower reaches more than
    `min_accuracy` percent are kept, best `limit` by accuracy.
    """
    colors = [o.color for o in outcomes]
    found: list[Pattern] = []
    for n in range(min_len, max_len + 1):
        followers: dict[tuple[Color, ...], list[Color]] = defaultdict(list)
        last_seen = {}
        for i in range(len(colors) - n):
            key = tuple(colors[i:i+n])
            followers[key].append(colors[i+n])
            last_seen[key] = outcomes[i+n].timestamp
        for key, nxt in followers.items():
            if len(nxt) < min_count:
                continue
            best, hits = plurality(nxt)
            accuracy = hits / len(nxt) * 100
            if accuracy > min_accuracy:
                found.append(Pattern(
                    sequence=key,
                    frequency=len(nxt),
                    accuracy=accuracy,
                    next_prediction=best,
                    last_seen=last_seen[key],
                ))
    found.sort(key=lambda p: p.accuracy, reverse=True)
    return found[:limit]
