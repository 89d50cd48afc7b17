from typing import Sequence

from doubleminer.core.types import Candidate, Color, EntryDelay, Outcome, Pattern

RECENT = 15
RARE_LOOKBACK = 200


def pattern_sequence(recent: Sequence[Color], patterns: Sequence[Pattern]) -> Candidate | None:
    for n in (5, 4, 3):
        if len(recent) < n:
            continue
        tail = tuple(recent[-n:])
        match = next((p for p in patterns if p.sequence[:-1] == tail), None)
        if match and match.accuracy > 70:
            if match.accuracy > 85:
                entry = EntryDelay.NEXT
            elif match.accuracy > 75:
                entry = EntryDelay.WAIT_1
            else:
                entry = EntryDelay.WAIT_2
            return Candidate(
                color=match.next_prediction,
                confidence=match.accuracy,
                algorithm='Pattern Sequence',
                reasoning=f"Pattern {match.text} with {match.accuracy:.1f}% accuracy",
                entry=entry,
            )
    return None


def frequency_gap(recent: Sequence[Color]) -> Candidate | None:
    last10 = list(recent[-10:])
    if len(last10) < 8:
        return None
    counts = {c: last10.count(c) for c in Color}
    least = min(Color, key=lambda c: counts[c])
    if counts[least] != 0:
        return None
    return Candidate(
        color=least,
        confidence=78,
        algorithm='Frequency Gap',
        reasoning=f"{least.value} has not appeared in {len(last10)} rounds",
        entry=EntryDelay.NEXT,
    )


def streak_reversal(recent: Sequence[Color]) -> Candidate | None:
    if not recent:
        return None
    color = recent[-1]
    streak = 1
    for c in reversed(recent[:-1]):
        if c != color:
            break
        streak += 1
    if streak < 4 or color == Color.WHITE:
        return None
    opposite = Color.BLACK if color == Color.RED else Color.RED
    return Candidate(
        color=opposite,
        confidence=min(88, 65 + streak * 4),
        algorithm='Streak Reversal',
        reasoning=f"Streak of {streak} {color.value} - reversal expected",
        entry=EntryDelay.NEXT if streak >= 6 else EntryDelay.WAIT_1,
    )


def white_gap(colors: Sequence[Color]) -> Candidate | None:
    gap = len(colors)
    for i, c in enumerate(reversed(colors)):
        if c == Color.WHITE:
            gap = i
            break
    if gap < 40:
        return None
    return Candidate(
        color=Color.WHITE,
        confidence=min(85, 60 + (gap - 40) * 2),
        algorithm='White Prediction',
        reasoning=f"white has not appeared for {gap} rounds",
        entry=EntryDelay.NEXT if gap >= 60 else EntryDelay.WAIT_1,
    )


def alternating(recent: Sequence[Color]) -> Candidate | None:
    last6 = list(recent[-6:])
    if len(last6) < 4:
        return None
    if any(a == b for a, b in zip(last6, last6[1:])):
        return None
    predicted = Color.BLACK if last6[-1] == Color.RED else Color.RED
    return Candidate(
        color=predicted,
        confidence=72,
        algorithm='Alternating Pattern',
        reasoning=f"Alternation over the last {len(last6)} rounds - next color: {predicted.value}",
        entry=EntryDelay.NEXT,
    )


def generate_predictions(outcomes: Sequence[Outcome],
                         patterns: Sequence[Pattern],
                         recent: int = RECENT,
                         rare_lookback: int = RARE_LOOKBACK) -> list[Candidate]:
    """Run every heuristic over the tail of the log, best confidence first."""
    colors = [o.color for o in outcomes]
    tail = colors[-recent:]
    out = [
        pattern_sequence(tail, patterns),
        frequency_gap(tail),
        streak_reversal(tail),
        white_gap(colors[-rare_lookback:]),
        alternating(tail),
    ]
    return sorted((c for c in out if c is not None), key=lambda c: c.confidence, reverse=True)
