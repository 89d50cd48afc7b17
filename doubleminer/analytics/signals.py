import logging
from typing import Sequence

from doubleminer.analytics.stats import plurality
from doubleminer.core.types import Candidate, EntryDelay, Signal

logger = logging.getLogger(__name__)

HIGH = 75
MEDIUM = 65


def generate_signal(candidates: Sequence[Candidate]) -> Signal:
    """Turn the confidence-sorted candidates into one BET/WAIT signal."""
    if not candidates:
        return Signal(
            action='WAIT',
            confidence=0,
            strategy='Insufficient Data',
            reasoning='Waiting for more data to analyse',
        )

    best = candidates[0]
    agree = [c for c in candidates if c.color == best.color]
    consensus = len(agree)
    avg = sum(c.confidence for c in agree) / consensus
    entry, _ = plurality((c.entry for c in agree), order=list(EntryDelay))

    if avg >= HIGH and consensus >= 2:
        signal = Signal(
            action='BET',
            color=best.color,
            confidence=avg,
            strategy='High Confidence',
            reasoning=f"{consensus} algorithms agree on {best.color.value} with {avg:.1f}% confidence",
            entry=entry,
            rounds_to_wait=entry.rounds,
            algorithm=best.algorithm,
        )
    elif avg >= MEDIUM:
        signal = Signal(
            action='BET',
            color=best.color,
            confidence=avg,
            strategy='Medium Confidence',
            reasoning=f"Moderate signal for {best.color.value} - wait {entry.rounds} round(s)",
            entry=entry,
            rounds_to_wait=entry.rounds,
            algorithm=best.algorithm,
        )
    else:
        signal = Signal(
            action='WAIT',
            confidence=avg,
            strategy='Low Confidence',
            reasoning='Confidence too low - wait for a better opportunity',
            algorithm=best.algorithm,
        )
    logger.debug("signal %s %s (%.1f%%, consensus %d)", signal.action, signal.strategy, avg, consensus)
    return signal
