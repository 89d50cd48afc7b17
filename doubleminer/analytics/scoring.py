from doubleminer.core.types import Outcome, Settlement, Signal, Stats, utcnow

WIN_CREDIT = 14.0  # 14x payout simulation
LOSS_DEBIT = 10.0


def settle(outcome: Outcome, signal: Signal | None, stats: Stats,
           credit: float = WIN_CREDIT, debit: float = LOSS_DEBIT) -> tuple[Settlement | None, Stats]:
    """Score `outcome` against the signal that was current before it arrived.

    Only BET signals with a color are scored; the outcome gets its
    predicted/was_correct tags and the returned stats are updated. Anything
    else leaves both the outcome and the stats untouched.
    """
    if signal is None or not signal.is_bet:
        return None, stats

    correct = outcome.color == signal.color
    outcome.predicted = True
    outcome.was_correct = correct

    now = utcnow()
    record = Settlement(
        timestamp=now,
        predicted_color=signal.color,
        actual_color=outcome.color,
        confidence=signal.confidence,
        algorithm=signal.algorithm or 'Unknown',
        was_correct=correct,
        entry=signal.entry,
    )

    total = stats.total_predictions + 1
    hits = stats.correct_predictions + (1 if correct else 0)
    streak = stats.current_streak + 1 if correct else 0
    updated = stats.evolve(
        total_predictions=total,
        correct_predictions=hits,
        accuracy=hits / total * 100,
        greens=stats.greens + (1 if correct else 0),
        reds=stats.reds + (0 if correct else 1),
        current_streak=streak,
        best_streak=max(stats.best_streak, streak),
        profit=stats.profit + (credit if correct else -debit),
        last_updated=now,
    )
    return record, updated
