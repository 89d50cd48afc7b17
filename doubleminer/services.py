import logging
import threading
from typing import Sequence

from doubleminer.analytics.anomaly import AnomalyReport, detect_anomalies
from doubleminer.analytics.heuristics import RARE_LOOKBACK, RECENT, generate_predictions
from doubleminer.analytics.patterns import mine_patterns, runs
from doubleminer.analytics.scoring import LOSS_DEBIT, WIN_CREDIT, settle
from doubleminer.analytics.signals import generate_signal
from doubleminer.analytics.stats import color_frequency, gaps
from doubleminer.config import Settings
from doubleminer.core.types import Candidate, Color, Outcome, Pattern, Settlement, Signal, Stats
from doubleminer.core.validation import DuplicateOutcomeError, InvalidOutcomeError, validate_outcome

logger = logging.getLogger(__name__)


class Engine:
    """Owns the outcome log and runs mining, heuristics, aggregation and scoring.

    The store and the data source are injected; both are optional so the
    engine can run purely in memory. One lock serialises "settle against the
    current signal, append, re-analyse", so the scorer always sees the signal
    that was current before the outcome arrived.
    """

    def __init__(self, store=None, source=None, recent: int = RECENT,
                 rare_lookback: int = RARE_LOOKBACK, memory_window: int = 200,
                 credit: float = WIN_CREDIT, debit: float = LOSS_DEBIT):
        self.store = store
        self.source = source
        self.recent = recent
        self.rare_lookback = rare_lookback
        self.memory_window = memory_window
        self.credit = credit
        self.debit = debit
        self.outcomes: list[Outcome] = []
        self.patterns: list[Pattern] = []
        self.candidates: list[Candidate] = []
        self.signal: Signal | None = None
        self.stats = Stats()
        self.records: list[Settlement] = []
        self._lock = threading.RLock()

    def load(self, seed_history: int = 0) -> None:
        """Restore persisted state; seed from the source when the log is empty."""
        with self._lock:
            if self.store is not None:
                self.outcomes = self.store.load_outcomes()[-self.memory_window:]
                self.stats = self.store.load_stats() or Stats()
                self.patterns = self.store.load_patterns()
            if not self.outcomes and self.source is not None and seed_history:
                self.outcomes = self.source.fetch_history(seed_history)
                if self.store is not None:
                    self.store.save_outcomes(self.outcomes)
                logger.info("seeded %d outcomes from %s", len(self.outcomes), type(self.source).__name__)
            if self.outcomes:
                self.analyze()

    def analyze(self) -> Signal:
        """One analysis pass over a snapshot of the log."""
        with self._lock:
            snapshot = tuple(self.outcomes)
            patterns = mine_patterns(snapshot)
            candidates = generate_predictions(snapshot, patterns, recent=self.recent,
                                              rare_lookback=self.rare_lookback)
            signal = generate_signal(candidates)
            self.patterns, self.candidates, self.signal = patterns, candidates, signal
            if self.store is not None:
                self.store.save_patterns(patterns)
        logger.info("analysis over %d outcomes: %d patterns, %d candidates -> %s %s",
                    len(snapshot), len(patterns), len(candidates), signal.action, signal.strategy)
        return signal

    def add_outcome(self, data: dict | Outcome) -> tuple[Outcome, Settlement | None, Signal]:
        """Validate, score against the prior signal, append and re-analyse.

        Raises InvalidOutcomeError for malformed input or a timestamp older
        than the last logged outcome, DuplicateOutcomeError for an id that is
        already in the log; nothing is appended or scored then.
        """
        outcome = validate_outcome(data)
        with self._lock:
            if any(o.id == outcome.id for o in self.outcomes):
                raise DuplicateOutcomeError(f"outcome {outcome.id} already logged")
            if self.outcomes and outcome.timestamp < self.outcomes[-1].timestamp:
                raise InvalidOutcomeError(
                    f"outcome {outcome.id} at {outcome.timestamp.isoformat()} is older than "
                    f"the last logged one ({self.outcomes[-1].timestamp.isoformat()})")
            record, self.stats = settle(outcome, self.signal, self.stats,
                                        credit=self.credit, debit=self.debit)
            self.outcomes.append(outcome)
            del self.outcomes[:-self.memory_window]
            if self.store is not None:
                self.store.add_outcome(outcome)
                if record is not None:
                    self.store.append_settlement(record)
                    self.store.save_stats(self.stats)
            if record is not None:
                self.records.append(record)
                logger.info("%s: predicted %s, got %s (streak %d, profit %.2f)",
                            'GREEN' if record.was_correct else 'RED', record.predicted_color.value,
                            record.actual_color.value, self.stats.current_streak, self.stats.profit)
            signal = self.analyze()
        return outcome, record, signal

    def simulate(self) -> tuple[Outcome, Settlement | None, Signal] | None:
        """Pull the source's newest outcome; None when there is nothing new to log."""
        if self.source is None:
            return None
        latest = self.source.fetch_latest()
        if latest is None:
            return None
        try:
            return self.add_outcome(latest)
        except DuplicateOutcomeError:
            logger.debug("no new outcome, %s is already logged", latest.id)
        except InvalidOutcomeError as e:
            logger.warning("skipping source outcome: %s", e)
        return None

    def sync(self, limit: int = 100) -> int:
        """Replace the log with fresh history from the source."""
        if self.source is None:
            return 0
        fresh = self.source.fetch_history(limit)
        if not fresh:
            logger.warning("sync returned no outcomes, keeping %d in memory", len(self.outcomes))
            return 0
        with self._lock:
            self.outcomes = list(fresh)[-self.memory_window:]
            if self.store is not None:
                self.store.save_outcomes(self.outcomes)
            self.analyze()
        return len(fresh)

    def source_online(self) -> bool:
        return self.source is not None and self.source.check_availability()

    def anomalies(self) -> AnomalyReport:
        return detect_anomalies(tuple(self.outcomes))

    def summary(self) -> dict:
        colors = [o.color for o in self.outcomes]
        return {
            'total': len(colors),
            'frequency': color_frequency(colors),
            'streaks': [
                {'start': s, 'end': e, 'color': c.value, 'length': n}
                for s, e, c, n in runs(colors, k=3)
            ],
            'white_gap': gaps(colors, Color.WHITE),
            'performance': self.performance(),
        }

    def performance(self) -> dict:
        if self.store is not None:
            return self.store.performance_stats()
        return {
            'total_results': len(self.outcomes),
            'total_patterns': len(self.patterns),
            'total_predictions': len(self.records),
            'accuracy': self.stats.accuracy,
            'last_update': self.stats.last_updated,
        }

    def settlements(self, limit: int | None = None) -> Sequence[Settlement]:
        if self.store is None:
            return self.records[-limit:] if limit else list(self.records)
        return self.store.load_settlements(limit=limit)

    def reset(self) -> None:
        with self._lock:
            if self.store is not None:
                self.store.clear_all()
            self.outcomes, self.patterns, self.candidates = [], [], []
            self.signal = None
            self.stats = Stats()
            self.records = []


def build_engine(settings: Settings, store=None, source=None) -> Engine:
    return Engine(
        store=store,
        source=source,
        recent=settings.recent_window,
        rare_lookback=settings.rare_lookback,
        memory_window=settings.memory_window,
        credit=settings.win_credit,
        debit=settings.loss_debit,
    )
