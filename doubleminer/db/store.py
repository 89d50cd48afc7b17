"""SQL-backed persistence store.

Every call is safe to fire and forget: database errors are logged and the
caller gets an empty or neutral value back, so the analysis pipeline keeps
running on its in-memory snapshot.
"""
import json
import logging
from datetime import datetime
from typing import Iterable

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from doubleminer.core.types import Color, EntryDelay, Outcome, Pattern, Settlement, Stats, as_utc, to_dict, utcnow
from doubleminer.db import crud
from doubleminer.db.base import init_db
from doubleminer.db.models import OutcomeRow, PatternRow, SettlementRow, StatsRow

logger = logging.getLogger(__name__)


class SQLStore:
    def __init__(self, engine, history_limit: int = 1000, settlement_limit: int = 500):
        self.engine = engine
        self.history_limit = history_limit
        self.settlement_limit = settlement_limit

    def init(self) -> None:
        init_db(self.engine)

    # outcomes

    def load_outcomes(self) -> list[Outcome]:
        try:
            with Session(self.engine) as s:
                return crud.latest_outcomes(s, limit=self.history_limit)
        except SQLAlchemyError:
            logger.exception("failed to load outcomes")
            return []

    def save_outcomes(self, outcomes: Iterable[Outcome]) -> None:
        outcomes = list(outcomes)[-self.history_limit:]
        try:
            with Session(self.engine) as s:
                s.execute(delete(OutcomeRow))
                crud.insert_outcomes(s, outcomes)
        except SQLAlchemyError:
            logger.exception("failed to save %d outcomes", len(outcomes))

    def add_outcome(self, outcome: Outcome) -> None:
        try:
            with Session(self.engine) as s:
                crud.insert_outcomes(s, [outcome])
                crud.trim_table(s, OutcomeRow, OutcomeRow.seq, self.history_limit)
        except SQLAlchemyError:
            logger.exception("failed to add outcome %s", outcome.id)

    # patterns

    def load_patterns(self) -> list[Pattern]:
        try:
            with Session(self.engine) as s:
                return crud.all_patterns(s)
        except (SQLAlchemyError, ValueError):
            logger.exception("failed to load patterns")
            return []

    def save_patterns(self, patterns: Iterable[Pattern]) -> None:
        try:
            with Session(self.engine) as s:
                crud.replace_patterns(s, patterns)
        except SQLAlchemyError:
            logger.exception("failed to save patterns")

    # stats

    def load_stats(self) -> Stats | None:
        try:
            with Session(self.engine) as s:
                return crud.get_stats(s)
        except SQLAlchemyError:
            logger.exception("failed to load stats")
            return None

    def save_stats(self, stats: Stats) -> None:
        try:
            with Session(self.engine) as s:
                crud.put_stats(s, stats)
        except SQLAlchemyError:
            logger.exception("failed to save stats")

    # settlements

    def append_settlement(self, record: Settlement) -> None:
        try:
            with Session(self.engine) as s:
                crud.insert_settlement(s, record)
                crud.trim_table(s, SettlementRow, SettlementRow.id, self.settlement_limit)
        except SQLAlchemyError:
            logger.exception("failed to save settlement")

    def save_settlements(self, records: Iterable[Settlement]) -> None:
        records = list(records)[-self.settlement_limit:]
        try:
            with Session(self.engine) as s:
                crud.replace_settlements(s, records)
        except SQLAlchemyError:
            logger.exception("failed to save %d settlements", len(records))

    def load_settlements(self, limit: int | None = None) -> list[Settlement]:
        try:
            with Session(self.engine) as s:
                return crud.settlements(s, limit=limit)
        except (SQLAlchemyError, ValueError):
            logger.exception("failed to load settlements")
            return []

    # maintenance

    def clear_all(self) -> None:
        try:
            with Session(self.engine) as s:
                for model in (OutcomeRow, PatternRow, StatsRow, SettlementRow):
                    s.execute(delete(model))
                s.commit()
        except SQLAlchemyError:
            logger.exception("failed to clear data")

    def export_data(self) -> str:
        stats = self.load_stats()
        data = {
            'results': [to_dict(o) for o in self.load_outcomes()],
            'patterns': [to_dict(p) for p in self.load_patterns()],
            'stats': to_dict(stats) if stats else None,
            'predictions': [to_dict(r) for r in self.load_settlements()],
            'exportDate': utcnow().isoformat(),
        }
        return json.dumps(data, indent=2)

    def import_data(self, raw: str) -> bool:
        try:
            data = json.loads(raw)
            results = [_load_outcome(r) for r in data.get('results') or []]
            patterns = [_load_pattern(p) for p in data.get('patterns') or []]
            stats = _load_stats(data['stats']) if data.get('stats') else None
            records = [_load_settlement(r) for r in data.get('predictions') or []]
        except (ValueError, KeyError, TypeError):
            logger.exception("failed to import backup")
            return False
        if results:
            self.save_outcomes(results)
        if patterns:
            self.save_patterns(patterns)
        if stats:
            self.save_stats(stats)
        if records:
            self.save_settlements(records)
        return True

    def performance_stats(self) -> dict:
        """Row counts plus the stored accuracy and last scoring time."""
        try:
            with Session(self.engine) as s:
                stats = crud.get_stats(s)
                return {
                    'total_results': crud.count(s, OutcomeRow),
                    'total_patterns': crud.count(s, PatternRow),
                    'total_predictions': crud.count(s, SettlementRow),
                    'accuracy': stats.accuracy if stats else 0.0,
                    'last_update': stats.last_updated if stats else None,
                }
        except SQLAlchemyError:
            logger.exception("failed to read performance stats")
            return {'total_results': 0, 'total_patterns': 0, 'total_predictions': 0,
                    'accuracy': 0.0, 'last_update': None}


def _ts(v: str | None) -> datetime | None:
    return as_utc(datetime.fromisoformat(v)) if v else None


def _load_outcome(d: dict) -> Outcome:
    return Outcome(id=int(d['id']), color=Color(d['color']), number=int(d['number']),
                   timestamp=_ts(d['timestamp']), predicted=d.get('predicted'),
                   was_correct=d.get('was_correct'))


def _load_pattern(d: dict) -> Pattern:
    return Pattern(sequence=tuple(Color(c) for c in d['sequence']), frequency=int(d['frequency']),
                   accuracy=float(d['accuracy']), next_prediction=Color(d['next_prediction']),
                   last_seen=_ts(d.get('last_seen')))


def _load_stats(d: dict) -> Stats:
    d = dict(d)
    d['last_updated'] = _ts(d.get('last_updated'))
    return Stats(**d)


def _load_settlement(d: dict) -> Settlement:
    return Settlement(timestamp=_ts(d['timestamp']), predicted_color=Color(d['predicted_color']),
                      actual_color=Color(d['actual_color']), confidence=float(d['confidence']),
                      algorithm=d['algorithm'], was_correct=bool(d['was_correct']),
                      entry=EntryDelay(d['entry']))
