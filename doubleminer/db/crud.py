from typing import Iterable
from sqlalchemy import delete, func
from sqlmodel import Session, select
from doubleminer.db.models import OutcomeRow, PatternRow, StatsRow, SettlementRow
from doubleminer.core.types import Color, EntryDelay, Outcome, Pattern, Settlement, Stats, as_utc


# row <-> domain

def outcome_to_row(o: Outcome) -> OutcomeRow:
    return OutcomeRow(id=o.id, color=o.color.value, number=o.number, timestamp=as_utc(o.timestamp),
                      predicted=o.predicted, was_correct=o.was_correct)

def row_to_outcome(r: OutcomeRow) -> Outcome:
    return Outcome(id=r.id, color=Color(r.color), number=r.number, timestamp=as_utc(r.timestamp),
                   predicted=r.predicted, was_correct=r.was_correct)

def pattern_to_row(p: Pattern) -> PatternRow:
    return PatternRow(sequence=p.text, frequency=p.frequency, accuracy=p.accuracy,
                      next_prediction=p.next_prediction.value, last_seen=as_utc(p.last_seen))

def row_to_pattern(r: PatternRow) -> Pattern:
    return Pattern(sequence=tuple(Color(c) for c in r.sequence.split('-')), frequency=r.frequency,
                   accuracy=r.accuracy, next_prediction=Color(r.next_prediction), last_seen=as_utc(r.last_seen))

def settlement_to_row(s: Settlement) -> SettlementRow:
    return SettlementRow(timestamp=as_utc(s.timestamp), predicted_color=s.predicted_color.value,
                         actual_color=s.actual_color.value, confidence=s.confidence,
                         algorithm=s.algorithm, was_correct=s.was_correct, entry=s.entry.value)

def row_to_settlement(r: SettlementRow) -> Settlement:
    return Settlement(timestamp=as_utc(r.timestamp), predicted_color=Color(r.predicted_color),
                      actual_color=Color(r.actual_color), confidence=r.confidence,
                      algorithm=r.algorithm, was_correct=r.was_correct, entry=EntryDelay(r.entry))


# outcomes

def insert_outcomes(session: Session, outcomes: Iterable[Outcome]) -> None:
    for o in outcomes:
        session.add(outcome_to_row(o))
    session.commit()


def latest_outcomes(session: Session, limit: int | None = None) -> list[Outcome]:
    q = select(OutcomeRow).order_by(OutcomeRow.seq.desc())
    if limit:
        q = q.limit(limit)
    rows = session.exec(q).all()
    return [row_to_outcome(r) for r in reversed(rows)]


def trim_table(session: Session, model, order_col, keep: int) -> None:
    """Delete everything but the newest `keep` rows."""
    n = count(session, model)
    if n <= keep:
        return
    cutoff = session.exec(select(order_col).order_by(order_col.desc()).offset(keep - 1).limit(1)).first()
    session.execute(delete(model).where(order_col < cutoff))
    session.commit()


# patterns

def replace_patterns(session: Session, patterns: Iterable[Pattern]) -> None:
    session.execute(delete(PatternRow))
    for p in patterns:
        session.add(pattern_to_row(p))
    session.commit()


def all_patterns(session: Session) -> list[Pattern]:
    rows = session.exec(select(PatternRow).order_by(PatternRow.id)).all()
    return [row_to_pattern(r) for r in rows]


# stats

def get_stats(session: Session) -> Stats | None:
    r = session.get(StatsRow, 1)
    if not r:
        return None
    return Stats(
        total_predictions=r.total_predictions, correct_predictions=r.correct_predictions,
        accuracy=r.accuracy, greens=r.greens, reds=r.reds, current_streak=r.current_streak,
        best_streak=r.best_streak, profit=r.profit, last_updated=as_utc(r.last_updated),
    )


def put_stats(session: Session, s: Stats) -> None:
    r = session.get(StatsRow, 1) or StatsRow(id=1)
    r.total_predictions = s.total_predictions
    r.correct_predictions = s.correct_predictions
    r.accuracy = s.accuracy
    r.greens = s.greens
    r.reds = s.reds
    r.current_streak = s.current_streak
    r.best_streak = s.best_streak
    r.profit = s.profit
    if s.last_updated:
        r.last_updated = as_utc(s.last_updated)
    session.add(r)
    session.commit()


# settlements

def insert_settlement(session: Session, s: Settlement) -> None:
    session.add(settlement_to_row(s))
    session.commit()


def settlements(session: Session, limit: int | None = None) -> list[Settlement]:
    q = select(SettlementRow).order_by(SettlementRow.id.desc())
    if limit:
        q = q.limit(limit)
    rows = session.exec(q).all()
    return [row_to_settlement(r) for r in reversed(rows)]


def replace_settlements(session: Session, records: Iterable[Settlement]) -> None:
    session.execute(delete(SettlementRow))
    for r in records:
        session.add(settlement_to_row(r))
    session.commit()


def count(session: Session, model) -> int:
    return session.exec(select(func.count()).select_from(model)).one()
