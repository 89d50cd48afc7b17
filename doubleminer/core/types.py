from __future__ import annotations
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum


class Color(str, Enum):
    RED = "red"
    BLACK = "black"
    WHITE = "white"  # rare, ~2%


class EntryDelay(str, Enum):
    NEXT = "NEXT"
    WAIT_1 = "WAIT_1"
    WAIT_2 = "WAIT_2"

    @property
    def rounds(self) -> int:
        return _ROUNDS[self]


_ROUNDS = {EntryDelay.NEXT: 0, EntryDelay.WAIT_1: 1, EntryDelay.WAIT_2: 2}


# All timestamps are timezone-aware UTC.

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(ts: datetime | None) -> datetime | None:
    """Naive values are taken as UTC; aware ones are converted."""
    if ts is None:
        return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


# red 1..7, black 8..14, white 0
NUMBER_RANGES = {
    Color.RED: range(1, 8),
    Color.BLACK: range(8, 15),
    Color.WHITE: range(0, 1),
}


@dataclass
class Outcome:
    id: int
    color: Color
    number: int
    timestamp: datetime
    predicted: bool | None = None
    was_correct: bool | None = None


@dataclass(frozen=True)
class Pattern:
    sequence: tuple[Color, ...]
    frequency: int
    accuracy: float
    next_prediction: Color
    last_seen: datetime | None = None

    @property
    def text(self) -> str:
        return '-'.join(c.value for c in self.sequence)


@dataclass(frozen=True)
class Candidate:
    color: Color
    confidence: float
    algorithm: str
    reasoning: str
    entry: EntryDelay


@dataclass(frozen=True)
class Signal:
    action: str  # 'BET' | 'WAIT'
    confidence: float
    strategy: str
    reasoning: str
    entry: EntryDelay = EntryDelay.NEXT
    rounds_to_wait: int = 0
    color: Color | None = None
    algorithm: str | None = None
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def is_bet(self) -> bool:
        return self.action == 'BET' and self.color is not None


@dataclass(frozen=True)
class Settlement:
    timestamp: datetime
    predicted_color: Color
    actual_color: Color
    confidence: float
    algorithm: str
    was_correct: bool
    entry: EntryDelay


@dataclass(frozen=True)
class Stats:
    total_predictions: int = 0
    correct_predictions: int = 0
    accuracy: float = 0.0
    greens: int = 0
    reds: int = 0
    current_streak: int = 0
    best_streak: int = 0
    profit: float = 0.0
    last_updated: datetime | None = None

    def evolve(self, **changes) -> Stats:
        return replace(self, **changes)


def to_dict(obj) -> dict:
    """Plain JSON-ready dict of a domain dataclass."""
    out = {}
    for k, v in asdict(obj).items():
        if isinstance(v, datetime):
            v = v.isoformat()
        elif isinstance(v, Enum):
            v = v.value
        elif isinstance(v, tuple):
            v = [x.value if isinstance(x, Enum) else x for x in v]
        out[k] = v
    return out
