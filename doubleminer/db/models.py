from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime

from doubleminer.core.types import utcnow

# timestamps are stored as aware UTC; SQLite hands them back naive, crud re-attaches UTC


class OutcomeRow(SQLModel, table=True):
    seq: int | None = Field(default=None, primary_key=True)  # log order
    id: int = Field(index=True)
    color: str = Field(index=True)  # 'red' | 'black' | 'white'
    number: int
    timestamp: datetime = Field(sa_type=DateTime(timezone=True), index=True)
    predicted: bool | None = None
    was_correct: bool | None = None


class PatternRow(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    sequence: str  # 'red-black-red'
    frequency: int
    accuracy: float
    next_prediction: str
    last_seen: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))


class StatsRow(SQLModel, table=True):
    id: int | None = Field(default=1, primary_key=True)
    total_predictions: int = 0
    correct_predictions: int = 0
    accuracy: float = 0.0
    greens: int = 0
    reds: int = 0
    current_streak: int = 0
    best_streak: int = 0
    profit: float = 0.0
    last_updated: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class SettlementRow(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    timestamp: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)
    predicted_color: str
    actual_color: str
    confidence: float
    algorithm: str
    was_correct: bool
    entry: str  # 'NEXT' | 'WAIT_1' | 'WAIT_2'
