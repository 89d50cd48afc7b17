from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional


class OutcomeIn(BaseModel):
    color: Literal['red', 'black', 'white']
    number: int = Field(ge=0, le=14)
    timestamp: Optional[datetime] = None
    id: Optional[int] = None


class OutcomeOut(BaseModel):
    id: int
    color: str
    number: int
    timestamp: datetime
    predicted: bool | None = None
    was_correct: bool | None = None


class PatternOut(BaseModel):
    sequence: list[str]
    frequency: int
    accuracy: float
    next_prediction: str
    last_seen: datetime | None = None


class CandidateOut(BaseModel):
    color: str
    confidence: float
    algorithm: str
    reasoning: str
    entry: str


class SignalOut(BaseModel):
    action: str
    color: str | None = None
    confidence: float
    strategy: str
    reasoning: str
    entry: str
    rounds_to_wait: int
    algorithm: str | None = None
    timestamp: datetime


class StatsOut(BaseModel):
    total_predictions: int
    correct_predictions: int
    accuracy: float
    greens: int
    reds: int
    current_streak: int
    best_streak: int
    profit: float
    last_updated: datetime | None = None


class SettlementOut(BaseModel):
    timestamp: datetime
    predicted_color: str
    actual_color: str
    confidence: float
    algorithm: str
    was_correct: bool
    entry: str


class IngestOut(BaseModel):
    stored: OutcomeOut | None = None
    settlement: SettlementOut | None = None
    signal: SignalOut | None = None
    stats: StatsOut


class AnomaliesOut(BaseModel):
    has_anomalies: bool
    anomalies: list[str]


class SourceOut(BaseModel):
    source: str
    online: bool
