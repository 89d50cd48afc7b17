from dataclasses import dataclass, field
from typing import Sequence

from doubleminer.core.types import Color, Outcome

WHITE_HIGH = 5.0
WHITE_LOW = 0.5
WHITE_LOW_MIN_SAMPLES = 100
MAX_RUN = 15
MIN_GAP_SECONDS = 10


@dataclass
class AnomalyReport:
    has_anomalies: bool = False
    anomalies: list[str] = field(default_factory=list)


def detect_anomalies(outcomes: Sequence[Outcome]) -> AnomalyReport:
    """Advisory feed-quality checks; never changes engine decisions."""
    if not outcomes:
        return AnomalyReport()
    out = []

    white = sum(1 for o in outcomes if o.color == Color.WHITE)
    pct = white / len(outcomes) * 100
    if pct > WHITE_HIGH:
        out.append(f"white frequency too high: {pct:.1f}%")
    if pct < WHITE_LOW and len(outcomes) > WHITE_LOW_MIN_SAMPLES:
        out.append(f"white frequency too low: {pct:.1f}%")

    longest, cur, longest_color = 1, 1, outcomes[0].color
    for prev, o in zip(outcomes, outcomes[1:]):
        cur = cur + 1 if o.color == prev.color else 1
        if cur > longest:
            longest, longest_color = cur, o.color
    if longest > MAX_RUN:
        out.append(f"run too long: {longest} consecutive {longest_color.value}")

    ts = sorted(o.timestamp for o in outcomes)
    if any((b - a).total_seconds() < MIN_GAP_SECONDS for a, b in zip(ts, ts[1:])):
        out.append("results arriving too close together")

    return AnomalyReport(has_anomalies=bool(out), anomalies=out)
