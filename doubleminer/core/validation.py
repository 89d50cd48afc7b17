from datetime import datetime
from typing import Any

from doubleminer.core.types import Color, NUMBER_RANGES, Outcome, as_utc


class InvalidOutcomeError(ValueError):
    pass


class DuplicateOutcomeError(InvalidOutcomeError):
    """The outcome id is already in the log."""


def is_valid_color(c: Any) -> bool:
    return isinstance(c, Color) or (isinstance(c, str) and c in {x.value for x in Color})

def is_valid_number(color: Color, n: Any) -> bool:
    return isinstance(n, int) and not isinstance(n, bool) and n in NUMBER_RANGES[color]


def validate_outcome(data: dict | Outcome) -> Outcome:
    """Check an externally received outcome and build the log entry.

    Raises InvalidOutcomeError when the color is unknown, the number does not
    belong to the color's range, the id is not an int or the timestamp is not
    a datetime (ISO strings are accepted and parsed). Timestamps come back in
    UTC; naive ones are read as UTC.
    """
    if isinstance(data, Outcome):
        data = {'id': data.id, 'color': data.color, 'number': data.number, 'timestamp': data.timestamp}
    color = data.get('color')
    if not is_valid_color(color):
        raise InvalidOutcomeError(f"unknown color: {color!r}")
    color = Color(color)
    number = data.get('number')
    if not is_valid_number(color, number):
        raise InvalidOutcomeError(f"number {number!r} out of range for {color.value}")
    ts = data.get('timestamp')
    if isinstance(ts, str):
        try:
            ts = datetime.fromisoformat(ts)
        except ValueError as e:
            raise InvalidOutcomeError(f"bad timestamp: {ts!r}") from e
    if not isinstance(ts, datetime):
        raise InvalidOutcomeError(f"bad timestamp: {ts!r}")
    ts = as_utc(ts)
    oid = data.get('id')
    if oid is None:
        oid = int(ts.timestamp() * 1000)
    if not isinstance(oid, int) or isinstance(oid, bool):
        raise InvalidOutcomeError(f"bad id: {oid!r}")
    return Outcome(id=oid, color=color, number=number, timestamp=ts)
