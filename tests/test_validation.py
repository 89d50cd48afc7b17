from datetime import datetime, timezone

import pytest

from doubleminer.core.types import Color
from doubleminer.core.validation import InvalidOutcomeError, is_valid_color, validate_outcome

TS = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

def test_valid_outcomes():
    o = validate_outcome({'id': 5, 'color': 'red', 'number': 7, 'timestamp': TS})
    assert o.color == Color.RED and o.number == 7 and o.id == 5
    assert o.predicted is None and o.was_correct is None
    assert validate_outcome({'color': 'white', 'number': 0, 'timestamp': TS}).color == Color.WHITE
    assert validate_outcome({'id': 1, 'color': 'black', 'number': 14, 'timestamp': '2024-01-01T12:00:00'}).timestamp == TS

def test_is_valid_color():
    assert is_valid_color('black') and is_valid_color(Color.WHITE)
    assert not is_valid_color('green')

@pytest.mark.parametrize('payload', [
    {'color': 'green', 'number': 1, 'timestamp': TS},
    {'color': 'red', 'number': 9, 'timestamp': TS},
    {'color': 'black', 'number': 7, 'timestamp': TS},
    {'color': 'white', 'number': 3, 'timestamp': TS},
    {'color': 'red', 'number': True, 'timestamp': TS},
    {'color': 'red', 'number': '3', 'timestamp': TS},
    {'color': 'red', 'number': 3, 'timestamp': 1704110400},
    {'color': 'red', 'number': 3, 'timestamp': 'yesterday'},
    {'id': 'x', 'color': 'red', 'number': 3, 'timestamp': TS},
])
def test_malformed_outcomes_rejected(payload):
    with pytest.raises(InvalidOutcomeError):
        validate_outcome(payload)

def test_timestamps_normalised_to_utc():
    naive = validate_outcome({'id': 1, 'color': 'red', 'number': 1, 'timestamp': datetime(2024, 1, 1, 12, 0)})
    assert naive.timestamp == TS and naive.timestamp.tzinfo == timezone.utc
    shifted = validate_outcome({'id': 2, 'color': 'red', 'number': 1, 'timestamp': '2024-01-01T09:00:00-03:00'})
    assert shifted.timestamp == TS and shifted.timestamp.tzinfo == timezone.utc
