from doubleminer.analytics.heuristics import (
    alternating, frequency_gap, generate_predictions, pattern_sequence, streak_reversal, white_gap,
)
from doubleminer.core.types import Color, EntryDelay, Pattern
from conftest import colors

R, B, W = Color.RED, Color.BLACK, Color.WHITE


def pat(seq: str, accuracy: float, nxt: Color) -> Pattern:
    return Pattern(sequence=tuple(colors(seq)), frequency=6, accuracy=accuracy, next_prediction=nxt)


def test_pattern_sequence_entry_by_accuracy():
    tail = colors("BBRRB")
    c = pattern_sequence(tail, [pat("RRBR", 90, B)])
    assert c.color == B and c.confidence == 90 and c.entry == EntryDelay.NEXT
    assert c.algorithm == 'Pattern Sequence' and 'red-red-black-red' in c.reasoning
    assert pattern_sequence(tail, [pat("RRBR", 80, B)]).entry == EntryDelay.WAIT_1
    assert pattern_sequence(tail, [pat("RRBR", 72, B)]).entry == EntryDelay.WAIT_2
    assert pattern_sequence(tail, [pat("RRBR", 70, B)]) is None

def test_pattern_sequence_prefers_longest():
    tail = colors("BBRRB")
    patterns = [pat("RRBR", 95, R), pat("BBRRBW", 76, W)]
    c = pattern_sequence(tail, patterns)
    assert c.color == W and c.entry == EntryDelay.WAIT_1
    assert 'black-black-red-red-black-white' in c.reasoning

def test_pattern_sequence_falls_back_to_shorter():
    tail = colors("BBRRB")
    patterns = [pat("BBRRBW", 68, W), pat("RRBR", 88, R)]
    assert pattern_sequence(tail, patterns).color == R

def test_pattern_sequence_needs_tail():
    assert pattern_sequence(colors("RB"), [pat("RBR", 99, B)]) is None

def test_frequency_gap():
    assert frequency_gap(colors("RBRBRBR")) is None
    c = frequency_gap(colors("RBRBRBRB"))
    assert c.color == W and c.confidence == 78 and c.entry == EntryDelay.NEXT
    assert '8' in c.reasoning
    assert frequency_gap(colors("RRRRRRRRRR")).color == B
    assert frequency_gap(colors("RBWRBRBRBR")) is None

def test_streak_reversal():
    assert streak_reversal(colors("BRRR")) is None
    c = streak_reversal(colors("BRRRR"))
    assert c.color == B and c.confidence == 81 and c.entry == EntryDelay.WAIT_1
    assert '4' in c.reasoning
    c = streak_reversal(colors("BBBBBBB"))
    assert c.color == R and c.confidence == 88 and c.entry == EntryDelay.NEXT

def test_streak_reversal_ignores_white():
    assert streak_reversal(colors("RWWWWW")) is None
    assert streak_reversal([]) is None

def test_white_gap():
    c = white_gap(colors("RB" * 22 + "R"))
    assert c.color == W and c.confidence == 70 and c.entry == EntryDelay.WAIT_1
    assert '45' in c.reasoning
    c = white_gap(colors("R" * 60))
    assert c.confidence == 85 and c.entry == EntryDelay.NEXT
    assert white_gap(colors("W" + "R" * 39)) is None
    assert white_gap(colors("W" + "R" * 40)).confidence == 60

def test_alternating():
    c = alternating(colors("RB" * 7))
    assert c.color == R and c.confidence == 72 and c.entry == EntryDelay.NEXT
    assert alternating(colors("BRBR")).color == B
    assert alternating(colors("RBR")) is None
    assert alternating(colors("RBRBB")) is None

def test_generate_predictions_sorted(log):
    candidates = generate_predictions(log("RB" * 7), [])
    assert [c.algorithm for c in candidates] == ['Frequency Gap', 'Alternating Pattern']
    assert [c.confidence for c in candidates] == [78, 72]

def test_white_gap_looks_past_recent_tail(log):
    candidates = generate_predictions(log("RB" * 22 + "R"), [])
    white = [c for c in candidates if c.algorithm == 'White Prediction']
    assert white and white[0].confidence == 70
    assert generate_predictions(log("RB" * 22 + "R"), [], rare_lookback=15) == [
        c for c in candidates if c.algorithm != 'White Prediction'
    ]

def test_generate_predictions_empty_log():
    assert generate_predictions([], []) == []
