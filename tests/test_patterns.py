from doubleminer.analytics.patterns import mine_patterns, runs
from doubleminer.core.types import Color
from doubleminer.sources import SimulatedSource
from conftest import colors

R, B = Color.RED, Color.BLACK

def test_runs():
    assert runs(colors("RRRBB"), k=3) == [(0, 2, R, 3)]
    assert runs(colors("RBBBB"), k=3) == [(1, 4, B, 4)]

def test_periodic_log(log):
    patterns = mine_patterns(log("RRB" * 10))
    assert len(patterns) == 24
    assert all(p.accuracy == 100 for p in patterns)
    first = patterns[0]
    assert first.sequence == (R, R, B)
    assert first.frequency == 9
    assert first.next_prediction == R

def test_short_log_has_no_patterns(log):
    assert mine_patterns(log("RRBRRBR")) == []

def test_invariants_on_simulated_history():
    outcomes = SimulatedSource(seed=7).fetch_history(600)
    patterns = mine_patterns(outcomes)
    assert len(patterns) <= 30
    for p in patterns:
        assert 3 <= len(p.sequence) <= 10
        assert p.frequency >= 5
        assert p.accuracy > 65
    accs = [p.accuracy for p in patterns]
    assert accs == sorted(accs, reverse=True)

def test_mining_is_idempotent():
    outcomes = SimulatedSource(seed=3).fetch_history(400)
    assert mine_patterns(outcomes) == mine_patterns(outcomes)

def test_accuracy_threshold(log):
    # RRR is followed by B four times and by R once: 80%
    patterns = mine_patterns(log("RRRB RRRB RRRB RRRB RRRR"))
    rrr = [p for p in patterns if p.sequence == (R, R, R)]
    assert rrr and rrr[0].next_prediction == B and rrr[0].accuracy == 80
