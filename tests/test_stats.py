from doubleminer.analytics.stats import color_frequency, gaps, plurality
from doubleminer.core.types import EntryDelay
from conftest import colors

def test_plurality_first_to_reach_max():
    assert plurality("ABBA") == ('B', 2)
    assert plurality("AB") == ('A', 1)
    assert plurality([]) == (None, 0)

def test_plurality_with_order():
    votes = [EntryDelay.WAIT_1, EntryDelay.NEXT]
    assert plurality(votes, order=list(EntryDelay)) == (EntryDelay.NEXT, 1)
    votes = [EntryDelay.WAIT_2, EntryDelay.WAIT_1, EntryDelay.WAIT_2]
    assert plurality(votes, order=list(EntryDelay)) == (EntryDelay.WAIT_2, 2)

def test_color_frequency():
    freq = color_frequency(colors("RRBW"))
    assert freq['red'] == {'count': 2, 'percentage': 50.0}
    assert freq['white']['count'] == 1
    assert color_frequency([])['black']['percentage'] == 0.0

def test_gaps():
    g = gaps(colors("RRWRRRWBB"), colors("W")[0])
    assert g['gaps'] == [2, 3]
    assert g['current_gap'] == 2
    assert g['average_gap'] == 2.5 and g['max_gap'] == 3
