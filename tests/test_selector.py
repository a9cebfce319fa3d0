import random
from notes.catalog import all_pitches, lookup
from notes.selector import NoteSelector, make_selector

def test_pick_one_comes_from_catalog(selector):
    catalog = set(all_pitches())
    assert all(selector.pick_one() in catalog for _ in range(200))

def test_pick_many_length_and_duplicates_allowed():
    sel = NoteSelector(random.Random(0), pitches=[lookup("C", 4), lookup("D", 4)])
    picks = sel.pick_many(20)
    assert len(picks) == 20
    assert len(set(picks)) <= 2

def test_pick_many_non_positive_is_empty(selector):
    assert selector.pick_many(0) == []
    assert selector.pick_many(-3) == []

def test_seeded_selectors_repeat():
    assert make_selector(7).pick_many(10) == make_selector(7).pick_many(10)

def test_draws_cover_the_catalog():
    sel = make_selector(3)
    seen = set(sel.pick_many(2000))
    assert seen == set(all_pitches())
