import math
import pytest
from notes.catalog import lookup
from notes.model import Pitch, PresentedNote, TREBLE, BASS
from render import layout as L

def notes_of(*key_ids, answered=0):
    out = []
    for i, kid in enumerate(key_ids):
        letter, octave = kid[:-1], int(kid[-1])
        out.append(PresentedNote(lookup(letter, octave), answered=i < answered))
    return out

@pytest.mark.parametrize("pos,expected", [
    (-4, [-4, -2]),
    (-2, [-2]),
    (-1, []),
    (-3, []),
    (0, []),
    (4, []),
    (8, []),
    (9, []),
    (10, [10]),
    (12, [10, 12]),
])
def test_ledger_positions(pos, expected):
    assert L.ledger_positions(Pitch("X", 4, pos, TREBLE)) == expected

@pytest.mark.parametrize("pos", range(-10, 19))
def test_ledger_count_matches_distance_to_staff(pos):
    lines = L.ledger_positions(Pitch("X", 4, pos, BASS))
    if pos % 2 or 0 <= pos <= 8:
        assert lines == []
    else:
        boundary = 0 if pos < 0 else 8
        assert len(lines) == math.ceil(abs(pos - boundary) / 2)

def test_ledger_ys_for_middle_c_on_each_staff():
    assert L.ledger_line_ys(lookup("C", 4, TREBLE)) == [130]
    assert L.ledger_line_ys(lookup("C", 4, BASS)) == [158]

def test_note_y():
    assert L.note_y(lookup("E", 4)) == 118
    assert L.note_y(lookup("F", 5)) == 70
    assert L.note_y(lookup("G", 2, BASS)) == 218
    assert L.note_y(lookup("A", 3, BASS)) == 170

def test_note_and_bar_x():
    assert L.note_x(0) == 92 + 25
    assert L.note_x(3) == 92 + 175
    assert L.note_x(5) == 92 + 200 + 75
    assert L.bar_line_x(0) == 92
    assert L.bar_line_x(3) == 692

def test_stem_direction_flips_above_middle_line():
    b4, c5 = lookup("B", 4), lookup("C", 5)
    assert L.stem_up(b4)
    assert not L.stem_up(c5)
    up = L.note_geometry(0, PresentedNote(b4))
    down = L.note_geometry(0, PresentedNote(c5))
    assert up.stem.x1 == up.x + 8 and up.stem.y2 == up.y - 42
    assert down.stem.x1 == down.x - 8 and down.stem.y2 == down.y + 42

def test_accidental_widens_ledger_lines():
    plain = L.note_geometry(0, PresentedNote(lookup("C", 4)))
    sharp = L.note_geometry(0, PresentedNote(lookup("C#", 4)))
    assert plain.accidental is None
    assert plain.ledger_lines[0].x1 == plain.x - 14
    assert sharp.accidental.text == L.SHARP
    assert sharp.accidental.anchor == "end"
    assert sharp.accidental.x == sharp.x - 10
    assert sharp.ledger_lines[0].x1 == sharp.x - 18
    assert sharp.ledger_lines[0].x2 == sharp.x + 14

def test_flat_spelling_gets_flat_glyph():
    g = L.note_geometry(0, PresentedNote(Pitch("Bb", 4, 4, TREBLE)))
    assert g.accidental.text == L.FLAT

def test_empty_staff_defaults():
    out = L.layout_staff([])
    assert out.width == 500
    assert out.measures == 1
    assert len(out.bar_lines) == 2
    assert len(out.staff_lines) == 10
    assert out.notes == []
    assert out.first_unanswered == -1
    assert [g.text for g in out.clefs] == [L.TREBLE_CLEF, L.BASS_CLEF]
    assert out.time_signature.text == L.COMMON_TIME

def test_staff_grows_with_notes():
    notes = notes_of(*["E4"] * 12)
    out = L.layout_staff(notes)
    assert out.measures == 3
    assert out.width == 692 + 60
    assert [b.x1 for b in out.bar_lines] == [92, 292, 492, 692]
    assert out.bar_lines[0].width == 2 and out.bar_lines[1].width == 1.5
    assert out.staff_lines[0].x2 == out.width - 20

def test_fixed_measures_have_fixed_width():
    assert L.layout_staff([], fixed_measures=4).width == 952
    assert L.layout_staff(notes_of("E4", "G4"), fixed_measures=4).width == 952

def test_current_note_is_first_unanswered():
    out = L.layout_staff(notes_of("E4", "G4", "B4", answered=2))
    assert out.first_unanswered == 2
    assert [n.current for n in out.notes] == [False, False, True]
    assert [n.answered for n in out.notes] == [True, True, False]

def test_brace_joins_the_staves():
    pts = L.brace_points()
    assert pts[0] == (20, 70)
    assert pts[-1] == pytest.approx((20, 218))
    assert min(x for x, _ in pts) >= 4

def test_layout_is_pure():
    notes = notes_of("C4", "F#5", "A5")
    assert L.layout_staff(notes) == L.layout_staff(notes)

def test_chunk_notes():
    assert L.chunk_notes([]) == [[]]
    pages = L.chunk_notes(notes_of(*["E4"] * 17))
    assert [len(p) for p in pages] == [16, 1]

def test_layout_pages_are_fixed_width():
    pages = L.layout_pages(notes_of(*["E4"] * 20))
    assert len(pages) == 2
    assert all(p.fixed_width and p.measures == 4 for p in pages)
    assert len(pages[1].notes) == 4

def test_scroll_keeps_current_note_in_view():
    notes = notes_of(*["E4"] * 24, answered=8)
    out = L.layout_staff(notes)
    assert L.scroll_offset(out, viewport_width=500) == L.note_x(8) - 40
    assert L.scroll_offset(out, viewport_width=500, scale=2.0) == L.note_x(8) * 2 - 40

def test_scroll_to_end_when_all_answered():
    out = L.layout_staff(notes_of(*["E4"] * 24, answered=24))
    assert L.scroll_offset(out, viewport_width=500) == out.width - 500

def test_scroll_clamped_and_zero_cases():
    first = L.layout_staff(notes_of("E4", "G4"))
    assert L.scroll_offset(first, viewport_width=2000) == 0
    assert L.scroll_offset(L.layout_staff([]), viewport_width=100) == 0
    fixed = L.layout_staff(notes_of(*["E4"] * 16, answered=10), fixed_measures=4)
    assert L.scroll_offset(fixed, viewport_width=100) == 0
