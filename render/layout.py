# render/layout.py
"""Grand-staff geometry.

Everything here is a pure function of the presented notes: the renderer calls
``layout_staff`` / ``layout_pages`` every frame and draws the primitives it
gets back. Units are viewBox units (320 tall); the renderer applies the scale.

Left to right: brace | clef | time signature | bar | [4 notes] | bar | ...
"""
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
from notes.model import Pitch, PresentedNote, TREBLE

VIEWBOX_HEIGHT = 320
STAFF_LEFT = 20
STAFF_RIGHT_PAD = 20
CLEF_X = 48
CLEF_SIZE = 60
TIME_SIG_X = 78
TIME_SIG_Y = 144
TIME_SIG_SIZE = 52
FIRST_BAR_X = 92
MEASURE_WIDTH = 200
NOTES_PER_MEASURE = 4
NOTES_PER_PAGE = 16          # 4 measures x 4 notes
PAGE_MEASURES = 4
LINE_SPACING = 12
HALF_SPACE = LINE_SPACING / 2
LEDGER_LENGTH = 14
ACCIDENTAL_WIDTH = 18
ACCIDENTAL_OFFSET = 10
ACCIDENTAL_SIZE = 28
STAFF_EXTEND = 60
MIN_WIDTH = 500
EMPTY_CONTENT_WIDTH = 400
STEM_LENGTH = 42
HEAD_RX = 8
HEAD_RY = 6
SCROLL_MARGIN = 40

TREBLE_TOP_Y = 70
TREBLE_BOTTOM_Y = 118
BASS_TOP_Y = 170
BASS_BOTTOM_Y = 218
BRACE_MID_Y = 144
BRACE_BULGE_X = 4

TOP_STAFF_POSITION = 8       # top line, in half spaces above the bottom line
MIDDLE_STAFF_POSITION = 4

TREBLE_CLEF = "\U0001D11E"
BASS_CLEF = "\U0001D122"
COMMON_TIME = "\U0001D134"
SHARP = "♯"
FLAT = "♭"

NOTE_OFFSETS_IN_MEASURE = [f * MEASURE_WIDTH for f in (1 / 8, 3 / 8, 5 / 8, 7 / 8)]

# ---- primitives ----
@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 1.5
    opacity: float = 1.0

@dataclass(frozen=True)
class Glyph:
    text: str
    x: float
    y: float
    size: float
    anchor: str = "middle"   # "middle" | "end"

@dataclass(frozen=True)
class Oval:
    cx: float
    cy: float
    rx: float = HEAD_RX
    ry: float = HEAD_RY

@dataclass(frozen=True)
class NoteGeometry:
    index: int
    pitch: Pitch
    x: float
    y: float
    head: Oval
    stem: Line
    accidental: Optional[Glyph]
    ledger_lines: Tuple[Line, ...]
    answered: bool
    current: bool

@dataclass
class StaffLayout:
    width: float
    height: float
    measures: int
    fixed_width: bool
    staff_lines: List[Line] = field(default_factory=list)
    connector: Optional[Line] = None
    brace: List[Tuple[float, float]] = field(default_factory=list)
    clefs: List[Glyph] = field(default_factory=list)
    time_signature: Optional[Glyph] = None
    bar_lines: List[Line] = field(default_factory=list)
    notes: List[NoteGeometry] = field(default_factory=list)
    first_unanswered: int = -1

# ---- positions ----
def note_x(index: int) -> float:
    measure, slot = divmod(index, NOTES_PER_MEASURE)
    return FIRST_BAR_X + measure * MEASURE_WIDTH + NOTE_OFFSETS_IN_MEASURE[slot]

def bar_line_x(measure: int) -> float:
    return FIRST_BAR_X + measure * MEASURE_WIDTH

def _bottom_y(pitch: Pitch) -> float:
    return TREBLE_BOTTOM_Y if pitch.clef == TREBLE else BASS_BOTTOM_Y

def position_y(pitch: Pitch, position: int) -> float:
    return _bottom_y(pitch) - position * HALF_SPACE

def note_y(pitch: Pitch) -> float:
    return position_y(pitch, pitch.staff_position)

def ledger_positions(pitch: Pitch) -> List[int]:
    """Staff positions that need a ledger line for this pitch.

    Only notes sitting on a line (even position) get ledger lines; a note in a
    space just outside the staff needs none.
    """
    pos = pitch.staff_position
    if pos % 2 != 0:
        return []
    if pos < 0:
        return list(range(pos, 0, 2))
    if pos > TOP_STAFF_POSITION:
        return list(range(TOP_STAFF_POSITION + 2, pos + 1, 2))
    return []

def ledger_line_ys(pitch: Pitch) -> List[float]:
    return [position_y(pitch, p) for p in ledger_positions(pitch)]

def stem_up(pitch: Pitch) -> bool:
    # on or below the middle line
    return pitch.staff_position <= MIDDLE_STAFF_POSITION

def has_accidental(pitch: Pitch) -> bool:
    return pitch.has_sharp or pitch.has_flat

# ---- pieces ----
def note_geometry(index: int, note: PresentedNote, current: bool = False) -> NoteGeometry:
    pitch = note.pitch
    x, y = note_x(index), note_y(pitch)
    up = stem_up(pitch)
    sx = x + HEAD_RX if up else x - HEAD_RX
    stem = Line(sx, y, sx, y - STEM_LENGTH if up else y + STEM_LENGTH, width=2)

    accidental = None
    if has_accidental(pitch):
        accidental = Glyph(SHARP if pitch.has_sharp else FLAT,
                           x - ACCIDENTAL_OFFSET, y, ACCIDENTAL_SIZE, anchor="end")

    left = x - ACCIDENTAL_WIDTH if accidental else x - LEDGER_LENGTH
    ledgers = tuple(Line(left, ly, x + LEDGER_LENGTH, ly) for ly in ledger_line_ys(pitch))

    return NoteGeometry(index=index, pitch=pitch, x=x, y=y, head=Oval(x, y), stem=stem,
                        accidental=accidental, ledger_lines=ledgers,
                        answered=note.answered, current=current)

def _cubic(p0, p1, p2, p3, steps: int) -> List[Tuple[float, float]]:
    pts = []
    for i in range(steps + 1):
        t = i / steps
        u = 1 - t
        x = u**3 * p0[0] + 3 * u * u * t * p1[0] + 3 * u * t * t * p2[0] + t**3 * p3[0]
        y = u**3 * p0[1] + 3 * u * u * t * p1[1] + 3 * u * t * t * p2[1] + t**3 * p3[1]
        pts.append((x, y))
    return pts

def brace_points(steps: int = 16) -> List[Tuple[float, float]]:
    """Curly brace joining the staves as two cubic curves flattened to a polyline."""
    upper = _cubic((STAFF_LEFT, TREBLE_TOP_Y), (BRACE_BULGE_X, TREBLE_TOP_Y),
                   (BRACE_BULGE_X, BRACE_MID_Y), (STAFF_LEFT, BRACE_MID_Y), steps)
    lower = _cubic((STAFF_LEFT, BRACE_MID_Y), (BRACE_BULGE_X, BRACE_MID_Y),
                   (BRACE_BULGE_X, BASS_BOTTOM_Y), (STAFF_LEFT, BASS_BOTTOM_Y), steps)
    return upper + lower[1:]

def first_unanswered(notes: Sequence[PresentedNote]) -> int:
    for i, n in enumerate(notes):
        if not n.answered:
            return i
    return -1

# ---- whole staff ----
def layout_staff(notes: Sequence[PresentedNote], fixed_measures: Optional[int] = None) -> StaffLayout:
    measures = fixed_measures if fixed_measures is not None else (math.ceil(len(notes) / NOTES_PER_MEASURE) or 1)
    last_bar = bar_line_x(measures)
    if notes or fixed_measures is not None:
        content_right = last_bar + STAFF_EXTEND
    else:
        content_right = EMPTY_CONTENT_WIDTH
    width = max(MIN_WIDTH, content_right)
    staff_right = width - STAFF_RIGHT_PAD

    out = StaffLayout(width=width, height=VIEWBOX_HEIGHT, measures=measures,
                      fixed_width=fixed_measures is not None)
    for top in (TREBLE_TOP_Y, BASS_TOP_Y):
        for i in range(5):
            y = top + i * LINE_SPACING
            out.staff_lines.append(Line(STAFF_LEFT, y, staff_right, y, opacity=0.45))

    out.connector = Line(STAFF_LEFT, TREBLE_TOP_Y, STAFF_LEFT, BASS_BOTTOM_Y)
    out.brace = brace_points()
    out.clefs = [
        Glyph(TREBLE_CLEF, CLEF_X, (TREBLE_TOP_Y + TREBLE_BOTTOM_Y) / 2, CLEF_SIZE),
        Glyph(BASS_CLEF, CLEF_X, (BASS_TOP_Y + BASS_BOTTOM_Y) / 2, CLEF_SIZE),
    ]
    out.time_signature = Glyph(COMMON_TIME, TIME_SIG_X, TIME_SIG_Y, TIME_SIG_SIZE)
    out.bar_lines = [Line(bar_line_x(m), TREBLE_TOP_Y, bar_line_x(m), BASS_BOTTOM_Y,
                          width=2 if m == 0 else 1.5)
                     for m in range(measures + 1)]

    out.first_unanswered = first_unanswered(notes)
    out.notes = [note_geometry(i, n, current=(i == out.first_unanswered))
                 for i, n in enumerate(notes)]
    return out

# ---- pagination / scrolling ----
def chunk_notes(notes: Sequence[PresentedNote], per_page: int = NOTES_PER_PAGE) -> List[List[PresentedNote]]:
    pages = [list(notes[i:i + per_page]) for i in range(0, len(notes), per_page)]
    return pages or [[]]

def layout_pages(notes: Sequence[PresentedNote], per_page: int = NOTES_PER_PAGE) -> List[StaffLayout]:
    measures = math.ceil(per_page / NOTES_PER_MEASURE)
    return [layout_staff(page, fixed_measures=measures) for page in chunk_notes(notes, per_page)]

def scroll_offset(layout: StaffLayout, viewport_width: float, scale: float = 1.0) -> float:
    """Horizontal scroll (pixels) that keeps the current note in view.

    The first unanswered note sits SCROLL_MARGIN px from the left edge; once
    every note is answered the staff scrolls all the way to the end.
    """
    if layout.fixed_width or not layout.notes:
        return 0.0
    max_scroll = max(0.0, layout.width * scale - viewport_width)
    if layout.first_unanswered >= 0:
        target = max(0.0, note_x(layout.first_unanswered) * scale - SCROLL_MARGIN)
    else:
        target = max_scroll
    return min(target, max_scroll)
