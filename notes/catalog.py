# notes/catalog.py
"""Static table of every pitch the trainer can ask for.

Staff positions are written out by hand and looked up, never derived, so the
note drawn on the staff and the tone played for it always agree.
"""
from typing import Dict, Optional, Tuple
from notes.model import Pitch, TREBLE, BASS

# C4 .. A#5, bottom line E4 = 0
TREBLE_PITCHES: Tuple[Pitch, ...] = (
    Pitch("C", 4, -2, TREBLE), Pitch("C#", 4, -2, TREBLE),
    Pitch("D", 4, -1, TREBLE), Pitch("D#", 4, -1, TREBLE),
    Pitch("E", 4, 0, TREBLE),
    Pitch("F", 4, 1, TREBLE), Pitch("F#", 4, 1, TREBLE),
    Pitch("G", 4, 2, TREBLE), Pitch("G#", 4, 2, TREBLE),
    Pitch("A", 4, 3, TREBLE), Pitch("A#", 4, 3, TREBLE),
    Pitch("B", 4, 4, TREBLE),
    Pitch("C", 5, 5, TREBLE), Pitch("C#", 5, 5, TREBLE),
    Pitch("D", 5, 6, TREBLE), Pitch("D#", 5, 6, TREBLE),
    Pitch("E", 5, 7, TREBLE),
    Pitch("F", 5, 8, TREBLE), Pitch("F#", 5, 8, TREBLE),
    Pitch("G", 5, 9, TREBLE), Pitch("G#", 5, 9, TREBLE),
    Pitch("A", 5, 10, TREBLE), Pitch("A#", 5, 10, TREBLE),
)

# G2 .. C#4, bottom line G2 = 0
BASS_PITCHES: Tuple[Pitch, ...] = (
    Pitch("G", 2, 0, BASS), Pitch("G#", 2, 0, BASS),
    Pitch("A", 2, 1, BASS), Pitch("A#", 2, 1, BASS),
    Pitch("B", 2, 2, BASS),
    Pitch("C", 3, 3, BASS), Pitch("C#", 3, 3, BASS),
    Pitch("D", 3, 4, BASS), Pitch("D#", 3, 4, BASS),
    Pitch("E", 3, 5, BASS),
    Pitch("F", 3, 6, BASS), Pitch("F#", 3, 6, BASS),
    Pitch("G", 3, 7, BASS), Pitch("G#", 3, 7, BASS),
    Pitch("A", 3, 8, BASS), Pitch("A#", 3, 8, BASS),
    Pitch("B", 3, 9, BASS),
    Pitch("C", 4, 10, BASS), Pitch("C#", 4, 10, BASS),
)


def _index(pitches: Tuple[Pitch, ...]) -> Dict[Tuple[str, int], Pitch]:
    out: Dict[Tuple[str, int], Pitch] = {}
    for p in pitches:
        k = (p.letter.upper(), p.octave)
        if k in out:
            raise ValueError(f"Duplicate catalog entry: {p.key_id} ({p.clef})")
        out[k] = p
    return out

_BY_CLEF = {TREBLE: _index(TREBLE_PITCHES), BASS: _index(BASS_PITCHES)}
_ALL = TREBLE_PITCHES + BASS_PITCHES


def all_pitches() -> Tuple[Pitch, ...]:
    return _ALL

def lookup(letter: str, octave: int, clef: Optional[str] = None) -> Optional[Pitch]:
    """Return the catalog entry for letter+octave, or None if it isn't playable.

    Without a clef the treble spelling wins for pitches on both staves (C4, C#4).
    """
    k = (letter.strip().upper(), int(octave))
    if clef is not None:
        return _BY_CLEF.get(clef, {}).get(k)
    return _BY_CLEF[TREBLE].get(k) or _BY_CLEF[BASS].get(k)
