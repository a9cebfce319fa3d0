# ui/piano.py
from dataclasses import dataclass
from typing import List, Optional, Tuple

WHITE_NAMES = ("C", "D", "E", "F", "G", "A", "B")
BLACK_NAMES = ("C#", "D#", "F#", "G#", "A#")
BLACK_AFTER = (0, 1, 3, 4, 5)   # white-key index each black key follows

# octave -> white keys shown
OCTAVES: Tuple[Tuple[int, Tuple[str, ...]], ...] = (
    (3, WHITE_NAMES),
    (4, WHITE_NAMES),
    (5, ("C", "D", "E", "F")),
)

BLACK_W = 22
BLACK_H_RATIO = 0.6

@dataclass(frozen=True)
class PianoKey:
    key_id: str
    letter: str
    octave: int
    black: bool
    rect: Tuple[float, float, float, float]   # x, y, w, h

    def contains(self, px: float, py: float) -> bool:
        x, y, w, h = self.rect
        return x <= px < x + w and y <= py < y + h

class PianoLayout:
    """Clickable piano: octaves 3 and 4 in full, then C-F of octave 5."""
    def __init__(self, x: float, y: float, width: float, height: float):
        self.x, self.y, self.width, self.height = x, y, width, height
        self.white_keys: List[PianoKey] = []
        self.black_keys: List[PianoKey] = []
        self._layout_keys()

    def _layout_keys(self):
        total_white = sum(len(names) for _, names in OCTAVES)
        white_w = self.width / max(1, total_white)
        black_h = self.height * BLACK_H_RATIO
        x = self.x
        for octave, names in OCTAVES:
            start = x
            for name in names:
                self.white_keys.append(PianoKey(f"{name}{octave}", name, octave, False,
                                                (x, self.y, white_w, self.height)))
                x += white_w
            # short octave only carries C# and D#
            blacks = BLACK_NAMES if len(names) == 7 else BLACK_NAMES[:2]
            for name, after in zip(blacks, BLACK_AFTER):
                boundary = start + (after + 1) * white_w
                self.black_keys.append(PianoKey(f"{name}{octave}", name, octave, True,
                                                (boundary - BLACK_W / 2, self.y, BLACK_W, black_h)))

    def key_at(self, px: float, py: float) -> Optional[PianoKey]:
        for k in self.black_keys:
            if k.contains(px, py):
                return k
        for k in self.white_keys:
            if k.contains(px, py):
                return k
        return None
