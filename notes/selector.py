# notes/selector.py
import random
from typing import List, Optional, Sequence
from notes.model import Pitch
from notes.catalog import all_pitches

class NoteSelector:
    """Uniform, independent draws from the pitch catalog (with replacement)."""
    def __init__(self, rng: Optional[random.Random] = None,
                 pitches: Optional[Sequence[Pitch]] = None):
        self.rng = rng or random.Random()
        self.pitches = tuple(pitches) if pitches else all_pitches()

    def pick_one(self) -> Pitch:
        return self.rng.choice(self.pitches)

    def pick_many(self, n: int) -> List[Pitch]:
        return [self.pick_one() for _ in range(max(0, n))]

def make_selector(seed: Optional[int] = None) -> NoteSelector:
    return NoteSelector(random.Random(seed))
