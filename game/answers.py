# game/answers.py
"""Where an answer came from, resolved once at the input boundary."""
from dataclasses import dataclass
from typing import Optional, Tuple, Union
from notes.model import Pitch

def split_key_id(key_id: str) -> Tuple[str, int]:
    """'F#4' -> ('F#', 4)"""
    s = key_id.strip()
    i = len(s)
    while i > 0 and (s[i - 1].isdigit() or s[i - 1] == "-"):
        i -= 1
    if i == 0 or i == len(s):
        raise ValueError(f"Bad key id: {key_id!r}")
    return s[:i], int(s[i:])

@dataclass(frozen=True)
class ClickedKey:
    key_id: str        # simulated piano key, e.g. "C#4"

    @property
    def letter(self) -> str:
        return split_key_id(self.key_id)[0]

    @property
    def octave(self) -> int:
        return split_key_id(self.key_id)[1]

    def feedback_key(self, pending: Optional[Pitch] = None) -> str:
        return self.key_id

@dataclass(frozen=True)
class TypedKey:
    letter: str
    octave: Optional[int] = None   # None -> use the pending note's octave

    def feedback_key(self, pending: Optional[Pitch] = None) -> str:
        octave = self.octave
        if octave is None and pending is not None:
            octave = pending.octave
        return f"{self.letter.strip().upper()}{'' if octave is None else octave}"

AnswerSource = Union[ClickedKey, TypedKey]

def normalize(letter: str) -> str:
    return letter.strip().upper()
