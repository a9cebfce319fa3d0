# notes/model.py
from dataclasses import dataclass

TREBLE = "treble"
BASS = "bass"

SEMITONES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

def midi_number(letter: str, octave: int) -> int:
    letter = letter.strip()
    offset = 1 if "#" in letter else (-1 if "b" in letter[1:] else 0)
    return 12 * (octave + 1) + SEMITONES[letter[0].upper()] + offset

@dataclass(frozen=True)
class Pitch:
    letter: str          # "C", "C#", ...
    octave: int
    staff_position: int  # 0 = bottom line, +1 per half space
    clef: str            # TREBLE / BASS

    @property
    def key_id(self) -> str:
        return f"{self.letter}{self.octave}"

    @property
    def has_sharp(self) -> bool:
        return "#" in self.letter

    @property
    def has_flat(self) -> bool:
        return "b" in self.letter[1:]

    @property
    def midi_number(self) -> int:
        return midi_number(self.letter, self.octave)


@dataclass
class PresentedNote:
    pitch: Pitch
    answered: bool = False
