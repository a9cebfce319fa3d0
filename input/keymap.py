# ========================= input/keymap.py =========================
import json
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Set, Union
import pygame
from game.answers import TypedKey

log = logging.getLogger(__name__)

NATURALS = ("C", "D", "E", "F", "G", "A", "B")
SHARPS = ("C#", "D#", "F#", "G#", "A#")

# home row -> naturals, row above -> sharps; octave comes from the cycler
DEFAULT_KEYMAP: Dict[int, str] = {
    pygame.K_a: "C",
    pygame.K_s: "D",
    pygame.K_d: "E",
    pygame.K_f: "F",
    pygame.K_g: "G",
    pygame.K_h: "A",
    pygame.K_j: "B",
    pygame.K_w: "C#",
    pygame.K_e: "D#",
    pygame.K_r: "F#",
    pygame.K_t: "G#",
    pygame.K_y: "A#",
}

OCTAVE_KEYS = (pygame.K_LSHIFT, pygame.K_RSHIFT)
HELP_KEY = pygame.K_F1

@dataclass(frozen=True)
class OctaveCycled:
    pass

@dataclass(frozen=True)
class HelpToggled:
    pass

KeyAction = Union[TypedKey, OctaveCycled, HelpToggled]

class KeyboardMapper:
    """Physical keys -> answers.

    A held key only counts on its first key-down (auto-repeat is ignored until
    the key comes back up). Shift cycles the octave on release, F1 toggles the
    on-key labels.
    """
    def __init__(self, keymap: Optional[Dict[int, str]] = None):
        self.keymap: Dict[int, str] = dict(keymap if keymap is not None else DEFAULT_KEYMAP)
        self.held: Set[int] = set()

    def key_down(self, key: int, octave: int) -> Optional[KeyAction]:
        if key in self.held:
            return None
        self.held.add(key)
        if key in OCTAVE_KEYS:
            return None
        if key == HELP_KEY:
            return HelpToggled()
        letter = self.keymap.get(key)
        if letter is None:
            return None
        return TypedKey(letter, octave)

    def key_up(self, key: int) -> Optional[KeyAction]:
        self.held.discard(key)
        if key in OCTAVE_KEYS:
            return OctaveCycled()
        return None

    def reset(self):
        self.held.clear()

    def label_for(self, letter: str) -> Optional[str]:
        for k, v in self.keymap.items():
            if v == letter:
                return keycode_to_name(k)
        return None

def keycode_to_name(k: int) -> str:
    try:
        return pygame.key.name(k)
    except Exception:
        return str(k)

def name_to_keycode(name: str) -> int:
    """'a', 'comma' ... -> pygame keycode; plain integers are accepted as-is."""
    try:
        return pygame.key.key_code(name)
    except Exception:
        try:
            return int(name)
        except ValueError:
            raise ValueError(f"Unknown key name: {name}")

def deserialize_keymap(obj: dict) -> Dict[int, str]:
    out: Dict[int, str] = {}
    for kname, letter in obj.items():
        letter = str(letter).strip().upper()
        if letter not in NATURALS and letter not in SHARPS:
            raise ValueError(f"Key {kname!r} is bound to unknown note {letter!r}")
        kc = name_to_keycode(str(kname))
        if kc in OCTAVE_KEYS or kc == HELP_KEY:
            raise ValueError(f"Key {kname!r} is reserved")
        out[kc] = letter
    return out

def load_keymap(path: str) -> Dict[int, str]:
    with open(path, "r", encoding="utf-8") as f:
        obj = json.load(f)
    if not isinstance(obj, dict):
        raise ValueError("Keymap file must contain a JSON object of key name -> note")
    kmap = deserialize_keymap(obj)
    log.info("Loaded keymap with %d keys from %s", len(kmap), path)
    return kmap
