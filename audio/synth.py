# audio/synth.py
import logging
from typing import List, Tuple
from config import AudioConfig
from notes.model import midi_number

log = logging.getLogger(__name__)

class Synth:
    """
    Fire-and-forget piano tones on the system MIDI output.
    - the device is opened on the first play(), not at construction
    - any failure is logged and swallowed; game logic never sees it
    - each note is released after cfg.note_length via update(dt)
    """
    def __init__(self, cfg: AudioConfig, backend=None):
        self.cfg = cfg
        self._backend = backend        # pygame.midi module, injectable
        self.midi_out = None
        self._opened = False
        self._failed = False
        self._releases: List[Tuple[float, int]] = []  # (time left, midi note)

    def _midi(self):
        if self._backend is None:
            import pygame.midi
            self._backend = pygame.midi
        return self._backend

    def _ensure_open(self) -> bool:
        if self._opened:
            return self.midi_out is not None
        if self._failed or not self.cfg.enabled:
            return False
        self._opened = True
        try:
            midi = self._midi()
            midi.init()
            dev = midi.get_default_output_id()
            if dev == -1:
                log.warning("No MIDI output device found, audio disabled")
                return False
            self.midi_out = midi.Output(dev)
            self.midi_out.set_instrument(self.cfg.instrument, 0)
            log.info("Using system MIDI out (device %s)", dev)
            return True
        except Exception as e:
            log.warning("MIDI init failed: %s", e)
            self._failed = True
            self.midi_out = None
            return False

    def play(self, letter: str, octave: int):
        try:
            if not self._ensure_open():
                return
            note = midi_number(letter, octave)
            vel = max(1, min(127, int(self.cfg.velocity * 127)))
            self.midi_out.note_on(note, vel, 0)
            self._releases.append((self.cfg.note_length, note))
        except Exception as e:
            log.warning("play(%s%s) failed: %s", letter, octave, e)

    def update(self, dt: float):
        if not self._releases:
            return
        keep = []
        for left, note in self._releases:
            left -= dt
            if left > 0:
                keep.append((left, note))
                continue
            try:
                if self.midi_out:
                    self.midi_out.note_off(note, 0, 0)
            except Exception as e:
                log.warning("note_off(%s) failed: %s", note, e)
        self._releases = keep

    def close(self):
        try:
            if self.midi_out:
                for _, note in self._releases:
                    self.midi_out.note_off(note, 0, 0)
                self.midi_out.close()
            if self._opened:
                self._midi().quit()
        except Exception as e:
            log.warning("MIDI close failed: %s", e)
        self._releases.clear()
        self.midi_out = None
        self._opened = False
