# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import Optional

OCTAVE_CYCLE = (3, 4, 5)
MODES = ("quiz", "play")

@dataclass
class RenderConfig:
    window_w: int = 1280
    window_h: int = 720
    piano_h: int = 180
    staff_scale: float = 1.4   # viewBox units -> pixels
    paginate: bool = False     # 16-note pages instead of one scrolling staff
    fps: int = 60

@dataclass
class GameConfig:
    initial_notes: int = 12
    max_notes: int = 24        # sliding window, oldest evicted first
    correct_delay: float = 0.8 # seconds before the next note appears
    wrong_delay: float = 0.6   # seconds before "wrong" feedback clears
    play_buffer: int = 32
    start_octave: int = 3
    seed: Optional[int] = None
    mode: str = "quiz"

    def validate(self) -> "GameConfig":
        if self.initial_notes < 1:
            raise ValueError(f"initial_notes must be >= 1, got {self.initial_notes}")
        if self.max_notes < self.initial_notes:
            raise ValueError(f"max_notes ({self.max_notes}) must be >= initial_notes ({self.initial_notes})")
        if self.correct_delay <= 0 or self.wrong_delay <= 0:
            raise ValueError("feedback delays must be positive")
        if self.play_buffer < 1:
            raise ValueError(f"play_buffer must be >= 1, got {self.play_buffer}")
        if self.start_octave not in OCTAVE_CYCLE:
            raise ValueError(f"start_octave must be one of {OCTAVE_CYCLE}, got {self.start_octave}")
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")
        return self

@dataclass
class AudioConfig:
    enabled: bool = True
    instrument: int = 0        # GM Acoustic Grand
    velocity: float = 0.7
    note_length: float = 0.5   # seconds

@dataclass
class AppConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    game: GameConfig = field(default_factory=GameConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    keymap_path: Optional[str] = None
