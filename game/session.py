# game/session.py
import logging
from collections import deque
from typing import Deque, List, Optional
from config import GameConfig, OCTAVE_CYCLE
from notes.model import Pitch, PresentedNote
from notes.catalog import lookup
from notes.selector import NoteSelector
from timeline.scheduler import Scheduler, TaskHandle
from game.answers import AnswerSource, ClickedKey, normalize

log = logging.getLogger(__name__)

CORRECT = "correct"
WRONG = "wrong"
QUIZ = "quiz"
PLAY = "play"

def next_octave(octave: int) -> int:
    i = OCTAVE_CYCLE.index(octave) if octave in OCTAVE_CYCLE else -1
    return OCTAVE_CYCLE[(i + 1) % len(OCTAVE_CYCLE)]

class TrialStateMachine:
    """Question/answer loop.

    The pending note is the first unanswered one. Feedback ("correct"/"wrong")
    is a timed overlay: a correct answer marks the note and, after
    cfg.correct_delay, appends the next one; a wrong answer only flashes and
    clears after cfg.wrong_delay. While the correct overlay is up, answers are
    ignored, so every correct answer gets its new note. At most one delayed
    step is ever scheduled; scheduling always cancels the previous one first.
    """
    def __init__(self, cfg: GameConfig, selector: NoteSelector, scheduler: Scheduler):
        self.cfg = cfg.validate()
        self.selector = selector
        self.scheduler = scheduler

        self.notes: List[PresentedNote] = []
        self.score = 0
        self.streak = 0
        self.feedback: Optional[str] = None
        self.feedback_key: Optional[str] = None
        self.active_octave = cfg.start_octave
        self.mode = cfg.mode
        self.played: Deque[PresentedNote] = deque(maxlen=cfg.play_buffer)

        self._pending: Optional[TaskHandle] = None
        self._disposed = False
        self.start_over()

    # ---------- queries ----------
    @property
    def pending_note(self) -> Optional[PresentedNote]:
        for n in self.notes:
            if not n.answered:
                return n
        return None

    @property
    def has_pending_task(self) -> bool:
        return self._pending is not None and self._pending.active

    def display_notes(self) -> List[PresentedNote]:
        return list(self.played) if self.mode == PLAY else self.notes

    # ---------- timer ----------
    def _cancel_pending(self):
        if self._pending is not None:
            self.scheduler.cancel(self._pending)
            self._pending = None

    def _schedule(self, delay: float, action):
        self._cancel_pending()

        def fire():
            self._pending = None
            if not self._disposed:
                action()
        self._pending = self.scheduler.call_later(delay, fire)

    # ---------- transitions ----------
    def _clear_feedback(self):
        self.feedback = None
        self.feedback_key = None

    def _append_next(self):
        self.notes.append(PresentedNote(self.selector.pick_one()))
        self._clear_feedback()
        overflow = len(self.notes) - self.cfg.max_notes
        if overflow > 0:
            del self.notes[:overflow]
        log.debug("Next note %s (window=%d)", self.notes[-1].pitch.key_id, len(self.notes))

    def submit_answer(self, source: AnswerSource) -> Optional[bool]:
        """Check an answer; returns True/False, or None when nothing was judged."""
        if self._disposed:
            return None
        if self.mode == PLAY:
            if isinstance(source, ClickedKey):
                octave = source.octave
            elif source.octave is None:
                octave = self.active_octave
            else:
                octave = source.octave
            self.record_played(source.letter, octave)
            return None
        if self.feedback == CORRECT and self.has_pending_task:
            return None   # next note not drawn yet

        note = self.pending_note
        if note is None:
            return None
        self._cancel_pending()

        answer = normalize(source.letter)
        key = source.feedback_key(note.pitch)
        if answer == note.pitch.letter.upper():
            self.score += 1
            self.streak += 1
            self.feedback = CORRECT
            self.feedback_key = key
            note.answered = True
            log.debug("Correct %s (score=%d streak=%d)", note.pitch.key_id, self.score, self.streak)
            self._schedule(self.cfg.correct_delay, self._append_next)
            return True

        self.streak = 0
        self.feedback = WRONG
        self.feedback_key = key
        log.debug("Wrong: answered %s for %s", answer, note.pitch.key_id)
        self._schedule(self.cfg.wrong_delay, self._clear_feedback)
        return False

    def start_over(self):
        self._cancel_pending()
        self.notes = [PresentedNote(p) for p in self.selector.pick_many(self.cfg.initial_notes)]
        self.score = 0
        self.streak = 0
        self._clear_feedback()
        log.debug("Start over with %d notes", len(self.notes))

    def cycle_octave(self) -> int:
        self.active_octave = next_octave(self.active_octave)
        return self.active_octave

    # ---------- play mode ----------
    def set_mode(self, mode: str):
        if mode not in (QUIZ, PLAY):
            raise ValueError(f"Unknown mode: {mode!r}")
        self.mode = mode
        self.played.clear()
        self.start_over()
        log.info("Mode -> %s", mode)

    def toggle_mode(self) -> str:
        self.set_mode(PLAY if self.mode == QUIZ else QUIZ)
        return self.mode

    def record_played(self, letter: str, octave: int) -> Optional[Pitch]:
        pitch = lookup(letter, octave)
        if pitch is None:
            log.debug("Played %s%s is off the staff, not recorded", letter, octave)
            return None
        self.played.append(PresentedNote(pitch, answered=True))
        return pitch

    # ---------- teardown ----------
    def dispose(self):
        self._cancel_pending()
        self._disposed = True
