# app.py
import logging
import pygame
from typing import Dict, Optional
from config import AppConfig
from audio.synth import Synth
from game.answers import AnswerSource, ClickedKey, TypedKey
from game.session import TrialStateMachine, QUIZ, CORRECT, WRONG
from input.keymap import KeyboardMapper, HelpToggled, OctaveCycled, load_keymap
from notes.selector import make_selector
from render.renderer import Renderer
from timeline.scheduler import Scheduler

log = logging.getLogger(__name__)

PRESS_FLASH = 0.15  # seconds a clicked key stays lit

class App:
    def __init__(self, cfg: AppConfig):
        self.cfg = cfg
        self.scheduler = Scheduler()
        self.session = TrialStateMachine(cfg.game, make_selector(cfg.game.seed), self.scheduler)
        keymap = load_keymap(cfg.keymap_path) if cfg.keymap_path else None
        self.mapper = KeyboardMapper(keymap)
        self.renderer = Renderer(cfg.render)
        self.synth = Synth(cfg.audio)

        self.show_labels = False
        self.pressed_key: Optional[str] = None
        self._press_time = 0.0

    # ---------- input ----------
    def _answer(self, source: AnswerSource, letter: str, octave: int):
        self.synth.play(letter, octave)
        self.session.submit_answer(source)

    def _click_key(self, pos):
        k = self.renderer.key_at(pos)
        if k is None:
            return
        self.pressed_key = k.key_id
        self._press_time = PRESS_FLASH
        self._answer(ClickedKey(k.key_id), k.letter, k.octave)

    def _key_down(self, key: int):
        action = self.mapper.key_down(key, self.session.active_octave)
        if isinstance(action, HelpToggled):
            self.show_labels = not self.show_labels
        elif isinstance(action, TypedKey):
            self._answer(action, action.letter, action.octave)

    def _key_up(self, key: int):
        if isinstance(self.mapper.key_up(key), OctaveCycled):
            log.debug("Keyboard octave -> %d", self.session.cycle_octave())

    def _button(self, label: str) -> bool:
        """Returns False when the app should quit."""
        if label == "START OVER":
            self.session.start_over()
        elif label == "MODE":
            self.session.toggle_mode()
        elif label == "HELP":
            self.show_labels = not self.show_labels
        elif label == "QUIT":
            return False
        return True

    # ---------- frame ----------
    def _labels(self) -> Dict[str, str]:
        if not self.show_labels:
            return {}
        octave = self.session.active_octave
        out = {}
        for letter in set(self.mapper.keymap.values()):
            name = self.mapper.label_for(letter)
            if name:
                out[f"{letter}{octave}"] = name
        return out

    def _status_text(self) -> str:
        s = self.session
        fields = [f"MODE: {s.mode.upper()}", f"OCTAVE: {s.active_octave}"]
        if s.mode == QUIZ:
            fields = [f"SCORE: {s.score}", f"STREAK: {s.streak}"] + fields
        else:
            fields.append(f"PLAYED: {len(s.played)}")
        return "  |  ".join(fields)

    def _draw(self):
        s = self.session
        self.renderer.begin_frame()
        message = ""
        if s.mode == QUIZ and s.feedback == CORRECT:
            message = "Correct!"
        elif s.mode == QUIZ and s.feedback == WRONG:
            message = "Try again!"
        self.renderer.draw_status_bar(self._status_text(), message, message_ok=s.feedback == CORRECT)
        self.renderer.draw_staff(s.display_notes())
        self.renderer.draw_piano(feedback_key=s.feedback_key, feedback=s.feedback,
                                 pressed=self.pressed_key, labels=self._labels())
        self.renderer.end_frame()

    def run(self):
        log.info("Session started in %s mode", self.session.mode)
        running = True
        try:
            while running:
                dt = self.renderer.tick()
                for e in pygame.event.get():
                    if e.type == pygame.QUIT:
                        running = False
                    elif e.type == pygame.KEYDOWN:
                        if e.key == pygame.K_ESCAPE:
                            running = False; continue
                        self._key_down(e.key)
                    elif e.type == pygame.KEYUP:
                        self._key_up(e.key)
                    elif e.type == pygame.WINDOWFOCUSLOST:
                        self.mapper.reset()
                    elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                        label = self.renderer.button_at(e.pos)
                        if label is not None:
                            running = self._button(label)
                        else:
                            self._click_key(e.pos)
                if not running:
                    break

                self.scheduler.step(dt)
                self.synth.update(dt)
                if self._press_time > 0:
                    self._press_time -= dt
                    if self._press_time <= 0:
                        self.pressed_key = None
                self._draw()
        finally:
            self.close()

    def close(self):
        self.session.dispose()
        self.scheduler.clear()
        self.synth.close()
        pygame.quit()
        log.info("Closed (score=%d)", self.session.score)
