# render/renderer.py
import os, pygame, logging
from typing import Dict, Optional, Sequence, Tuple
from config import RenderConfig
from notes.model import PresentedNote
from render.layout import (StaffLayout, Line, Glyph, VIEWBOX_HEIGHT,
                           layout_staff, layout_pages, scroll_offset)
from ui.piano import PianoLayout, PianoKey
from utils.path import resource_path

log = logging.getLogger(__name__)

STATUS_H = 36
BTN_PAD_X = 12
BTN_GAP = 10
PIANO_MARGIN = 16
BUTTONS = ["START OVER", "MODE", "HELP", "QUIT"]
MUSIC_FONT = os.path.join("static", "fonts", "NotoMusic-Regular.ttf")
MUSIC_FALLBACK = "notomusic,segoeuisymbol,symbola,dejavusans"

PAPER = (250, 248, 240)
INK = (24, 24, 28)
CURRENT = (22, 163, 74)
CORRECT_FILL = (134, 239, 172)
WRONG_FILL = (252, 165, 165)
PRESSED_FILL = (255, 240, 170)

def _fade(color, opacity: float, bg=PAPER):
    return tuple(int(bg[i] + (color[i] - bg[i]) * opacity) for i in range(3))

class Renderer:
    def __init__(self, cfg: RenderConfig):
        pygame.init()
        self.cfg = cfg
        self.screen = pygame.display.set_mode((cfg.window_w, cfg.window_h))
        pygame.display.set_caption("Grand Staff Trainer")
        self.font = pygame.font.SysFont("consolas", 18)
        self.font_small = pygame.font.SysFont("consolas", 14)
        self.clock = pygame.time.Clock()
        self.button_rects: Dict[str, pygame.Rect] = {}
        self._music_fonts: Dict[int, pygame.font.Font] = {}
        self._music_path = resource_path(MUSIC_FONT)
        if not os.path.exists(self._music_path):
            log.info("Bundled music font missing, using system fallback (%s)", MUSIC_FALLBACK)
            self._music_path = None

        self.piano = PianoLayout(PIANO_MARGIN, cfg.window_h - cfg.piano_h,
                                 cfg.window_w - PIANO_MARGIN * 2, cfg.piano_h - PIANO_MARGIN)

    def tick(self, fps: Optional[int] = None) -> float:
        return self.clock.tick(fps or self.cfg.fps) / 1000.0

    def begin_frame(self):
        self.screen.fill(PAPER)

    def end_frame(self):
        pygame.display.flip()

    def _music_font(self, size: float) -> pygame.font.Font:
        px = max(6, int(round(size)))
        f = self._music_fonts.get(px)
        if f is None:
            try:
                f = pygame.font.Font(self._music_path, px) if self._music_path else pygame.font.SysFont(MUSIC_FALLBACK, px)
            except Exception:
                log.exception("Loading music font failed, using default font")
                f = pygame.font.Font(None, px)
            self._music_fonts[px] = f
        return f

    # ------- status bar -------
    def draw_status_bar(self, right_info_text: str = "", message: str = "", message_ok: bool = True):
        w = self.cfg.window_w
        pygame.draw.rect(self.screen, (24, 24, 28), (0, 0, w, STATUS_H))
        pygame.draw.line(self.screen, (60, 60, 66), (0, STATUS_H), (w, STATUS_H), 1)

        x = 10; self.button_rects.clear()
        for label in BUTTONS:
            surf = self.font_small.render(label, True, (220, 220, 230))
            rect = surf.get_rect(); rect.topleft = (x + BTN_PAD_X, (STATUS_H - rect.height)//2)
            box = pygame.Rect(x, 4, rect.width + BTN_PAD_X*2, STATUS_H - 8)
            pygame.draw.rect(self.screen, (40, 40, 46), box, border_radius=6)
            pygame.draw.rect(self.screen, (75, 75, 85), box, 1, border_radius=6)
            self.screen.blit(surf, rect)
            self.button_rects[label] = box
            x += box.width + BTN_GAP

        if message:
            color = (120, 220, 140) if message_ok else (240, 110, 110)
            surf = self.font.render(message, True, color)
            self.screen.blit(surf, (x + 12, (STATUS_H - surf.get_height())//2))

        if right_info_text:
            right = self.font_small.render(right_info_text, True, (180, 180, 190))
            self.screen.blit(right, (w - right.get_width() - 10, (STATUS_H - right.get_height())//2))

    def button_at(self, pos: Tuple[int, int]) -> Optional[str]:
        for label, rect in self.button_rects.items():
            if rect.collidepoint(pos):
                return label
        return None

    # ------- staff -------
    def _staff_area(self) -> pygame.Rect:
        top = STATUS_H + 8
        return pygame.Rect(0, top, self.cfg.window_w, self.cfg.window_h - self.cfg.piano_h - top)

    def draw_staff(self, notes: Sequence[PresentedNote]):
        area = self._staff_area()
        if self.cfg.paginate:
            self._draw_pages(notes, area)
            return
        layout = layout_staff(notes)
        scale = min(self.cfg.staff_scale, area.height / VIEWBOX_HEIGHT)
        surf = pygame.Surface((int(layout.width * scale) + 1, int(layout.height * scale) + 1))
        surf.fill(PAPER)
        self._draw_layout(surf, layout, scale)
        ox = scroll_offset(layout, area.width, scale)
        self.screen.blit(surf, (area.x - int(ox), area.y))

    def _draw_pages(self, notes: Sequence[PresentedNote], area: pygame.Rect):
        pages = layout_pages(notes)
        scale = min(self.cfg.staff_scale, area.width / pages[0].width)
        page_h = int(VIEWBOX_HEIGHT * scale)
        # newest page pinned to the bottom, older pages above it
        y = area.bottom - page_h
        clip_prev = self.screen.get_clip()
        self.screen.set_clip(area)
        for layout in reversed(pages):
            if y + page_h < area.top:
                break
            surf = pygame.Surface((int(layout.width * scale) + 1, page_h + 1))
            surf.fill(PAPER)
            self._draw_layout(surf, layout, scale)
            self.screen.blit(surf, (area.x, y))
            y -= page_h
        self.screen.set_clip(clip_prev)

    def _line(self, surf, ln: Line, scale: float, color=INK):
        c = _fade(color, ln.opacity)
        pygame.draw.line(surf, c, (ln.x1 * scale, ln.y1 * scale), (ln.x2 * scale, ln.y2 * scale),
                         max(1, int(round(ln.width * scale))))

    def _glyph(self, surf, g: Glyph, scale: float, color=INK):
        img = self._music_font(g.size * scale).render(g.text, True, color)
        r = img.get_rect()
        if g.anchor == "end":
            r.midright = (int(g.x * scale), int(g.y * scale))
        else:
            r.center = (int(g.x * scale), int(g.y * scale))
        surf.blit(img, r)

    def _draw_layout(self, surf: pygame.Surface, layout: StaffLayout, scale: float):
        for ln in layout.staff_lines:
            self._line(surf, ln, scale)
        if layout.connector:
            self._line(surf, layout.connector, scale)
        if layout.brace:
            pts = [(x * scale, y * scale) for x, y in layout.brace]
            pygame.draw.lines(surf, INK, False, pts, max(1, int(round(2 * scale))))
        for g in layout.clefs:
            self._glyph(surf, g, scale)
        if layout.time_signature:
            self._glyph(surf, layout.time_signature, scale)
        for ln in layout.bar_lines:
            self._line(surf, ln, scale)

        for n in layout.notes:
            color = CURRENT if n.current else (_fade(INK, 0.7) if n.answered else INK)
            for ln in n.ledger_lines:
                self._line(surf, ln, scale, color)
            if n.accidental:
                self._glyph(surf, n.accidental, scale, color)
            h = n.head
            pygame.draw.ellipse(surf, color, pygame.Rect((h.cx - h.rx) * scale, (h.cy - h.ry) * scale,
                                                         2 * h.rx * scale, 2 * h.ry * scale))
            self._line(surf, n.stem, scale, color)

    # ------- piano -------
    def draw_piano(self, feedback_key: Optional[str] = None, feedback: Optional[str] = None,
                   pressed: Optional[str] = None, labels: Optional[Dict[str, str]] = None):
        labels = labels or {}

        def fill_for(k: PianoKey, base):
            if feedback_key == k.key_id and feedback:
                return CORRECT_FILL if feedback == "correct" else WRONG_FILL
            if pressed == k.key_id:
                return PRESSED_FILL
            return base

        for k in self.piano.white_keys:
            x, y, w, h = k.rect
            pygame.draw.rect(self.screen, fill_for(k, (236, 236, 236)), (x, y, w - 1, h))
            pygame.draw.rect(self.screen, (60, 60, 66), (x, y, w - 1, h), 1)
            self._key_label(k, labels.get(k.key_id), (60, 60, 66))
        for k in self.piano.black_keys:
            x, y, w, h = k.rect
            pygame.draw.rect(self.screen, fill_for(k, (18, 18, 20)), (x, y, w, h))
            pygame.draw.rect(self.screen, (60, 60, 66), (x, y, w, h), 1)
            self._key_label(k, labels.get(k.key_id), (230, 230, 235))

    def _key_label(self, k: PianoKey, text: Optional[str], color):
        if not text:
            return
        x, y, w, h = k.rect
        surf = self.font_small.render(text.upper(), True, color)
        self.screen.blit(surf, (x + (w - surf.get_width()) / 2, y + h - surf.get_height() - 6))

    def key_at(self, pos: Tuple[int, int]) -> Optional[PianoKey]:
        return self.piano.key_at(*pos)
