import logging
import os
import time
from typing import List, Optional, Tuple

import numpy as np
import pygame
import pygame.sndarray

from clock import PygameClock
from game_session import GameSession, SessionState
from scoring import FinalStats
from targets import Target

log = logging.getLogger(__name__)

BG_COLOR = (15, 15, 18)
TARGET_FILL = (255, 68, 68)
TARGET_RING = (204, 0, 0)
CROSSHAIR_COLOR = (0, 255, 0)
PULL_LINE_COLOR = (255, 107, 107)
HIT_FLASH_COLOR = (255, 255, 0)

SHAKE_STEP = 10
DIFFICULTY_KEYS = {pygame.K_1: "Easy", pygame.K_2: "Medium", pygame.K_3: "Hard"}


class GameEngine:
    def __init__(self, screen_width: int = 800, screen_height: int = 600, session: Optional[GameSession] = None):
        pygame.init()
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.screen = pygame.display.set_mode((self.screen_width, self.screen_height))
        pygame.display.set_caption("Pull Trainer")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 36)
        self.big_font = pygame.font.Font(None, 72)

        self.running = True
        self.timers = PygameClock()
        self.session = session or GameSession(
            self.timers,
            width=screen_width,
            height=screen_height,
            on_session_end=self._on_session_end,
        )
        if self.session.on_session_end is None:
            self.session.on_session_end = self._on_session_end

        self.crosshair_size = 15
        self.hit_effects: List[dict] = []

        self.audio_enabled = False
        self.muted = False
        self.sounds = {"hit": None, "miss": None, "end": None}
        self._init_audio()

    # ---- audio ----

    def _init_audio(self):
        try:
            pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=512)
            self.audio_enabled = True
        except pygame.error as e:
            log.warning("audio disabled: %s", e)
            self.audio_enabled = False
            return
        try:
            self.sounds["hit"] = self._tone(880.0, 70, vol=0.5)
            self.sounds["miss"] = self._tone(180.0, 60, vol=0.4, wave="square")
            self.sounds["end"] = self._tone(440.0, 300, vol=0.5, wave="saw")
        except (pygame.error, ValueError) as e:
            log.warning("could not synthesize sounds: %s", e)

    def _tone(self, freq: float, dur_ms: int, vol: float = 0.5, wave: str = "sine"):
        sr, _, channels = pygame.mixer.get_init()
        n = max(1, int(sr * dur_ms / 1000.0))
        t = np.linspace(0.0, dur_ms / 1000.0, n, endpoint=False)
        if wave == "square":
            w = np.sign(np.sin(2 * np.pi * freq * t))
        elif wave == "saw":
            w = 2.0 * (t * freq - np.floor(0.5 + t * freq))
        else:
            w = np.sin(2 * np.pi * freq * t)
        # Short decay so the tail does not click
        w = w * np.exp(-np.linspace(0, 4, n))
        a = (w * vol * 32767).astype(np.int16)
        arr = a if channels == 1 else np.ascontiguousarray(np.repeat(a[:, None], channels, axis=1))
        return pygame.sndarray.make_sound(arr)

    def _play_sound(self, key: str):
        s = self.sounds.get(key)
        if s is not None and self.audio_enabled and not self.muted:
            s.play()

    def _toggle_mute(self):
        self.muted = not self.muted

    # ---- session glue ----

    def _on_session_end(self, final: FinalStats):
        self._play_sound("end")

    def _click(self, pos: Tuple[int, int]):
        if self.session.state is not SessionState.PLAYING:
            return
        target = self.session.click(*pos)
        if target is None:
            self._play_sound("miss")
            return
        self._play_sound("hit")
        self._spawn_hit_effect(target)

    def _change_shake(self, delta: int):
        self.session.set_shake_intensity(self.session.shake_intensity + delta)

    def _handle_event(self, event):
        s = self.session
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.MOUSEMOTION:
            s.pointer_moved(*event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            s.pointer_moved(*event.pos)
            self._click(event.pos)
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_SPACE:
                if s.state is SessionState.MENU:
                    s.start()
                else:
                    s.toggle_pause()
            elif event.key == pygame.K_ESCAPE:
                s.pause()
            elif event.key == pygame.K_RETURN:
                if s.state is SessionState.GAME_OVER:
                    s.start()
            elif event.key == pygame.K_r:
                s.reset()
            elif event.key in DIFFICULTY_KEYS:
                s.set_difficulty(DIFFICULTY_KEYS[event.key])
            elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                self._change_shake(-SHAKE_STEP)
            elif event.key in (pygame.K_EQUALS, pygame.K_KP_PLUS):
                self._change_shake(+SHAKE_STEP)
            elif event.key == pygame.K_m:
                self._toggle_mute()
            elif event.key == pygame.K_F12:
                print(self.save_screenshot())

    def _handle_events(self):
        for event in pygame.event.get():
            self._handle_event(event)

    # ---- effects ----

    def _spawn_hit_effect(self, target: Target):
        self.hit_effects.append({
            "x": int(target.x),
            "y": int(target.y),
            "life": 330,  # ms
            "max_life": 330.0,
        })

    def _update_hit_effects(self, dt_ms: int):
        for e in self.hit_effects[:]:
            e["life"] -= dt_ms
            if e["life"] <= 0:
                self.hit_effects.remove(e)

    def _draw_hit_effects(self):
        for e in self.hit_effects:
            frac = max(0.0, min(1.0, e["life"] / e["max_life"]))
            r = max(1, int(20 * (1.0 - frac)) + 2)
            surf = pygame.Surface((r * 2 + 2, r * 2 + 2), pygame.SRCALPHA)
            pygame.draw.circle(surf, (*HIT_FLASH_COLOR, int(255 * frac)), (r + 1, r + 1), r)
            self.screen.blit(surf, (e["x"] - r - 1, e["y"] - r - 1))

    # ---- drawing ----

    def _draw_targets(self, now: float):
        for t in self.session.targets:
            alpha = int(255 * t.fade_alpha(now))
            r = max(1, int(t.radius))
            surf = pygame.Surface((r * 2 + 6, r * 2 + 6), pygame.SRCALPHA)
            c = (r + 3, r + 3)
            pygame.draw.circle(surf, (*TARGET_FILL, alpha), c, r)
            pygame.draw.circle(surf, (*TARGET_RING, alpha), c, r, 3)
            pygame.draw.circle(surf, (255, 255, 255, alpha), c, max(1, r // 2))
            self.screen.blit(surf, (int(t.x) - c[0], int(t.y) - c[1]))

    def _draw_dashed_line(self, start, end, dash: int = 3):
        sx, sy = start
        ex, ey = end
        length = max(1.0, ((ex - sx) ** 2 + (ey - sy) ** 2) ** 0.5)
        steps = int(length // dash)
        for i in range(0, steps, 2):
            a = i / steps
            b = min(1.0, (i + 1) / steps)
            pygame.draw.line(
                self.screen,
                PULL_LINE_COLOR,
                (sx + (ex - sx) * a, sy + (ey - sy) * a),
                (sx + (ex - sx) * b, sy + (ey - sy) * b),
                1,
            )

    def _draw_crosshair(self):
        overlay = self.session.pointer_overlay()
        if overlay.adjusted is None:
            return
        cx, cy = overlay.adjusted
        if not (0 <= cx <= self.screen_width and 0 <= cy <= self.screen_height):
            return
        size = self.crosshair_size
        pygame.draw.line(self.screen, CROSSHAIR_COLOR, (cx, cy - size), (cx, cy + size), 2)
        pygame.draw.line(self.screen, CROSSHAIR_COLOR, (cx - size, cy), (cx + size, cy), 2)
        if overlay.shake_visible:
            self._draw_dashed_line(overlay.position, overlay.adjusted)

    def _blit_center(self, text: str, font, color, y: int):
        surf = font.render(text, True, color)
        rect = surf.get_rect(center=(self.screen_width // 2, y))
        self.screen.blit(surf, rect)

    def _draw_hud(self):
        stats = self.session.stats
        lines = [
            f"Score: {int(round(stats.score))}",
            f"Hits: {stats.hits}",
            f"Time: {stats.time_left_seconds}",
            f"Accuracy: {self.session.accuracy()}%",
        ]
        for i, line in enumerate(lines):
            self.screen.blit(self.font.render(line, True, (255, 255, 255)), (20, 20 + i * 32))

        diff_text = self.font.render(f"Diff: {self.session.difficulty}", True, (200, 200, 200))
        dr = diff_text.get_rect(topright=(self.screen_width - 20, 20))
        self.screen.blit(diff_text, dr)
        shake_text = self.font.render(f"Pull: {int(self.session.shake_intensity)}%", True, (200, 200, 200))
        sr = shake_text.get_rect(topright=(self.screen_width - 20, dr.bottom + 8))
        self.screen.blit(shake_text, sr)
        if not self.audio_enabled:
            audio = self.font.render("Audio: Off", True, (180, 180, 180))
        elif self.muted:
            audio = self.font.render("Audio: Muted", True, (255, 120, 120))
        else:
            audio = None
        if audio is not None:
            self.screen.blit(audio, audio.get_rect(topright=(self.screen_width - 20, sr.bottom + 8)))

    def _draw_state_banner(self):
        state = self.session.state
        mid = self.screen_height // 2
        if state is SessionState.MENU:
            self._blit_center("PULL TRAINER", self.big_font, (255, 255, 255), mid - 60)
            self._blit_center("SPACE to start  |  1/2/3 difficulty  |  -/= pull", self.font, (200, 200, 200), mid + 10)
        elif state is SessionState.PAUSED:
            self._blit_center("PAUSED", self.font, (255, 255, 0), 40)
        elif state is SessionState.GAME_OVER:
            final = self.session.final_stats
            overlay = pygame.Surface((self.screen_width, self.screen_height), pygame.SRCALPHA)
            overlay.fill((0, 0, 0, 160))
            self.screen.blit(overlay, (0, 0))
            self._blit_center("GAME OVER", self.big_font, (255, 255, 255), mid - 100)
            if final is not None:
                rows = [
                    f"Final score: {int(round(final.score))}",
                    f"Hits: {final.hits}",
                    f"Accuracy: {final.accuracy}%",
                    f"Best streak: {final.best_streak}",
                ]
                for i, row in enumerate(rows):
                    self._blit_center(row, self.font, (220, 220, 220), mid - 30 + i * 34)
            self._blit_center("ENTER play again  |  R main menu", self.font, (200, 200, 200), mid + 130)

    def draw(self):
        self.screen.fill(BG_COLOR)
        self._draw_targets(self.session.clock.now())
        self._draw_hit_effects()
        self._draw_crosshair()
        self._draw_hud()
        self._draw_state_banner()

    def save_screenshot(self, path: Optional[str] = None) -> str:
        if path is None:
            path = os.path.join("screenshots", f"pull-trainer-{int(time.time())}.png")
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        pygame.image.save(self.screen, path)
        return path

    def run(self):
        try:
            while self.running:
                dt_ms = self.clock.tick(60)
                self._handle_events()
                self.timers.pump()
                self._update_hit_effects(dt_ms)
                self.draw()
                pygame.display.flip()
        finally:
            self.session.reset()
            pygame.quit()
