#!/usr/bin/env python3
import os
import random
import sys
from pathlib import Path

# Headless rendering for pygame
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame

PROJECT_ROOT = Path(__file__).resolve().parents[1]
MODULE_DIR = PROJECT_ROOT / "pull_trainer"
if str(MODULE_DIR) not in sys.path:
    sys.path.insert(0, str(MODULE_DIR))

from clock import ManualClock
from game_engine import GameEngine
from game_session import GameSession


def main():
    out = sys.argv[1] if len(sys.argv) > 1 else "screenshots/gameplay.png"
    clock = ManualClock()
    session = GameSession(clock, width=800, height=600, difficulty="Hard", rng=random.Random(7))
    eng = GameEngine(screen_width=800, screen_height=600, session=session)
    try:
        # A few seconds into a run so several targets are on screen
        session.start()
        session.pointer_moved(400, 300)
        clock.advance(4500)
        eng.draw()
        print(eng.save_screenshot(out))
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
