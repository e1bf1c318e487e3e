import logging
import os

import pygame

from game_engine import GameEngine


def log_level_from_env(default: int = logging.WARNING) -> int:
    name = os.environ.get("PULL_TRAINER_LOG_LEVEL", "").strip().upper()
    level = getattr(logging, name, None) if name else None
    return level if isinstance(level, int) else default


def main():
    logging.basicConfig(
        level=log_level_from_env(),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    try:
        engine = GameEngine()
        engine.run()
    except Exception as e:
        print(f"An error occurred: {e}")
        raise SystemExit(1)
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
