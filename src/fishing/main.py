# main.py
from __future__ import annotations
import argparse
import logging
from typing import Dict, List, Optional, Sequence

import pygame  # type: ignore

from .config import WIDTH, HEIGHT, CFG, GameConfig
from .game import pointer_cue, step_game
from .inputs import Intent, PointerIntent, map_events
from .render import compose_frame, paint
from .scoring import ScoringController
from .world import World, new_world

logger = logging.getLogger(__name__)

CAPTION = "Fishing"
CURSORS = {
    "default": pygame.SYSTEM_CURSOR_ARROW,
    "grab": pygame.SYSTEM_CURSOR_HAND,
    "grabbing": pygame.SYSTEM_CURSOR_SIZEALL,
}


def run_headless(world: World, controller: ScoringController, frames: int,
                 intents_by_frame: Optional[Dict[int, List[Intent]]] = None) -> int:
    """
    Drive the simulation without a display, e.g. for tests or replays.
    `intents_by_frame` maps a frame index to the intents delivered before it.
    Returns the number of frames actually stepped (fewer if a quit intent arrives).
    """
    intents_by_frame = intents_by_frame or {}
    for frame in range(frames):
        if not step_game(world, controller, intents_by_frame.get(frame, ())):
            return frame
    return frames


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drag the hook, drop it on the right fish.")
    parser.add_argument("--seed", type=int, default=None, help="seed for fish behaviour")
    parser.add_argument("--fish-count", type=int, default=CFG.fish_count)
    parser.add_argument("--fps", type=int, default=CFG.fps)
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = GameConfig(seed=args.seed, fish_count=args.fish_count, fps=args.fps)

    pygame.init()
    window = pygame.display.set_mode((WIDTH, HEIGHT), pygame.RESIZABLE)
    pygame.display.set_caption(CAPTION)
    canvas = pygame.Surface((WIDTH, HEIGHT))
    clock = pygame.time.Clock()

    def show_score(score: int) -> None:
        pygame.display.set_caption(f"{CAPTION} — score {score}")

    def show_feedback(text: str, success: bool, duration_ms: int) -> None:
        logger.info("feedback (%s): %s for %d ms", "success" if success else "failure", text, duration_ms)

    controller = ScoringController(show_score, show_feedback)
    world = new_world(config)
    logger.info("%d fish in the water", len(world.fishes))

    pointer = (0.0, 0.0)
    cue = "default"
    running = True
    while running:
        # 1) input
        intents = map_events(pygame.event.get(), window.get_size())

        # 2) update
        running = step_game(world, controller, intents)
        if not running:
            break

        for intent in intents:
            if isinstance(intent, PointerIntent):
                pointer = (intent.x, intent.y)
        new_cue = pointer_cue(world, *pointer)
        if new_cue != cue:
            pygame.mouse.set_cursor(CURSORS[new_cue])
            cue = new_cue

        # 3) render at world size, then stretch to the window
        paint(canvas, compose_frame(world))
        if window.get_size() == canvas.get_size():
            window.blit(canvas, (0, 0))
        else:
            window.blit(pygame.transform.smoothscale(canvas, window.get_size()), (0, 0))
        pygame.display.flip()
        clock.tick(config.fps)

    pygame.quit()


if __name__ == "__main__":
    main()
