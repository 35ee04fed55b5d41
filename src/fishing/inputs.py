# inputs.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple, Union

import pygame  # type: ignore

from .config import WIDTH, HEIGHT


class PointerKind(Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"


class Control(Enum):
    START = "start"
    RESTART = "restart"
    QUIT = "quit"


@dataclass(frozen=True)
class PointerIntent:
    kind: PointerKind
    x: float
    y: float


Intent = Union[PointerIntent, Control]

START_KEYS = (pygame.K_SPACE, pygame.K_RETURN)


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def to_world(pos: Tuple[float, float],
             display_size: Tuple[int, int],
             world_size: Tuple[int, int] = (WIDTH, HEIGHT)) -> Tuple[float, float]:
    """
    Map a window position onto the world surface.
    The window may be stretched, so scale per axis; anything outside the
    surface is clamped onto its edge.
    """
    dw, dh = max(display_size[0], 1), max(display_size[1], 1)
    ww, wh = world_size
    x = pos[0] * ww / dw
    y = pos[1] * wh / dh
    return (_clamp(x, 0, ww), _clamp(y, 0, wh))


def map_event(event: pygame.event.Event,
              display_size: Tuple[int, int],
              world_size: Tuple[int, int] = (WIDTH, HEIGHT)) -> Intent | None:
    """Translate one pygame event into an intent, or None if it is not ours."""
    et = event.type
    if et == pygame.QUIT:
        return Control.QUIT
    if et == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return Control.QUIT
        if event.key in START_KEYS:
            return Control.START
        if event.key == pygame.K_r:
            return Control.RESTART
        return None

    # SDL mirrors touches as mouse events; the FINGER* events below already cover them
    if et in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEMOTION, pygame.MOUSEBUTTONUP) and getattr(event, "touch", False):
        return None

    # Mouse
    if et == pygame.MOUSEBUTTONDOWN and event.button == 1:
        return PointerIntent(PointerKind.DOWN, *to_world(event.pos, display_size, world_size))
    if et == pygame.MOUSEMOTION:
        return PointerIntent(PointerKind.MOVE, *to_world(event.pos, display_size, world_size))
    if et == pygame.MOUSEBUTTONUP and event.button == 1:
        return PointerIntent(PointerKind.UP, *to_world(event.pos, display_size, world_size))
    if et == pygame.WINDOWLEAVE:
        # leaving the window counts as letting go
        return PointerIntent(PointerKind.UP, 0.0, 0.0)

    # Touch: finger coordinates are already normalized to 0..1
    finger_kinds = {
        pygame.FINGERDOWN: PointerKind.DOWN,
        pygame.FINGERMOTION: PointerKind.MOVE,
        pygame.FINGERUP: PointerKind.UP,
    }
    if et in finger_kinds:
        ww, wh = world_size
        return PointerIntent(finger_kinds[et],
                             _clamp(event.x * ww, 0, ww),
                             _clamp(event.y * wh, 0, wh))
    return None


def map_events(events: Iterable[pygame.event.Event],
               display_size: Tuple[int, int],
               world_size: Tuple[int, int] = (WIDTH, HEIGHT)) -> List[Intent]:
    intents: List[Intent] = []
    for event in events:
        intent = map_event(event, display_size, world_size)
        if intent is not None:
            intents.append(intent)
    return intents
