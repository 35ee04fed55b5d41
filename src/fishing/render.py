"""
Renderer.

`compose_frame` turns the world into a flat list of draw commands without
touching it; `paint` executes those commands on a pygame surface. Keeping the
two apart lets the simulation and the picture be tested on their own.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union
import math

import numpy as np  # type: ignore
import pygame  # type: ignore

from .config import (
    SKY_TOP, SKY_BOTTOM, WATER_STOPS, WAVE, SUN, GRASS, TEXT, SUCCESS, FAILURE,
)
from .entities import Fish
from .world import World

Color = Tuple[int, int, int]
Point = Tuple[float, float]

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
SKIN = (253, 188, 180)
WOOD = (139, 69, 19)


# ---------- Draw commands ----------
@dataclass(frozen=True)
class FillRect:
    color: Color
    rect: Tuple[float, float, float, float]
    alpha: float = 1.0
    width: int = 0               # 0 fills, >0 outlines


@dataclass(frozen=True)
class Gradient:
    rect: Tuple[float, float, float, float]
    stops: Tuple[Tuple[float, Color], ...]   # (offset 0..1, color), vertical


@dataclass(frozen=True)
class Circle:
    color: Color
    center: Point
    radius: float
    alpha: float = 1.0
    width: int = 0


@dataclass(frozen=True)
class Ellipse:
    color: Color
    center: Point
    rx: float
    ry: float
    alpha: float = 1.0
    width: int = 0


@dataclass(frozen=True)
class Polygon:
    color: Color
    points: Tuple[Point, ...]
    alpha: float = 1.0
    width: int = 0


@dataclass(frozen=True)
class Polyline:
    color: Color
    points: Tuple[Point, ...]
    width: int = 1
    alpha: float = 1.0


@dataclass(frozen=True)
class Line:
    color: Color
    start: Point
    end: Point
    width: int = 1


@dataclass(frozen=True)
class Text:
    text: str
    pos: Point
    color: Color = TEXT
    size: int = 28
    centered: bool = False


DrawCommand = Union[FillRect, Gradient, Circle, Ellipse, Polygon, Polyline, Line, Text]


# ---------- Composition ----------
def _sky(world: World) -> List[DrawCommand]:
    cmds: List[DrawCommand] = [
        Gradient((0, 0, world.width, world.water_surface), ((0.0, SKY_TOP), (1.0, SKY_BOTTOM))),
    ]
    sun = (world.width - 100, 60)
    cmds.append(Circle(SUN, sun, 25))
    for i in range(8):
        angle = math.pi * 2 * i / 8 + world.elapsed * 0.01
        rx, ry = math.cos(angle) * 35, math.sin(angle) * 35
        cmds.append(Line(SUN, (sun[0] + rx * 0.8, sun[1] + ry * 0.8), (sun[0] + rx, sun[1] + ry), 2))

    for cloud in world.clouds:
        x, y, w, h = cloud.x, cloud.y, cloud.width, cloud.height
        for cx, cy in ((x, y + h / 2), (x + w / 4, y), (x + w / 2, y + h / 3),
                       (x + w * 3 / 4, y), (x + w, y + h / 2)):
            cmds.append(Circle(WHITE, (cx, cy), h / 2, alpha=0.8))
    return cmds


def _water(world: World) -> List[DrawCommand]:
    top = world.water_surface
    cmds: List[DrawCommand] = [
        Gradient((0, top, world.width, world.height - top),
                 ((0.0, WATER_STOPS[0]), (0.5, WATER_STOPS[1]), (1.0, WATER_STOPS[2]))),
    ]
    for wave in range(4):
        pts = tuple(
            (x, top + math.sin(x * 0.02 + world.wave_offset + wave * 2) * (10 - wave * 2))
            for x in range(0, world.width + 1, 5)
        )
        cmds.append(Polyline(WAVE, pts, width=4 - wave, alpha=0.6))

    # shore grass on both banks
    for base in (0, world.width - 50):
        for i in range(8):
            h = 15 + math.sin(world.elapsed * 0.05 + i) * 3
            cmds.append(FillRect(GRASS, (base + i * 6, top - h, 3, h)))
    return cmds


def _boat(world: World) -> List[DrawCommand]:
    b = world.boat
    y = b.y + b.sway
    return [
        FillRect(BLACK, (b.x - 5, y + 35, 130, 8), alpha=0.2),
        FillRect(WOOD, (b.x - 10, y + 20, 140, 20)),
        FillRect((222, 184, 135), (b.x, y + 10, 120, 12)),
        FillRect((255, 107, 107), (b.x + 10, y - 5, 25, 20)),
        FillRect((78, 205, 196), (b.x + 85, y - 5, 25, 20)),
        FillRect((101, 67, 33), (b.x - 10, y + 10, 140, 30), width=2),
    ]


def _fisherman(world: World) -> List[DrawCommand]:
    f = world.fisherman
    x, y = f.x, f.y + world.boat.sway
    arm = (x + 12, y + 16, 10, 4) if f.state == "casting" else (x + 12, y + 18, 8, 4)
    return [
        FillRect((65, 105, 225), (x, y + 20, 15, 25)),
        Circle(SKIN, (x + 7, y + 10), 8),
        FillRect((50, 205, 50), (x + 2, y + 2, 10, 8)),
        FillRect((50, 205, 50), (x - 2, y + 8, 14, 2)),
        Circle(BLACK, (x + 5, y + 8), 1),
        Circle(BLACK, (x + 9, y + 8), 1),
        Line(WOOD, (x + 15, y + 15), (world.rod_tip.x, world.rod_tip.y), 3),
        FillRect(SKIN, arm),
        FillRect((47, 79, 79), (x + 2, y + 40, 5, 12)),
        FillRect((47, 79, 79), (x + 10, y + 40, 5, 12)),
    ]


def _fish(fish: Fish) -> List[DrawCommand]:
    cx, cy = fish.center
    d = fish.direction
    hw, hh = fish.width / 2, fish.height / 2

    def at(lx: float, ly: float) -> Point:
        # local sprite space, mirrored horizontally by direction
        return (cx + d * lx, cy + ly)

    wag = math.sin(fish.anim_frame * 0.3) * 5
    tail = (at(-hw, 0), at(-hw - 12, -8 + wag), at(-hw - 12, 8 + wag))
    color = fish.type.color
    return [
        Ellipse(BLACK, at(2, 2), hw, hh, alpha=0.1),
        Ellipse(color, (cx, cy), hw, hh),
        Ellipse(BLACK, (cx, cy), hw, hh, width=2),
        Polygon(color, tail),
        Polygon(BLACK, tail, width=2),
        Circle(WHITE, at(fish.width / 4, -fish.height / 4), 4),
        Circle(BLACK, at(fish.width / 4, -fish.height / 4), 2),
        Ellipse(color, at(-5, fish.height / 3), 8, 4, alpha=0.7),
    ]


def _hook(world: World) -> List[DrawCommand]:
    h = world.hook
    return [
        Line(BLACK, (world.rod_tip.x, world.rod_tip.y), (h.x, h.y), 2),
        Circle(BLACK, (h.x + 2, h.y + 2), h.radius, alpha=0.3),
        Circle(SUN, (h.x, h.y), h.radius),
        Circle((184, 134, 11), (h.x, h.y), h.radius, width=2),
        Circle((139, 115, 85), (h.x + 3, h.y + 3), 3),
    ]


def _effects(world: World) -> List[DrawCommand]:
    cmds: List[DrawCommand] = []
    for s in world.splashes:
        if s.delay > 0:
            continue
        fade = s.life / s.max_life
        cmds.append(Circle(WAVE, (s.x, s.y), s.size, alpha=fade, width=4))
        cmds.append(Circle(WAVE, (s.x, s.y), s.size * 0.7, alpha=fade, width=4))
    for p in world.particles:
        fade = p.life / p.max_life
        cmds.append(Circle(WAVE, (p.x, p.y), p.size, alpha=fade))
        cmds.append(Circle(WHITE, (p.x - p.size / 3, p.y - p.size / 3), p.size / 3, alpha=fade * 0.5))
    return cmds


def _hud(world: World) -> List[DrawCommand]:
    cmds: List[DrawCommand] = [Text(f"Score: {world.score}", (8, 6))]
    if world.feedback is not None:
        color = SUCCESS if world.feedback.success else FAILURE
        cmds.append(Text(world.feedback.text, (world.width / 2, world.height / 2), color,
                         size=64, centered=True))
    if not world.started:
        cmds.append(FillRect(BLACK, (0, 0, world.width, world.height), alpha=0.35))
        cmds.append(Text("Press SPACE to start", (world.width / 2, world.height / 2 - 16),
                         centered=True))
        cmds.append(Text("R restarts, ESC quits", (world.width / 2, world.height / 2 + 16),
                         centered=True, size=22))
    return cmds


def compose_frame(world: World) -> List[DrawCommand]:
    """Read-only walk over the world, back to front."""
    cmds: List[DrawCommand] = []
    cmds += _sky(world)
    cmds += _water(world)
    cmds += _boat(world)
    cmds += _fisherman(world)
    for fish in world.fishes:
        if not fish.caught:
            cmds += _fish(fish)
    cmds += _hook(world)
    cmds += _effects(world)
    cmds += _hud(world)
    return cmds


# ---------- Painting ----------
_fonts: dict = {}


def _rect(x: float, y: float, w: float, h: float) -> pygame.Rect:
    return pygame.Rect(int(x), int(y), int(round(w)), int(round(h)))


def _font(size: int) -> pygame.font.Font:
    if size not in _fonts:
        if not pygame.font.get_init():
            pygame.font.init()
        _fonts[size] = pygame.font.SysFont(None, size)
    return _fonts[size]


def _bounds(cmd: DrawCommand) -> pygame.Rect:
    if isinstance(cmd, FillRect):
        return _rect(*cmd.rect)
    if isinstance(cmd, Circle):
        r = cmd.radius
        return _rect(cmd.center[0] - r - 1, cmd.center[1] - r - 1, 2 * r + 3, 2 * r + 3)
    if isinstance(cmd, Ellipse):
        return _rect(cmd.center[0] - cmd.rx - 1, cmd.center[1] - cmd.ry - 1,
                     2 * cmd.rx + 3, 2 * cmd.ry + 3)
    # Polygon / Polyline
    xs = [p[0] for p in cmd.points]
    ys = [p[1] for p in cmd.points]
    pad = max(getattr(cmd, "width", 1), 1) + 1
    return _rect(min(xs) - pad, min(ys) - pad,
                 max(xs) - min(xs) + 2 * pad + 1, max(ys) - min(ys) + 2 * pad + 1)


def _draw_shape(surface: pygame.Surface, cmd: DrawCommand, color, ox: float = 0, oy: float = 0) -> None:
    if isinstance(cmd, FillRect):
        x, y, w, h = cmd.rect
        pygame.draw.rect(surface, color, _rect(x + ox, y + oy, w, h), cmd.width)
    elif isinstance(cmd, Circle):
        if cmd.radius > 0:
            pygame.draw.circle(surface, color, (cmd.center[0] + ox, cmd.center[1] + oy),
                               cmd.radius, cmd.width)
    elif isinstance(cmd, Ellipse):
        rect = _rect(cmd.center[0] - cmd.rx + ox, cmd.center[1] - cmd.ry + oy,
                     2 * cmd.rx, 2 * cmd.ry)
        pygame.draw.ellipse(surface, color, rect, cmd.width)
    elif isinstance(cmd, Polygon):
        pygame.draw.polygon(surface, color, [(x + ox, y + oy) for x, y in cmd.points], cmd.width)
    elif isinstance(cmd, Polyline):
        pygame.draw.lines(surface, color, False, [(x + ox, y + oy) for x, y in cmd.points], cmd.width)


def _paint_gradient(surface: pygame.Surface, cmd: Gradient) -> None:
    x, y, w, h = (int(v) for v in cmd.rect)
    if h <= 0:
        return
    offsets = [s[0] for s in cmd.stops]
    channels = np.array([s[1] for s in cmd.stops], dtype=float)
    t = np.linspace(0.0, 1.0, h)
    rows = np.stack([np.interp(t, offsets, channels[:, c]) for c in range(3)], axis=1)
    for i, rgb in enumerate(rows.astype(int)):
        pygame.draw.line(surface, tuple(int(c) for c in rgb), (x, y + i), (x + w - 1, y + i))


def paint(surface: pygame.Surface, commands: Sequence[DrawCommand]) -> None:
    for cmd in commands:
        if isinstance(cmd, Gradient):
            _paint_gradient(surface, cmd)
        elif isinstance(cmd, Line):
            pygame.draw.line(surface, cmd.color, cmd.start, cmd.end, cmd.width)
        elif isinstance(cmd, Text):
            img = _font(cmd.size).render(cmd.text, True, cmd.color)
            rect = img.get_rect(center=cmd.pos) if cmd.centered else img.get_rect(topleft=cmd.pos)
            surface.blit(img, rect)
        elif cmd.alpha >= 1.0:
            _draw_shape(surface, cmd, cmd.color)
        elif cmd.alpha > 0.0:
            # translucent shapes go through a small SRCALPHA layer
            box = _bounds(cmd)
            if box.width <= 0 or box.height <= 0:
                continue
            layer = pygame.Surface(box.size, pygame.SRCALPHA)
            rgba = (*cmd.color, int(255 * cmd.alpha))
            _draw_shape(layer, cmd, rgba, -box.x, -box.y)
            surface.blit(layer, box.topleft)


def capture_frame(world: World) -> np.ndarray:
    """Render off-screen and return an (H, W, 3) uint8 array."""
    surface = pygame.Surface((world.width, world.height))
    paint(surface, compose_frame(world))
    return np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2)).astype(np.uint8)
