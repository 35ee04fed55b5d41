# world.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import itertools
import logging

import numpy as np  # type: ignore

from .config import WIDTH, HEIGHT, CFG, GameConfig
from .entities import (
    Boat, Cloud, Feedback, Fish, Fisherman, Hook, HookState, Particle, RodTip, Splash,
)
from .schedule import Scheduler

logger = logging.getLogger(__name__)

# Scene layout, relative to the water surface
ROD_TIP_X = 285
ROD_TIP_RISE = 95
HOOK_DROP = 5


# ---------- State ----------
@dataclass
class World:
    config: GameConfig
    rng: np.random.Generator
    width: int
    height: int
    water_surface: float
    hook: Hook
    boat: Boat
    fisherman: Fisherman
    rod_tip: RodTip
    scheduler: Scheduler = field(default_factory=Scheduler)
    fishes: List[Fish] = field(default_factory=list)
    clouds: List[Cloud] = field(default_factory=list)
    splashes: List[Splash] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)
    score: int = 0
    elapsed: int = 0               # ticks since start
    started: bool = False
    wave_offset: float = 0.0
    feedback: Optional[Feedback] = None
    fish_ids: itertools.count = field(default_factory=itertools.count)


def _initial_clouds() -> List[Cloud]:
    return [
        Cloud(100, 50, 80, 40, 0.3),
        Cloud(400, 30, 100, 50, 0.2),
        Cloud(700, 60, 90, 45, 0.25),
    ]


def new_world(config: GameConfig = CFG, width: int = WIDTH, height: int = HEIGHT) -> World:
    surface = config.water_level
    anchor_x, anchor_y = ROD_TIP_X, surface - ROD_TIP_RISE + HOOK_DROP
    world = World(
        config=config,
        rng=np.random.default_rng(config.seed),
        width=width,
        height=height,
        water_surface=surface,
        hook=Hook(x=anchor_x, y=anchor_y, anchor_x=anchor_x, anchor_y=anchor_y,
                  radius=config.hook_radius),
        boat=Boat(x=200, y=surface - 50),
        fisherman=Fisherman(x=250, y=surface - 80),
        rod_tip=RodTip(ROD_TIP_X, surface - ROD_TIP_RISE),
        clouds=_initial_clouds(),
    )
    populate_fish(world)
    logger.debug("world created, water surface at %s", surface)
    return world


# ---------- Spawning ----------
def spawn_fish(world: World) -> Fish:
    rng = world.rng
    types = world.config.fish_types
    fish_type = types[int(rng.integers(len(types)))]
    water_top = world.water_surface + 50
    water_bottom = world.height - 50

    fish = Fish(
        fish_id=next(world.fish_ids),
        x=rng.random() * (world.width - 100) + 50,
        y=rng.random() * (water_bottom - water_top - 60) + water_top + 30,
        vx=(rng.random() - 0.5) * 2 * fish_type.speed,
        vy=(rng.random() - 0.5) * 0.5,
        type=fish_type,
        anim_frame=rng.random() * 60,
        direction=1 if rng.random() > 0.5 else -1,
    )
    world.fishes.append(fish)
    logger.debug("spawned fish #%d (%s)", fish.fish_id, fish_type.id)
    return fish


def populate_fish(world: World) -> None:
    world.fishes = []
    for _ in range(world.config.fish_count):
        spawn_fish(world)


def spawn_splash(world: World, x: float, y: float) -> None:
    """Three staggered ripple rings plus a burst of droplets."""
    rng = world.rng
    for i in range(3):
        life = 40 - i * 5
        world.splashes.append(Splash(
            x=x, y=y, size=0.0, max_size=50 + i * 15,
            life=life, max_life=life, delay=i * 5,
        ))

    for _ in range(12):
        world.particles.append(Particle(
            x=x + (rng.random() - 0.5) * 10,
            y=y + (rng.random() - 0.5) * 10,
            vx=(rng.random() - 0.5) * 8,
            vy=rng.random() * -6 - 3,
            gravity=0.3,
            life=30,
            max_life=30,
            size=rng.random() * 4 + 2,
        ))
    logger.debug("splash at (%.1f, %.1f)", x, y)


# ---------- Session ----------
def reset_hook(world: World) -> None:
    hook = world.hook
    hook.x, hook.y = hook.anchor_x, hook.anchor_y
    hook.state = HookState.IDLE
    hook.speed = 0.0
    hook.sinking = False
    hook.pending_reset = False
    world.fisherman.state = "idle"


def start_game(world: World) -> None:
    world.started = True
    world.elapsed = 0
    logger.info("game started")


def restart_game(world: World) -> None:
    """Back to a fresh, not-yet-started session. Pending deferred actions are discarded."""
    world.scheduler.cancel_all()
    world.score = 0
    world.started = False
    world.elapsed = 0
    reset_hook(world)
    world.splashes = []
    world.particles = []
    world.feedback = None
    populate_fish(world)
    logger.info("game restarted")
