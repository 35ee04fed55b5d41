# game.py
from __future__ import annotations
from typing import Iterable, Optional
import logging
import math

from .entities import Fish, HookState
from .inputs import Control, Intent, PointerIntent, PointerKind
from .scoring import ScoringController
from .world import (
    World, HOOK_DROP, ROD_TIP_RISE, ROD_TIP_X,
    reset_hook, restart_game, start_game,
)

logger = logging.getLogger(__name__)

# Drag limits
DRAG_MARGIN_X = 50
DRAG_MIN_Y = 50
# Hook stops sinking this far above the bottom
FLOOR_MARGIN = 100
# Fish swim band, measured from the water surface and from the bottom
FISH_TOP_MARGIN = 30
FISH_BOTTOM_MARGIN = 30


# ---------- Hook state machine ----------
def _grabbable(world: World, x: float, y: float) -> bool:
    hook = world.hook
    if hook.state is HookState.CASTING or hook.pending_reset:
        return False
    return math.hypot(x - hook.x, y - hook.y) <= hook.radius + world.config.grab_slack


def press(world: World, x: float, y: float) -> bool:
    """Idle/Dragging -> Dragging if the press lands on the hook."""
    if not world.started or not _grabbable(world, x, y):
        return False
    hook = world.hook
    hook.state = HookState.DRAGGING
    hook.grab_dx = x - hook.x
    hook.grab_dy = y - hook.y
    logger.debug("started dragging hook at (%.1f, %.1f)", x, y)
    return True


def pointer_cue(world: World, x: float, y: float) -> str:
    """Cursor hint for the host: "grabbing" while dragging, "grab" over a grabbable hook."""
    if not world.started:
        return "default"
    if world.hook.state is HookState.DRAGGING:
        return "grabbing"
    return "grab" if _grabbable(world, x, y) else "default"


def drag(world: World, x: float, y: float) -> None:
    hook = world.hook
    if not world.started or hook.state is not HookState.DRAGGING:
        return
    hook.x = max(DRAG_MARGIN_X, min(world.width - DRAG_MARGIN_X, x - hook.grab_dx))
    hook.y = max(DRAG_MIN_Y, y - hook.grab_dy)


def release(world: World) -> bool:
    """Dragging -> Casting."""
    hook = world.hook
    if not world.started or hook.state is not HookState.DRAGGING:
        return False
    hook.state = HookState.CASTING
    hook.sinking = True
    hook.speed = world.config.hook_initial_speed
    hook.cast_id += 1
    world.fisherman.state = "casting"
    logger.debug("hook released, cast #%d", hook.cast_id)
    return True


def _schedule_cast_timeout(world: World) -> None:
    hook = world.hook
    cast_id = hook.cast_id

    def timeout() -> None:
        # a catch or a newer cast already took over
        if hook.state is HookState.CASTING and hook.cast_id == cast_id:
            reset_hook(world)
            logger.debug("cast #%d timed out", cast_id)

    world.scheduler.schedule(world.config.ticks(world.config.cast_timeout_ms),
                             timeout, label="cast-timeout")


def update_hook(world: World) -> None:
    hook = world.hook
    if hook.state is HookState.CASTING and hook.sinking:
        hook.speed += world.config.hook_acceleration
        hook.y += hook.speed
        if hook.y > world.height - FLOOR_MARGIN:
            hook.sinking = False
            _schedule_cast_timeout(world)
    elif hook.state is HookState.IDLE and not hook.pending_reset:
        hook.x, hook.y = hook.anchor_x, hook.anchor_y


# ---------- Ambient ----------
def update_ambient(world: World) -> None:
    world.wave_offset += world.config.wave_speed

    world.boat.sway = math.sin(world.elapsed * 0.02) * 3
    world.rod_tip.x = ROD_TIP_X + world.boat.sway * 0.3
    world.rod_tip.y = world.water_surface - ROD_TIP_RISE + world.boat.sway * 0.2
    world.hook.anchor_x = world.rod_tip.x
    world.hook.anchor_y = world.rod_tip.y + HOOK_DROP

    for cloud in world.clouds:
        cloud.x += cloud.speed
        if cloud.x > world.width + cloud.width:
            cloud.x = -cloud.width


# ---------- Fish ----------
def update_fish(world: World, fish: Fish) -> None:
    fish.anim_frame += 1
    fish.x += fish.vx
    fish.y += fish.vy

    right = world.width - fish.width
    if fish.x <= 0 or fish.x >= right:
        # point back inside, then flip the sprite
        fish.vx = abs(fish.vx) if fish.x <= 0 else -abs(fish.vx)
        fish.direction *= -1
        fish.x = max(0.0, min(right, fish.x))

    top = world.water_surface + FISH_TOP_MARGIN
    bottom = world.height - FISH_BOTTOM_MARGIN - fish.height
    if fish.y <= top or fish.y >= bottom:
        fish.vy = abs(fish.vy) if fish.y <= top else -abs(fish.vy)
        fish.y = max(top, min(bottom, fish.y))

    if world.rng.random() < world.config.turn_chance:
        fish.vx = (world.rng.random() - 0.5) * 2 * fish.type.speed
        fish.direction = 1 if fish.vx > 0 else -1


# ---------- Effects ----------
def update_effects(world: World) -> None:
    alive = []
    for splash in world.splashes:
        if splash.delay > 0:
            splash.delay -= 1
            alive.append(splash)
            continue
        splash.life -= 1
        splash.size = splash.max_size * (1 - splash.life / splash.max_life)
        if splash.life > 0:
            alive.append(splash)
    world.splashes = alive

    drops = []
    for p in world.particles:
        p.x += p.vx
        p.y += p.vy
        p.vy += p.gravity
        p.vx *= 0.99  # air resistance
        p.life -= 1
        if p.life > 0 and p.y <= world.height:
            drops.append(p)
    world.particles = drops


# ---------- Collisions ----------
def find_catch(world: World) -> Optional[Fish]:
    """First uncaught fish (insertion order) within the catch radius of a casting hook."""
    hook = world.hook
    if hook.state is not HookState.CASTING:
        return None
    for fish in world.fishes:
        if fish.caught:
            continue
        cx, cy = fish.center
        if math.hypot(hook.x - cx, hook.y - cy) < world.config.catch_radius:
            return fish
    return None


# ---------- Input / Update ----------
def apply_intents(world: World, controller: ScoringController, intents: Iterable[Intent]) -> bool:
    """Consume queued intents. Return False to quit."""
    for intent in intents:
        if intent is Control.QUIT:
            return False
        if intent is Control.START:
            if not world.started:
                start_game(world)
        elif intent is Control.RESTART:
            restart_game(world)
            controller.push_score(world)
        elif isinstance(intent, PointerIntent):
            if intent.kind is PointerKind.DOWN:
                press(world, intent.x, intent.y)
            elif intent.kind is PointerKind.MOVE:
                drag(world, intent.x, intent.y)
            else:
                release(world)
    return True


def step_game(world: World, controller: ScoringController,
              intents: Iterable[Intent] = ()) -> bool:
    """
    Advance the world by one tick:
    intents -> ambient motion -> hook -> fish -> effects -> collisions -> deferred actions.
    Returns False once a quit intent is seen.
    """
    if not apply_intents(world, controller, intents):
        return False

    world.elapsed += 1
    update_ambient(world)
    update_hook(world)

    for fish in world.fishes:
        if not fish.caught:
            update_fish(world, fish)

    update_effects(world)

    if world.started:
        caught = find_catch(world)
        if caught is not None:
            controller.on_catch(world, caught)

    world.scheduler.advance()
    world.scheduler.drain()

    hook = world.hook
    casting = hook.state is HookState.CASTING or hook.pending_reset
    world.fisherman.state = "casting" if casting else "idle"
    return True
