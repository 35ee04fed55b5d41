import math

import pytest

from fishing.entities import HookState
from fishing.game import (
    drag, find_catch, pointer_cue, press, release, step_game, update_ambient,
    update_effects, update_fish,
)
from fishing.inputs import Control, PointerIntent, PointerKind
from fishing.world import spawn_splash, start_game

from conftest import cast_hook_at, place_fish


def grab_hook(world):
    return press(world, world.hook.x, world.hook.y)


# ---------- Hook state machine ----------
def test_press_ignored_before_start(world):
    assert not grab_hook(world)
    assert world.hook.state is HookState.IDLE


def test_press_must_land_near_hook(world):
    start_game(world)
    hook = world.hook
    far = hook.radius + world.config.grab_slack + 1
    assert not press(world, hook.x + far, hook.y)
    assert press(world, hook.x + hook.radius + world.config.grab_slack, hook.y)
    assert hook.state is HookState.DRAGGING


def test_drag_keeps_grab_offset_and_clamps(world):
    start_game(world)
    hook = world.hook
    press(world, hook.x + 3, hook.y - 2)

    drag(world, 403, 298)
    assert (hook.x, hook.y) == (400, 300)

    drag(world, -500, -500)
    assert hook.x == 50
    assert hook.y == 50

    drag(world, 5000, 5000)
    assert hook.x == world.width - 50
    assert hook.y == 5000 - (-2)


def test_release_starts_cast_with_growing_speed(world, controller):
    start_game(world)
    grab_hook(world)
    drag(world, 450, 100)
    assert release(world)

    hook = world.hook
    assert hook.state is HookState.CASTING
    assert hook.sinking
    assert 0 < hook.speed <= 5
    assert world.fisherman.state == "casting"

    world.fishes = []  # nothing to catch
    speeds = []
    for _ in range(5):
        step_game(world, controller)
        speeds.append(hook.speed)
    diffs = [b - a for a, b in zip(speeds, speeds[1:])]
    assert all(d == pytest.approx(world.config.hook_acceleration) for d in diffs)
    assert speeds[0] == pytest.approx(world.config.hook_initial_speed + world.config.hook_acceleration)


def test_release_without_drag_is_ignored(world):
    start_game(world)
    assert not release(world)
    assert world.hook.state is HookState.IDLE


def test_cannot_grab_while_casting(world):
    start_game(world)
    cast_hook_at(world, 300, 300)
    assert not press(world, 300, 300)
    assert world.hook.state is HookState.CASTING


def test_cast_times_out_back_to_idle(world, controller):
    start_game(world)
    world.fishes = []
    cast_hook_at(world, 450, 480, sinking=True)

    for _ in range(20):
        step_game(world, controller)
        if not world.hook.sinking:
            break
    hook = world.hook
    assert not hook.sinking
    assert hook.state is HookState.CASTING
    assert hook.y > world.height - 100
    resting_y = hook.y

    step_game(world, controller)
    assert hook.y == resting_y  # parked until the timeout fires

    for _ in range(world.config.ticks(world.config.cast_timeout_ms)):
        step_game(world, controller)
    assert hook.state is HookState.IDLE
    assert (hook.x, hook.y) == (hook.anchor_x, hook.anchor_y)
    assert world.fisherman.state == "idle"


def test_stale_timeout_does_not_reset_next_cast(world, controller):
    start_game(world)
    world.fishes = []
    cast_hook_at(world, 450, 499, sinking=True)
    step_game(world, controller)
    assert not world.hook.sinking

    # a new cast starts before the old timeout fires
    cast_hook_at(world, 450, 200, sinking=False)
    for _ in range(world.config.ticks(world.config.cast_timeout_ms) + 1):
        step_game(world, controller)
    assert world.hook.state is HookState.CASTING


def test_idle_hook_follows_boat_sway(world, controller):
    seen = set()
    for _ in range(100):
        step_game(world, controller)
        hook = world.hook
        sway = math.sin(world.elapsed * 0.02) * 3
        assert hook.anchor_x == pytest.approx(285 + sway * 0.3)
        assert hook.anchor_y == pytest.approx(world.water_surface - 95 + sway * 0.2 + 5)
        assert (hook.x, hook.y) == (hook.anchor_x, hook.anchor_y)
        seen.add(round(hook.x, 6))
    assert len(seen) > 1


def test_intents_flow_through_step(world, controller):
    start_game(world)
    hook = world.hook
    x, y = hook.x, hook.y
    step_game(world, controller, [PointerIntent(PointerKind.DOWN, x, y)])
    assert hook.state is HookState.DRAGGING
    step_game(world, controller, [PointerIntent(PointerKind.MOVE, 500, 120)])
    assert (hook.x, hook.y) == (500, 120)
    step_game(world, controller, [PointerIntent(PointerKind.UP, 500, 120)])
    assert hook.state is HookState.CASTING


def test_quit_intent_stops_the_loop(world, controller):
    assert step_game(world, controller, [Control.QUIT]) is False


def test_start_and_restart_controls(world, controller, sinks):
    step_game(world, controller, [Control.START])
    assert world.started
    world.score = 3
    step_game(world, controller, [Control.RESTART])
    assert not world.started
    assert world.score == 0
    assert sinks.scores[-1] == 0


def test_hook_is_always_in_exactly_one_state(config, controller):
    from fishing.world import new_world
    world = new_world(config)
    start_game(world)
    for tick in range(600):
        hook = world.hook
        intents = []
        if hook.state is HookState.IDLE and not hook.pending_reset and tick % 50 == 0:
            intents = [PointerIntent(PointerKind.DOWN, hook.x, hook.y),
                       PointerIntent(PointerKind.MOVE, 100 + tick % 700, 120),
                       PointerIntent(PointerKind.UP, 0, 0)]
        step_game(world, controller, intents)
        assert isinstance(world.hook.state, HookState)
        if world.hook.state is not HookState.CASTING:
            assert not world.hook.sinking


# ---------- Fish ----------
def test_fish_reflect_at_side_walls(world):
    fish = place_fish(world, "correct1", (25, 300))
    fish.x, fish.vx, fish.direction = 1.0, -2.0, -1
    update_fish(world, fish)
    assert fish.x == 0
    assert fish.vx == 2.0
    assert fish.direction == 1

    fish.x, fish.vx = world.width - fish.width - 1, 3.0
    update_fish(world, fish)
    assert fish.x == world.width - fish.width
    assert fish.vx == -3.0


def test_fish_never_leave_the_water(config, controller):
    from dataclasses import replace
    from fishing.world import new_world
    world = new_world(replace(config, turn_chance=0.05))
    for _ in range(2000):
        step_game(world, controller)
        for fish in world.fishes:
            assert 0 <= fish.x <= world.width - fish.width
            assert world.water_surface + 30 <= fish.y <= world.height - 30 - fish.height


def test_caught_fish_stay_put(world, controller):
    fish = world.fishes[0]
    fish.caught = True
    before = (fish.x, fish.y, fish.anim_frame)
    step_game(world, controller)
    assert (fish.x, fish.y, fish.anim_frame) == before


# ---------- Effects ----------
def test_splash_grows_monotonically_then_disappears(world):
    spawn_splash(world, 300, world.water_surface)
    world.particles = []
    ring = world.splashes[1]
    sizes = []
    while ring in world.splashes:
        update_effects(world)
        if ring.delay == 0 and ring.life < ring.max_life:
            sizes.append(ring.size)
    assert sizes == sorted(sizes)
    assert sizes[-1] == pytest.approx(ring.max_size)
    assert ring.life == 0


def test_particles_fall_and_expire(world):
    spawn_splash(world, 300, world.water_surface)
    world.splashes = []
    p = world.particles[0]
    vy0 = p.vy
    update_effects(world)
    assert p.vy == pytest.approx(vy0 + p.gravity)
    for _ in range(30):
        update_effects(world)
    assert world.particles == []


# ---------- Collisions ----------
def test_no_catch_unless_casting(world):
    world.fishes = []
    place_fish(world, "correct1", (world.hook.x, world.hook.y))
    assert find_catch(world) is None


def test_first_fish_in_insertion_order_wins(world):
    world.fishes = []
    cast_hook_at(world, 400, 300)
    first = place_fish(world, "wrong", (410, 300))
    place_fish(world, "correct1", (400, 300))
    assert find_catch(world) is first


def test_catch_radius_is_strict(world):
    world.fishes = []
    cast_hook_at(world, 400, 300)
    place_fish(world, "correct1", (430, 300))
    assert find_catch(world) is None
    world.hook.x = 401
    assert find_catch(world) is not None


def test_no_collisions_before_start(world, controller):
    world.fishes = []
    place_fish(world, "correct1", (400, 300))
    cast_hook_at(world, 400, 300)
    step_game(world, controller)
    assert world.score == 0
    assert not world.fishes[0].caught


# ---------- Ambient ----------
def test_cloud_wraps_to_the_left_edge(world):
    cloud = world.clouds[0]
    cloud.x = world.width + cloud.width
    update_ambient(world)
    assert cloud.x == -cloud.width

    other = world.clouds[1]
    before = other.x
    update_ambient(world)
    assert other.x == pytest.approx(before + other.speed)


def test_wave_phase_advances_by_wave_speed(world, controller):
    phases = []
    for _ in range(10):
        step_game(world, controller)
        phases.append(world.wave_offset)
    diffs = [b - a for a, b in zip(phases, phases[1:])]
    assert all(d == pytest.approx(world.config.wave_speed) for d in diffs)


def test_random_turns_stay_within_speed_and_orient_sprite(config):
    from dataclasses import replace
    from fishing.world import new_world
    world = new_world(replace(config, turn_chance=1.0))
    world.fishes = []
    fish = place_fish(world, "correct2", (450, 350))
    seen = set()
    for _ in range(50):
        update_fish(world, fish)
        assert -fish.type.speed <= fish.vx <= fish.type.speed
        assert fish.direction == (1 if fish.vx > 0 else -1)
        seen.add(fish.vx)
    assert len(seen) > 1


# ---------- Pointer cue ----------
def test_pointer_cue_follows_hook_state(world):
    hook = world.hook
    assert pointer_cue(world, hook.x, hook.y) == "default"  # not started

    start_game(world)
    assert pointer_cue(world, hook.x, hook.y) == "grab"
    assert pointer_cue(world, hook.x + 100, hook.y) == "default"

    press(world, hook.x, hook.y)
    assert pointer_cue(world, 700, 500) == "grabbing"

    release(world)
    assert pointer_cue(world, hook.x, hook.y) == "default"
