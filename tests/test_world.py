import pytest

from fishing.config import CFG, FishType, GameConfig
from fishing.entities import HookState
from fishing.world import new_world, restart_game, spawn_splash, start_game


def test_new_world_layout(world):
    assert world.water_surface == 150
    assert (world.width, world.height) == (900, 600)
    assert len(world.fishes) == world.config.fish_count == 6
    assert len(world.clouds) == 3
    assert world.hook.state is HookState.IDLE
    assert (world.hook.x, world.hook.y) == (285, 60)
    assert world.score == 0
    assert not world.started


def test_spawned_fish_are_in_the_water_with_unique_ids(world):
    ids = [f.fish_id for f in world.fishes]
    assert len(set(ids)) == len(ids)
    for fish in world.fishes:
        assert 50 <= fish.x < world.width - 50
        assert world.water_surface + 80 <= fish.y < world.height - 80
        assert abs(fish.vx) <= fish.type.speed
        assert abs(fish.vy) <= 0.25
        assert fish.direction in (1, -1)
        assert fish.type in world.config.fish_types


def test_same_seed_same_pond():
    a = new_world(GameConfig(seed=7))
    b = new_world(GameConfig(seed=7))
    assert [(f.x, f.y, f.type.id) for f in a.fishes] == [(f.x, f.y, f.type.id) for f in b.fishes]


def test_splash_burst(world):
    spawn_splash(world, 400, world.water_surface)

    assert [s.delay for s in world.splashes] == [0, 5, 10]
    assert [s.max_size for s in world.splashes] == [50, 65, 80]
    assert [s.life for s in world.splashes] == [40, 35, 30]
    assert len(world.particles) == 12
    for p in world.particles:
        assert abs(p.x - 400) <= 5
        assert -9 <= p.vy < -3
        assert p.gravity == 0.3
        assert p.life == p.max_life == 30
        assert 2 <= p.size < 6


def test_start_resets_elapsed(world):
    world.elapsed = 99
    start_game(world)
    assert world.started
    assert world.elapsed == 0


def test_restart_from_any_state(world):
    start_game(world)
    world.score = 5
    world.hook.state = HookState.CASTING
    world.hook.y = 400
    spawn_splash(world, 100, 150)
    world.fishes.pop()
    old_ids = {f.fish_id for f in world.fishes}
    world.scheduler.schedule(10, lambda: None)

    restart_game(world)

    assert world.score == 0
    assert not world.started
    assert world.hook.state is HookState.IDLE
    assert (world.hook.x, world.hook.y) == (world.hook.anchor_x, world.hook.anchor_y)
    assert world.splashes == [] and world.particles == []
    assert world.feedback is None
    assert len(world.fishes) == world.config.fish_count
    assert old_ids.isdisjoint(f.fish_id for f in world.fishes)
    assert world.scheduler.pending == 0


@pytest.mark.parametrize("types", [
    (),
    (FishType("a", (0, 0, 0), 1, 1.0),),
    (FishType("a", (0, 0, 0), 0, 1.0), FishType("b", (0, 0, 0), 0, 1.0)),
])
def test_bad_catalog_rejected(types):
    with pytest.raises(ValueError):
        GameConfig(fish_types=types)


def test_ticks_conversion():
    assert CFG.ticks(2000) == 120
    assert CFG.ticks(1500) == 90
    assert CFG.ticks(0) == 1
