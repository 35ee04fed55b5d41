import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest

from fishing.config import GameConfig
from fishing.entities import Fish, HookState
from fishing.scoring import ScoringController
from fishing.world import World, new_world


class RecordingSinks:
    """Stands in for the host's score and feedback displays."""

    def __init__(self):
        self.scores = []
        self.feedback = []

    def score(self, value):
        self.scores.append(value)

    def message(self, text, success, duration_ms):
        self.feedback.append((text, success, duration_ms))


@pytest.fixture
def config():
    # no random turns so fish motion is predictable
    return GameConfig(seed=1234, turn_chance=0.0)


@pytest.fixture
def world(config) -> World:
    return new_world(config)


@pytest.fixture
def sinks():
    return RecordingSinks()


@pytest.fixture
def controller(sinks):
    return ScoringController(sinks.score, sinks.message)


def place_fish(world, type_id, center, fish_id=None):
    """Append a motionless fish of the given catalog type centred on `center`."""
    fish_type = next(t for t in world.config.fish_types if t.id == type_id)
    fish = Fish(
        fish_id=next(world.fish_ids) if fish_id is None else fish_id,
        x=center[0] - 20,
        y=center[1] - 12.5,
        vx=0.0,
        vy=0.0,
        type=fish_type,
    )
    world.fishes.append(fish)
    return fish


def cast_hook_at(world, x, y, sinking=False):
    hook = world.hook
    hook.x, hook.y = x, y
    hook.state = HookState.CASTING
    hook.sinking = sinking
    hook.speed = world.config.hook_initial_speed
    hook.cast_id += 1
