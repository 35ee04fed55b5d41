from dataclasses import dataclass, field
from typing import Tuple

# ----- Window & world -----
WIDTH, HEIGHT = 900, 600
FPS = 60

# ----- Colors -----
SKY_TOP     = (135, 206, 235)
SKY_BOTTOM  = (176, 224, 230)
WATER_STOPS = ((65, 105, 225), (30, 144, 255), (25, 25, 112))
WAVE        = (135, 206, 235)
SUN         = (255, 215, 0)
GRASS       = (34, 139, 34)
TEXT        = (255, 255, 255)
SUCCESS     = (76, 175, 80)
FAILURE     = (244, 67, 54)


@dataclass(frozen=True)
class FishType:
    id: str
    color: Tuple[int, int, int]
    points: int
    speed: float


DEFAULT_FISH_TYPES: Tuple[FishType, ...] = (
    FishType("correct1", (76, 175, 80), 1, 1.0),
    FishType("correct2", (33, 150, 243), 1, 1.2),
    FishType("wrong", (244, 67, 54), 0, 0.8),
)


# ----- Tunables -----
@dataclass(frozen=True)
class GameConfig:
    seed: int | None = None
    fish_count: int = 6
    water_level: int = 150
    fish_types: Tuple[FishType, ...] = field(default=DEFAULT_FISH_TYPES)
    wave_speed: float = 0.02
    hook_radius: float = 8
    grab_slack: float = 10
    hook_initial_speed: float = 2
    hook_acceleration: float = 0.3
    catch_radius: float = 30
    catch_reset_ms: int = 2000
    feedback_ms: int = 1500
    cast_timeout_ms: int = 1000
    turn_chance: float = 0.003
    fps: int = FPS

    def __post_init__(self):
        if not self.fish_types:
            raise ValueError("fish_types must not be empty")
        wrong = [t for t in self.fish_types if t.points == 0]
        if len(wrong) != 1:
            raise ValueError(f"expected exactly one zero-point fish type, got {len(wrong)}")
        if any(t.points < 0 for t in self.fish_types):
            raise ValueError("fish type points must be >= 0")
        if self.fish_count < 1:
            raise ValueError("fish_count must be positive")
        if self.fps < 1:
            raise ValueError("fps must be positive")

    def ticks(self, ms: int) -> int:
        """Convert a real-time delay into a tick count at the target frame rate."""
        return max(1, round(ms * self.fps / 1000))


CFG = GameConfig()
