"""Plain data records for everything that lives in the pond."""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .config import FishType


class HookState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    CASTING = "casting"


@dataclass
class Hook:
    x: float
    y: float
    anchor_x: float
    anchor_y: float
    radius: float
    speed: float = 0.0
    state: HookState = HookState.IDLE
    sinking: bool = False         # still falling while CASTING
    pending_reset: bool = False   # caught something, held until the reset fires
    grab_dx: float = 0.0
    grab_dy: float = 0.0
    cast_id: int = 0


@dataclass
class Fish:
    fish_id: int
    x: float
    y: float
    vx: float
    vy: float
    type: FishType
    anim_frame: float = 0.0
    direction: int = 1            # sprite orientation, +1 faces right
    caught: bool = False
    width: float = 40
    height: float = 25

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class Splash:
    x: float
    y: float
    size: float
    max_size: float
    life: int
    max_life: int
    delay: int                    # ticks before the ring starts expanding


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    gravity: float
    life: int
    max_life: int
    size: float


@dataclass
class Cloud:
    x: float
    y: float
    width: float
    height: float
    speed: float


@dataclass
class Boat:
    x: float
    y: float
    width: float = 120
    height: float = 40
    sway: float = 0.0


@dataclass
class Fisherman:
    x: float
    y: float
    state: str = "idle"           # "idle" | "casting"


@dataclass
class RodTip:
    x: float
    y: float


@dataclass(frozen=True)
class Feedback:
    text: str
    success: bool
