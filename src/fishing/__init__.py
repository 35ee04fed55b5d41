# src/fishing/__init__.py
"""Drag-and-drop fishing arcade game."""

from .config import CFG, GameConfig, FishType
from .world import World, new_world, restart_game, start_game
from .scoring import ScoringController
from .game import step_game

__all__ = [
    "CFG", "GameConfig", "FishType",
    "World", "new_world", "restart_game", "start_game",
    "ScoringController", "step_game",
]
