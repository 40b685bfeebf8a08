"""Snake Assist — tick-driven snake simulation and local move advisor."""

from snake_assist.advisor import MoveAdvisor, is_safe_move, suggest_move
from snake_assist.config import GameSettings, GameStatistics
from snake_assist.engine import SimulationEngine, SimulationState
from snake_assist.events import GameOverEvent, ScoreChangedEvent, UpdateEvent
from snake_assist.food import Food, FoodPlacementError
from snake_assist.geometry import Direction, GridBounds, Point, opposite
from snake_assist.snake import Snake
from snake_assist.snapshot import Snapshot

__all__ = [
    "Direction",
    "Food",
    "FoodPlacementError",
    "GameOverEvent",
    "GameSettings",
    "GameStatistics",
    "GridBounds",
    "MoveAdvisor",
    "Point",
    "ScoreChangedEvent",
    "SimulationEngine",
    "SimulationState",
    "Snake",
    "Snapshot",
    "UpdateEvent",
    "is_safe_move",
    "opposite",
    "suggest_move",
]
