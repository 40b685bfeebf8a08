"""Game settings and play statistics, persisted as JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

logger = logging.getLogger(__name__)


def _read_json(path: str | Path, what: str) -> dict:
    """Return the JSON object at *path*, or ``{}`` if absent or unreadable."""
    p = Path(path)
    if not p.exists():
        return {}
    try:
        raw = json.loads(p.read_text())
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load %s from %s: %s", what, p, exc)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring malformed %s file %s.", what, p)
        return {}
    return raw


def _known_fields(cls: type, raw: dict) -> dict:
    names = {f.name for f in fields(cls) if f.init}
    return {k: v for k, v in raw.items() if k in names}


@dataclass(frozen=True)
class GameSettings:
    """Simulation and advice configuration.

    Passed explicitly to the engine and advice service at construction.
    """

    # Simulation
    game_speed_ms: int = 200
    grid_width: int = 30
    grid_height: int = 20

    # Scoring and speed ramp
    food_reward: int = 10
    speed_step_score: int = 50
    speed_floor_ms: int = 50
    speed_decrement_ms: int = 10

    # Advice
    advisor_enabled: bool = True
    advice_api_url: str = "https://api.deepseek.com/v1/chat/completions"
    advice_api_key: str = ""
    advice_model: str = "deepseek-chat"
    advice_timeout_s: float = 5.0

    # Player
    player_name: str = "Player"
    high_score: int = 0

    def __post_init__(self) -> None:
        if self.grid_width < 1 or self.grid_height < 1:
            raise ValueError("Grid dimensions must be at least 1×1.")
        if self.game_speed_ms <= 0:
            raise ValueError("game_speed_ms must be positive.")
        if self.food_reward < 0:
            raise ValueError("food_reward must be >= 0.")
        if self.speed_step_score <= 0:
            raise ValueError("speed_step_score must be positive.")

    def with_high_score(self, score: int) -> GameSettings:
        """Return settings carrying *score* if it beats the stored high score."""
        if score > self.high_score:
            return replace(self, high_score=score)
        return self

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write settings to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Settings saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameSettings:
        """Load settings, falling back to defaults if the file is unusable."""
        raw = _known_fields(cls, _read_json(path, "settings"))
        try:
            return cls(**raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Invalid settings in %s: %s", path, exc)
            return cls()


@dataclass
class GameStatistics:
    """Aggregate results across games."""

    total_games: int = 0
    total_play_time: float = 0.0
    total_score: int = 0
    highest_score: int = 0
    longest_snake: int = 0
    advice_used: int = 0

    @property
    def average_score(self) -> float:
        if self.total_games == 0:
            return 0.0
        return self.total_score / self.total_games

    def record_game(self, score: int, play_time: float, snake_length: int) -> None:
        self.total_games += 1
        self.total_score += score
        self.total_play_time += play_time
        self.highest_score = max(self.highest_score, score)
        self.longest_snake = max(self.longest_snake, snake_length)

    def record_advice_used(self) -> None:
        self.advice_used += 1

    def reset(self) -> None:
        self.total_games = 0
        self.total_play_time = 0.0
        self.total_score = 0
        self.highest_score = 0
        self.longest_snake = 0
        self.advice_used = 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["average_score"] = self.average_score
        return data

    def save(self, path: str | Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Statistics saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameStatistics:
        raw = _known_fields(cls, _read_json(path, "statistics"))
        try:
            return cls(**raw)
        except TypeError as exc:
            logger.warning("Invalid statistics in %s: %s", path, exc)
            return cls()
