"""Advisory text for the player: remote language model with local fallback.

Every public call on :class:`AdviceService` first asks the remote service
(when one is configured) and, if that fails for any reason, answers from
the local heuristics instead. Failures are reported in the returned
result, never raised, and nothing here touches engine state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx
import numpy as np

from snake_assist.advisor import is_near_self, is_near_wall, suggest_move
from snake_assist.config import GameSettings
from snake_assist.geometry import Direction
from snake_assist.snapshot import Snapshot

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_LOCAL = "local"

LOCAL_TIPS: tuple[str, ...] = (
    "Coil the body into a spiral to keep room for later moves.",
    "Don't rush the food; prefer a move that keeps an exit open.",
    "With a long body, circling the border buys time.",
    "Plan a few moves ahead instead of reacting to the next cell.",
    "Corners trap you easily; enter them with care.",
)


@dataclass(frozen=True)
class RemoteReply:
    """Outcome of one remote completion request."""

    text: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None


@dataclass(frozen=True)
class AdviceResult:
    text: str
    source: str
    error: str | None = None

    def to_dict(self) -> dict:
        return {"text": self.text, "source": self.source, "error": self.error}


@dataclass(frozen=True)
class MoveAdvice:
    direction: Direction | None
    source: str
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.name.lower() if self.direction else None,
            "source": self.source,
            "error": self.error,
        }


def parse_direction(text: str) -> Direction | None:
    """Pick the first direction keyword found in a free-text reply."""
    upper = text.upper().strip()
    for direction in (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT):
        if direction.name in upper:
            return direction
    return None


# ----------------------------------------------------------------------
# Prompts
# ----------------------------------------------------------------------


def game_analysis_prompt(snapshot: Snapshot) -> str:
    return "\n".join([
        "As a snake game expert, analyse the current state and give advice:",
        f"Head: ({snapshot.head.x}, {snapshot.head.y})",
        f"Food: ({snapshot.food.x}, {snapshot.food.y})",
        f"Direction: {snapshot.direction.name.lower()}",
        f"Length: {len(snapshot.body)}",
        f"Score: {snapshot.score}",
        f"Board: {snapshot.width}x{snapshot.height}",
        "Keep the advice under 50 words.",
    ])


def move_advice_prompt(snapshot: Snapshot) -> str:
    return "\n".join([
        "Suggest the best next move for this snake game state:",
        f"Head: ({snapshot.head.x}, {snapshot.head.y})",
        f"Food: ({snapshot.food.x}, {snapshot.food.y})",
        f"Direction: {snapshot.direction.name.lower()}",
        "Answer with one word: Up/Down/Left/Right",
    ])


def performance_prompt(score: int, play_time: float, recent_scores: Sequence[int]) -> str:
    return "\n".join([
        "Analyse this snake player's performance:",
        f"Score this game: {score}",
        f"Play time: {play_time:.0f}s",
        f"Recent scores: {', '.join(str(s) for s in recent_scores)}",
        "Give an analysis and suggestions in under 100 words.",
    ])


# ----------------------------------------------------------------------
# Local answers
# ----------------------------------------------------------------------


def local_game_advice(snapshot: Snapshot) -> str:
    dx = snapshot.food.x - snapshot.head.x
    dy = snapshot.food.y - snapshot.head.y

    suggestions: list[str] = []
    if abs(dx) > abs(dy):
        suggestions.append("Move right toward the food." if dx > 0 else "Move left toward the food.")
    else:
        suggestions.append("Move down toward the food." if dy > 0 else "Move up toward the food.")
    if is_near_wall(snapshot):
        suggestions.append("Watch out for the wall!")
    if is_near_self(snapshot):
        suggestions.append("Careful not to bite yourself!")
    if len(snapshot.body) > 10:
        suggestions.append("Your body is long; plan your path carefully.")
    return " ".join(suggestions)


def local_performance_analysis(score: int, recent_scores: Sequence[int]) -> str:
    if not recent_scores:
        return f"You scored {score}. Keep practising to get a feel for the pace!"
    average = float(np.mean(recent_scores))
    if score > average:
        return f"Nice! {score} beats your recent average of {average:.1f}. Keep it up!"
    return (
        f"{score} is below your recent average of {average:.1f}. "
        "Practise planning routes and spotting danger early."
    )


# ----------------------------------------------------------------------
# Remote client
# ----------------------------------------------------------------------


class RemoteAdviceClient:
    """Minimal chat-completion client.

    :meth:`complete` never raises for transport, HTTP, or payload errors;
    they come back as a :class:`RemoteReply` with ``error`` set.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        model: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.model = model
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)
        self._headers = {"Authorization": f"Bearer {api_key}"}

    async def complete(self, prompt: str) -> RemoteReply:
        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": 150,
            "temperature": 0.7,
        }
        try:
            resp = await self._client.post(self.url, json=body, headers=self._headers)
            resp.raise_for_status()
            content = resp.json()["choices"][0]["message"]["content"]
        except httpx.HTTPError as exc:
            return RemoteReply(error=f"{type(exc).__name__}: {exc}")
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            return RemoteReply(error=f"Malformed response: {exc!r}")
        if not isinstance(content, str) or not content.strip():
            return RemoteReply(error="Empty response.")
        return RemoteReply(text=content.strip())

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class AdviceService:
    """Two-path advice: remote when available, local otherwise."""

    def __init__(
        self,
        settings: GameSettings | None = None,
        remote: RemoteAdviceClient | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.settings = settings if settings is not None else GameSettings()
        if remote is None and self.settings.advisor_enabled and self.settings.advice_api_key:
            remote = RemoteAdviceClient(
                url=self.settings.advice_api_url,
                api_key=self.settings.advice_api_key,
                model=self.settings.advice_model,
                timeout=self.settings.advice_timeout_s,
            )
        self.remote = remote
        self.rng = rng if rng is not None else np.random.default_rng()

    async def _ask(self, prompt: str) -> RemoteReply:
        if self.remote is None:
            return RemoteReply(error="Remote advice not configured.")
        reply = await self.remote.complete(prompt)
        if not reply.ok:
            logger.warning("Remote advice failed, using local advice: %s", reply.error)
        return reply

    async def game_advice(self, snapshot: Snapshot) -> AdviceResult:
        reply = await self._ask(game_analysis_prompt(snapshot))
        if reply.ok:
            return AdviceResult(reply.text, SOURCE_REMOTE)
        return AdviceResult(local_game_advice(snapshot), SOURCE_LOCAL, reply.error)

    async def move_advice(self, snapshot: Snapshot) -> MoveAdvice:
        reply = await self._ask(move_advice_prompt(snapshot))
        if reply.ok:
            direction = parse_direction(reply.text)
            if direction is not None:
                return MoveAdvice(direction, SOURCE_REMOTE)
            error = f"No direction in reply: {reply.text!r}"
        else:
            error = reply.error
        return MoveAdvice(suggest_move(snapshot), SOURCE_LOCAL, error)

    async def tips(self) -> AdviceResult:
        reply = await self._ask(
            "Share some advanced snake game tips and strategies to help a player improve.",
        )
        if reply.ok:
            return AdviceResult(reply.text, SOURCE_REMOTE)
        tip = LOCAL_TIPS[int(self.rng.integers(0, len(LOCAL_TIPS)))]
        return AdviceResult(tip, SOURCE_LOCAL, reply.error)

    async def performance_analysis(
        self, score: int, play_time: float, recent_scores: Sequence[int],
    ) -> AdviceResult:
        reply = await self._ask(performance_prompt(score, play_time, recent_scores))
        if reply.ok:
            return AdviceResult(reply.text, SOURCE_REMOTE)
        return AdviceResult(
            local_performance_analysis(score, recent_scores), SOURCE_LOCAL, reply.error,
        )

    async def aclose(self) -> None:
        if self.remote is not None:
            await self.remote.aclose()
