"""Greedy one-ply move advisor.

Given a :class:`~snake_assist.snapshot.Snapshot`, propose a direction that
heads toward the food without stepping off the board or onto the body.
Only the immediate next cell is examined, so a move judged safe here can
still lead into a dead end a few ticks later.
"""

from __future__ import annotations

from snake_assist.geometry import Direction
from snake_assist.snapshot import Snapshot

# Order of the fallback scan when no food-directed move is safe.
CANONICAL_ORDER: tuple[Direction, ...] = tuple(Direction)


def candidate_directions(snapshot: Snapshot) -> list[Direction]:
    """Food-directed directions, most promising first.

    The axis with the larger distance to the food is tried first (the
    horizontal axis wins ties). An axis already aligned with the food
    contributes nothing.
    """
    dx = snapshot.food.x - snapshot.head.x
    dy = snapshot.food.y - snapshot.head.y

    horizontal: list[Direction] = []
    if dx > 0:
        horizontal.append(Direction.RIGHT)
    if dx < 0:
        horizontal.append(Direction.LEFT)

    vertical: list[Direction] = []
    if dy > 0:
        vertical.append(Direction.DOWN)
    if dy < 0:
        vertical.append(Direction.UP)

    if abs(dx) >= abs(dy):
        return horizontal + vertical
    return vertical + horizontal


def is_safe_move(snapshot: Snapshot, direction: Direction) -> bool:
    """Check that moving in *direction* keeps the head on a free cell.

    The tail cell counts as free because it is vacated on the same tick.
    """
    nxt = snapshot.head.step(direction)
    if not snapshot.bounds.contains(nxt):
        return False
    return nxt not in snapshot.body[:-1]


def suggest_move(snapshot: Snapshot) -> Direction | None:
    """Return a safe direction toward the food, any safe direction, or None."""
    for direction in candidate_directions(snapshot):
        if is_safe_move(snapshot, direction):
            return direction
    for direction in CANONICAL_ORDER:
        if is_safe_move(snapshot, direction):
            return direction
    return None


def is_near_wall(snapshot: Snapshot, margin: int = 1) -> bool:
    """Check whether the head is within *margin* cells of the board edge."""
    head = snapshot.head
    return (
        head.x <= margin
        or head.x >= snapshot.width - 1 - margin
        or head.y <= margin
        or head.y >= snapshot.height - 1 - margin
    )


def is_near_self(snapshot: Snapshot, reach: int = 2) -> bool:
    """Check whether a non-adjacent body segment is within *reach* of the head.

    The head and the two segments behind it are skipped.
    """
    head = snapshot.head
    return any(head.manhattan(seg) <= reach for seg in snapshot.body[3:])


class MoveAdvisor:
    """Stateless facade over the local heuristic."""

    def suggest_move(self, snapshot: Snapshot) -> Direction | None:
        return suggest_move(snapshot)

    def is_safe_move(self, snapshot: Snapshot, direction: Direction) -> bool:
        return is_safe_move(snapshot, direction)

    def safe_directions(self, snapshot: Snapshot) -> list[Direction]:
        """All directions that pass :func:`is_safe_move`, in canonical order."""
        return [d for d in CANONICAL_ORDER if is_safe_move(snapshot, d)]
