"""Snake representation and movement logic."""

from __future__ import annotations

from collections import deque

from snake_assist.geometry import Direction, Point, opposite


class Snake:
    """A snake represented as an ordered deque of body cells.

    The head is ``body[0]``; the tail is ``body[-1]``. A direction change
    is buffered in :attr:`next_direction` and only committed by the next
    :meth:`move`.
    """

    def __init__(
        self,
        start: Point,
        direction: Direction = Direction.RIGHT,
        length: int = 1,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        back = opposite(direction)
        self._body: deque[Point] = deque([start])
        for _ in range(length - 1):
            self._body.append(self._body[-1].step(back))
        self.current_direction = direction
        self.next_direction = direction

    @property
    def head(self) -> Point:
        """Return the head coordinate."""
        return self._body[0]

    @property
    def body(self) -> tuple[Point, ...]:
        """Return a copy of the body, head first."""
        return tuple(self._body)

    def __len__(self) -> int:
        return len(self._body)

    def set_direction(self, new_direction: Direction) -> None:
        """Queue a direction for the next move, ignoring 180° reversals."""
        if new_direction == opposite(self.current_direction):
            return
        self.next_direction = new_direction

    def move(self, grow: bool = False) -> Point | None:
        """Move the snake one step forward.

        The new head may lie outside the board; the engine decides what
        that means. Returns the vacated tail cell, or ``None`` if the
        snake grew.
        """
        self.current_direction = self.next_direction
        self._body.appendleft(self.head.step(self.current_direction))
        if grow:
            return None
        return self._body.pop()

    def occupies(self, point: Point) -> bool:
        """Check whether the snake occupies a given cell."""
        return point in self._body

    def check_self_collision(self) -> bool:
        """Check whether the head overlaps any other body segment."""
        head = self.head
        return any(seg == head for seg in list(self._body)[1:])

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [p.to_list() for p in self._body],
            "direction": self.current_direction.name.lower(),
            "next_direction": self.next_direction.name.lower(),
        }
