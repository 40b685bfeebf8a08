"""Tests for the greedy move advisor."""

from snake_assist.advisor import (
    MoveAdvisor,
    candidate_directions,
    is_near_self,
    is_near_wall,
    is_safe_move,
    suggest_move,
)
from snake_assist.geometry import Direction, Point
from snake_assist.snapshot import Snapshot


def _snap(body, food, width=10, height=10, direction=Direction.RIGHT):
    body = tuple(Point(*p) for p in body)
    return Snapshot(
        head=body[0],
        body=body,
        food=Point(*food),
        direction=direction,
        score=0,
        width=width,
        height=height,
    )


class TestCandidateOrder:
    def test_larger_horizontal_delta_first(self):
        snap = _snap([(0, 0)], (3, 1))
        assert candidate_directions(snap) == [Direction.RIGHT, Direction.DOWN]

    def test_larger_vertical_delta_first(self):
        snap = _snap([(5, 5)], (4, 1))
        assert candidate_directions(snap) == [Direction.UP, Direction.LEFT]

    def test_tie_prefers_horizontal(self):
        snap = _snap([(5, 5)], (3, 7))
        assert candidate_directions(snap) == [Direction.LEFT, Direction.DOWN]

    def test_aligned_axis_contributes_nothing(self):
        assert candidate_directions(_snap([(4, 4)], (1, 4))) == [Direction.LEFT]
        assert candidate_directions(_snap([(4, 4)], (4, 8))) == [Direction.DOWN]

    def test_head_on_food(self):
        assert candidate_directions(_snap([(4, 4)], (4, 4))) == []


class TestSafeMove:
    def test_wall_is_unsafe(self):
        snap = _snap([(0, 0)], (5, 5))
        assert not is_safe_move(snap, Direction.UP)
        assert not is_safe_move(snap, Direction.LEFT)
        assert is_safe_move(snap, Direction.RIGHT)

    def test_body_is_unsafe(self):
        snap = _snap([(2, 2), (2, 3), (3, 3), (3, 2)], (9, 9))
        assert not is_safe_move(snap, Direction.DOWN)

    def test_tail_cell_is_safe(self):
        snap = _snap([(2, 2), (2, 3), (3, 3), (3, 2)], (9, 9))
        assert is_safe_move(snap, Direction.RIGHT)


class TestSuggestMove:
    def test_heads_for_food(self):
        snap = _snap([(2, 2)], (4, 2), width=5, height=5)
        assert suggest_move(snap) == Direction.RIGHT

    def test_second_candidate_when_first_blocked(self):
        # RIGHT is blocked by the body, DOWN still approaches the food.
        snap = _snap([(2, 2), (3, 2), (3, 1)], (6, 4))
        assert suggest_move(snap) == Direction.DOWN

    def test_falls_back_to_canonical_scan(self):
        snap = _snap([(2, 2), (3, 2), (3, 3)], (4, 2))
        assert candidate_directions(snap) == [Direction.RIGHT]
        assert suggest_move(snap) == Direction.UP

    def test_fallback_skips_unsafe_canonical_directions(self):
        # Top-left corner: UP and LEFT are walls, RIGHT is body.
        snap = _snap([(0, 0), (1, 0), (1, 1)], (5, 0))
        assert suggest_move(snap) == Direction.DOWN

    def test_no_safe_move(self):
        snap = _snap([(0, 0), (1, 0), (2, 0)], (2, 0), width=3, height=1)
        assert suggest_move(snap) is None

    def test_one_ply_lookahead_walks_into_dead_end(self):
        # LEFT is safe for this tick, but after it no move is safe.
        # The advisor only looks one step ahead, so it still picks LEFT.
        first = _snap([(1, 0), (2, 0), (3, 0)], (0, 0), width=4, height=1)
        assert suggest_move(first) == Direction.LEFT
        after = _snap([(0, 0), (1, 0), (2, 0)], (3, 0), width=4, height=1)
        assert suggest_move(after) is None

    def test_does_not_mutate_snapshot(self):
        snap = _snap([(2, 2), (1, 2)], (7, 7))
        before = snap.to_dict()
        suggest_move(snap)
        assert snap.to_dict() == before


class TestHazards:
    def test_near_wall(self):
        assert is_near_wall(_snap([(1, 5)], (0, 0)))
        assert is_near_wall(_snap([(5, 8)], (0, 0)))
        assert not is_near_wall(_snap([(5, 5)], (0, 0)))

    def test_near_self_skips_neck(self):
        assert not is_near_self(_snap([(5, 5), (4, 5), (3, 5)], (0, 0)))
        body = [(5, 5), (5, 6), (4, 6), (3, 6), (3, 5)]
        assert is_near_self(_snap(body, (0, 0)))


class TestMoveAdvisor:
    def test_facade_matches_function(self):
        snap = _snap([(2, 2), (3, 2), (3, 3)], (4, 2))
        advisor = MoveAdvisor()
        assert advisor.suggest_move(snap) == suggest_move(snap)
        assert advisor.is_safe_move(snap, Direction.UP)

    def test_safe_directions(self):
        snap = _snap([(0, 0), (1, 0), (1, 1)], (5, 0))
        assert MoveAdvisor().safe_directions(snap) == [Direction.DOWN]
