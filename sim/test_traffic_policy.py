#!/usr/bin/env python3
"""
Tests for the right-of-way tables and the shared enumerations.
"""

from __future__ import annotations

import math
import unittest

from sim.geometry import Rect
from sim.physics import rects_overlap, step_toward, time_to_reach
from sim.traffic_policy import must_yield, priority_yield
from sim.types import Direction, Turn

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


class PriorityTableTests(unittest.TestCase):
    def test_perpendicular_pairs(self) -> None:
        for own, other in ((N, E), (E, S), (S, W), (W, N)):
            self.assertTrue(priority_yield(own, Turn.STRAIGHT, other, Turn.STRAIGHT))
            self.assertFalse(priority_yield(other, Turn.STRAIGHT, own, Turn.STRAIGHT))

    def test_opposing_pairs(self) -> None:
        self.assertTrue(priority_yield(N, Turn.LEFT, S, Turn.STRAIGHT))
        self.assertTrue(priority_yield(N, Turn.LEFT, S, Turn.RIGHT))
        self.assertTrue(priority_yield(E, Turn.STRAIGHT, W, Turn.RIGHT))
        self.assertFalse(priority_yield(S, Turn.STRAIGHT, N, Turn.LEFT))
        self.assertFalse(priority_yield(W, Turn.RIGHT, E, Turn.LEFT))

    def test_no_rule_for_same_intent_or_same_heading(self) -> None:
        self.assertIsNone(priority_yield(N, Turn.LEFT, S, Turn.LEFT))
        self.assertIsNone(priority_yield(E, Turn.RIGHT, W, Turn.RIGHT))
        self.assertIsNone(priority_yield(N, Turn.LEFT, N, Turn.STRAIGHT))

    def test_distance_fallback(self) -> None:
        self.assertTrue(must_yield(N, Turn.LEFT, 80.0, S, Turn.LEFT, 40.0))
        self.assertFalse(must_yield(S, Turn.LEFT, 40.0, N, Turn.LEFT, 80.0))
        # Table beats distance.
        self.assertFalse(must_yield(E, Turn.STRAIGHT, 90.0, N, Turn.STRAIGHT, 10.0))

    def test_never_both_yield_nor_both_proceed(self) -> None:
        for a in Direction:
            for b in Direction:
                if a is b:
                    continue
                for ta in Turn:
                    for tb in Turn:
                        ab = must_yield(a, ta, 50.0, b, tb, 60.0)
                        ba = must_yield(b, tb, 60.0, a, ta, 50.0)
                        self.assertNotEqual(ab, ba, msg=f"{a} {ta} vs {b} {tb}")


class EnumTests(unittest.TestCase):
    def test_turned_headings(self) -> None:
        self.assertIs(N.turned(Turn.RIGHT), E)
        self.assertIs(N.turned(Turn.LEFT), W)
        self.assertIs(E.turned(Turn.RIGHT), S)
        self.assertIs(W.turned(Turn.LEFT), S)
        self.assertIs(S.turned(Turn.STRAIGHT), S)

    def test_parse(self) -> None:
        self.assertIs(Direction.parse("n"), N)
        self.assertIs(Direction.parse(" west "), W)
        with self.assertRaises(ValueError):
            Direction.parse("up")

    def test_turn_colours(self) -> None:
        self.assertEqual(Turn.LEFT.color, (255, 0, 0))
        self.assertEqual(Turn.RIGHT.color, (0, 255, 0))
        self.assertEqual(Turn.STRAIGHT.color, (0, 0, 255))


class PhysicsTests(unittest.TestCase):
    def test_stationary_eta_is_infinite(self) -> None:
        self.assertTrue(math.isinf(time_to_reach(120.0, 0.0)))
        self.assertAlmostEqual(time_to_reach(120.0, 3.0), 40.0)

    def test_overlap_margin(self) -> None:
        a = Rect(0, 0, 20, 40)
        b = Rect(18, 0, 20, 40)
        self.assertTrue(rects_overlap(a, b))
        self.assertFalse(rects_overlap(a, b, margin=2.0))
        self.assertFalse(rects_overlap(a, Rect(20, 0, 20, 40)))

    def test_step_toward(self) -> None:
        self.assertEqual(step_toward(10.0, 12.5, 1.0), 11.0)
        self.assertEqual(step_toward(12.2, 12.5, 1.0), 12.5)
        self.assertEqual(step_toward(14.0, 12.5, 1.0), 13.0)


if __name__ == "__main__":
    unittest.main()
