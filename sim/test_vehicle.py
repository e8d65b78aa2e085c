#!/usr/bin/env python3
"""
Tests for the vehicle agent: car-following, signal reaction, arbitration,
turn execution and the deadlock breaker.
"""

from __future__ import annotations

import copy
import math
import random
import unittest
from dataclasses import replace

from sim.geometry import (
    EASTBOUND_LANE_Y, INTERSECTION_BOX, NORTHBOUND_LANE_X, SOUTHBOUND_LANE_X,
    STOP_LINE_EASTBOUND_X, STOP_LINE_NORTHBOUND_Y, STOP_LINE_SOUTHBOUND_Y,
    STOP_LINE_WESTBOUND_X, WESTBOUND_LANE_Y, WORLD_HEIGHT, WORLD_WIDTH,
)
from sim.traffic_policy import TrafficPolicy
from sim.types import Direction, LightState, StopReason, Turn
from sim.vehicle import LANE_CENTER, Vehicle

NO_MUTATION = replace(TrafficPolicy(), turn_mutation_probability=0.0)


class FixedLights:
    """Controller stand-in with every approach on one colour."""

    def __init__(self, state: LightState) -> None:
        self.state = state

    def light_for(self, direction: Direction) -> LightState:
        return self.state


GREEN = FixedLights(LightState.GREEN)
RED = FixedLights(LightState.RED)


def place(vehicle_id: str, direction: Direction, distance: float,
          turn: Turn = Turn.STRAIGHT, **kwargs) -> Vehicle:
    """Vehicle centred in its lane, *distance* units short of its stop line."""
    if direction is Direction.NORTH:
        x, y = NORTHBOUND_LANE_X - 10, STOP_LINE_NORTHBOUND_Y + distance
    elif direction is Direction.SOUTH:
        x, y = SOUTHBOUND_LANE_X - 10, STOP_LINE_SOUTHBOUND_Y - 40 - distance
    elif direction is Direction.EAST:
        x, y = STOP_LINE_EASTBOUND_X - 40 - distance, EASTBOUND_LANE_Y - 10
    else:
        x, y = STOP_LINE_WESTBOUND_X + distance, WESTBOUND_LANE_Y - 10
    kwargs.setdefault("policy", NO_MUTATION)
    return Vehicle(id=vehicle_id, x=x, y=y, direction=direction, turn=turn, **kwargs)


class VehicleGeometryTests(unittest.TestCase):
    def test_footprint_follows_heading(self) -> None:
        north = place("N", Direction.NORTH, 50)
        self.assertEqual((north.width, north.height), (20, 40))
        east = place("E", Direction.EAST, 50)
        self.assertEqual((east.width, east.height), (40, 20))

    def test_distance_to_stop_line(self) -> None:
        for direction in Direction:
            self.assertAlmostEqual(place("V", direction, 37.0).distance_to_stop_line(), 37.0)

    def test_spawn_points_are_off_screen_in_lane(self) -> None:
        rng = random.Random(4)
        north = Vehicle.spawn(Direction.NORTH, "A", rng)
        self.assertAlmostEqual(north.center[0], NORTHBOUND_LANE_X)
        self.assertGreater(north.y, WORLD_HEIGHT)
        west = Vehicle.spawn(Direction.WEST, "B", rng)
        self.assertAlmostEqual(west.center[1], WESTBOUND_LANE_Y)
        self.assertGreater(west.x, WORLD_WIDTH)
        south = Vehicle.spawn(Direction.SOUTH, "C", rng)
        self.assertLess(south.y + south.height, 0)
        self.assertIn(north.turn, tuple(Turn))
        self.assertEqual(north.color, north.turn.color)

    def test_stationary_vehicle_eta_is_infinite(self) -> None:
        v = place("V", Direction.NORTH, 40, current_speed=0.0)
        self.assertTrue(math.isinf(v.time_to_center()))

    def test_approach_zone(self) -> None:
        self.assertFalse(place("V", Direction.EAST, 85).in_approach_zone())
        self.assertTrue(place("V", Direction.EAST, 80).in_approach_zone())
        inside = place("V", Direction.EAST, -60)
        self.assertTrue(inside.in_intersection())
        self.assertTrue(inside.in_approach_zone())
        self.assertFalse(place("V", Direction.EAST, -200).in_approach_zone())


class CarFollowingTests(unittest.TestCase):
    def test_accelerates_without_leader(self) -> None:
        v = place("V", Direction.NORTH, 200, current_speed=1.0)
        v.check_same_direction_vehicles([v], 0)
        self.assertAlmostEqual(v.current_speed, 1.1)
        v.current_speed = v.max_speed
        v.check_same_direction_vehicles([v], 0)
        self.assertEqual(v.current_speed, v.max_speed)

    def test_stops_behind_stopped_leader(self) -> None:
        leader = place("L", Direction.NORTH, 20, stopped=True,
                       stop_reason=StopReason.TRAFFIC_LIGHT)
        follower = place("F", Direction.NORTH, 20 + 40 + 35)
        self.assertAlmostEqual(follower.gap_to(leader), 35.0)
        follower.check_same_direction_vehicles([leader, follower], 1)
        self.assertTrue(follower.stopped)
        self.assertIs(follower.stop_reason, StopReason.VEHICLE_AHEAD)
        self.assertEqual(follower.current_speed, 0.0)

    def test_critical_gap_nudges_back(self) -> None:
        leader = place("L", Direction.EAST, 20)
        follower = place("F", Direction.EAST, 20 + 40 + 1)
        x_before = follower.x
        follower.check_same_direction_vehicles([leader, follower], 1)
        self.assertIs(follower.stop_reason, StopReason.VEHICLE_AHEAD)
        self.assertEqual(follower.x, x_before - 1)

    def test_deceleration_caps_speed_drop(self) -> None:
        tight = replace(NO_MUTATION, min_gap=0.0, critical_gap=0.0)
        leader = place("L", Direction.EAST, 20, policy=tight)
        follower = place("F", Direction.EAST, 20 + 40 + 2.5, policy=tight)
        self.assertAlmostEqual(follower.gap_to(leader), 2.5)
        follower.check_same_direction_vehicles([leader, follower], 1)
        self.assertFalse(follower.stopped)
        self.assertAlmostEqual(follower.current_speed, 2.8)

        follower.current_speed = 3.0
        follower.deceleration = 5.0
        follower.check_same_direction_vehicles([leader, follower], 1)
        self.assertAlmostEqual(follower.current_speed, 2.0)

    def test_ignores_other_lanes(self) -> None:
        southbound = place("S", Direction.SOUTH, 20, stopped=True,
                           stop_reason=StopReason.TRAFFIC_LIGHT)
        # Parallel vehicle in the adjacent lane heading the same way.
        beside = place("B", Direction.NORTH, 120)
        beside.x -= 30
        northbound = place("N", Direction.NORTH, 150)
        self.assertFalse(northbound.same_lane(beside))
        northbound.check_same_direction_vehicles([southbound, beside, northbound], 2)
        self.assertFalse(northbound.stopped)


class TrafficLightReactionTests(unittest.TestCase):
    def test_red_stops_inside_window(self) -> None:
        v = place("V", Direction.WEST, 20)
        v.check_traffic_light(RED)
        self.assertTrue(v.stopped)
        self.assertIs(v.stop_reason, StopReason.TRAFFIC_LIGHT)

    def test_red_ignored_outside_window(self) -> None:
        far = place("V", Direction.WEST, 45)
        far.check_traffic_light(RED)
        self.assertFalse(far.stopped)
        past = place("V", Direction.WEST, -5)
        past.check_traffic_light(RED)
        self.assertFalse(past.stopped)

    def test_green_releases(self) -> None:
        v = place("V", Direction.SOUTH, 20, stopped=True,
                  stop_reason=StopReason.TRAFFIC_LIGHT)
        v.check_traffic_light(GREEN)
        self.assertFalse(v.stopped)
        self.assertIs(v.stop_reason, StopReason.NONE)

    def test_waiting_at_red_keeps_position(self) -> None:
        v = place("V", Direction.NORTH, 10)
        y = v.y
        for _ in range(50):
            v.step([copy.copy(v)], 0, RED, random.Random(1))
        self.assertEqual(v.y, y)
        self.assertIs(v.stop_reason, StopReason.TRAFFIC_LIGHT)


class ArbitrationTests(unittest.TestCase):
    def _pair(self, north_arrival: int, east_arrival: int):
        north = place("N", Direction.NORTH, 40, arrival_time=north_arrival, ticks=20)
        east = place("E", Direction.EAST, 40, arrival_time=east_arrival, ticks=20)
        return north, east

    def test_perpendicular_pair_conflicts(self) -> None:
        north, east = self._pair(5, 9)
        self.assertTrue(north.will_collide(east))
        self.assertTrue(east.will_collide(north))

    def test_later_arrival_yields(self) -> None:
        north, east = self._pair(5, 9)
        peers = [copy.copy(north), copy.copy(east)]
        north.check_intersection_conflicts(peers, 0)
        east.check_intersection_conflicts(peers, 1)
        self.assertFalse(north.stopped)
        self.assertTrue(east.stopped)
        self.assertIs(east.stop_reason, StopReason.INTERSECTION_CONFLICT)
        self.assertEqual(east.current_speed, 0.0)

    def test_arrival_order_beats_priority_table(self) -> None:
        north, east = self._pair(9, 5)
        peers = [copy.copy(north), copy.copy(east)]
        north.check_intersection_conflicts(peers, 0)
        east.check_intersection_conflicts(peers, 1)
        self.assertTrue(north.stopped)
        self.assertFalse(east.stopped)

    def test_arrival_tie_uses_priority_table(self) -> None:
        north, east = self._pair(7, 7)
        self.assertTrue(north.should_yield_to(east))
        self.assertFalse(east.should_yield_to(north))
        peers = [copy.copy(north), copy.copy(east)]
        north.check_intersection_conflicts(peers, 0)
        east.check_intersection_conflicts(peers, 1)
        self.assertIs(north.stop_reason, StopReason.INTERSECTION_CONFLICT)
        self.assertFalse(east.stopped)

    def test_yield_holds_until_winner_clears_box(self) -> None:
        north, east = self._pair(7, 7)
        north.check_intersection_conflicts([copy.copy(north), copy.copy(east)], 0)
        self.assertEqual(north.yielding_to, "E")
        y = north.y

        # Parked yielder: its own ETA is infinite, the hold must not lapse.
        for _ in range(20):
            east.x += 3.0
            north.step([copy.copy(north), copy.copy(east)], 0, GREEN, random.Random(0))
            self.assertIs(north.stop_reason, StopReason.INTERSECTION_CONFLICT)
            self.assertEqual(north.current_speed, 0.0)
            self.assertEqual(north.y, y)
        self.assertTrue(east.in_intersection())

        east.x = INTERSECTION_BOX.right
        self.assertFalse(east.in_approach_zone())
        north.step([copy.copy(north), copy.copy(east)], 0, GREEN, random.Random(0))
        self.assertFalse(north.stopped)
        self.assertIs(north.stop_reason, StopReason.NONE)
        self.assertIsNone(north.yielding_to)
        self.assertLess(north.y, y)

    def test_yield_lapses_when_winner_waits_at_red(self) -> None:
        north, east = self._pair(7, 7)
        north.check_intersection_conflicts([copy.copy(north), copy.copy(east)], 0)
        east.stopped, east.stop_reason = True, StopReason.TRAFFIC_LIGHT
        north.step([copy.copy(north), copy.copy(east)], 0, GREEN, random.Random(0))
        self.assertFalse(north.stopped)
        self.assertIsNone(north.yielding_to)

    def test_arrival_recorded_on_zone_entry_and_cleared_after(self) -> None:
        v = place("V", Direction.EAST, 79, ticks=12)
        v.check_intersection_conflicts([v], 0)
        self.assertEqual(v.arrival_time, 12)
        v.ticks = 30
        v.check_intersection_conflicts([v], 0)
        self.assertEqual(v.arrival_time, 12)
        v.x += 400
        v.check_intersection_conflicts([v], 0)
        self.assertIsNone(v.arrival_time)

    def test_opposing_straight_traffic_never_conflicts(self) -> None:
        north = place("N", Direction.NORTH, 30)
        south = place("S", Direction.SOUTH, 30)
        self.assertFalse(north.will_collide(south))

    def test_opposing_left_turn_conflicts_and_yields(self) -> None:
        north = place("N", Direction.NORTH, 30, turn=Turn.LEFT, arrival_time=3)
        south = place("S", Direction.SOUTH, 30, arrival_time=3)
        self.assertTrue(north.will_collide(south))
        north.check_intersection_conflicts([copy.copy(north), copy.copy(south)], 0)
        self.assertIs(north.stop_reason, StopReason.INTERSECTION_CONFLICT)

    def test_parked_peer_is_not_a_timing_conflict(self) -> None:
        north = place("N", Direction.NORTH, 40)
        east = place("E", Direction.EAST, 40, current_speed=0.0)
        self.assertFalse(north.will_collide(east))

    def test_moving_vehicle_inside_box_keeps_going(self) -> None:
        inside = place("N", Direction.NORTH, -30)
        self.assertTrue(inside.in_intersection())
        east = place("E", Direction.EAST, 10)
        self.assertFalse(inside.will_collide(east))

    def test_light_stop_skips_arbitration(self) -> None:
        north = place("N", Direction.NORTH, 20, stopped=True,
                      stop_reason=StopReason.TRAFFIC_LIGHT)
        east = place("E", Direction.EAST, 20, arrival_time=0)
        north.check_intersection_conflicts([north, east], 0)
        self.assertIs(north.stop_reason, StopReason.TRAFFIC_LIGHT)
        east.check_intersection_conflicts([north, east], 1)
        self.assertFalse(east.stopped)


class DeadlockReleaseTests(unittest.TestCase):
    def _held_pair(self, ticks: int):
        held = Vehicle(id="A", x=NORTHBOUND_LANE_X - 10, y=300.0,
                       direction=Direction.NORTH, policy=NO_MUTATION,
                       stopped=True, stop_reason=StopReason.INTERSECTION_CONFLICT,
                       current_speed=0.0, ticks=ticks)
        other = Vehicle(id="B", x=330.0, y=EASTBOUND_LANE_Y - 10,
                        direction=Direction.EAST, policy=NO_MUTATION,
                        stopped=True, stop_reason=StopReason.INTERSECTION_CONFLICT,
                        current_speed=0.0, ticks=150)
        return held, other

    def test_younger_vehicle_stays_held(self) -> None:
        held, other = self._held_pair(ticks=98)
        self.assertTrue(held.in_intersection())
        held.step([copy.copy(held), copy.copy(other)], 0, GREEN, random.Random(0))
        self.assertTrue(held.stopped)
        self.assertIs(held.stop_reason, StopReason.INTERSECTION_CONFLICT)
        self.assertEqual(held.y, 300.0)

    def test_forced_release_every_hundred_ticks(self) -> None:
        held, other = self._held_pair(ticks=99)
        held.step([copy.copy(held), copy.copy(other)], 0, GREEN, random.Random(0))
        self.assertFalse(held.stopped)
        self.assertIs(held.stop_reason, StopReason.NONE)
        self.assertEqual(held.current_speed, 1.0)
        self.assertEqual(held.y, 299.0)

    def test_older_vehicle_proceeds(self) -> None:
        held, other = self._held_pair(ticks=98)
        other.step([copy.copy(held), copy.copy(other)], 1, GREEN, random.Random(0))
        self.assertFalse(other.stopped)


class TurnTests(unittest.TestCase):
    def test_right_turn_moves_onto_new_lane(self) -> None:
        v = Vehicle(id="R", x=NORTHBOUND_LANE_X - 10, y=282.0,
                    direction=Direction.NORTH, turn=Turn.RIGHT, policy=NO_MUTATION)
        v.handle_intersection_turn()
        self.assertIs(v.direction, Direction.EAST)
        self.assertEqual((v.width, v.height), (40, 20))
        self.assertEqual(v.lateral(), LANE_CENTER[Direction.EAST])
        self.assertEqual(v.center[0], NORTHBOUND_LANE_X)
        self.assertTrue(v.has_turned)
        self.assertTrue(v.turn_executed)
        self.assertEqual(v.target_y, EASTBOUND_LANE_Y)

    def test_left_turn_targets_westbound_lane(self) -> None:
        v = Vehicle(id="L", x=NORTHBOUND_LANE_X - 10, y=281.0,
                    direction=Direction.NORTH, turn=Turn.LEFT, policy=NO_MUTATION)
        v.handle_intersection_turn()
        self.assertIs(v.direction, Direction.WEST)
        self.assertEqual(v.target_y, WESTBOUND_LANE_Y)
        self.assertEqual(v.lateral(), WESTBOUND_LANE_Y)

    def test_no_turn_outside_centre_band(self) -> None:
        v = place("V", Direction.NORTH, 10, turn=Turn.RIGHT)
        v.handle_intersection_turn()
        self.assertIs(v.direction, Direction.NORTH)
        self.assertFalse(v.turn_executed)

    def test_straight_keeps_heading(self) -> None:
        v = Vehicle(id="S", x=290.0, y=EASTBOUND_LANE_Y - 10,
                    direction=Direction.EAST, policy=NO_MUTATION)
        v.x = 400.0 - v.width / 2 + 3
        v.handle_intersection_turn()
        self.assertTrue(v.turn_executed)
        self.assertFalse(v.has_turned)
        self.assertIs(v.direction, Direction.EAST)

    def test_lane_adjustment_after_turn(self) -> None:
        v = Vehicle(id="T", x=520.0, y=EASTBOUND_LANE_Y - 10 - 7.5,
                    direction=Direction.EAST, has_turned=True, turn_executed=True,
                    target_y=EASTBOUND_LANE_Y, policy=NO_MUTATION)
        v.adjust_lane_position()
        self.assertAlmostEqual(v.center[1], EASTBOUND_LANE_Y - 6.5)
        for _ in range(10):
            v.adjust_lane_position()
        self.assertAlmostEqual(v.center[1], EASTBOUND_LANE_Y)

    def test_mutation_rerolls_turn_while_approaching(self) -> None:
        v = place("V", Direction.NORTH, 60, policy=replace(
            TrafficPolicy(), turn_mutation_probability=1.0))
        seen = set()
        rng = random.Random(2)
        for _ in range(100):
            v.maybe_change_turn(rng)
            seen.add(v.turn)
        self.assertEqual(seen, set(Turn))

    def test_no_mutation_before_approach_zone(self) -> None:
        v = place("V", Direction.EAST, 150, turn=Turn.RIGHT, policy=replace(
            TrafficPolicy(), turn_mutation_probability=1.0))
        rng = random.Random(5)
        for _ in range(30):
            v.maybe_change_turn(rng)
        self.assertIs(v.turn, Turn.RIGHT)

    def test_no_mutation_inside_box(self) -> None:
        v = place("V", Direction.NORTH, -20, turn=Turn.LEFT, policy=replace(
            TrafficPolicy(), turn_mutation_probability=1.0))
        for _ in range(30):
            v.maybe_change_turn(random.Random(3))
        self.assertIs(v.turn, Turn.LEFT)


if __name__ == "__main__":
    unittest.main()
