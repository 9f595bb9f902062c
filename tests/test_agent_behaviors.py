"""
Unit tests for the agent brain and its mode handlers.

Tests verify:
- Recognition needs sustained visibility and decays while unseen
- Recognition persists until the enemy has been unseen long enough, then LOST
- EXPLORE walks to a waypoint and hands over to SCAN, which hands back
- LOST walks to the last seen cell, looks around, then resumes exploring
- CHASE emits a knockout signal from behind the enemy
- DOWN is terminal
"""

from __future__ import annotations

import math

import numpy as np
import pytest
from conftest import build_room, build_services, make_view

from stealth_agents.behaviors import follow_path, scan_step
from stealth_agents.maze import floor_cells
from stealth_agents.state import AgentState
from stealth_agents.types import AgentMode, KnockoutSignal


class TestRecognition:
    def test_recognized_after_sustained_visibility(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (4, 8), heading=math.pi / 2)
        enemy = make_view((8, 8))
        for _ in range(7):
            assert brain.perceive(0.25, enemy)
            assert not brain.state.recognized
        brain.perceive(0.25, enemy)
        assert brain.state.recognized
        assert brain.state.mode == AgentMode.CHASE
        assert brain.state.perception.last_seen_enemy == (8, 8)

    def test_visibility_decays_while_unseen(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (4, 8), heading=math.pi / 2)
        seen = make_view((8, 8))
        hidden = make_view((4, 2))
        for _ in range(4):
            brain.perceive(0.25, seen)
        for _ in range(2):
            assert not brain.perceive(0.25, hidden)
        assert brain.state.perception.visibility_timer == pytest.approx(0.75)
        for _ in range(4):
            brain.perceive(0.25, seen)
        assert not brain.state.recognized
        brain.perceive(0.25, seen)
        assert brain.state.recognized

    def test_glimpse_does_not_trigger_lost(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (4, 8), heading=math.pi / 2)
        for _ in range(4):
            brain.perceive(0.25, make_view((8, 8)))
        for _ in range(40):
            brain.perceive(0.25, make_view((4, 2)))
        assert brain.state.mode == AgentMode.EXPLORE
        assert brain.state.perception.visibility_timer == 0.0

    def test_recognition_held_until_lost(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (4, 8), heading=math.pi / 2)
        for _ in range(8):
            brain.perceive(0.25, make_view((8, 8)))
        assert brain.state.recognized

        hidden = make_view((4, 2))
        for _ in range(11):
            brain.perceive(0.25, hidden)
            assert brain.state.recognized
        brain.perceive(0.25, hidden)

        state = brain.state
        assert not state.recognized
        assert state.mode == AgentMode.LOST
        assert state.nav.goal == (8, 8)
        assert state.nav.path[0] == (4, 8)
        assert state.nav.path[-1] == (8, 8)

    def test_escape_is_not_overridden_by_recognition(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (4, 8), heading=math.pi / 2)
        brain.state.mode = AgentMode.ESCAPE
        for _ in range(8):
            brain.perceive(0.25, make_view((8, 8)))
        assert brain.state.recognized
        assert brain.state.mode == AgentMode.ESCAPE


class TestPrimitives:
    def test_follow_path_moves_toward_next_cell(self, open_room: np.ndarray) -> None:
        services = build_services(open_room)
        state = AgentState(agent_id="A", position=(3, 3), world_position=services.to_world((3, 3)))
        state.nav.set_path([(3, 3), (4, 3)])
        start_x, start_z = state.world_position

        assert not follow_path(state, services, 0.05)
        x, z = state.world_position
        assert x - start_x == pytest.approx(1.4 * 0.05)
        assert z == pytest.approx(start_z)
        assert state.heading == pytest.approx(math.pi / 2)
        assert state.position == (3, 3)

    def test_follow_path_reaches_end(self, open_room: np.ndarray) -> None:
        services = build_services(open_room)
        state = AgentState(agent_id="A", position=(3, 3), world_position=services.to_world((3, 3)))
        state.nav.set_path([(3, 3), (3, 4), (3, 5)])
        arrived = False
        for _ in range(100):
            if follow_path(state, services, 0.05):
                arrived = True
                break
        assert arrived
        assert state.position == (3, 5)
        assert state.nav.path == []
        assert state.heading == pytest.approx(0.0)

    def test_single_cell_path_counts_as_arrived(self, open_room: np.ndarray) -> None:
        services = build_services(open_room)
        state = AgentState(agent_id="A", position=(3, 3), world_position=services.to_world((3, 3)))
        state.nav.set_path([(3, 3)])
        assert follow_path(state, services, 0.05)
        assert state.nav.path == []

    def test_scan_holds_each_heading(self, open_room: np.ndarray) -> None:
        services = build_services(open_room)
        state = AgentState(agent_id="A", position=(3, 3), world_position=(0.0, 0.0), heading=1.0)
        calls = 0
        while not scan_step(state, services, 0.05):
            calls += 1
            assert calls < 100
        assert 59 <= calls <= 62
        assert state.scan.step == 3
        # Ended turning toward the last heading (-90 degrees)
        assert state.heading < 0


class TestExploreAndScan:
    def test_exploration_queue_covers_interior_floor(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (3, 3))
        waypoints = list(brain.state.nav.waypoints)
        assert sorted(waypoints) == sorted(floor_cells(open_room))
        assert len(waypoints) == len(set(waypoints))

    def test_explore_then_scan_then_explore(self, make_brain) -> None:
        grid = build_room(14)
        brain = make_brain(grid, (3, 3), waypoints=[(5, 3)])
        far_enemy = make_view((12, 12))

        modes = []
        for _ in range(200):
            brain.update(0.05, far_enemy)
            modes.append(brain.state.mode)
            if brain.state.mode == AgentMode.SCAN and len(modes) > 1 and modes[-2] == AgentMode.EXPLORE:
                assert brain.state.position == (5, 3)

        first_scan = modes.index(AgentMode.SCAN)
        assert 38 <= first_scan <= 42
        assert AgentMode.EXPLORE in modes[first_scan:]
        # Waypoints cycle, so the same waypoint is queued again
        assert list(brain.state.nav.waypoints) == [(5, 3)]

    def test_empty_waypoint_queue_scans_in_place(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (3, 3), waypoints=[])
        brain.update(0.05, make_view((14, 14)))
        assert brain.state.mode == AgentMode.SCAN
        assert brain.state.position == (3, 3)


class TestLost:
    def test_investigates_last_seen_cell(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (4, 8), heading=math.pi / 2)
        state = brain.state
        state.mode = AgentMode.CHASE
        state.perception.recognized = True
        state.perception.last_seen_enemy = (8, 8)
        state.perception.lost_timer = 2.9

        hidden = make_view((14, 14))
        brain.update(0.25, hidden)
        assert state.mode == AgentMode.LOST
        assert state.uncertain

        saw_uncertain = False
        for _ in range(400):
            brain.update(0.05, hidden)
            if state.mode == AgentMode.LOST:
                saw_uncertain = saw_uncertain or state.uncertain
            if state.mode == AgentMode.EXPLORE:
                break

        assert state.mode == AgentMode.EXPLORE
        assert saw_uncertain
        assert not state.uncertain
        assert state.position == (8, 8)


class TestChase:
    def test_unrecognized_chase_falls_back_to_explore(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (3, 3))
        brain.state.mode = AgentMode.CHASE
        brain.update(0.05, make_view((14, 14)))
        assert brain.state.mode == AgentMode.EXPLORE

    def test_knockout_from_behind(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (8, 7))
        brain.state.mode = AgentMode.CHASE
        brain.state.perception.recognized = True

        signals = brain.update(0.016, make_view((8, 8), heading=0.0))

        assert signals == [KnockoutSignal(source_id="A", target_id="B", step=1)]
        assert brain.state.mode == AgentMode.FLANK
        assert brain.state.nav.goal == (8, 7)

    def test_no_knockout_from_the_front(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (8, 9), heading=math.pi)
        brain.state.mode = AgentMode.CHASE
        brain.state.perception.recognized = True

        signals = brain.update(0.016, make_view((8, 8), heading=0.0))

        assert signals == []
        assert brain.state.mode == AgentMode.CHASE
        assert brain.state.nav.goal == (8, 7)


class TestEscapeAndDown:
    def test_finished_escape_returns_to_explore(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (3, 3))
        brain.state.mode = AgentMode.ESCAPE
        brain.update(0.05, make_view((14, 14)))
        assert brain.state.mode == AgentMode.EXPLORE

    def test_down_agent_does_nothing(self, open_room: np.ndarray, make_brain) -> None:
        brain = make_brain(open_room, (3, 3), heading=0.5)
        brain.state.mode = AgentMode.DOWN
        before = brain.view()
        for _ in range(10):
            assert brain.update(0.05, make_view((3, 6), mode=AgentMode.CHASE, recognized=True)) == []
        assert brain.view() == before
        assert brain.state.step == 0
