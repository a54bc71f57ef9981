import math

import pytest

from firelink.navigation import FiniteStateMachine, FlightState, Waypoint
from firelink.state import OnboardControl


def _wp(x, y, z, radius=1.0, max_velocity=0.5, hold_time=1.0):
    return Waypoint(x, y, z, radius, max_velocity, hold_time, False, 0.05, 0.05)


def test_is_at_waypoint_inside_and_outside():
    wp = _wp(1.0, 2.0, 3.0, radius=1.0)
    assert wp.is_at_waypoint(1.0, 2.0, 3.5)
    assert wp.is_at_waypoint(1.0, 2.0, 4.0)
    assert not wp.is_at_waypoint(1.0, 2.0, 4.1)


def test_hold_time_accumulates_and_resets():
    wp = _wp(0, 0, 0, hold_time=1.0)
    wp.update_hold_time(0.5)
    assert not wp.can_transition(0.0)
    wp.update_hold_time(0.5)
    assert wp.can_transition(0.0)
    assert not wp.can_transition(0.6)
    wp.reset_hold_time()
    assert wp.elapsed_hold_time == 0.0


def test_is_turned_within_tolerance():
    wp = _wp(0, 0, 0)
    assert wp.is_turned(0.01, 0.01, 0.0)
    assert not wp.is_turned(0.2, 0.0, 0.0)
    assert not wp.is_turned(0.01, 0.2, 0.0)


def test_is_turned_uses_truncating_remainder():
    wp = _wp(0, 0, 0)
    # Nearly a full turn below the target is not wrapped round.
    assert not wp.is_turned(-2 * math.pi + 0.01, 0.0, 0.0)


def test_update_without_waypoints_raises():
    fsm = FiniteStateMachine(OnboardControl())
    with pytest.raises(LookupError):
        fsm.update(0, 0, 0, 0, 0, 0, 0.1)


def test_flying_to_waypoint_returns_its_position():
    fsm = FiniteStateMachine(OnboardControl())
    fsm.add_waypoint(_wp(5.0, 6.0, 7.0))
    pose = fsm.update(0.0, 0.0, 0.0, 0.3, 0.0, 0.0, 0.1)
    assert pose[:3] == (5.0, 6.0, 7.0)
    assert fsm.current_state is FlightState.FLYING


def test_full_mission_progression():
    control = OnboardControl(pos_integral=[1.0, 2.0, 3.0])
    fsm = FiniteStateMachine(control, 2)
    fsm.add_waypoint(_wp(0.0, 0.0, 1.0, hold_time=0.2))
    fsm.add_waypoint(_wp(4.0, 0.0, 1.0, hold_time=0.2))
    assert len(fsm) == 2

    fsm.update(0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.1)
    assert fsm.current_state is FlightState.AT_WAYPOINT
    fsm.update(0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.1)
    assert fsm.current_waypoint_index == 0
    pose = fsm.update(0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.1)
    assert fsm.current_waypoint_index == 1
    assert fsm.current_state is FlightState.TURNING
    assert pose[:3] == (4.0, 0.0, 1.0)
    assert control.pos_integral == [0.0, 0.0, 3.0]

    pose = fsm.update(0.0, 0.0, 1.0, 0.7, 0.0, 0.0, 0.1)
    assert fsm.current_state is FlightState.FLYING
    assert pose[3] == 0.7


def test_leaving_waypoint_resets_hold():
    fsm = FiniteStateMachine(OnboardControl())
    fsm.add_waypoint(_wp(0.0, 0.0, 0.0, hold_time=5.0))
    fsm.update(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.1)
    fsm.update(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.1)
    assert fsm.waypoints[0].elapsed_hold_time > 0.0
    fsm.update(3.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.1)
    assert fsm.current_state is FlightState.FLYING
    assert fsm.waypoints[0].elapsed_hold_time == 0.0


def test_after_last_waypoint_holds_last_position_with_current_heading():
    fsm = FiniteStateMachine(OnboardControl())
    fsm.add_waypoint(_wp(1.0, 1.0, 1.0, hold_time=0.0))
    fsm.update(1.0, 1.0, 1.0, 0.0, 0.0, 0.0, 0.1)
    pose = fsm.update(1.0, 1.0, 1.0, 0.0, 0.0, 0.0, 0.1)
    assert fsm.current_waypoint_index == 1
    assert pose[:3] == (1.0, 1.0, 1.0)
    pose = fsm.update(9.0, 9.0, 9.0, 1.25, 0.0, 0.0, 0.1)
    assert pose == (1.0, 1.0, 1.0, 1.25)


def test_mission_over_replaces_waypoints_once():
    fsm = FiniteStateMachine(OnboardControl())
    fsm.add_waypoint(_wp(8.0, 8.0, 8.0))
    fsm.mission_over()
    assert [(w.x, w.y, w.z) for w in fsm.waypoints] == [(0.0, 0.0, 3.0), (0.0, 0.0, 0.0)]
    assert fsm.current_state is FlightState.TURNING
    assert fsm.current_waypoint_index == 0
    fsm.add_waypoint(_wp(2.0, 2.0, 2.0))
    fsm.mission_over()
    assert len(fsm) == 3