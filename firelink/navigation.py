"""Waypoint following state machine for autonomous missions."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto

from firelink.state import OnboardControl

log = logging.getLogger(__name__)


class FlightState(Enum):
    """Phases of flying a waypoint mission."""

    FLYING = auto()
    AT_WAYPOINT = auto()
    HOLD = auto()
    TURNING = auto()


@dataclass
class Waypoint:
    """A target point with arrival and departure conditions."""

    x: float
    y: float
    z: float
    radius: float
    max_velocity: float
    hold_time: float
    turn_to: bool = False
    turn_error: float = 0.05
    turn_vel_error: float = 0.05
    elapsed_hold_time: float = 0.0

    def is_turned(
        self, current_angle: float, angle_derivative: float, desired_angle: float
    ) -> bool:
        """Whether the heading is within tolerance and no longer turning fast."""
        difference = (
            math.fmod(current_angle - desired_angle + math.pi, 2 * math.pi) - math.pi
        )
        return (
            abs(difference) <= self.turn_error
            and abs(angle_derivative) <= self.turn_vel_error
        )

    def is_at_waypoint(self, x: float, y: float, z: float) -> bool:
        """Whether the point lies within the waypoint's radius."""
        return math.dist((x, y, z), (self.x, self.y, self.z)) <= self.radius

    def can_transition(self, velocity: float) -> bool:
        """Whether the hold time has passed and the vehicle is slow enough."""
        log.debug("elapsed hold time %s", self.elapsed_hold_time)
        return self.elapsed_hold_time >= self.hold_time and velocity <= self.max_velocity

    def update_hold_time(self, delta_time: float) -> None:
        """Add ``delta_time`` to the time spent at the waypoint."""
        self.elapsed_hold_time += delta_time

    def reset_hold_time(self) -> None:
        """Forget the time spent at the waypoint."""
        self.elapsed_hold_time = 0.0


class FiniteStateMachine:
    """Steps through a list of waypoints and yields the desired pose."""

    def __init__(self, control: OnboardControl, number_of_waypoints: int = 1) -> None:
        self.control = control
        self.number_of_waypoints = number_of_waypoints
        self.waypoints: list[Waypoint] = []
        self.current_state = FlightState.FLYING
        self.current_waypoint_index = 0
        self.mission_over_flag = False
        self.psi_des = 0.0

    def __len__(self) -> int:
        return len(self.waypoints)

    def add_waypoint(self, waypoint: Waypoint) -> None:
        """Append a waypoint to the mission."""
        self.waypoints.append(waypoint)

    def mission_over(self) -> None:
        """Replace the mission with a climb to 3 units and a landing at the origin.

        Only the first call has any effect.
        """
        if self.mission_over_flag:
            return
        self.mission_over_flag = True
        self.waypoints = [
            Waypoint(0.0, 0.0, 3.0, 1, 0.2, 2, False, 0.05, 0.05),
            Waypoint(0.0, 0.0, 0.0, 1, 0.2, 2, False, 0.05, 0.05),
        ]
        self.current_waypoint_index = 0
        self.current_state = FlightState.TURNING
        log.info("Mission over. Waypoints reset to (0, 0, 3) and (0, 0, 0).")

    def update(
        self,
        x: float,
        y: float,
        z: float,
        psi: float,
        psi_dot: float,
        velocity: float,
        delta_time: float,
    ) -> tuple[float, float, float, float]:
        """Advance the mission and return the desired ``(x, y, z, heading)``."""
        if not self.waypoints:
            raise LookupError("no waypoints available")

        if self.current_waypoint_index >= len(self.waypoints):
            last = self.waypoints[-1]
            return (last.x, last.y, last.z, psi)

        waypoint = self.waypoints[self.current_waypoint_index]
        state = self.current_state
        if state is FlightState.TURNING:
            self.psi_des = psi
            self.current_state = FlightState.FLYING
        elif state is FlightState.FLYING:
            if waypoint.is_at_waypoint(x, y, z):
                self.current_state = FlightState.AT_WAYPOINT
                waypoint.reset_hold_time()
        elif state is FlightState.AT_WAYPOINT:
            if waypoint.is_at_waypoint(x, y, z):
                waypoint.update_hold_time(delta_time)
                if waypoint.can_transition(velocity):
                    self.current_waypoint_index += 1
                    if self.current_waypoint_index >= len(self.waypoints):
                        log.info("Reached the last waypoint.")
                        self.current_waypoint_index = len(self.waypoints)
                    self.control.pos_integral[0] = 0.0
                    self.control.pos_integral[1] = 0.0
                    self.current_state = FlightState.TURNING
            else:
                waypoint.reset_hold_time()
                self.current_state = FlightState.FLYING

        target = self.waypoints[min(self.current_waypoint_index, len(self.waypoints) - 1)]
        return (target.x, target.y, target.z, self.psi_des)