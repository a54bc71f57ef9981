"""Shared vehicle state: controller, estimator, sensor and pilot inputs."""

from __future__ import annotations

from dataclasses import dataclass, field

DEG2RAD = 0.0174533
RAD2DEG = 57.2958
MILLI2BASE = 0.001
GRAVITY = 9.81

POZYX_GYR_SCALE = 0.0625
POZYX_MAG_SCALE = 0.0625
POZYX_EULER_SCALE = 0.0625
POZYX_QUAT_SCALE = 1.0 / 16384.0

NUM_CALIBRATION = 1000
LOWPASS_WEIGHT = 0.01

RC_CHANS = 6
MAX_RC_CHANNELS = 16
MIN_PWM_IN = 900
MAX_PWM_IN = 2000
PWM_JUMP_LIMIT = 990


def _zeros(n: int) -> list[float]:
    return [0.0] * n


def _vec3() -> list[float]:
    return _zeros(3)


def _matrix(n: int) -> list[list[float]]:
    return [_zeros(n) for _ in range(n)]


@dataclass
class OnboardControl:
    """Gains, set-points and loop memory of the onboard controller."""

    hitl: int = 0
    max_vel_xy: float = 0.0
    max_vel_z: float = 0.0
    pos_des: list[float] = field(default_factory=_vec3)
    psi_cmd: float = 0.0
    kp_pos: list[float] = field(default_factory=_vec3)
    kd_pos: list[float] = field(default_factory=_vec3)
    ki_pos: list[float] = field(default_factory=_vec3)
    kp_vel: list[float] = field(default_factory=_vec3)
    kd_vel: list[float] = field(default_factory=_vec3)
    ki_vel: list[float] = field(default_factory=_vec3)
    kp_accel: list[float] = field(default_factory=_vec3)
    kd_accel: list[float] = field(default_factory=_vec3)
    ki_accel: list[float] = field(default_factory=_vec3)
    kp_angle: list[float] = field(default_factory=_vec3)
    kd_angle: list[float] = field(default_factory=_vec3)
    ki_angle: list[float] = field(default_factory=_vec3)
    kp_rate: list[float] = field(default_factory=_vec3)
    kd_rate: list[float] = field(default_factory=_vec3)
    ki_rate: list[float] = field(default_factory=_vec3)
    # Gains received from the ground station's PID tuning message.
    kp: list[float] = field(default_factory=_vec3)
    kd: list[float] = field(default_factory=_vec3)
    ki: list[float] = field(default_factory=_vec3)
    phi_cmd: float = 0.0
    theta_cmd: float = 0.0
    pos_error: list[float] = field(default_factory=_vec3)
    pos_error_hdg: list[float] = field(default_factory=_vec3)
    pos_hdg: list[float] = field(default_factory=_vec3)
    vel_hdg: list[float] = field(default_factory=_vec3)
    accel_hdg: list[float] = field(default_factory=_vec3)
    prev_rate_error: list[float] = field(default_factory=_vec3)
    rate_integral: list[float] = field(default_factory=_vec3)
    prev_angle_error: list[float] = field(default_factory=_vec3)
    angle_integral: list[float] = field(default_factory=_vec3)
    prev_accel_error: list[float] = field(default_factory=_vec3)
    accel_integral: list[float] = field(default_factory=_vec3)
    prev_vel_error: list[float] = field(default_factory=_vec3)
    vel_integral: list[float] = field(default_factory=_vec3)
    prev_pos_error: list[float] = field(default_factory=_vec3)
    pos_integral: list[float] = field(default_factory=_vec3)
    waypoint_number: int = 0
    number_of_waypoints: int = 0


@dataclass
class NavOutput:
    """Navigation solution handed from the estimator to the controller."""

    p_b_e_L: list[float] = field(default_factory=_vec3)
    v_b_e_L: list[float] = field(default_factory=_vec3)
    a_b_e_L: list[float] = field(default_factory=_vec3)
    v_b_e_B: list[float] = field(default_factory=_vec3)
    a_b_e_B: list[float] = field(default_factory=_vec3)
    w_b_e_B: list[float] = field(default_factory=_vec3)
    q: list[float] = field(default_factory=lambda: _zeros(4))
    phi: float = 0.0
    theta: float = 0.0
    psi: float = 0.0
    dt: float = 0.0
    fire_detected: int = 0
    fire_location: list[float] = field(default_factory=lambda: _zeros(2))
    payload_dropped: int = 0


@dataclass
class KalmanFilterState:
    """Working state of the orientation and position Kalman filters."""

    orientation_state: list[float] = field(default_factory=lambda: _zeros(7))
    position_state: list[float] = field(default_factory=lambda: _zeros(9))
    orientation_covariance: list[list[float]] = field(default_factory=lambda: _matrix(7))
    position_covariance: list[list[float]] = field(default_factory=lambda: _matrix(9))
    orientation_derivative: list[float] = field(default_factory=lambda: _zeros(7))
    position_derivative: list[float] = field(default_factory=lambda: _zeros(9))
    mocap_orientation_sigma: list[float] = field(default_factory=lambda: _zeros(4))
    euler_angles: list[float] = field(default_factory=_vec3)
    angular_rates_avg: list[float] = field(default_factory=_vec3)
    angular_rates_current: list[float] = field(default_factory=_vec3)
    ekf_counter: int = 0
    imu_counter: int = 0
    gps_counter: int = 0


@dataclass
class PozyxData:
    """Latest readings from the Pozyx inertial unit."""

    gyr: list[float] = field(default_factory=_vec3)
    gyr_rad: list[float] = field(default_factory=_vec3)
    euler_rad: list[float] = field(default_factory=_vec3)
    update_counter: int = 0
    acc: list[float] = field(default_factory=_vec3)
    mag: list[float] = field(default_factory=_vec3)
    euler: list[float] = field(default_factory=_vec3)
    quat: list[float] = field(default_factory=lambda: _zeros(4))


@dataclass
class MoCapData:
    """Latest pose reported by the motion-capture system."""

    pos: list[float] = field(default_factory=_vec3)
    quat: list[float] = field(default_factory=lambda: _zeros(4))
    update_counter: int = 0
    frame_counter: int = 0
    valid: int = 0
    first: bool = True
    calibration_pos: list[float] = field(default_factory=_vec3)
    euler_angles: list[float] = field(default_factory=_vec3)


@dataclass
class SensorState:
    """All sensor data known to the vehicle."""

    pozyx: PozyxData = field(default_factory=PozyxData)
    mocap: MoCapData = field(default_factory=MoCapData)


@dataclass
class RcInputs:
    """Receiver channel values together with their calibration limits."""

    roll: int = 0
    pitch: int = 0
    thr: int = 0
    yaw: int = 0
    aux: int = 0
    aux2: int = 0

    prev_roll: int = 0
    prev_pitch: int = 0
    prev_thr: int = 0
    prev_yaw: int = 0
    prev_aux: int = 0
    prev_aux2: int = 0

    same_count: int = 0
    same_count_kill_switch: int = 0

    good_receiver: bool = False
    good_kill_wire: bool = False

    roll_min: int = 0
    pitch_min: int = 0
    thr_min: int = 0
    yaw_min: int = 0
    aux_min: int = 0
    aux2_min: int = 0

    roll_mid: int = 0
    pitch_mid: int = 0
    thr_mid: int = 0
    yaw_mid: int = 0
    aux_mid: int = 0
    aux2_mid: int = 0

    roll_max: int = 0
    pitch_max: int = 0
    thr_max: int = 0
    yaw_max: int = 0
    aux_max: int = 0
    aux2_max: int = 0