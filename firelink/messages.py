"""Wire layouts of the messages exchanged with the ground station."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar

from firelink.checksum import HEADER_FORMAT, HEADER_SIZE, SYNC0, SYNC1, SYNC2, seal_message

BUFFER_SIZE = 1024


class MessageId(IntEnum):
    """Identifiers carried in the ``messageID`` field of the header."""

    MESSAGE0 = 0
    MESSAGE1 = 1
    DRONE_STATE = 4
    SENSOR_DATA = 5
    UP0 = 12
    PWM = 56
    AUTOPILOT_DELS = 173
    TRUTH = 221
    HITL_SIM2ONBOARD = 222
    HITL_ONBOARD2SIM = 223
    OPTITRACK = 230
    PID = 250


DEFAULT_INTERVALS_MS: dict[MessageId, int] = {
    MessageId.UP0: 100,
    MessageId.PWM: 100,
    MessageId.AUTOPILOT_DELS: 10,
    MessageId.TRUTH: 100,
    MessageId.HITL_SIM2ONBOARD: 100,
    MessageId.HITL_ONBOARD2SIM: 100,
    MessageId.OPTITRACK: 10,
    MessageId.DRONE_STATE: 10,
    MessageId.SENSOR_DATA: 10,
    MessageId.PID: 10,
}


@dataclass
class Header:
    """The 20-byte header that starts every datalink frame."""

    SIZE: ClassVar[int] = HEADER_SIZE

    sync1: int = SYNC0
    sync2: int = SYNC1
    sync3: int = SYNC2
    spare: int = 0
    message_id: int = 0
    message_size: int = 0
    hcsum: int = 0
    csum: int = 0

    def pack(self) -> bytes:
        """Encode the header as little-endian bytes."""
        return struct.pack(
            HEADER_FORMAT,
            self.sync1,
            self.sync2,
            self.sync3,
            self.spare,
            self.message_id,
            self.message_size,
            self.hcsum,
            self.csum,
        )

    @classmethod
    def unpack(cls, data: bytes | bytearray | memoryview) -> "Header":
        """Decode a header from the start of ``data``."""
        if len(data) < HEADER_SIZE:
            raise ValueError(f"need {HEADER_SIZE} bytes for a header, got {len(data)}")
        return cls(*struct.unpack_from(HEADER_FORMAT, data))


def _wrap_int(value: Any, code: str) -> int:
    bits = struct.calcsize(code) * 8
    wrapped = int(value) & ((1 << bits) - 1)
    if code.islower() and wrapped >= 1 << (bits - 1):
        wrapped -= 1 << bits
    return wrapped


def _coerce(value: Any, code: str) -> float | int:
    if code in "fd":
        return float(value)
    return _wrap_int(value, code)


class Message:
    """Base of all datalink messages: a header followed by a fixed body.

    Subclasses declare ``MESSAGE_ID`` and ``_LAYOUT``, a sequence of
    ``(attribute, struct code, count)``; a count above one means a list.
    """

    MESSAGE_ID: ClassVar[int] = 0
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = ()
    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<")

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "_LAYOUT" in cls.__dict__:
            cls._STRUCT = struct.Struct(
                "<" + "".join(f"{count}{code}" for _, code, count in cls._LAYOUT)
            )

    @classmethod
    def size(cls) -> int:
        """Total length of the message in bytes, header included."""
        return HEADER_SIZE + cls._STRUCT.size

    def _values(self) -> list[float | int]:
        values: list[float | int] = []
        for name, code, count in self._LAYOUT:
            item = getattr(self, name)
            if count == 1:
                values.append(_coerce(item, code))
                continue
            items = list(item)
            if len(items) != count:
                raise ValueError(f"{name} needs {count} values, got {len(items)}")
            values.extend(_coerce(v, code) for v in items)
        return values

    def pack(self) -> bytes:
        """Encode the message as a sealed frame ready to send."""
        header = Header(message_id=self.MESSAGE_ID, message_size=self.size())
        body = self._STRUCT.pack(*self._values())
        return seal_message(header.pack() + body)

    @classmethod
    def unpack(cls, data: bytes | bytearray | memoryview) -> "Message":
        """Decode a message of this type from the start of ``data``."""
        if len(data) < cls.size():
            raise ValueError(
                f"{cls.__name__} needs {cls.size()} bytes, got {len(data)}"
            )
        header = Header.unpack(data)
        if header.message_id != cls.MESSAGE_ID:
            raise ValueError(
                f"message id {header.message_id} is not {cls.__name__} ({cls.MESSAGE_ID})"
            )
        flat = iter(cls._STRUCT.unpack_from(data, HEADER_SIZE))
        kwargs: dict[str, Any] = {}
        for name, _, count in cls._LAYOUT:
            if count == 1:
                kwargs[name] = next(flat)
            else:
                kwargs[name] = [next(flat) for _ in range(count)]
        return cls(**kwargs)


def _zeros(n: int):
    return field(default_factory=lambda: [0.0] * n)


def _izeros(n: int):
    return field(default_factory=lambda: [0] * n)


@dataclass
class Message0(Message):
    """Basic vehicle status: navigation state and pose."""

    MESSAGE_ID: ClassVar[int] = MessageId.MESSAGE0
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("nav_status", "b", 1),
        ("gps_status", "b", 1),
        ("agl_status", "b", 1),
        ("overrun", "B", 1),
        ("wow", "b", 1),
        ("autopilot", "b", 1),
        ("launch_state", "b", 1),
        ("motor", "B", 1),
        ("time", "f", 1),
        ("pos", "f", 3),
        ("vel", "f", 3),
        ("q", "f", 4),
        ("altitude_agl", "f", 1),
    )

    nav_status: int = 0
    gps_status: int = 0
    agl_status: int = 0
    overrun: int = 0
    wow: int = 0
    autopilot: int = 0
    launch_state: int = 0
    motor: int = 0
    time: float = 0.0
    pos: list[float] = field(default_factory=lambda: [0.0, 0.0, -2.0])
    vel: list[float] = _zeros(3)
    q: list[float] = field(default_factory=lambda: [1.0, 0.0, 0.0, 0.0])
    altitude_agl: float = 2.0


@dataclass
class Message1(Message):
    """Extended vehicle status: actuators, trajectory and subsystem health."""

    MESSAGE_ID: ClassVar[int] = MessageId.MESSAGE1
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("time", "f", 1),
        ("number_of_sats", "b", 1),
        ("datarecord_status", "b", 1),
        ("safemode", "b", 1),
        ("type", "B", 1),
        ("delm", "f", 3),
        ("delf", "f", 1),
        ("delt", "f", 1),
        ("delc", "f", 1),
        ("battery", "i", 1),
        ("current", "i", 1),
        ("rpm", "i", 1),
        ("tx", "b", 1),
        ("fuel", "b", 1),
        ("ycs_status", "b", 1),
        ("unique_id", "B", 1),
        ("yrd_status", "b", 1),
        ("hub_status", "b", 1),
        ("range_finder_status", "b", 1),
        ("magnet_status", "b", 1),
        ("traj_x", "f", 3),
        ("traj_v", "f", 3),
        ("traj_a", "f", 3),
        ("traj_q", "f", 4),
        ("traj_psi", "f", 1),
        ("traj_vscale", "f", 1),
        ("traj_man_index", "h", 1),
        ("align", "B", 1),
        ("actuator_interface_status", "B", 1),
        ("imu_status", "B", 1),
        ("traj_status", "B", 1),
        ("vision_status", "B", 1),
        ("mission_status", "B", 1),
        ("other_status", "B", 1),
        ("camera_control_status", "B", 1),
        ("history_status", "B", 1),
        ("battery_status", "B", 1),
        ("uplink_status", "B", 2),
        ("lost_comm", "B", 1),
        ("hokuyo_laser_status", "B", 1),
        ("ublox_snr", "B", 1),
        ("ublox_hacc", "B", 1),
        ("ublox_sacc", "B", 1),
        ("ublox_pdop", "B", 1),
        ("pan", "f", 1),
        ("tilt", "f", 1),
        ("roll", "f", 1),
        ("fovy", "f", 1),
        ("g", "f", 1),
        ("wind", "f", 3),
        ("point_pos", "f", 3),
        ("datum_lat", "f", 1),
        ("datum_lon", "f", 1),
        ("datum_alt", "f", 1),
    )

    time: float = 0.0
    number_of_sats: int = 0
    datarecord_status: int = 0
    safemode: int = 0
    type: int = 0
    delm: list[float] = _zeros(3)
    delf: float = 0.0
    delt: float = 0.0
    delc: float = 0.0
    battery: int = 12000
    current: int = 0
    rpm: int = 0
    tx: int = 0
    fuel: int = 0
    ycs_status: int = 0
    unique_id: int = 0
    yrd_status: int = 0
    hub_status: int = 0
    range_finder_status: int = 0
    magnet_status: int = 0
    traj_x: list[float] = _zeros(3)
    traj_v: list[float] = _zeros(3)
    traj_a: list[float] = _zeros(3)
    traj_q: list[float] = _zeros(4)
    traj_psi: float = 0.0
    traj_vscale: float = 1.0
    traj_man_index: int = 0
    align: int = 0
    actuator_interface_status: int = 0
    imu_status: int = 0
    traj_status: int = 0
    vision_status: int = 0
    mission_status: int = 0
    other_status: int = 0
    camera_control_status: int = 0
    history_status: int = 0
    battery_status: int = 0
    uplink_status: list[int] = _izeros(2)
    lost_comm: int = 0
    hokuyo_laser_status: int = 0
    ublox_snr: int = 0
    ublox_hacc: int = 0
    ublox_sacc: int = 0
    ublox_pdop: int = 0
    pan: float = 0.0
    tilt: float = 0.0
    roll: float = 0.0
    fovy: float = 58.5
    g: float = 1.0
    wind: list[float] = _zeros(3)
    point_pos: list[float] = field(default_factory=lambda: [30.0, 0.0, 0.0])
    datum_lat: float = 33.659653
    datum_lon: float = -84.663333
    datum_alt: float = 745.0


@dataclass
class Up0Message(Message):
    """Pilot stick positions and buttons."""

    MESSAGE_ID: ClassVar[int] = MessageId.UP0
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("k", "i", 1),
        ("time", "f", 1),
        ("throttle_lever", "f", 1),
        ("roll_stick", "f", 1),
        ("pitch_stick", "f", 1),
        ("rudder_pedal", "f", 1),
        ("button", "b", 16),
    )

    k: int = 0
    time: float = 0.0
    throttle_lever: float = 0.0
    roll_stick: float = 0.0
    pitch_stick: float = 0.0
    rudder_pedal: float = 0.0
    button: list[int] = _izeros(16)


@dataclass
class PwmMessage(Message):
    """Raw PWM outputs."""

    MESSAGE_ID: ClassVar[int] = MessageId.PWM
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("raw_pwm", "H", 17),
        ("align", "H", 1),
    )

    raw_pwm: list[int] = _izeros(17)
    align: int = 0


@dataclass
class AutopilotDelsMessage(Message):
    """Controller commands, motor outputs and pilot inputs."""

    MESSAGE_ID: ClassVar[int] = MessageId.AUTOPILOT_DELS
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("time", "f", 1),
        ("c_delm", "f", 3),
        ("c_delf", "f", 1),
        ("c_delt", "f", 1),
        ("pwm", "f", 4),
        ("kp", "f", 3),
        ("kd", "f", 3),
        ("ki", "f", 3),
        ("roll", "f", 1),
        ("pitch", "f", 1),
        ("yaw", "f", 1),
        ("throttle", "f", 1),
        ("kill", "f", 1),
        ("auto", "f", 1),
    )

    time: float = 0.0
    c_delm: list[float] = _zeros(3)
    c_delf: float = 0.0
    c_delt: float = 0.0
    pwm: list[float] = _zeros(4)
    kp: list[float] = _zeros(3)
    kd: list[float] = _zeros(3)
    ki: list[float] = _zeros(3)
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0
    throttle: float = 0.0
    kill: float = 0.0
    auto: float = 0.0


@dataclass
class DroneStateMessage(Message):
    """Navigation solution and mission progress."""

    MESSAGE_ID: ClassVar[int] = MessageId.DRONE_STATE
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("p_b_e_L", "f", 3),
        ("v_b_e_L", "f", 3),
        ("a_b_e_L", "f", 3),
        ("v_b_e_B", "f", 3),
        ("a_b_e_B", "f", 3),
        ("w_b_e_B", "f", 3),
        ("q", "f", 4),
        ("phi", "f", 1),
        ("theta", "f", 1),
        ("psi", "f", 1),
        ("dt", "f", 1),
        ("fire_detected", "i", 1),
        ("fire_location", "f", 2),
        ("payload_dropped", "i", 1),
        ("desired_location", "f", 3),
        ("waypoint_number", "i", 1),
        ("number_of_waypoints", "i", 1),
    )

    p_b_e_L: list[float] = _zeros(3)
    v_b_e_L: list[float] = _zeros(3)
    a_b_e_L: list[float] = _zeros(3)
    v_b_e_B: list[float] = _zeros(3)
    a_b_e_B: list[float] = _zeros(3)
    w_b_e_B: list[float] = _zeros(3)
    q: list[float] = _zeros(4)
    phi: float = 0.0
    theta: float = 0.0
    psi: float = 0.0
    dt: float = 0.0
    fire_detected: int = 0
    fire_location: list[float] = _zeros(2)
    payload_dropped: int = 0
    desired_location: list[float] = _zeros(3)
    waypoint_number: int = 0
    number_of_waypoints: int = 0


@dataclass
class TruthMessage(Message):
    """True pose from a simulator."""

    MESSAGE_ID: ClassVar[int] = MessageId.TRUTH
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("align", "I", 1),
        ("p_b_e_L", "f", 3),
        ("v_b_e_L", "f", 3),
        ("q", "f", 4),
    )

    align: int = 0
    p_b_e_L: list[float] = _zeros(3)
    v_b_e_L: list[float] = _zeros(3)
    q: list[float] = _zeros(4)


@dataclass
class Sim2OnboardMessage(Message):
    """Simulated navigation state sent to the vehicle in hardware-in-the-loop runs."""

    MESSAGE_ID: ClassVar[int] = MessageId.HITL_SIM2ONBOARD
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = tuple(
        (name, "f", 1)
        for name in (
            "phi_cmd",
            "pos_des_x",
            "pos_des_y",
            "pos_des_z",
            "nav_p_x",
            "nav_p_y",
            "nav_p_z",
            "nav_v_x",
            "nav_v_y",
            "nav_v_z",
            "nav_w_x",
            "nav_w_y",
            "nav_w_z",
            "nav_phi",
            "nav_theta",
            "nav_psi",
        )
    )

    phi_cmd: float = 0.0
    pos_des_x: float = 0.0
    pos_des_y: float = 0.0
    pos_des_z: float = 0.0
    nav_p_x: float = 0.0
    nav_p_y: float = 0.0
    nav_p_z: float = 0.0
    nav_v_x: float = 0.0
    nav_v_y: float = 0.0
    nav_v_z: float = 0.0
    nav_w_x: float = 0.0
    nav_w_y: float = 0.0
    nav_w_z: float = 0.0
    nav_phi: float = 0.0
    nav_theta: float = 0.0
    nav_psi: float = 0.0


@dataclass
class Onboard2SimMessage(Message):
    """Controller outputs returned to the simulator."""

    MESSAGE_ID: ClassVar[int] = MessageId.HITL_ONBOARD2SIM
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("c_delf", "f", 1),
        ("c_delm0", "f", 1),
        ("c_delm1", "f", 1),
        ("c_delm2", "f", 1),
    )

    c_delf: float = 0.0
    c_delm0: float = 0.0
    c_delm1: float = 0.0
    c_delm2: float = 0.0


@dataclass
class OptitrackMessage(Message):
    """Pose from the motion-capture system."""

    MESSAGE_ID: ClassVar[int] = MessageId.OPTITRACK
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("pos_x", "f", 1),
        ("pos_y", "f", 1),
        ("pos_z", "f", 1),
        ("qx", "f", 1),
        ("qy", "f", 1),
        ("qz", "f", 1),
        ("qw", "f", 1),
        ("frame_num", "i", 1),
        ("valid", "i", 1),
    )

    pos_x: float = 0.0
    pos_y: float = 0.0
    pos_z: float = 0.0
    qx: float = 0.0
    qy: float = 0.0
    qz: float = 0.0
    qw: float = 0.0
    frame_num: int = 0
    valid: int = 0


@dataclass
class SensorDataMessage(Message):
    """Raw inertial and motion-capture readings."""

    MESSAGE_ID: ClassVar[int] = MessageId.SENSOR_DATA
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("imu_gyro", "f", 3),
        ("imu_accel", "f", 3),
        ("imu_angles", "f", 3),
        ("imu_count", "i", 1),
        ("mocap_pos", "f", 3),
        ("mocap_orientation", "f", 4),
        ("mocap_euler_angles", "f", 3),
        ("mocap_update", "i", 1),
    )

    imu_gyro: list[float] = _zeros(3)
    imu_accel: list[float] = _zeros(3)
    imu_angles: list[float] = _zeros(3)
    imu_count: int = 0
    mocap_pos: list[float] = _zeros(3)
    mocap_orientation: list[float] = _zeros(4)
    mocap_euler_angles: list[float] = _zeros(3)
    mocap_update: int = 0


@dataclass
class PidMessage(Message):
    """Controller gains sent from the ground station for tuning."""

    MESSAGE_ID: ClassVar[int] = MessageId.PID
    _LAYOUT: ClassVar[tuple[tuple[str, str, int], ...]] = (
        ("kp", "f", 3),
        ("kd", "f", 3),
        ("ki", "f", 3),
    )

    kp: list[float] = _zeros(3)
    kd: list[float] = _zeros(3)
    ki: list[float] = _zeros(3)


MESSAGE_TYPES: dict[int, type[Message]] = {
    cls.MESSAGE_ID: cls
    for cls in (
        Message0,
        Message1,
        Up0Message,
        PwmMessage,
        AutopilotDelsMessage,
        DroneStateMessage,
        TruthMessage,
        Sim2OnboardMessage,
        Onboard2SimMessage,
        OptitrackMessage,
        SensorDataMessage,
        PidMessage,
    )
}