"""Ground-station link: receiving commands and building outgoing telemetry."""

from __future__ import annotations

from dataclasses import dataclass, field

from firelink.datalink import DatalinkStats, apply_message, parse_frames
from firelink.messages import (
    BUFFER_SIZE,
    DEFAULT_INTERVALS_MS,
    AutopilotDelsMessage,
    DroneStateMessage,
    Message,
    MessageId,
    PwmMessage,
    SensorDataMessage,
    Sim2OnboardMessage,
    TruthMessage,
    Up0Message,
)
from firelink.state import NavOutput, OnboardControl, RcInputs, SensorState

GCS_ADDRESS = ("192.168.1.12", 10000)

_MILLIS_MASK = 0xFFFFFFFF

# Message types whose intervals are configured when the link starts.
_INITIAL_INTERVALS = (
    MessageId.UP0,
    MessageId.PWM,
    MessageId.AUTOPILOT_DELS,
    MessageId.TRUTH,
    MessageId.HITL_SIM2ONBOARD,
    MessageId.HITL_ONBOARD2SIM,
    MessageId.OPTITRACK,
    MessageId.DRONE_STATE,
    MessageId.SENSOR_DATA,
)


@dataclass
class AutopilotCommand:
    """Controller outputs, pilot inputs and motor commands for one cycle."""

    c_delf: float = 0.0
    c_delm: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    throttle: float = 0.0
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0
    auto: float = 0.0
    kill: float = 0.0
    pwm: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0, 0.0])


class Datalink:
    """Schedules outgoing messages and applies incoming ones to vehicle state."""

    def __init__(self, control: OnboardControl | None = None) -> None:
        self.control = control if control is not None else OnboardControl()
        self.stats = DatalinkStats()
        self.intervals: dict[MessageId, int] = {}
        self.previous_ms: dict[MessageId, int] = {}
        self.truth: TruthMessage | None = None
        self.sim2onboard: Sim2OnboardMessage | None = None
        for message_id in _INITIAL_INTERVALS:
            self.set_interval(DEFAULT_INTERVALS_MS[message_id], message_id)

    def set_interval(self, interval_ms: int, message_id: int) -> None:
        """Set how often a message type is sent and restart its timer."""
        try:
            key = MessageId(message_id)
        except ValueError:
            raise ValueError(f"invalid message type {message_id} for datalink interval") from None
        if key not in DEFAULT_INTERVALS_MS:
            raise ValueError(f"invalid message type {message_id} for datalink interval")
        self.intervals[key] = int(interval_ms)
        self.previous_ms[key] = 0

    def read(self, packet: bytes | bytearray | memoryview, sensors: SensorState) -> list[Message]:
        """Decode a received packet, apply its messages and return them."""
        data = bytes(packet)[:BUFFER_SIZE]
        if not data:
            return []
        messages = parse_frames(data, self.stats)
        for message in messages:
            if isinstance(message, TruthMessage):
                self.truth = message
            elif isinstance(message, Sim2OnboardMessage):
                self.sim2onboard = message
            else:
                apply_message(message, sensors, self.control)
        return messages

    def build_autopilot_dels(self, command: AutopilotCommand) -> bytes:
        """Encode the controller and pilot command message."""
        return AutopilotDelsMessage(
            c_delm=list(command.c_delm),
            c_delf=command.c_delf,
            pwm=list(command.pwm),
            roll=command.roll,
            pitch=command.pitch,
            yaw=command.yaw,
            throttle=command.throttle,
            kill=command.kill,
            auto=command.auto,
        ).pack()

    def build_drone_state(self, nav: NavOutput) -> bytes:
        """Encode the navigation solution."""
        return DroneStateMessage(
            p_b_e_L=list(nav.p_b_e_L),
            v_b_e_L=list(nav.v_b_e_L),
            a_b_e_L=list(nav.a_b_e_L),
            v_b_e_B=list(nav.v_b_e_B),
            a_b_e_B=list(nav.a_b_e_B),
            w_b_e_B=list(nav.w_b_e_B),
            q=list(nav.q),
            phi=nav.phi,
            theta=nav.theta,
            psi=nav.psi,
            dt=nav.dt,
        ).pack()

    def build_sensor_data(self, sensors: SensorState) -> bytes:
        """Encode the raw inertial and motion-capture readings."""
        return SensorDataMessage(
            imu_gyro=list(sensors.pozyx.gyr_rad),
            imu_accel=list(sensors.pozyx.acc),
            imu_count=sensors.pozyx.update_counter,
            mocap_pos=list(sensors.mocap.pos),
            mocap_orientation=list(sensors.mocap.quat),
            mocap_update=sensors.mocap.update_counter,
        ).pack()

    def build_up0(self, rc: RcInputs) -> bytes:
        """Encode the pilot's stick positions and switches."""
        buttons = [0] * 16
        buttons[0] = rc.aux
        buttons[1] = rc.aux2
        return Up0Message(
            throttle_lever=rc.thr,
            roll_stick=rc.roll,
            pitch_stick=rc.pitch,
            rudder_pedal=rc.yaw,
            button=buttons,
        ).pack()

    def build_pwm(self) -> bytes:
        """Encode the raw PWM message; the motor outputs are reported as zero."""
        return PwmMessage().pack()

    def _due(self, message_id: MessageId, now_ms: int) -> bool:
        elapsed = (now_ms - self.previous_ms[message_id]) & _MILLIS_MASK
        if elapsed >= self.intervals[message_id]:
            self.previous_ms[message_id] = now_ms
            return True
        return False

    def send_update(
        self,
        now_ms: int,
        sensors: SensorState,
        nav: NavOutput,
        command: AutopilotCommand,
    ) -> list[bytes]:
        """Return the frames whose send interval has elapsed at ``now_ms``."""
        frames: list[bytes] = []
        if self._due(MessageId.AUTOPILOT_DELS, now_ms):
            frames.append(self.build_autopilot_dels(command))
        if self._due(MessageId.DRONE_STATE, now_ms):
            frames.append(self.build_drone_state(nav))
        if self._due(MessageId.SENSOR_DATA, now_ms):
            frames.append(self.build_sensor_data(sensors))
        return frames