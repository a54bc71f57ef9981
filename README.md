# firelink

`firelink` encodes and decodes the binary datalink that runs between a small
quadcopter and its ground station, and holds the waypoint logic the vehicle
flies by. It uses only the standard library.

## Modules

- **`firelink.checksum`**: `compute_checksum`, the Fletcher-32 variant used on
  the link (little-endian 16-bit words; a trailing odd byte counts as if
  followed by a zero byte), and `seal_message`, which sets the sync bytes, the
  message size and both the header and body checksums of a message buffer.
  A buffer shorter than the 20-byte header raises `ValueError`.
- **`firelink.messages`**: `Header` and the fixed-layout message types
  `Message0`, `Message1`, `Up0Message`, `PwmMessage`, `AutopilotDelsMessage`,
  `DroneStateMessage`, `TruthMessage`, `Sim2OnboardMessage`,
  `Onboard2SimMessage`, `OptitrackMessage`, `SensorDataMessage` and
  `PidMessage`, all dataclasses. Each has `pack()` (returns a sealed frame),
  `unpack(data)` and `size()`. `unpack` raises `ValueError` on short data or a
  wrong message id. Identifiers are in `MessageId`; default send intervals in
  `DEFAULT_INTERVALS_MS`.
- **`firelink.datalink`**: `parse_frames(buffer, stats)` scans a received
  datagram for frames and returns the messages the vehicle acts on
  (motion-capture, truth, hardware-in-the-loop and PID messages). Good frames
  are counted in `DatalinkStats.received`; bad frames in `bad_checksums` and
  `bad_header_checksums`. A partial frame at the end stops the scan.
  `apply_message(message, sensors, control)` copies motion-capture fixes into
  a `SensorState` and PID gains into an `OnboardControl`.
- **`firelink.telemetry`**: `Datalink` reads packets (`read`), keeps the last
  truth and simulator messages, and builds outgoing frames
  (`build_autopilot_dels`, `build_drone_state`, `build_sensor_data`,
  `build_up0`, `build_pwm`). `send_update(now_ms, sensors, nav, command)`
  returns the frames whose interval has passed, in the order autopilot
  commands, drone state, sensor data. `set_interval` changes an interval and
  raises `ValueError` for a message type that has none.
- **`firelink.state`**: plain records `OnboardControl`, `NavOutput`,
  `KalmanFilterState`, `PozyxData`, `MoCapData`, `SensorState` and `RcInputs`.
- **`firelink.navigation`**: `Waypoint` and `FiniteStateMachine`, which move
  through the `FlightState` phases and return the desired
  `(x, y, z, heading)`. `mission_over()` replaces the mission with a climb to
  height 3 and a landing at the origin.
- **`firelink.registers`**: Pozyx register addresses (`Register`), interrupt
  bits (`InterruptStatus`), error codes (`ErrorCode`) and the
  `is_reg_readable`, `is_reg_writable` and `is_function_call` checks.

## Example

```python
from firelink.messages import PidMessage
from firelink.datalink import DatalinkStats, parse_frames

frame = PidMessage(kp=[1.0, 2.0, 3.0]).pack()

stats = DatalinkStats()
for message in parse_frames(frame, stats):
    print(type(message).__name__, message.kp)
print(stats.received, stats.bad_checksums)
```

Waypoint following:

```python
from firelink.navigation import FiniteStateMachine, Waypoint
from firelink.state import OnboardControl

fsm = FiniteStateMachine(OnboardControl())
fsm.add_waypoint(Waypoint(0.0, 0.0, 3.0, radius=0.5, max_velocity=0.2, hold_time=2.0))
desired = fsm.update(0.0, 0.0, 3.0, psi=0.0, psi_dot=0.0, velocity=0.0, delta_time=0.01)
```

`update` raises `LookupError` when the mission has no waypoints.

## What it does not do

`firelink` opens no sockets: `Datalink` takes received packets as bytes and
returns frames as bytes, and sending them is left to the caller
(`telemetry.GCS_ADDRESS` only records the usual ground-station address). It
has no flight controller, state estimator, sensor or radio-receiver drivers,
and no motor or servo output; `firelink.state` only describes the data those
parts exchange.

## Running the tests

```
pip install -e .[test]
pytest
```