"""Decoding of received datalink frames and applying them to vehicle state."""

from __future__ import annotations

from dataclasses import dataclass

from firelink.checksum import (
    HEADER_CHECKED_SIZE,
    HEADER_SIZE,
    SYNC0,
    SYNC1,
    SYNC2,
    compute_checksum,
)
from firelink.messages import (
    BUFFER_SIZE,
    MESSAGE_TYPES,
    Header,
    Message,
    MessageId,
    OptitrackMessage,
    PidMessage,
)
from firelink.state import OnboardControl, SensorState

_SYNC = bytes((SYNC0, SYNC1, SYNC2))

# Messages the vehicle acts upon when they arrive.
RECEIVED_IDS = frozenset(
    {
        MessageId.OPTITRACK,
        MessageId.TRUTH,
        MessageId.HITL_SIM2ONBOARD,
        MessageId.PID,
    }
)


@dataclass
class DatalinkStats:
    """Counters kept while receiving frames."""

    received: int = 0
    bad_checksums: int = 0
    bad_header_checksums: int = 0


def parse_frames(
    buffer: bytes | bytearray | memoryview, stats: DatalinkStats | None = None
) -> list[Message]:
    """Scan ``buffer`` for frames and return the recognised messages in order.

    Every frame whose body checksum is good counts as received, whether or
    not its type is recognised. Frames with a bad header or body checksum are
    counted in ``stats`` and skipped. A partial frame at the end of the
    buffer stops the scan.
    """
    if stats is None:
        stats = DatalinkStats()
    data = bytes(buffer)
    length = len(data)
    messages: list[Message] = []
    index = 0

    while index <= length - HEADER_SIZE:
        if data[index : index + 3] != _SYNC:
            index += 1
            continue

        frame = data[index:]
        header = Header.unpack(frame)
        header_ok = (
            compute_checksum(frame[:HEADER_CHECKED_SIZE]) == header.hcsum
            and HEADER_SIZE <= header.message_size < BUFFER_SIZE
        )
        if not header_ok:
            stats.bad_header_checksums += 1
            index += HEADER_SIZE
            continue

        if index + header.message_size > length:
            break  # the rest of this frame has not arrived yet

        body = frame[HEADER_SIZE : header.message_size]
        if compute_checksum(body) == header.csum:
            message_type = MESSAGE_TYPES.get(header.message_id)
            if (
                header.message_id in RECEIVED_IDS
                and message_type is not None
                and header.message_size == message_type.size()
            ):
                messages.append(message_type.unpack(frame[: header.message_size]))
            stats.received += 1
        else:
            stats.bad_checksums += 1
        index += header.message_size

    return messages


def apply_message(
    message: Message, sensors: SensorState, control: OnboardControl
) -> bool:
    """Update ``sensors`` or ``control`` from a received message.

    Returns whether the message type is one that changes vehicle state.
    """
    if isinstance(message, OptitrackMessage):
        mocap = sensors.mocap
        mocap.valid = message.valid
        if mocap.valid:
            mocap.pos = [message.pos_x, message.pos_y, message.pos_z]
            mocap.quat = [message.qw, message.qx, message.qy, message.qz]
            if message.frame_num != mocap.frame_counter:
                mocap.frame_counter = message.frame_num
                mocap.update_counter += 1
        return True
    if isinstance(message, PidMessage):
        control.kp = list(message.kp)
        control.kd = list(message.kd)
        control.ki = list(message.ki)
        return True
    return False