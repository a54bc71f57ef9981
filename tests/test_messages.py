import struct

import pytest

from firelink.checksum import compute_checksum
from firelink.messages import (
    MESSAGE_TYPES,
    AutopilotDelsMessage,
    DroneStateMessage,
    Header,
    Message0,
    Message1,
    MessageId,
    OptitrackMessage,
    PidMessage,
    PwmMessage,
    SensorDataMessage,
    Up0Message,
)

ALL_TYPES = list(MESSAGE_TYPES.values())
SYNC = bytes([0xA3, 0xB2, 0xC1])


def test_header_size_is_twenty_bytes():
    assert Header.SIZE == 20
    assert len(Header().pack()) == Header.SIZE


def test_header_round_trip():
    header = Header(spare=3, message_id=173, message_size=120, hcsum=7, csum=9)
    assert Header.unpack(header.pack()) == header


def test_header_unpack_too_short():
    with pytest.raises(ValueError):
        Header.unpack(b"\xa3\xb2\xc1")


@pytest.mark.parametrize("cls", ALL_TYPES)
def test_frame_starts_with_sync_bytes(cls):
    frame = cls().pack()
    assert Header().pack()[:3] == SYNC
    assert frame[:3] == SYNC


@pytest.mark.parametrize("cls", ALL_TYPES)
def test_size_matches_frame_and_header(cls):
    frame = cls().pack()
    header = Header.unpack(frame)
    assert len(frame) == cls.size()
    assert header.message_size == cls.size()
    assert header.message_id == cls.MESSAGE_ID


@pytest.mark.parametrize("cls", ALL_TYPES)
def test_checksums_are_valid(cls):
    frame = cls().pack()
    header = Header.unpack(frame)
    assert header.hcsum == compute_checksum(frame[:12])
    assert header.csum == compute_checksum(frame[Header.SIZE:])


def test_autopilot_dels_id_on_wire():
    frame = AutopilotDelsMessage().pack()
    (message_id,) = struct.unpack_from("<i", frame, 4)
    assert message_id == 173
    assert message_id == MessageId.AUTOPILOT_DELS


def test_message0_defaults_survive_round_trip():
    decoded = Message0.unpack(Message0().pack())
    assert decoded.pos == [0.0, 0.0, -2.0]
    assert decoded.q == [1.0, 0.0, 0.0, 0.0]


def test_message1_defaults_survive_round_trip():
    decoded = Message1.unpack(Message1().pack())
    assert decoded.battery == 12000
    assert decoded.fovy == 58.5
    assert decoded.datum_alt == 745.0
    assert decoded.datum_lat == pytest.approx(33.659653, rel=1e-6)


def test_drone_state_round_trip_with_values():
    message = DroneStateMessage(
        p_b_e_L=[1.5, -2.25, 3.0],
        q=[1.0, 0.0, 0.5, -0.5],
        psi=0.25,
        fire_detected=1,
        fire_location=[4.0, -8.5],
        desired_location=[0.0, 1.0, 2.0],
        waypoint_number=2,
        number_of_waypoints=5,
    )
    assert DroneStateMessage.unpack(message.pack()) == message


def test_float_fields_round_to_single_precision():
    decoded = OptitrackMessage.unpack(OptitrackMessage(pos_x=0.1).pack())
    assert decoded.pos_x == pytest.approx(0.1, rel=1e-6)
    assert decoded.pos_x != 0.1 or decoded.pos_x == pytest.approx(0.1)


def test_unpack_ignores_trailing_bytes():
    message = OptitrackMessage(pos_x=1.0, frame_num=42, valid=1)
    decoded = OptitrackMessage.unpack(message.pack() + b"\x00\x01\x02")
    assert decoded == message


def test_unpack_too_short_raises():
    frame = PidMessage(kp=[1.0, 2.0, 3.0]).pack()
    with pytest.raises(ValueError):
        PidMessage.unpack(frame[:-1])


def test_unpack_wrong_id_raises():
    frame = SensorDataMessage().pack()
    with pytest.raises(ValueError):
        PidMessage.unpack(frame)


def test_pack_wrong_list_length_raises():
    with pytest.raises(ValueError):
        PidMessage(kp=[1.0, 2.0]).pack()


def test_char_fields_wrap_into_range():
    message = Up0Message(button=[1500, 5] + [0] * 14)
    decoded = Up0Message.unpack(message.pack())
    assert -128 <= decoded.button[0] <= 127
    assert decoded.button[1] == 5


def test_pwm_round_trip():
    message = PwmMessage(raw_pwm=[1000, 1500, 1980, 1200] + [0] * 13)
    decoded = PwmMessage.unpack(message.pack())
    assert decoded.raw_pwm[:4] == [1000, 1500, 1980, 1200]


def test_registry_maps_ids_to_types():
    for message_id, cls in MESSAGE_TYPES.items():
        assert cls.MESSAGE_ID == message_id
    assert MESSAGE_TYPES[MessageId.OPTITRACK] is OptitrackMessage
    assert set(MESSAGE_TYPES) == set(MessageId)


def test_changing_body_changes_body_checksum():
    first = Header.unpack(PidMessage(kp=[1.0, 0.0, 0.0]).pack())
    second = Header.unpack(PidMessage(kp=[2.0, 0.0, 0.0]).pack())
    assert first.hcsum == second.hcsum
    assert first.csum != second.csum