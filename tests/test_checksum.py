import struct

import pytest

from firelink.checksum import (
    HEADER_CHECKED_SIZE,
    HEADER_SIZE,
    SYNC0,
    SYNC1,
    SYNC2,
    compute_checksum,
    seal_message,
)


def test_empty_buffer_keeps_initial_sums():
    assert compute_checksum(b"") == 0xFFFFFFFF


def test_single_byte_is_ignored():
    assert compute_checksum(b"\x7f") == compute_checksum(b"")


def test_single_word_value():
    assert compute_checksum(b"\x01\x00") == 0x00010001


@pytest.mark.parametrize("data", [b"abc", b"hello", bytes(range(1, 100))])
def test_odd_length_equals_zero_padding(data):
    assert compute_checksum(data) == compute_checksum(data + b"\x00")


def test_checksum_detects_changed_byte():
    data = bytearray(range(64))
    original = compute_checksum(data)
    data[10] ^= 0x01
    assert compute_checksum(data) != original
    assert compute_checksum(bytes(data)) == compute_checksum(data)


def test_large_buffer_fits_in_32_bits():
    data = bytes((i * 37) & 0xFF for i in range(5000))
    value = compute_checksum(data)
    assert 0 <= value <= 0xFFFFFFFF
    assert value == compute_checksum(memoryview(data))


def test_seal_sets_header_fields():
    body = bytes(range(12))
    raw = struct.pack("<4BiiII", 0, 0, 0, 0, 56, 0, 0, 0) + body
    sealed = seal_message(raw)
    sync1, sync2, sync3, spare, message_id, size, hcsum, csum = struct.unpack_from(
        "<4BiiII", sealed
    )
    assert (sync1, sync2, sync3) == (SYNC0, SYNC1, SYNC2)
    assert spare == 0
    assert message_id == 56
    assert size == len(raw)
    assert hcsum == compute_checksum(sealed[:HEADER_CHECKED_SIZE])
    assert csum == compute_checksum(sealed[HEADER_SIZE:])
    assert sealed[HEADER_SIZE:] == body


def test_seal_does_not_modify_input():
    raw = bytearray(HEADER_SIZE + 4)
    seal_message(raw)
    assert raw == bytearray(HEADER_SIZE + 4)


def test_seal_is_idempotent():
    raw = bytes(HEADER_SIZE) + b"\x01\x02\x03"
    once = seal_message(raw)
    assert seal_message(once) == once


def test_seal_rejects_short_buffer():
    with pytest.raises(ValueError):
        seal_message(bytes(HEADER_SIZE - 1))