"""Fletcher-32 style checksums and sealing of datalink frames."""

from __future__ import annotations

import struct

SYNC0 = 0xA3
SYNC1 = 0xB2
SYNC2 = 0xC1

HEADER_FORMAT = "<4BiiII"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
# The header checksum covers everything before the two checksum words.
HEADER_CHECKED_SIZE = HEADER_SIZE - 2 * 4

_MASK32 = 0xFFFFFFFF
_BLOCK = 360  # largest number of sums that cannot overflow 32 bits


def _fold(value: int) -> int:
    return ((value & 0xFFFF) + (value >> 16)) & _MASK32


def compute_checksum(data: bytes | bytearray | memoryview) -> int:
    """Return the 32-bit datalink checksum of ``data``.

    This is Fletcher-32 over little-endian 16-bit words. A trailing odd byte
    is added as if followed by a zero byte, but only when at least one full
    word precedes it; a lone single byte does not contribute.
    """
    buf = bytes(data)
    sum1 = 0xFFFF
    sum2 = 0xFFFF
    word_count = len(buf) // 2
    odd = len(buf) % 2 == 1
    pos = 0

    while word_count:
        block = min(word_count, _BLOCK)
        word_count -= block
        for _ in range(block):
            sum1 = (sum1 + buf[pos] + (buf[pos + 1] << 8)) & _MASK32
            sum2 = (sum2 + sum1) & _MASK32
            pos += 2
        if odd and word_count == 0:
            sum1 = (sum1 + buf[pos]) & _MASK32
            sum2 = (sum2 + sum1) & _MASK32
            pos += 1
        sum1 = _fold(sum1)
        sum2 = _fold(sum2)

    sum1 = _fold(sum1)
    sum2 = _fold(sum2)
    return ((sum2 << 16) | sum1) & _MASK32


def seal_message(buffer: bytes | bytearray | memoryview) -> bytes:
    """Return ``buffer`` with its header completed for sending.

    The sync bytes are set, the message size is set to the buffer length and
    both the header and body checksums are computed. The message id and the
    spare byte are left as they are.
    """
    out = bytearray(buffer)
    if len(out) < HEADER_SIZE:
        raise ValueError(
            f"message of {len(out)} bytes is shorter than the {HEADER_SIZE}-byte header"
        )
    _, _, _, spare, message_id, _, _, _ = struct.unpack_from(HEADER_FORMAT, out)
    struct.pack_into(
        "<4Bii", out, 0, SYNC0, SYNC1, SYNC2, spare, message_id, len(out)
    )
    hcsum = compute_checksum(out[:HEADER_CHECKED_SIZE])
    csum = compute_checksum(out[HEADER_SIZE:])
    struct.pack_into("<II", out, HEADER_CHECKED_SIZE, hcsum, csum)
    return bytes(out)