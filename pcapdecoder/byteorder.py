"""
Conversion of fixed-width integer fields under either byte order.

Every multi-byte number in a section is stored in the byte order chosen
by the writer of that section and announced by the byte-order magic of
its section header.
"""

import struct
from enum import Enum

from pcapdecoder.constants import BYTE_ORDER_MAGIC, BYTE_ORDER_MAGIC_INVERSE
from pcapdecoder.exceptions import BadMagic

_uint_formats = {1: "B", 2: "H", 4: "I", 8: "Q"}


class ByteOrder(Enum):
    """Byte order of a section; the value is the :py:mod:`struct` prefix"""

    BIG = ">"
    LITTLE = "<"

    @property
    def prefix(self):
        return self.value

    def swapped(self):
        return ByteOrder.LITTLE if self is ByteOrder.BIG else ByteOrder.BIG


def _format(size, signed, byte_order):
    try:
        fmt = _uint_formats[size]
    except KeyError:
        raise ValueError(
            "Unsupported integer width: {0} bytes (expected 1, 2, 4 or 8)".format(size)
        )
    if signed:
        fmt = fmt.lower()
    return ByteOrder(byte_order).prefix + fmt


def swap_bytes(data):
    # type: (bytes) -> bytes
    """Reverse a byte sequence end to end."""
    return bytes(data[::-1])


def unpack_uint(data, byte_order):
    # type: (bytes, ByteOrder) -> int
    return struct.unpack(_format(len(data), False, byte_order), data)[0]


def unpack_int(data, byte_order):
    # type: (bytes, ByteOrder) -> int
    return struct.unpack(_format(len(data), True, byte_order), data)[0]


def pack_uint(value, size, byte_order):
    # type: (int, int, ByteOrder) -> bytes
    return struct.pack(_format(size, False, byte_order), value)


def pack_int(value, size, byte_order):
    # type: (int, int, ByteOrder) -> bytes
    return struct.pack(_format(size, True, byte_order), value)


def join_timestamp(high, low, byte_order):
    # type: (bytes, bytes, ByteOrder) -> int
    """
    Assemble a 64-bit timestamp stored as two 32-bit words.

    Each half is converted on its own first: under little-endian the
    high word still comes first in the block, only its bytes are swapped.
    """
    return (unpack_uint(high, byte_order) << 32) | unpack_uint(low, byte_order)


def split_timestamp(timestamp):
    # type: (int) -> tuple
    return (timestamp >> 32) & 0xFFFFFFFF, timestamp & 0xFFFFFFFF


def detect_byte_order(magic):
    # type: (bytes) -> ByteOrder
    """
    Classify the four byte-order magic bytes of a section header.

    :raises: :py:exc:`~pcapdecoder.exceptions.BadMagic` if they match
        neither byte order.
    """
    if len(magic) != 4:
        raise BadMagic("Byte order magic must be 4 bytes, got {0}".format(len(magic)))
    value = unpack_uint(magic, ByteOrder.BIG)
    if value == BYTE_ORDER_MAGIC:
        return ByteOrder.BIG
    if value == BYTE_ORDER_MAGIC_INVERSE:
        return ByteOrder.LITTLE
    raise BadMagic(
        "Format not recognized: byte order magic is 0x{0:08X}, expected "
        "0x{1:08X} or 0x{2:08X}".format(
            value, BYTE_ORDER_MAGIC, BYTE_ORDER_MAGIC_INVERSE
        )
    )
