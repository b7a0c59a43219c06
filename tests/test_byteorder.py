import pytest

from pcapdecoder.byteorder import (
    ByteOrder,
    detect_byte_order,
    join_timestamp,
    pack_int,
    pack_uint,
    split_timestamp,
    swap_bytes,
    unpack_int,
    unpack_uint,
)
from pcapdecoder.exceptions import BadMagic, FatalFormatError


def test_byte_order_values():
    assert ByteOrder(">") is ByteOrder.BIG
    assert ByteOrder("<") is ByteOrder.LITTLE
    assert ByteOrder.BIG.swapped() is ByteOrder.LITTLE
    assert ByteOrder.LITTLE.swapped() is ByteOrder.BIG


@pytest.mark.parametrize(
    "data,big,little",
    [
        (b"\x01", 0x01, 0x01),
        (b"\x01\x02", 0x0102, 0x0201),
        (b"\x01\x02\x03\x04", 0x01020304, 0x04030201),
        (
            b"\x01\x02\x03\x04\x05\x06\x07\x08",
            0x0102030405060708,
            0x0807060504030201,
        ),
    ],
)
def test_unpack_uint(data, big, little):
    assert unpack_uint(data, ByteOrder.BIG) == big
    assert unpack_uint(data, ByteOrder.LITTLE) == little
    assert pack_uint(big, len(data), ByteOrder.BIG) == data
    assert pack_uint(little, len(data), ByteOrder.LITTLE) == data


def test_unpack_int():
    assert unpack_int(b"\xff\xff\xff\xff\xff\xff\xff\xff", ByteOrder.BIG) == -1
    assert unpack_int(b"\xfe\xff", ByteOrder.LITTLE) == -2
    assert pack_int(-2, 2, ByteOrder.BIG) == b"\xff\xfe"


def test_unsupported_width():
    with pytest.raises(ValueError):
        unpack_uint(b"\x00\x00\x00", ByteOrder.BIG)
    with pytest.raises(ValueError):
        pack_uint(0, 3, ByteOrder.LITTLE)


def test_swap_bytes():
    assert swap_bytes(b"\x01\x02\x03\x04") == b"\x04\x03\x02\x01"
    assert swap_bytes(b"") == b""


def test_join_timestamp_halves_little_endian():
    high = b"\x1e\xf8\x04\x00"
    low = b"\xa9\xd5\x3e\x3c"
    assert join_timestamp(high, low, ByteOrder.LITTLE) == 0x0004F81E3C3ED5A9

    # The halves are *not* a single little endian 64-bit number
    assert unpack_uint(high + low, ByteOrder.LITTLE) != 0x0004F81E3C3ED5A9


def test_join_timestamp_halves_big_endian():
    high = b"\x00\x04\xf8\x1e"
    low = b"\x3c\x3e\xd5\xa9"
    assert join_timestamp(high, low, ByteOrder.BIG) == 0x0004F81E3C3ED5A9
    assert split_timestamp(0x0004F81E3C3ED5A9) == (0x0004F81E, 0x3C3ED5A9)


def test_detect_byte_order():
    assert detect_byte_order(b"\x1a\x2b\x3c\x4d") is ByteOrder.BIG
    assert detect_byte_order(b"\x4d\x3c\x2b\x1a") is ByteOrder.LITTLE


@pytest.mark.parametrize(
    "magic", [b"\x00\x00\x00\x00", b"\x1a\x2b\x4d\x3c", b"\xa1\xb2\xc3\xd4", b"\x1a"]
)
def test_detect_byte_order_bad_magic(magic):
    with pytest.raises(BadMagic) as excinfo:
        detect_byte_order(magic)
    assert isinstance(excinfo.value, FatalFormatError)
