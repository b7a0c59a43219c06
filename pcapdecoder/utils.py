"""
Codecs for the address and resolution values carried by options and
name resolution records.
"""

import socket
import struct

DEFAULT_TIMESTAMP_RESOLUTION = 1e-6

# if_tsresol: high bit selects base 2 (set) or 10, low bits the exponent
_TSRESOL_BASE2 = 0x80
_TSRESOL_EXPONENT = 0x7F


def unpack_ipv4(data):
    # type: (bytes) -> str
    return socket.inet_ntoa(bytes(data))


def pack_ipv4(data):
    # type: (str) -> bytes
    return socket.inet_aton(data)


def unpack_ipv6(data):
    # type: (bytes) -> str
    return socket.inet_ntop(socket.AF_INET6, bytes(data))


def pack_ipv6(data):
    # type: (str) -> bytes
    return socket.inet_pton(socket.AF_INET6, data)


def unpack_macaddr(data):
    # type: (bytes) -> str
    return ":".join(format(x, "02x") for x in data)


def pack_macaddr(data):
    # type: (str) -> bytes
    return bytes(int(x, 16) for x in data.split(":"))


def unpack_euiaddr(data):
    # type: (bytes) -> str
    return unpack_macaddr(data)


def pack_euiaddr(data):
    # type: (str) -> bytes
    return pack_macaddr(data)


def unpack_string(data):
    # type: (bytes) -> str
    """
    Decode an UTF-8 option string.

    Writers are allowed (though not required) to NUL-terminate strings;
    the terminator is dropped. Invalid sequences are replaced rather than
    failing the whole block.
    """
    return bytes(data).rstrip(b"\x00").decode("utf-8", errors="replace")


def unpack_timestamp_resolution(data):
    # type: (bytes) -> float
    """
    Unpack a timestamp resolution (``if_tsresol`` option).

    If the most significant bit is zero the remaining bits are a negative
    power of 10, otherwise a negative power of 2.

    :returns: the duration of one timestamp tick, in seconds
    """
    if len(data) != 1:
        raise ValueError("if_tsresol is one byte long, got {0}".format(len(data)))
    if data[0] & _TSRESOL_BASE2:
        return float(2 ** -(data[0] & _TSRESOL_EXPONENT))
    return float(10 ** -data[0])


def pack_timestamp_resolution(base, exponent):
    # type: (int, int) -> bytes
    """
    Encode the ``if_tsresol`` byte for ticks of ``base ** -exponent``
    seconds; the sign of ``exponent`` is ignored.
    """
    if base not in (2, 10):
        raise ValueError(
            "Timestamp resolution base must be 2 or 10, got {0}".format(base)
        )
    value = abs(exponent) & _TSRESOL_EXPONENT
    if base == 2:
        value |= _TSRESOL_BASE2
    return struct.pack("B", value)
