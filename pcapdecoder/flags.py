"""
Enumerations and the 32-bit flag word attached to packet blocks.

Every enumeration has an ``UNKNOWN`` member, returned for any value
outside its documented domain: a capture written by a newer tool must
still decode.
"""

from enum import Enum, IntEnum


class _UnknownMixin(object):
    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class PacketBound(_UnknownMixin, IntEnum):
    """Direction of a packet (flag word bits 0-1)"""

    UNKNOWN = 0
    INBOUND = 1
    OUTBOUND = 2


class ReceptionType(_UnknownMixin, IntEnum):
    """How the packet reached the interface (flag word bits 2-4)"""

    UNKNOWN = 0
    UNICAST = 1
    MULTICAST = 2
    BROADCAST = 3
    PROMISCUOUS = 4


class HashType(_UnknownMixin, IntEnum):
    """Algorithm of an ``epb_hash`` option (first byte of its value)"""

    UNKNOWN = -1
    TWOS_COMPLEMENT = 0
    XOR = 1
    CRC32 = 2
    MD5 = 3
    SHA1 = 4
    TOEPLITZ = 5


class LinkLayerError(Enum):
    """Link-layer dependent errors (flag word bits 24-31), by bit number"""

    CRC = 24
    PACKET_TOO_LONG = 25
    PACKET_TOO_SHORT = 26
    WRONG_INTER_FRAME_GAP = 27
    UNALIGNED_FRAME = 28
    START_FRAME_DELIMITER = 29
    PREAMBLE = 30
    SYMBOL = 31


_BOUND_MASK = 0b11
_RECEPTION_SHIFT = 2
_RECEPTION_MASK = 0b111
_FCS_SHIFT = 5
_FCS_MASK = 0b1111


class PacketFlags(object):
    """
    Decoded ``epb_flags`` / ``pack_flags`` option.

    Bits 9-15 are reserved and bits 16-23 carry link-layer dependent
    errors not named by the format; both are kept in the raw value.
    """

    __slots__ = ["_value"]

    def __init__(self, value=0):
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError("Flag word must fit in 32 bits, got {0}".format(value))
        self._value = value

    @classmethod
    def build(cls, packet_bound=PacketBound.UNKNOWN,
              reception_type=ReceptionType.UNKNOWN, fcs_length=0, errors=()):
        if not 0 <= fcs_length <= _FCS_MASK:
            raise ValueError("FCS length must fit in 4 bits")
        value = int(packet_bound) & _BOUND_MASK
        value |= (int(reception_type) & _RECEPTION_MASK) << _RECEPTION_SHIFT
        value |= fcs_length << _FCS_SHIFT
        for error in errors:
            value |= 1 << LinkLayerError(error).value
        return cls(value)

    def __int__(self):
        return self._value

    def __eq__(self, other):
        if not isinstance(other, PacketFlags):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash(self._value)

    @property
    def packet_bound(self):
        return PacketBound(self._value & _BOUND_MASK)

    @property
    def reception_type(self):
        return ReceptionType((self._value >> _RECEPTION_SHIFT) & _RECEPTION_MASK)

    @property
    def fcs_length(self):
        """FCS length in octets; ``None`` when the flag word does not say"""
        return ((self._value >> _FCS_SHIFT) & _FCS_MASK) or None

    @property
    def link_layer_errors(self):
        return [err for err in LinkLayerError if self._value & (1 << err.value)]

    def __repr__(self):
        return (
            "<{0} (value=0x{1:08x}) packet_bound={2} reception_type={3} "
            "fcs_length={4} link_layer_errors={5}>"
        ).format(
            self.__class__.__name__,
            self._value,
            self.packet_bound.name,
            self.reception_type.name,
            self.fcs_length,
            [err.name for err in self.link_layer_errors],
        )
