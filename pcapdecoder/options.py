"""
Typed access to the options trailing a block.

Each block kind has its own :py:class:`Options` sub-class, whose
``schema`` maps option codes to names and value types. The raw
``(code, value)`` pairs found by :py:func:`~pcapdecoder.structs.read_options`
are decoded according to that schema; codes the schema does not know
(and values that cannot be decoded as their declared type) are kept,
undecoded, in :py:attr:`Options.unknown`.
"""

import struct
from collections import namedtuple
from collections.abc import Mapping

from pcapdecoder import strictness
from pcapdecoder.byteorder import ByteOrder, pack_int, pack_uint, unpack_int, unpack_uint
from pcapdecoder.constants import (
    OPT_COMMENT,
    OPT_CUSTOM_BYTES,
    OPT_CUSTOM_BYTES_SAFE,
    OPT_CUSTOM_STR,
    OPT_CUSTOM_STR_SAFE,
    OPT_ENDOFOPT,
)
from pcapdecoder.exceptions import EncodeError
from pcapdecoder.flags import HashType, PacketBound, PacketFlags, ReceptionType
from pcapdecoder.utils import (
    DEFAULT_TIMESTAMP_RESOLUTION,
    pack_euiaddr,
    pack_ipv4,
    pack_ipv6,
    pack_macaddr,
    unpack_euiaddr,
    unpack_ipv4,
    unpack_ipv6,
    unpack_macaddr,
    unpack_string,
    unpack_timestamp_resolution,
)

# Type name constants, to keep a list and prevent typos
TYPE_BYTES = "bytes"
TYPE_STRING = "string"
TYPE_U8 = "u8"
TYPE_U32 = "u32"
TYPE_U64 = "u64"
TYPE_I64 = "i64"
TYPE_IPV4 = "ipv4"
TYPE_IPV4_MASK = "ipv4+mask"
TYPE_IPV6 = "ipv6"
TYPE_IPV6_PREFIX = "ipv6+prefix"
TYPE_MACADDR = "macaddr"
TYPE_EUIADDR = "euiaddr"
TYPE_TYPE_BYTES = "type+bytes"
TYPE_PACKET_FLAGS = "packet_flags"
TYPE_PACKET_HASH = "packet_hash"
TYPE_CUSTOM_STR = "custom_str"
TYPE_CUSTOM_BYTES = "custom_bytes"


# A single option of a schema: code and name are required; values are
# kept as raw bytes and may not be repeated unless stated otherwise.
Option = namedtuple(
    "Option", ("code", "name", "ftype", "multiple"), defaults=(TYPE_BYTES, False)
)


class PacketHash(namedtuple("PacketHash", ("type_code", "value"))):
    """Value of ``epb_hash``/``pack_hash``: algorithm code and the hash"""

    __slots__ = []

    @property
    def hash_type(self):
        return HashType(self.type_code)


class _ValueType(namedtuple("_ValueType", ("decode", "encode", "size", "min_size"))):
    """How an option type is decoded/encoded, and which value widths fit"""

    __slots__ = []

    def accepts(self, length):
        if self.size is not None:
            return length == self.size
        return length >= self.min_size


def _number(size, signed=False):
    if signed:
        return _ValueType(
            lambda v, bo: unpack_int(v, bo),
            lambda x, bo: pack_int(x, size, bo),
            size,
            size,
        )
    return _ValueType(
        lambda v, bo: unpack_uint(v, bo),
        lambda x, bo: pack_uint(x, size, bo),
        size,
        size,
    )


def _fixed(size, decode, encode):
    return _ValueType(lambda v, bo: decode(v), lambda x, bo: encode(x), size, size)


def _pack_hash(packet_hash, byte_order):
    if not 0 <= packet_hash.type_code <= 0xFF:
        raise EncodeError(
            "hash type code {0!r} does not fit in one byte".format(packet_hash.type_code)
        )
    return struct.pack("B", packet_hash.type_code) + bytes(packet_hash.value)


def _custom(decode_payload, encode_payload):
    # 4 bytes of Private Enterprise Number, then the payload
    return _ValueType(
        lambda v, bo: (unpack_uint(v[:4], bo), decode_payload(v[4:])),
        lambda x, bo: pack_uint(x[0], 4, bo) + encode_payload(x[1]),
        None,
        4,
    )


_value_types = {
    TYPE_BYTES: _ValueType(lambda v, bo: bytes(v), lambda x, bo: bytes(x), None, 0),
    TYPE_STRING: _ValueType(
        lambda v, bo: unpack_string(v), lambda x, bo: x.encode("utf-8"), None, 0
    ),
    TYPE_U8: _number(1),
    TYPE_U32: _number(4),
    TYPE_U64: _number(8),
    TYPE_I64: _number(8, signed=True),
    TYPE_IPV4: _fixed(4, unpack_ipv4, pack_ipv4),
    TYPE_IPV4_MASK: _fixed(
        8,
        lambda v: (unpack_ipv4(v[:4]), unpack_ipv4(v[4:8])),
        lambda x: pack_ipv4(x[0]) + pack_ipv4(x[1]),
    ),
    TYPE_IPV6: _fixed(16, unpack_ipv6, pack_ipv6),
    TYPE_IPV6_PREFIX: _fixed(
        17,
        lambda v: (unpack_ipv6(v[:16]), v[16]),
        lambda x: pack_ipv6(x[0]) + struct.pack("B", x[1]),
    ),
    TYPE_MACADDR: _fixed(6, unpack_macaddr, pack_macaddr),
    TYPE_EUIADDR: _fixed(8, unpack_euiaddr, pack_euiaddr),
    TYPE_TYPE_BYTES: _ValueType(
        lambda v, bo: (v[0], bytes(v[1:])),
        lambda x, bo: struct.pack("B", x[0]) + bytes(x[1]),
        None,
        1,
    ),
    TYPE_PACKET_FLAGS: _ValueType(
        lambda v, bo: PacketFlags(unpack_uint(v, bo)),
        lambda x, bo: pack_uint(int(x), 4, bo),
        4,
        4,
    ),
    TYPE_PACKET_HASH: _ValueType(
        lambda v, bo: PacketHash(v[0], bytes(v[1:])),
        _pack_hash,
        None,
        1,
    ),
    TYPE_CUSTOM_STR: _custom(unpack_string, lambda x: x.encode("utf-8")),
    TYPE_CUSTOM_BYTES: _custom(bytes, bytes),
}

# Options every block kind may carry
COMMON_SCHEMA = [
    Option(OPT_COMMENT, "opt_comment", TYPE_STRING, multiple=True),
    # All four are named ``opt_custom`` by the format; renamed here so
    # they can be told apart
    Option(OPT_CUSTOM_STR_SAFE, "custom_str_safe", TYPE_CUSTOM_STR, multiple=True),
    Option(OPT_CUSTOM_BYTES_SAFE, "custom_bytes_safe", TYPE_CUSTOM_BYTES, multiple=True),
    Option(OPT_CUSTOM_STR, "custom_str", TYPE_CUSTOM_STR, multiple=True),
    Option(OPT_CUSTOM_BYTES, "custom_bytes", TYPE_CUSTOM_BYTES, multiple=True),
]

_schema_cache = {}


def _schema_index(cls):
    """Return ``({code: Option}, {name: code})`` for an Options sub-class"""
    try:
        return _schema_cache[cls]
    except KeyError:
        pass
    by_code = {}
    for item in COMMON_SCHEMA + list(cls.schema):
        if not isinstance(item, Option):
            raise TypeError("expected option, got '{}'".format(item))
        if item.ftype not in _value_types:
            raise ValueError("Unsupported field type: {0}".format(item.ftype))
        by_code[item.code] = item
    by_name = {item.name: code for code, item in by_code.items()}
    _schema_cache[cls] = by_code, by_name
    return _schema_cache[cls]


class Options(Mapping):
    """
    Read-only mapping of the options of a block.

    Options can be accessed either by numerical code or by name. Iterating
    yields names. Options that may be repeated keep every value: subscript
    access returns the first one, :py:meth:`get_all` returns them all.

    :param raw: ``(code, value)`` pairs, as read from the block
    :param byte_order: byte order of the section, used for numeric values
    """

    schema = []

    __slots__ = ["byte_order", "data", "unknown"]

    def __init__(self, raw=None, byte_order=ByteOrder.BIG):
        self.byte_order = ByteOrder(byte_order)
        self.data = {}  # {code: [decoded values]}
        self.unknown = {}  # {code: [raw bytes]}
        for code, value in raw or ():
            self._load(code, value)

    @classmethod
    def build(cls, values=None, byte_order=ByteOrder.BIG):
        """
        Create an option set from already decoded values.

        :param values: a mapping of option names (or codes) to a value, or
            to a list of values for repeated options
        """
        options = cls(byte_order=byte_order)
        by_code, by_name = _schema_index(cls)
        for key, value in (values or {}).items():
            code = options._resolve(key)
            if not isinstance(value, list):
                value = [value]
            if code in by_code:
                options.data[code] = list(value)
            else:
                options.unknown[code] = [bytes(x) for x in value]
        return options

    # -------------------- Mapping interface --------------------

    def __getitem__(self, key):
        code = self._resolve(key)
        if code not in self.data:
            raise KeyError(key)
        return self.data[code][0]

    def __iter__(self):
        by_code, by_name = _schema_index(type(self))
        for code in self.data:
            yield by_code[code].name

    def __len__(self):
        return len(self.data)

    def __eq__(self, other):
        if not isinstance(other, Options):
            return NotImplemented
        return self.data == other.data and self.unknown == other.unknown

    __hash__ = None

    def get_all(self, key):
        """Get all values for the given option (empty list if absent)"""
        return list(self.data.get(self._resolve(key), []))

    def iter_all_items(self):
        """Like ``items()``, but yields the list of all values"""
        for key in self:
            yield key, self.get_all(key)

    def iter_raw(self, byte_order=None):
        """Yield ``(code, raw value)`` pairs, known options first"""
        byte_order = ByteOrder(byte_order or self.byte_order)
        by_code, by_name = _schema_index(type(self))
        for code, values in self.data.items():
            value_type = _value_types[by_code[code].ftype]
            for value in values:
                yield code, value_type.encode(value, byte_order)
        for code, values in self.unknown.items():
            for value in values:
                yield code, value

    def __repr__(self):
        args = dict(self.iter_all_items())
        if self.unknown:
            args["unknown"] = self.unknown
        return "{0}({1!r})".format(self.__class__.__name__, args)

    # -------------------- Common options --------------------

    @property
    def comment(self):
        return self.get("opt_comment")

    @property
    def comments(self):
        return self.get_all("opt_comment")

    # -------------------- Internal methods --------------------

    def _resolve(self, key):
        by_code, by_name = _schema_index(type(self))
        code = by_name.get(key, key)
        if not isinstance(code, int) or code == OPT_ENDOFOPT:
            # opt_endofopt only exists on the wire
            raise KeyError(key)
        return code

    def _load(self, code, value):
        by_code, by_name = _schema_index(type(self))
        option = by_code.get(code)
        if option is None:
            self.unknown.setdefault(code, []).append(value)
            return

        value_type = _value_types[option.ftype]
        if not value_type.accepts(len(value)):
            strictness.problem(
                "option {0} '{1}' has invalid length {2}".format(
                    code, option.name, len(value)
                )
            )
            if strictness.should_fix():
                return
            self.unknown.setdefault(code, []).append(value)
            return

        if code in self.data and not option.multiple:
            strictness.problem(
                "repeated option {0} '{1}' not permitted by pcapng format".format(
                    code, option.name
                )
            )
            if strictness.should_fix():
                return
        self.data.setdefault(code, []).append(
            value_type.decode(value, self.byte_order)
        )


class SectionHeaderOptions(Options):
    schema = [
        Option(2, "shb_hardware", TYPE_STRING),
        Option(3, "shb_os", TYPE_STRING),
        Option(4, "shb_userappl", TYPE_STRING),
    ]

    __slots__ = []

    @property
    def hardware(self):
        return self.get("shb_hardware")

    @property
    def os(self):
        return self.get("shb_os")

    @property
    def user_application(self):
        return self.get("shb_userappl")


class InterfaceOptions(Options):
    schema = [
        Option(2, "if_name", TYPE_STRING),
        Option(3, "if_description", TYPE_STRING),
        Option(4, "if_IPv4addr", TYPE_IPV4_MASK, multiple=True),
        Option(5, "if_IPv6addr", TYPE_IPV6_PREFIX, multiple=True),
        Option(6, "if_MACaddr", TYPE_MACADDR),
        Option(7, "if_EUIaddr", TYPE_EUIADDR),
        Option(8, "if_speed", TYPE_U64),
        Option(9, "if_tsresol"),  # Just keep the raw data
        Option(10, "if_tzone", TYPE_U32),
        Option(11, "if_filter", TYPE_TYPE_BYTES),
        Option(12, "if_os", TYPE_STRING),
        Option(13, "if_fcslen", TYPE_U8),
        Option(14, "if_tsoffset", TYPE_I64),
        Option(15, "if_hardware", TYPE_STRING),
        Option(16, "if_txspeed", TYPE_U64),
        Option(17, "if_rxspeed", TYPE_U64),
    ]

    __slots__ = []

    @property
    def name(self):
        return self.get("if_name")

    @property
    def description(self):
        return self.get("if_description")

    @property
    def mac_address(self):
        return self.get("if_MACaddr")

    @property
    def speed(self):
        return self.get("if_speed")

    @property
    def timestamp_resolution(self):
        """Duration of one timestamp tick, in seconds (default 1e-6)"""
        tsresol = self.get("if_tsresol")
        if tsresol is None or len(tsresol) != 1:
            return DEFAULT_TIMESTAMP_RESOLUTION
        return unpack_timestamp_resolution(tsresol)

    @property
    def timestamp_offset(self):
        return self.get("if_tsoffset", 0)


class PacketOptionsMixin(object):
    """
    Typed accessors shared by the options of packet blocks, which only
    differ in the names of their flags and hash options.
    """

    __slots__ = []

    flags_option = None
    hash_option = None

    @property
    def flags(self):
        return self.get(self.flags_option)

    @property
    def packet_bound(self):
        flags = self.flags
        return flags.packet_bound if flags is not None else PacketBound.UNKNOWN

    @property
    def reception_type(self):
        flags = self.flags
        return flags.reception_type if flags is not None else ReceptionType.UNKNOWN

    @property
    def fcs_length(self):
        flags = self.flags
        return flags.fcs_length if flags is not None else None

    @property
    def link_layer_errors(self):
        flags = self.flags
        return flags.link_layer_errors if flags is not None else []

    @property
    def hashes(self):
        return self.get_all(self.hash_option)

    @property
    def hash_type(self):
        packet_hash = self.get(self.hash_option)
        return packet_hash.hash_type if packet_hash is not None else HashType.UNKNOWN

    @property
    def hash_value(self):
        packet_hash = self.get(self.hash_option)
        return packet_hash.value if packet_hash is not None else None


class EnhancedPacketOptions(PacketOptionsMixin, Options):
    schema = [
        Option(2, "epb_flags", TYPE_PACKET_FLAGS),
        Option(3, "epb_hash", TYPE_PACKET_HASH, multiple=True),
        Option(4, "epb_dropcount", TYPE_U64),
        Option(5, "epb_packetid", TYPE_U64),
        Option(6, "epb_queue", TYPE_U32),
        Option(7, "epb_verdict", TYPE_TYPE_BYTES, multiple=True),
    ]

    __slots__ = []

    flags_option = "epb_flags"
    hash_option = "epb_hash"

    @property
    def drop_count(self):
        return self.get("epb_dropcount")

    @property
    def packet_id(self):
        return self.get("epb_packetid")

    @property
    def queue(self):
        return self.get("epb_queue")

    @property
    def verdicts(self):
        return self.get_all("epb_verdict")


class PacketOptions(PacketOptionsMixin, Options):
    """Options of the obsolete Packet Block; same meaning as ``epb_*``"""

    schema = [
        Option(2, "pack_flags", TYPE_PACKET_FLAGS),
        Option(3, "pack_hash", TYPE_PACKET_HASH, multiple=True),
    ]

    __slots__ = []

    flags_option = "pack_flags"
    hash_option = "pack_hash"


class NameResolutionOptions(Options):
    schema = [
        Option(2, "ns_dnsname", TYPE_STRING),
        Option(3, "ns_dnsIP4addr", TYPE_IPV4),
        Option(4, "ns_dnsIP6addr", TYPE_IPV6),
    ]

    __slots__ = []

    @property
    def dns_name(self):
        return self.get("ns_dnsname")


class InterfaceStatisticsOptions(Options):
    # Start/end times are raw ticks, in the interface timestamp resolution
    schema = [
        Option(2, "isb_starttime", TYPE_U64),
        Option(3, "isb_endtime", TYPE_U64),
        Option(4, "isb_ifrecv", TYPE_U64),
        Option(5, "isb_ifdrop", TYPE_U64),
        Option(6, "isb_filteraccept", TYPE_U64),
        Option(7, "isb_osdrop", TYPE_U64),
        Option(8, "isb_usrdeliv", TYPE_U64),
    ]

    __slots__ = []

    @property
    def received(self):
        return self.get("isb_ifrecv")

    @property
    def dropped(self):
        return self.get("isb_ifdrop")
