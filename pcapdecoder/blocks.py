"""
Module containing the definition of known / supported "blocks" of the
pcap-ng format.

Each block is a struct-like, read-only record described by a ``schema``
of fields, usually ending with the options of its kind. Blocks are built
either by :py:meth:`Block.decode` from a block body, or directly from
keyword arguments (missing fields take the schema defaults).
"""


from pcapdecoder import strictness
from pcapdecoder.byteorder import (
    ByteOrder,
    join_timestamp,
    pack_uint,
    split_timestamp,
)
from pcapdecoder.constants import BYTE_ORDER_MAGIC, SECTION_LENGTH_UNSPECIFIED
from pcapdecoder.constants import block_types, link_types
from pcapdecoder.exceptions import PcapDecoderWarning
from pcapdecoder.options import (
    EnhancedPacketOptions,
    InterfaceOptions,
    InterfaceStatisticsOptions,
    NameResolutionOptions,
    Options,
    PacketOptions,
    SectionHeaderOptions,
)
from pcapdecoder.structs import (
    IntField,
    ListField,
    NameResolutionRecordField,
    OptionsField,
    PacketBytes,
    StructField,
    pack_padded,
    read_bytes,
    struct_decode,
    struct_encode,
)


KNOWN_BLOCKS = {}


def register_block(block):
    """Handy decorator to register a new known block type"""
    KNOWN_BLOCKS[block.magic_number] = block
    return block


class TimestampField(StructField):
    """
    64-bit timestamp stored as two 32-bit words, high word first.
    """

    __slots__ = []

    def load(self, stream, byte_order, seen=None):
        high = read_bytes(stream, 4)
        low = read_bytes(stream, 4)
        return join_timestamp(high, low, byte_order)

    def encode(self, timestamp, byte_order):
        high, low = split_timestamp(timestamp)
        return pack_uint(high, 4, byte_order) + pack_uint(low, 4, byte_order)


class Block(object):
    """Base class for blocks"""

    magic_number = None
    schema = []
    __slots__ = ["byte_order", "_decoded"]

    def __init__(self, byte_order=ByteOrder.BIG, **kwargs):
        byte_order = ByteOrder(byte_order)
        decoded = {}
        for name, field, default in self.schema:
            value = kwargs.pop(name, default)
            if isinstance(field, OptionsField) and not isinstance(value, Options):
                value = field.options_class.build(value, byte_order)
            decoded[name] = value
        if kwargs:
            raise TypeError(
                "{0} got unexpected fields: {1}".format(
                    self.__class__.__name__, ", ".join(sorted(kwargs))
                )
            )
        object.__setattr__(self, "byte_order", byte_order)
        object.__setattr__(self, "_decoded", decoded)

    @classmethod
    def decode(cls, body, byte_order, section=None):
        """
        Build a block from its body: the bytes between the leading and
        the trailing block length.

        :param section: the :py:class:`~pcapdecoder.section.Section` the
            block belongs to, for blocks whose layout depends on it
        """
        return cls(byte_order=byte_order, **struct_decode(cls.schema, body, byte_order))

    def encode(self):
        """Return the block body, under the block byte order"""
        return struct_encode(self.schema, self._decoded, self.byte_order)

    def __getattr__(self, name):
        # Only called for attributes this object doesn't have
        try:
            return object.__getattribute__(self, "_decoded")[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name, value):
        raise AttributeError(
            "'{cls}' object is read-only (setting '{prop}')".format(
                cls=self.__class__.__name__, prop=name
            )
        )

    def __eq__(self, other):
        if self.__class__ != other.__class__:
            return False
        return self._decoded == other._decoded

    __hash__ = None

    def __repr__(self):
        args = []
        for name, field, default in self.schema:
            value = getattr(self, name)
            if isinstance(value, bytes) and len(value) > 32:
                value = "<{0} bytes>".format(len(value))
            else:
                value = repr(value)
            args.append("{0}={1}".format(name, value))
        return "<{0} {1}>".format(self.__class__.__name__, " ".join(args))


class BlockWithTimestampMixin(object):
    """
    Block mixin giving access to the two halves of the timestamp, as
    stored in the file. The unit is given by the ``if_tsresol`` option of
    the interface, see :py:meth:`~pcapdecoder.section.Section.timestamp_seconds`.
    """

    __slots__ = []

    @property
    def timestamp_high(self):
        return split_timestamp(self.timestamp)[0]

    @property
    def timestamp_low(self):
        return split_timestamp(self.timestamp)[1]


class BasePacketBlock(Block):
    """
    Base class for blocks with packet data:

    * ``packet_len`` is the original amount of data that was "on the wire"
    * ``packet_data`` is the captured part of it

    Both lengths are kept as found in the file, even when inconsistent.
    """

    __slots__ = []

    def __init__(self, byte_order=ByteOrder.BIG, **kwargs):
        packet_data = kwargs.get("packet_data") or b""
        kwargs["packet_data"] = bytes(packet_data)
        if any(name == "captured_len" for name, _, _ in self.schema):
            kwargs.setdefault("captured_len", len(packet_data))
        kwargs.setdefault("packet_len", len(packet_data))
        super(BasePacketBlock, self).__init__(byte_order, **kwargs)

    @classmethod
    def decode(cls, body, byte_order, section=None):
        block = super(BasePacketBlock, cls).decode(body, byte_order, section)
        if block.captured_len > block.packet_len:
            strictness.problem(
                "{0}: captured length {1} exceeds original packet length {2}".format(
                    cls.__name__, block.captured_len, block.packet_len
                ),
                PcapDecoderWarning,
            )
        return block

    def encode(self):
        values = dict(self._decoded)
        if "captured_len" in values:
            values["captured_len"] = len(self.packet_data)
        return struct_encode(self.schema, values, self.byte_order)

    @property
    def truncated(self):
        return len(self.packet_data) < self.packet_len


@register_block
class SectionHeader(Block):
    """
    "The Section Header Block (SHB) is mandatory. It identifies the beginning
    of a section of the capture file."

    Its body starts with the byte order magic, which establishes the byte
    order of every following block up to the next section header.
    """

    magic_number = block_types.BLK_SECTION_HEADER
    __slots__ = []
    schema = [
        ("version_major", IntField(16), 1),
        ("version_minor", IntField(16), 0),
        ("section_length", IntField(64, signed=True), SECTION_LENGTH_UNSPECIFIED),
        ("options", OptionsField(SectionHeaderOptions), None),
    ]

    @classmethod
    def decode(cls, body, byte_order, section=None):
        # The magic was already used to find out the byte order
        return super(SectionHeader, cls).decode(body[4:], byte_order, section)

    def encode(self):
        return pack_uint(BYTE_ORDER_MAGIC, 4, self.byte_order) + super(
            SectionHeader, self
        ).encode()

    @property
    def version(self):
        return (self.version_major, self.version_minor)

    @property
    def length(self):
        return self.section_length

    def __repr__(self):
        return (
            "<{name} version={version} byte_order={byte_order} "
            "length={length} options={options}>"
        ).format(
            name=self.__class__.__name__,
            version=".".join(str(x) for x in self.version),
            byte_order=self.byte_order.name,
            length=self.length,
            options=repr(self.options),
        )


@register_block
class InterfaceDescription(Block):
    """
    "An Interface Description Block (IDB) is the container for information
    describing an interface on which packet data is captured."

    Interfaces are numbered, from 0, in the order they appear in their
    section; packet blocks refer to them by that number.
    """

    magic_number = block_types.BLK_INTERFACE
    __slots__ = []
    schema = [
        ("link_type", IntField(16), 0),
        ("reserved", IntField(16), 0),
        ("snaplen", IntField(32), 0),
        ("options", OptionsField(InterfaceOptions), None),
    ]

    @property
    def timestamp_resolution(self):
        return self.options.timestamp_resolution

    @property
    def link_type_description(self):
        try:
            return link_types.LINKTYPE_DESCRIPTIONS[self.link_type]
        except KeyError:
            return "Unknown link type: 0x{0:04x}".format(self.link_type)


@register_block
class EnhancedPacket(BasePacketBlock, BlockWithTimestampMixin):
    """
    "An Enhanced Packet Block (EPB) is the standard container for storing the
    packets coming from the network."
    """

    magic_number = block_types.BLK_ENHANCED_PACKET
    __slots__ = []
    schema = [
        ("interface_id", IntField(32), 0),
        ("timestamp", TimestampField(), 0),
        ("captured_len", IntField(32), 0),
        ("packet_len", IntField(32), 0),
        ("packet_data", PacketBytes("captured_len"), b""),
        ("options", OptionsField(EnhancedPacketOptions), None),
    ]


@register_block
class SimplePacket(BasePacketBlock):
    """
    "The Simple Packet Block (SPB) is a lightweight container for storing the
    packets coming from the network."

    It has no interface id (the first interface of the section is implied),
    no timestamp and no options.
    """

    magic_number = block_types.BLK_PACKET_SIMPLE
    __slots__ = []
    schema = [
        # packet_len is NOT the captured length
        ("packet_len", IntField(32), 0),
        ("packet_data", PacketBytes("captured_len"), b""),
    ]

    @classmethod
    def decode(cls, body, byte_order, section=None):
        """
        "...the SnapLen value MUST be used to determine the size of the Packet
        Data field length." Without a known interface, the room left in the
        block is used instead.
        """
        packet_len = struct_decode(cls.schema[:1], body, byte_order)["packet_len"]
        captured_len = min(packet_len, len(body) - 4)
        interface = section.get_interface(0) if section is not None else None
        if interface is not None and interface.snaplen:
            captured_len = min(captured_len, interface.snaplen)
        return cls(
            byte_order=byte_order,
            packet_len=packet_len,
            packet_data=body[4 : 4 + captured_len],
        )

    def encode(self):
        return pack_uint(self.packet_len, 4, self.byte_order) + pack_padded(
            self.packet_data
        )

    @property
    def captured_len(self):
        return len(self.packet_data)

    @property
    def interface_id(self):
        return 0


@register_block
class ObsoletePacket(BasePacketBlock, BlockWithTimestampMixin):
    """
    "The Packet Block is obsolete, and MUST NOT be used in new files."
    Still found in old captures; decoded like an enhanced packet with a
    16-bit interface id and a drop counter.
    """

    magic_number = block_types.BLK_PACKET
    __slots__ = []
    schema = [
        ("interface_id", IntField(16), 0),
        ("drops_count", IntField(16), 0),
        ("timestamp", TimestampField(), 0),
        ("captured_len", IntField(32), 0),
        ("packet_len", IntField(32), 0),
        ("packet_data", PacketBytes("captured_len"), b""),
        ("options", OptionsField(PacketOptions), None),
    ]

    def enhanced(self):
        """Return an EnhancedPacket with this block's attributes."""
        values = {"epb_dropcount": self.drops_count}
        for name, option in (("epb_flags", "pack_flags"), ("epb_hash", "pack_hash")):
            if option in self.options:
                values[name] = self.options.get_all(option)
        if self.options.comments:
            values["opt_comment"] = self.options.comments
        return EnhancedPacket(
            byte_order=self.byte_order,
            interface_id=self.interface_id,
            timestamp=self.timestamp,
            packet_len=self.packet_len,
            packet_data=self.packet_data,
            options=EnhancedPacketOptions.build(values, self.byte_order),
        )


@register_block
class NameResolution(Block):
    """
    "The Name Resolution Block (NRB) is used to support the correlation of
    numeric addresses (present in the captured packets) and their corresponding
    canonical names."
    """

    magic_number = block_types.BLK_NAME_RESOLUTION
    __slots__ = []
    schema = [
        ("records", ListField(NameResolutionRecordField()), []),
        ("options", OptionsField(NameResolutionOptions), None),
    ]


@register_block
class InterfaceStatistics(Block, BlockWithTimestampMixin):
    """
    "The Interface Statistics Block (ISB) contains the capture statistics for a
    given interface." The interface is given by the Interface ID field,
    within the current section.
    """

    magic_number = block_types.BLK_INTERFACE_STATS
    __slots__ = []
    schema = [
        ("interface_id", IntField(32), 0),
        ("timestamp", TimestampField(), 0),
        ("options", OptionsField(InterfaceStatisticsOptions), None),
    ]
