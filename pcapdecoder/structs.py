"""
Module providing facilities for handling struct-like data.

Block bodies are decoded by walking a *schema*, a list of
``(name, field, default)`` tuples, over an in-memory stream of the body
bytes. Each field knows how to load (and encode) itself under the byte
order of the current section.
"""

import abc
import io
import logging
from collections import namedtuple

from pcapdecoder import strictness
from pcapdecoder.byteorder import pack_int, pack_uint, unpack_int, unpack_uint
from pcapdecoder.constants import BLOCK_ALIGNMENT, OPT_ENDOFOPT
from pcapdecoder.exceptions import (
    CorruptedFile,
    PcapDecoderException,
    StreamEmpty,
    TruncatedFile,
)
from pcapdecoder.utils import pack_ipv4, pack_ipv6, unpack_ipv4, unpack_ipv6

logger = logging.getLogger(__name__)

NRB_RECORD_END = 0
NRB_RECORD_IPv4 = 1
NRB_RECORD_IPv6 = 2


def padding_for(size, pad_block_size=BLOCK_ALIGNMENT):
    """Number of zero bytes needed after ``size`` bytes to reach alignment"""
    return (pad_block_size - (size % pad_block_size)) % pad_block_size


def read_bytes(stream, size):
    """
    Read the given amount of raw bytes from a stream.

    :param stream: the stream from which to read data
    :param size: the size to read, in bytes
    :returns: the read data
    :raises: :py:exc:`~pcapdecoder.exceptions.StreamEmpty` if zero bytes
        were read
    :raises: :py:exc:`~pcapdecoder.exceptions.TruncatedFile` if
        0 < bytes < size were read
    """

    if size == 0:
        return b""

    data = stream.read(size)
    if len(data) == 0:
        raise StreamEmpty("Zero bytes read from stream")
    if len(data) < size:
        raise TruncatedFile(
            "Trying to read {0} bytes, only got {1}".format(size, len(data))
        )
    return data


def read_bytes_padded(stream, size, pad_block_size=BLOCK_ALIGNMENT):
    """
    Read the given amount of bytes from a stream, then read and discard
    the zero padding up to the next ``pad_block_size`` boundary.

    Block bodies may legally end without the trailing padding of their
    last field, so missing padding bytes are tolerated.
    """

    data = read_bytes(stream, size)
    padding = padding_for(size, pad_block_size)
    if padding > 0:
        stream.read(padding)
    return data


def read_int(stream, size, byte_order, signed=False):
    """
    Read (and decode) an integer number from a binary stream.

    :param stream: an object providing a ``read()`` method
    :param size: the size, in bits, of the number to be read.
        Supported sizes are: 8, 16, 32 and 64 bits.
    :param byte_order: a :py:class:`~pcapdecoder.byteorder.ByteOrder`
    :param signed: whether a signed or unsigned number is required.
        Defaults to ``False`` (unsigned int).
    :return: the read integer number
    """
    data = read_bytes(stream, size // 8)
    if signed:
        return unpack_int(data, byte_order)
    return unpack_uint(data, byte_order)


def pack_padded(data, pad_block_size=BLOCK_ALIGNMENT):
    return bytes(data) + b"\x00" * padding_for(len(data), pad_block_size)


class StructField(abc.ABC):
    """Abstract base class for struct fields"""

    __slots__ = []

    @abc.abstractmethod
    def load(self, stream, byte_order, seen=None):
        pass

    @abc.abstractmethod
    def encode(self, value, byte_order):
        """Return the wire representation of ``value``"""

    def __repr__(self):
        return "{0}()".format(self.__class__.__name__)


class IntField(StructField):
    """
    Field containing an integer number.

    :param size: number size, in bits (8, 16, 32 or 64)
    :param signed: whether the number is signed. Defaults to False
    """

    __slots__ = ["size", "signed"]

    def __init__(self, size, signed=False):
        self.size = size  # in bits!
        self.signed = signed

    def load(self, stream, byte_order, seen=None):
        return read_int(stream, self.size, byte_order, signed=self.signed)

    def encode(self, number, byte_order):
        if not isinstance(number, int):
            raise TypeError("'{}' is not numeric".format(number))
        if self.signed:
            return pack_int(number, self.size // 8, byte_order)
        return pack_uint(number, self.size // 8, byte_order)

    def __repr__(self):
        return "{0}(size={1!r}, signed={2!r})".format(
            self.__class__.__name__, self.size, self.signed
        )


class PacketBytes(StructField):
    """
    Packet data whose length was given by an earlier field of the same
    block (``captured_len`` for packet blocks), followed by padding.
    """

    __slots__ = ["dependency"]

    def __init__(self, len_field):
        self.dependency = len_field

    def load(self, stream, byte_order, seen=None):
        if seen is None or self.dependency not in seen:
            raise PcapDecoderException(
                "PacketBytes dependent on field '{0}' which was never found".format(
                    self.dependency
                )
            )
        return read_bytes_padded(stream, seen[self.dependency])

    def encode(self, packet, byte_order):
        return pack_padded(packet)

    def __repr__(self):
        return "{0}({1!r})".format(self.__class__.__name__, self.dependency)


class OptionsField(StructField):
    """
    Field containing the trailing options of a block.

    :param options_class: the :py:class:`~pcapdecoder.options.Options`
        sub-class holding the schema for this block kind
    """

    __slots__ = ["options_class"]

    def __init__(self, options_class):
        self.options_class = options_class

    def load(self, stream, byte_order, seen=None):
        return self.options_class(read_options(stream, byte_order), byte_order)

    def encode(self, options, byte_order):
        return write_options(options.iter_raw(byte_order), byte_order)

    def __repr__(self):
        return "{0}({1})".format(self.__class__.__name__, self.options_class.__name__)


class ListField(StructField):
    """
    A variable amount of values of some other field type, loaded until the
    sub-field signals the end of the list by raising
    :py:exc:`~pcapdecoder.exceptions.StreamEmpty`.
    """

    __slots__ = ["subfield"]

    def __init__(self, subfield):
        self.subfield = subfield

    def load(self, stream, byte_order, seen=None):
        items = []
        while True:
            try:
                items.append(self.subfield.load(stream, byte_order))
            except StreamEmpty:
                return items

    def encode(self, items, byte_order):
        parts = [self.subfield.encode(item, byte_order) for item in items]
        parts.append(self.subfield.encode_end(byte_order))
        return b"".join(parts)

    def __repr__(self):
        return "{0}({1!r})".format(self.__class__.__name__, self.subfield)


NameRecord = namedtuple(
    "NameRecord", ("type", "address", "names", "raw"), defaults=(None, (), None)
)


class NameResolutionRecordField(StructField):
    """
    A single record of a name resolution block:

    - record type (uint16)
    - record length (uint16)
    - payload, padded to 32 bits

    IPv4 (``0x01``) and IPv6 (``0x02``) payloads are an address followed
    by NUL-separated names. Type ``0x00`` ends the list.
    """

    __slots__ = []

    _address_sizes = {NRB_RECORD_IPv4: 4, NRB_RECORD_IPv6: 16}

    def load(self, stream, byte_order, seen=None):
        # Running out of data is only a clean end before a record starts
        record_type = read_int(stream, 16, byte_order)
        if record_type == NRB_RECORD_END:
            stream.read(2)  # length of the end marker
            raise StreamEmpty("End marker reached")

        try:
            record_length = read_int(stream, 16, byte_order)
            data = read_bytes_padded(stream, record_length)
        except StreamEmpty as e:
            raise TruncatedFile(
                "Name record of type {0} runs past the end of the block".format(
                    record_type
                )
            ) from e

        size = self._address_sizes.get(record_type)
        if size is None or len(data) < size:
            return NameRecord(record_type, raw=data)

        if record_type == NRB_RECORD_IPv4:
            address = unpack_ipv4(data[:size])
        else:
            address = unpack_ipv6(data[:size])
        names = tuple(x.decode("utf-8", "replace") for x in data[size:].split(b"\x00") if x)
        return NameRecord(record_type, address, names)

    def encode(self, record, byte_order):
        if record.type == NRB_RECORD_IPv4:
            raw = pack_ipv4(record.address)
        elif record.type == NRB_RECORD_IPv6:
            raw = pack_ipv6(record.address)
        else:
            raw = record.raw
        if record.type in self._address_sizes:
            raw += b"".join(name.encode("utf-8") + b"\x00" for name in record.names)
        return (
            pack_uint(record.type, 2, byte_order)
            + pack_uint(len(raw), 2, byte_order)
            + pack_padded(raw)
        )

    def encode_end(self, byte_order):
        return pack_uint(NRB_RECORD_END, 4, byte_order)


def read_options(stream, byte_order):
    """
    Read the options found at the end of a block body.

    Each option is composed by:

    - option_code (uint16)
    - value_length (uint16)
    - value (value_length-sized binary data, padded to 32 bits)

    Reading stops at the end marker (an option with code ``0x0000``) or
    when the body has no room left for another option header; anything
    after the end marker is ignored.

    :returns: a list of ``(code, value)`` tuples, in file order
    """

    options = []
    while True:
        header = stream.read(4)
        if len(header) < 4:
            if header.strip(b"\x00"):
                strictness.problem(
                    "Ignoring {0} trailing bytes after last option".format(len(header))
                )
            return options

        code = unpack_uint(header[:2], byte_order)
        length = unpack_uint(header[2:], byte_order)
        if code == OPT_ENDOFOPT:
            return options

        try:
            value = read_bytes_padded(stream, length)
        except (StreamEmpty, TruncatedFile):
            strictness.problem(
                "Option {0} claims {1} bytes, past the end of the block; "
                "dropped".format(code, length)
            )
            return options
        logger.debug("    option %d: %d bytes", code, length)
        options.append((code, value))


def write_options(options, byte_order):
    """
    Encode ``(code, value)`` pairs, followed by the end marker.

    Options are optional: with none to write, nothing (not even the end
    marker) is produced.
    """
    options = list(options)
    if not options:
        return b""
    parts = []
    for code, value in options:
        parts.append(pack_uint(code, 2, byte_order))
        parts.append(pack_uint(len(value), 2, byte_order))
        parts.append(pack_padded(value))
    parts.append(pack_uint(OPT_ENDOFOPT, 4, byte_order))
    return b"".join(parts)


def struct_decode(schema, data, byte_order):
    """
    Decode a block body following a schema.

    :param schema:
        a list of ``(name, field, default)`` tuples, where ``field`` is a
        :py:class:`StructField` instance. ``default`` is used when building
        a block by hand and ignored here.
    :param data: the block body (bytes)
    :param byte_order: the :py:class:`~pcapdecoder.byteorder.ByteOrder`
        of the section
    :return: a dictionary mapping the field names to decoded data
    """

    stream = io.BytesIO(data)
    decoded = {}
    for name, field, default in schema:
        try:
            decoded[name] = field.load(stream, byte_order, seen=decoded)
        except (StreamEmpty, TruncatedFile) as e:
            # The block lengths matched, so its own fields are inconsistent
            raise CorruptedFile(
                "Block body ({0} bytes) ended inside field '{1}': {2}".format(
                    len(data), name, e
                )
            ) from e
    return decoded


def struct_encode(schema, values, byte_order):
    """Encode a mapping of field values into a block body"""
    return b"".join(
        field.encode(values[name], byte_order) for name, field, default in schema
    )
