"""
Block dispatcher: frames the blocks of a capture, keeps track of the
byte order of the current section, and hands each block body to the
decoder of its kind.
"""

import logging

from pcapdecoder import strictness
from pcapdecoder.blocks import KNOWN_BLOCKS, SectionHeader
from pcapdecoder.byteorder import ByteOrder, detect_byte_order, unpack_uint
from pcapdecoder.constants import (
    BLOCK_ALIGNMENT,
    MIN_BLOCK_LENGTH,
    MIN_SECTION_HEADER_LENGTH,
)
from pcapdecoder.constants.block_types import (
    BLK_RESERVED,
    BLK_SECTION_HEADER,
    BLOCK_TYPE_NAMES,
    is_corrupted_marker,
)
from pcapdecoder.exceptions import (
    CorruptedFile,
    SkippedBlockWarning,
    StreamEmpty,
    TruncatedFile,
)
from pcapdecoder.section import Section
from pcapdecoder.sources import BufferSource, as_source

logger = logging.getLogger(__name__)

# Same bytes under both byte orders
SECTION_HEADER_TAG = BLK_SECTION_HEADER.to_bytes(4, "big")

BLOCK_HEADER_LENGTH = 8  # type + leading length


class Decoder(object):
    """
    pcap-ng block decoder.

    A decoder is either *scanning* (no section header seen yet, so no byte
    order is known) or *in a section*, whose byte order applies to every
    block until the next section header. Use one decoder per capture.

    Example usage:

        .. code-block:: python

            from pcapdecoder import Decoder

            with open('/tmp/mycapture.pcapng', 'rb') as fp:
                records = Decoder().decode_all(fp.read())

            # or, block by block:
            decoder = Decoder()
            with open('/tmp/mycapture.pcapng', 'rb') as fp:
                for block in decoder.iter_blocks(fp):
                    pass  # do something with the block...
    """

    __slots__ = ["byte_order", "current_section"]

    def __init__(self):
        self.byte_order = None
        self.current_section = None

    @property
    def scanning(self):
        return self.byte_order is None

    def decode_all(self, buffer):
        """
        Decode every block of an in-memory capture.

        :param buffer: the whole capture, as a bytes-like object
        :returns: the list of decoded blocks, in file order; blocks of
            unknown type are skipped
        :raises: :py:exc:`~pcapdecoder.exceptions.FatalFormatError` if the
            capture cannot be framed; no partial result is returned
        """
        source = BufferSource(buffer)
        if source.remaining < MIN_BLOCK_LENGTH:
            raise TruncatedFile(
                "Buffer too short to hold a block: {0} bytes".format(source.remaining)
            )

        records = []
        while source.remaining > 0:
            block = self.decode_block(source)
            if block is not None:
                records.append(block)
        logger.debug("Decoded %d blocks from %d bytes", len(records), source.tell())
        return records

    def decode_next(self, source):
        """
        Decode the next known block from a source.

        :param source: a :py:class:`~pcapdecoder.sources.BufferSource`, a
            :py:class:`~pcapdecoder.sources.StreamSource`, or a file-like
            object (wrapped on the fly; pass the same source on every call)
        :returns: the next block, or ``None`` once the source is exhausted
            at a block boundary
        :raises: :py:exc:`TypeError` for a bare bytes-like object, which
            has no position to resume from
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            raise TypeError(
                "decode_next() needs a source keeping its position across "
                "calls; wrap the buffer in a BufferSource"
            )
        source = as_source(source)
        while True:
            try:
                block = self.decode_block(source)
            except StreamEmpty:
                return None
            if block is not None:
                return block

    def iter_blocks(self, source):
        """Iterate over the blocks of a source, until its end"""
        source = as_source(source)
        while True:
            block = self.decode_next(source)
            if block is None:
                return
            yield block

    def decode_block(self, source):
        """
        Read and decode exactly one block from a source.

        :returns: the decoded block, or ``None`` if the block was skipped
        :raises: :py:exc:`~pcapdecoder.exceptions.StreamEmpty` if the source
            was already exhausted
        """
        start = source.tell()
        header = source.read(BLOCK_HEADER_LENGTH)
        if not header:
            raise StreamEmpty("Zero bytes read from source")
        if len(header) < BLOCK_HEADER_LENGTH:
            raise TruncatedFile(
                "Block header at offset {0}: expected {1} bytes, got {2}".format(
                    start, BLOCK_HEADER_LENGTH, len(header)
                )
            )

        raw_type, raw_length = header[:4], header[4:]
        prefix = b""
        if raw_type == SECTION_HEADER_TAG:
            # The byte order magic comes first: read it before the length
            # can be decoded.
            prefix = self._read(source, 4, start)
            byte_order = detect_byte_order(prefix)
        else:
            byte_order = self._current_byte_order(start)

        block_type = unpack_uint(raw_type, byte_order)
        block_length = unpack_uint(raw_length, byte_order)
        logger.debug(
            "Block 0x%08x (%s) at offset %d: %d bytes, %s endian",
            block_type,
            BLOCK_TYPE_NAMES.get(block_type, "unknown"),
            start,
            block_length,
            byte_order.name.lower(),
        )
        self._check_length(block_type, block_length, source, start)

        rest = self._read(source, block_length - BLOCK_HEADER_LENGTH - len(prefix), start)
        body = prefix + rest[:-4]
        trailing_length = unpack_uint(rest[-4:], byte_order)
        if trailing_length != block_length:
            raise CorruptedFile(
                "Mismatching block lengths at offset {0}: {1} and {2}".format(
                    start, block_length, trailing_length
                )
            )

        if block_type == BLK_SECTION_HEADER:
            return self._open_section(body, byte_order)

        block_class = KNOWN_BLOCKS.get(block_type)
        if block_class is None:
            self._skip_block(block_type, block_length, start)
            return None

        block = block_class.decode(body, byte_order, self.current_section)
        if self.current_section is not None:
            self.current_section.add(block)
        return block

    def _open_section(self, body, byte_order):
        block = SectionHeader.decode(body, byte_order)
        if byte_order is not self.byte_order:
            logger.debug("Switching to %s endian section", byte_order.name.lower())
        self.byte_order = byte_order
        self.current_section = Section(block)
        return block

    def _current_byte_order(self, offset):
        if self.byte_order is None:
            strictness.problem(
                "Block at offset {0} before any section header; "
                "assuming big endian".format(offset)
            )
            return ByteOrder.BIG
        return self.byte_order

    def _check_length(self, block_type, block_length, source, offset):
        """
        Make sure the length can be trusted to locate the next block.
        """
        minimum = MIN_BLOCK_LENGTH
        if block_type == BLK_SECTION_HEADER:
            minimum = MIN_SECTION_HEADER_LENGTH
        if block_length < minimum or block_length % BLOCK_ALIGNMENT != 0:
            raise CorruptedFile(
                "Implausible length {0} for block 0x{1:08X} at offset {2}".format(
                    block_length, block_type, offset
                )
            )
        if block_type == BLK_RESERVED:
            raise CorruptedFile(
                "Block type 0x00000000 is reserved and should not be used "
                "in capture files (offset {0})".format(offset)
            )
        if is_corrupted_marker(block_type):
            raise CorruptedFile(
                "Block type 0x{0:08X} is reserved to detect a corrupted file "
                "(offset {1})".format(block_type, offset)
            )
        remaining = source.remaining
        already_read = source.tell() - offset
        if remaining is not None and block_length - already_read > remaining:
            raise TruncatedFile(
                "Block 0x{0:08X} at offset {1} claims {2} bytes, only {3} "
                "left".format(block_type, offset, block_length, remaining + already_read)
            )

    def _skip_block(self, block_type, block_length, offset):
        msg = "Skipped block of unknown type 0x{0:08X} ({1} bytes) at offset {2}".format(
            block_type, block_length, offset
        )
        logger.warning(msg)
        strictness.problem(msg, SkippedBlockWarning)

    @staticmethod
    def _read(source, size, offset):
        data = source.read(size)
        if len(data) < size:
            raise TruncatedFile(
                "Block at offset {0}: trying to read {1} bytes, only got {2}".format(
                    offset, size, len(data)
                )
            )
        return data


def decode_all(buffer):
    """Decode a whole in-memory capture with a new :py:class:`Decoder`"""
    return Decoder().decode_all(buffer)


def iter_blocks(stream):
    """Iterate over the blocks of a stream with a new :py:class:`Decoder`"""
    return Decoder().iter_blocks(stream)
