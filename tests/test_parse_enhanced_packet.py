import pytest

from pcapdecoder.blocks import EnhancedPacket, InterfaceDescription, SectionHeader
from pcapdecoder.byteorder import ByteOrder
from pcapdecoder.decoder import Decoder
from pcapdecoder.exceptions import (
    CorruptedFile,
    PcapDecoderStrictnessError,
    PcapDecoderWarning,
)
from pcapdecoder.flags import HashType, LinkLayerError, PacketBound, ReceptionType
from pcapdecoder.strictness import Strictness

SECTION_HEADER_BE = (
    b"\x0a\x0d\x0d\x0a"  # Magic number
    b"\x00\x00\x00\x20"  # Block size (32 bytes)
    b"\x1a\x2b\x3c\x4d"  # Byte order magic
    b"\x00\x01\x00\x00"  # Version
    b"\xff\xff\xff\xff\xff\xff\xff\xff"  # Undefined section length
    b"\x00\x00\x00\x00"  # Empty options
    b"\x00\x00\x00\x20"  # Block size (32 bytes)
)

SECTION_HEADER_LE = (
    b"\x0a\x0d\x0d\x0a"  # Magic number
    b"\x20\x00\x00\x00"  # Block size (32 bytes)
    b"\x4d\x3c\x2b\x1a"  # Byte order magic
    b"\x01\x00\x00\x00"  # Version
    b"\xff\xff\xff\xff\xff\xff\xff\xff"  # Undefined section length
    b"\x00\x00\x00\x00"  # Empty options
    b"\x20\x00\x00\x00"  # Block size (32 bytes)
)

INTERFACE_LE = (
    b"\x01\x00\x00\x00"  # Magic number
    b"\x14\x00\x00\x00"  # Block size (20 bytes)
    b"\x01\x00"  # Link type
    b"\x00\x00"  # Reserved
    b"\xff\xff\x00\x00"  # Snapshot length
    b"\x14\x00\x00\x00"  # Block size (20 bytes)
)


def test_read_block_enhanced_packet_bigendian():
    data = SECTION_HEADER_BE + (
        # ---------- Interface description, microseconds
        b"\x00\x00\x00\x01"  # Magic number
        b"\x00\x00\x00\x20"  # Block size (32 bytes)
        b"\x00\x01"  # Link type
        b"\x00\x00"  # Reserved
        b"\x00\x00\xff\xff"  # Snapshot length
        b"\x00\x09\x00\x01"  # if_tsresol, 1 byte
        b"\x06\x00\x00\x00"  # resolution: microseconds
        b"\x00\x00\x00\x00"  # End of options
        b"\x00\x00\x00\x20"  # Block size (32 bytes)
        # ---------- Enhanced packet
        b"\x00\x00\x00\x06"  # Magic number
        b"\x00\x00\x00\x30"  # Block size (48 bytes)
        b"\x00\x00\x00\x00"  # Interface id (first one)
        b"\x00\x04\xf8\x1e"  # Timestamp (high)
        b"\x3c\x3e\xd5\xa9"  # Timestamp (low)
        b"\x00\x00\x00\x0e"  # Captured length (14)
        b"\x00\x00\x00\x0e"  # Original length (14)
        # Packet data: an ethernet header
        b"\xff\xff\xff\xff\xff\xff"
        b"\x00\x1b\x21\xaa\xbb\xcc"
        b"\x08\x00"
        b"\x00\x00"  # Padding
        # No options
        b"\x00\x00\x00\x30"  # Block size (48 bytes)
    )

    decoder = Decoder()
    blocks = decoder.decode_all(data)
    assert isinstance(blocks[0], SectionHeader)
    assert isinstance(blocks[1], InterfaceDescription)
    assert isinstance(blocks[2], EnhancedPacket)

    block = blocks[2]
    assert block.byte_order is ByteOrder.BIG
    assert block.interface_id == 0
    assert block.timestamp_high == 0x0004F81E
    assert block.timestamp_low == 0x3C3ED5A9
    assert block.timestamp == 0x0004F81E3C3ED5A9
    assert block.captured_len == 14
    assert block.packet_len == 14
    assert block.packet_data == (
        b"\xff\xff\xff\xff\xff\xff" b"\x00\x1b\x21\xaa\xbb\xcc" b"\x08\x00"
    )
    assert not block.truncated
    assert len(block.options) == 0

    section = decoder.current_section
    assert section.interface_for(block) is blocks[1]
    assert section.timestamp_seconds(block) == pytest.approx(1398708650.3008409)


def test_read_block_enhanced_packet_littleendian_timestamp_halves():
    data = SECTION_HEADER_LE + INTERFACE_LE + (
        b"\x06\x00\x00\x00"  # Magic number
        b"\x28\x00\x00\x00"  # Block size (40 bytes)
        b"\x00\x00\x00\x00"  # Interface id (first one)
        b"\x1e\xf8\x04\x00"  # Timestamp (high)
        b"\xa9\xd5\x3e\x3c"  # Timestamp (low)
        b"\x05\x00\x00\x00"  # Captured length (5)
        b"\x40\x00\x00\x00"  # Original length (64)
        b"hello\x00\x00\x00"  # Packet data + padding
        b"\x28\x00\x00\x00"  # Block size (40 bytes)
    )

    block = Decoder().decode_all(data)[2]
    assert isinstance(block, EnhancedPacket)
    assert block.byte_order is ByteOrder.LITTLE
    assert block.timestamp == 0x0004F81E3C3ED5A9
    assert block.captured_len == 5
    assert block.packet_len == 64
    assert block.packet_data == b"hello"
    assert block.truncated


def test_read_block_enhanced_packet_with_options():
    data = SECTION_HEADER_BE + (
        b"\x00\x00\x00\x06"  # Magic number
        b"\x00\x00\x00\x5c"  # Block size (92 bytes)
        b"\x00\x00\x00\x00"  # Interface id (first one)
        b"\x00\x00\x00\x01"  # Timestamp (high)
        b"\x00\x00\x00\x02"  # Timestamp (low)
        b"\x00\x00\x00\x05"  # Captured length (5)
        b"\x00\x00\x00\x05"  # Original length (5)
        b"hello\x00\x00\x00"  # Packet data + padding
        b"\x00\x01\x00\x0a"  # opt_comment, 10 bytes
        b"0123456789\x00\x00"
        b"\x00\x02\x00\x04"  # epb_flags, 4 bytes
        b"\x81\x00\x00\x89"  # inbound, multicast, FCS 4, CRC + symbol errors
        b"\x00\x03\x00\x05"  # epb_hash, 5 bytes
        b"\x02\xde\xad\xbe\xef\x00\x00\x00"  # CRC32
        b"\x00\x04\x00\x08"  # epb_dropcount, 8 bytes
        b"\x00\x00\x00\x00\x00\x00\x00\x07"
        b"\x00\x00\x00\x00"  # End of options
        b"\x00\x00\x00\x5c"  # Block size (92 bytes)
    )

    block = Decoder().decode_all(data)[1]
    assert isinstance(block, EnhancedPacket)
    assert block.timestamp == (1 << 32) | 2
    assert block.packet_data == b"hello"

    options = block.options
    assert options.comment == "0123456789"
    assert options.packet_bound is PacketBound.INBOUND
    assert options.reception_type is ReceptionType.MULTICAST
    assert options.fcs_length == 4
    assert options.link_layer_errors == [LinkLayerError.CRC, LinkLayerError.SYMBOL]
    assert options.hash_type is HashType.CRC32
    assert options.hash_value == b"\xde\xad\xbe\xef"
    assert options.drop_count == 7


def test_read_block_enhanced_packet_captured_longer_than_original():
    data = SECTION_HEADER_LE + INTERFACE_LE + (
        b"\x06\x00\x00\x00"  # Magic number
        b"\x28\x00\x00\x00"  # Block size (40 bytes)
        b"\x00\x00\x00\x00"  # Interface id (first one)
        b"\x00\x00\x00\x00"  # Timestamp (high)
        b"\x00\x00\x00\x00"  # Timestamp (low)
        b"\x08\x00\x00\x00"  # Captured length (8)
        b"\x04\x00\x00\x00"  # Original length (4)
        b"abcdefgh"  # Packet data
        b"\x28\x00\x00\x00"  # Block size (40 bytes)
    )

    with pytest.warns(PcapDecoderWarning, match="exceeds original packet length"):
        block = Decoder().decode_all(data)[2]

    # Both lengths are kept as found
    assert block.captured_len == 8
    assert block.packet_len == 4
    assert block.packet_data == b"abcdefgh"


def test_read_block_enhanced_packet_captured_longer_than_original_forbidden(
    strict_level,
):
    strict_level(Strictness.FORBID)
    body = (
        b"\x00\x00\x00\x00"  # Interface id (first one)
        b"\x00\x00\x00\x00"  # Timestamp (high)
        b"\x00\x00\x00\x00"  # Timestamp (low)
        b"\x00\x00\x00\x08"  # Captured length (8)
        b"\x00\x00\x00\x04"  # Original length (4)
        b"abcdefgh"  # Packet data
    )

    with pytest.raises(PcapDecoderStrictnessError, match="exceeds original packet length"):
        EnhancedPacket.decode(body, ByteOrder.BIG)


def test_read_block_enhanced_packet_empty():
    data = SECTION_HEADER_LE + INTERFACE_LE + (
        b"\x06\x00\x00\x00"  # Magic number
        b"\x20\x00\x00\x00"  # Block size (32 bytes)
        b"\x00\x00\x00\x00"  # Interface id (first one)
        b"\x00\x00\x00\x00"  # Timestamp (high)
        b"\x00\x00\x00\x00"  # Timestamp (low)
        b"\x00\x00\x00\x00"  # Captured length (0)
        b"\x00\x00\x00\x00"  # Original length (0)
        b"\x20\x00\x00\x00"  # Block size (32 bytes)
    )

    block = Decoder().decode_all(data)[2]
    assert block.packet_data == b""
    assert block.captured_len == 0
    assert len(block.options) == 0
    assert block.options.packet_bound is PacketBound.UNKNOWN


def test_read_block_enhanced_packet_data_past_end_of_block():
    body = (
        b"\x00\x00\x00\x00"  # Interface id (first one)
        b"\x00\x00\x00\x00"  # Timestamp (high)
        b"\x00\x00\x00\x00"  # Timestamp (low)
        b"\x00\x00\x01\x00"  # Captured length (256)
        b"\x00\x00\x01\x00"  # Original length (256)
        b"only a few bytes"
    )

    with pytest.raises(CorruptedFile):
        EnhancedPacket.decode(body, ByteOrder.BIG)


def test_enhanced_packet_is_read_only():
    block = EnhancedPacket(packet_data=b"spam")
    with pytest.raises(AttributeError):
        block.packet_data = b"eggs"
    with pytest.raises(AttributeError):
        block.no_such_field
