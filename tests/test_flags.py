import pytest

from pcapdecoder.flags import (
    HashType,
    LinkLayerError,
    PacketBound,
    PacketFlags,
    ReceptionType,
)


def test_enums_unknown_values():
    assert PacketBound(3) is PacketBound.UNKNOWN
    assert ReceptionType(7) is ReceptionType.UNKNOWN
    assert HashType(0x42) is HashType.UNKNOWN
    assert HashType(2) is HashType.CRC32


def test_packet_flags_decoding():
    flags = PacketFlags(0x81000089)
    assert flags.packet_bound is PacketBound.INBOUND
    assert flags.reception_type is ReceptionType.MULTICAST
    assert flags.fcs_length == 4
    assert flags.link_layer_errors == [LinkLayerError.CRC, LinkLayerError.SYMBOL]
    assert int(flags) == 0x81000089


def test_packet_flags_empty():
    flags = PacketFlags(0)
    assert flags.packet_bound is PacketBound.UNKNOWN
    assert flags.reception_type is ReceptionType.UNKNOWN
    assert flags.fcs_length is None
    assert flags.link_layer_errors == []


def test_packet_flags_out_of_domain():
    # Direction 3 and reception type 7 are not defined
    flags = PacketFlags(0b11111)
    assert flags.packet_bound is PacketBound.UNKNOWN
    assert flags.reception_type is ReceptionType.UNKNOWN


def test_packet_flags_build():
    flags = PacketFlags.build(
        PacketBound.OUTBOUND,
        ReceptionType.PROMISCUOUS,
        fcs_length=2,
        errors=[LinkLayerError.PREAMBLE],
    )
    assert int(flags) == 0x40000052
    assert flags == PacketFlags(0x40000052)
    assert flags != PacketFlags(0)
    assert hash(flags) == hash(PacketFlags(0x40000052))


def test_packet_flags_range():
    with pytest.raises(ValueError):
        PacketFlags(1 << 32)
    with pytest.raises(ValueError):
        PacketFlags.build(fcs_length=16)
