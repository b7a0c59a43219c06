# pcap-ng block types

BLK_RESERVED = 0x00000000  # Reserved
BLK_INTERFACE = 0x00000001  # Interface Description Block
BLK_PACKET = 0x00000002  # Packet Block (obsolete)
BLK_PACKET_SIMPLE = 0x00000003  # Simple Packet Block
BLK_NAME_RESOLUTION = 0x00000004  # Name Resolution Block
BLK_INTERFACE_STATS = 0x00000005  # Interface Statistics Block
BLK_ENHANCED_PACKET = 0x00000006  # Enhanced Packet Block

# Same value under both byte orders, so it can be recognized before the
# byte order of its section is known.
BLK_SECTION_HEADER = 0x0A0D0D0A

# Reserved, used to detect trace files corrupted by file transfers
# in text mode (CR/LF translation).
BLK_RESERVED_CORRUPTED = [
    (0x0A0D0A00, 0x0A0D0AFF),
    (0x000A0D0A, 0xFF0A0D0A),
    (0x000A0D0D, 0xFF0A0D0D),
    (0x0D0D0A00, 0x0D0D0AFF),
]


def is_corrupted_marker(block_type):
    """Tell whether a block type falls in one of the reserved ranges"""
    for low, high in BLK_RESERVED_CORRUPTED:
        # Each range only lets a single byte vary
        mask = ~(low ^ high) & 0xFFFFFFFF
        if block_type & mask == low & mask:
            return True
    return False


BLOCK_TYPE_NAMES = {
    BLK_SECTION_HEADER: "Section Header",
    BLK_INTERFACE: "Interface Description",
    BLK_PACKET: "Packet",
    BLK_PACKET_SIMPLE: "Simple Packet",
    BLK_NAME_RESOLUTION: "Name Resolution",
    BLK_INTERFACE_STATS: "Interface Statistics",
    BLK_ENHANCED_PACKET: "Enhanced Packet",
}
