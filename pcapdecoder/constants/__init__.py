"""Generic constants"""

# Byte order magic, as read in big endian order
# ----------------------------------------

BYTE_ORDER_MAGIC = 0x1A2B3C4D
BYTE_ORDER_MAGIC_INVERSE = 0x4D3C2B1A

# Section length of a section header not carrying one (64bit "-1")
SECTION_LENGTH_UNSPECIFIED = -1

# Block framing
# ----------------------------------------

# type tag + leading length + trailing length
MIN_BLOCK_LENGTH = 12
# ..plus byte order magic, version and section length
MIN_SECTION_HEADER_LENGTH = 28
BLOCK_ALIGNMENT = 4

# Options common to every block kind
# ----------------------------------------

OPT_ENDOFOPT = 0
OPT_COMMENT = 1
OPT_CUSTOM_STR_SAFE = 2988
OPT_CUSTOM_BYTES_SAFE = 2989
OPT_CUSTOM_STR = 19372
OPT_CUSTOM_BYTES = 19373
