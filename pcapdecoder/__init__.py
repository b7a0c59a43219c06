# ----------------------------------------------------------------------
# Decoder for the pcap-ng capture file format
#
# See: https://www.ietf.org/archive/id/draft-ietf-opsawg-pcapng-02.html
# ----------------------------------------------------------------------

from .byteorder import ByteOrder  # noqa
from .decoder import Decoder, decode_all, iter_blocks  # noqa
from .exceptions import FatalFormatError, SkippedBlockWarning  # noqa
from .sources import BufferSource, StreamSource  # noqa
from .writer import BlockWriter, encode_block  # noqa
