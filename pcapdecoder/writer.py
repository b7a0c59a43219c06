from pcapdecoder.blocks import Block, SectionHeader
from pcapdecoder.byteorder import pack_uint
from pcapdecoder.constants import MIN_BLOCK_LENGTH
from pcapdecoder.exceptions import EncodeError
from pcapdecoder.structs import pack_padded


def encode_block(block):
    """
    Frame a block: type, total length, padded body, total length again,
    all under the byte order of the block.
    """
    if not isinstance(block, Block):
        raise TypeError("not a pcap-ng block: {0!r}".format(block))
    body = pack_padded(block.encode())
    block_length = MIN_BLOCK_LENGTH + len(body)
    byte_order = block.byte_order
    return b"".join(
        (
            pack_uint(block.magic_number, 4, byte_order),
            pack_uint(block_length, 4, byte_order),
            body,
            pack_uint(block_length, 4, byte_order),
        )
    )


class BlockWriter(object):
    """
    pcap-ng block writer.

    Every block written must share the byte order of the section header
    written before it; writing a new section header starts a new section.

    :param stream: a file-like object providing a ``write()`` method
    """

    __slots__ = ["stream", "current_section"]

    def __init__(self, stream):
        self.stream = stream
        self.current_section = None

    def write_block(self, block):
        if isinstance(block, SectionHeader):
            self.current_section = block
        elif self.current_section is None:
            raise EncodeError("a section header must be written first")
        elif block.byte_order is not self.current_section.byte_order:
            raise EncodeError(
                "{0} is {1} endian, current section is {2} endian".format(
                    block.__class__.__name__,
                    block.byte_order.name.lower(),
                    self.current_section.byte_order.name.lower(),
                )
            )
        data = encode_block(block)
        self.stream.write(data)
        return len(data)

    def write_blocks(self, blocks):
        return sum(self.write_block(block) for block in blocks)
