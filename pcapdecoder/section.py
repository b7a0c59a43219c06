"""
Bookkeeping of the blocks which other blocks of the same section refer
to: interfaces (by position) and their statistics.
"""

from pcapdecoder.blocks import InterfaceDescription, InterfaceStatistics
from pcapdecoder.utils import DEFAULT_TIMESTAMP_RESOLUTION


class Section(object):
    """
    A run of blocks sharing the byte order of their section header.

    Records never point back to their section; use :py:meth:`interface_for`
    to find the interface a packet or statistics block refers to.
    """

    __slots__ = ["header", "interfaces", "interface_stats"]

    def __init__(self, header):
        self.header = header
        self.interfaces = []
        self.interface_stats = {}

    @property
    def byte_order(self):
        return self.header.byte_order

    def add(self, block):
        """Register a block decoded within this section"""
        if isinstance(block, InterfaceDescription):
            self.interfaces.append(block)
        elif isinstance(block, InterfaceStatistics):
            self.interface_stats[block.interface_id] = block

    def get_interface(self, interface_id):
        try:
            return self.interfaces[interface_id]
        except IndexError:
            return None

    def interface_for(self, block):
        return self.get_interface(block.interface_id)

    def statistics_for(self, interface_id):
        return self.interface_stats.get(interface_id)

    def timestamp_seconds(self, block):
        """
        Convert the raw timestamp of a block to seconds since the epoch,
        using the resolution and offset of its interface (microseconds and
        no offset when the interface is not known).
        """
        interface = self.interface_for(block)
        if interface is None:
            return block.timestamp * DEFAULT_TIMESTAMP_RESOLUTION
        return (
            block.timestamp * interface.timestamp_resolution
            + interface.options.timestamp_offset
        )

    def __repr__(self):
        return "<{0} byte_order={1} interfaces={2}>".format(
            self.__class__.__name__, self.byte_order.name, len(self.interfaces)
        )
