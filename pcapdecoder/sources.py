"""
Byte providers consumed by the decoder.

The decoder pulls every block through the same ``read(size)`` call, so an
in-memory buffer and a live stream go through the very same decoding
code. Sources return fewer bytes than asked only at the end of the data.
"""


class BufferSource(object):
    """
    Source over a contiguous, already available buffer.

    :param buffer: any object supporting the buffer protocol
    :param offset: cursor position to start reading from
    """

    __slots__ = ["buffer", "offset"]

    def __init__(self, buffer, offset=0):
        self.buffer = memoryview(buffer).cast("B")
        if not 0 <= offset <= len(self.buffer):
            raise ValueError(
                "Offset {0} outside of buffer ({1} bytes)".format(offset, len(self.buffer))
            )
        self.offset = offset

    def read(self, size):
        data = self.buffer[self.offset : self.offset + size].tobytes()
        self.offset += len(data)
        return data

    def tell(self):
        return self.offset

    @property
    def remaining(self):
        return len(self.buffer) - self.offset

    def __repr__(self):
        return "<{0} offset={1} size={2}>".format(
            self.__class__.__name__, self.offset, len(self.buffer)
        )


class StreamSource(object):
    """
    Source over a file-like object providing a ``read()`` method: a file
    opened in binary mode, a pipe, or ``socket.makefile("rb")``.

    Short reads (as returned by pipes and sockets) are retried until
    either the requested size is reached or the stream reports its end.
    """

    __slots__ = ["stream", "offset"]

    def __init__(self, stream):
        if not hasattr(stream, "read"):
            raise TypeError("{0!r} does not provide a read() method".format(stream))
        self.stream = stream
        self.offset = 0

    def read(self, size):
        chunks = []
        missing = size
        while missing > 0:
            chunk = self.stream.read(missing)
            if not chunk:
                break
            chunks.append(chunk)
            missing -= len(chunk)
        data = b"".join(chunks)
        self.offset += len(data)
        return data

    def tell(self):
        return self.offset

    @property
    def remaining(self):
        # Unknown until the stream ends
        return None

    def __repr__(self):
        return "<{0} offset={1} stream={2!r}>".format(
            self.__class__.__name__, self.offset, self.stream
        )


def as_source(obj):
    """Wrap ``obj`` in the appropriate source, unless it already is one"""
    if isinstance(obj, (BufferSource, StreamSource)):
        return obj
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BufferSource(obj)
    return StreamSource(obj)
