class PcapDecoderException(Exception):
    """Base for all the pcapdecoder exceptions"""

    pass


class PcapDecoderWarning(Warning):
    """Base for all the pcapdecoder warnings"""

    pass


class FatalFormatError(PcapDecoderException):
    """
    The capture cannot be decoded any further.

    Raised when the position of the next block can no longer be trusted;
    the whole decode call is aborted and no partial result is returned.
    """

    pass


class BadMagic(FatalFormatError):
    """
    The byte order magic of a section header is neither 0x1A2B3C4D
    nor its byte-swapped form: the format is not recognized.
    """

    pass


class CorruptedFile(FatalFormatError):
    """
    Something is wrong with the block structure (mismatching or
    implausible block lengths, reserved block types), possibly due to
    data corruption.
    """

    pass


class TruncatedFile(FatalFormatError):
    """
    Not all the bytes required by a block could be read before the
    end of the data, but the read length was non-zero.
    """

    pass


class EncodeError(PcapDecoderException):
    """Indicate an error while encoding blocks"""

    pass


class StreamEmpty(PcapDecoderException):  # End of stream
    """
    Exactly zero bytes were read at a block boundary; usually it simply
    indicates we reached the end of the data.
    """

    pass


class PcapDecoderStrictnessError(PcapDecoderException):
    """A questionable condition was found while running in FORBID mode"""


class PcapDecoderStrictnessWarning(PcapDecoderWarning):
    """A questionable, but recoverable, condition was found in the data"""


class SkippedBlockWarning(PcapDecoderStrictnessWarning):
    """A block of unknown type was skipped and produced no record"""
