"""
Policy applied when the decoder meets data that is questionable but
can still be decoded: unknown blocks, inconsistent lengths, repeated
or malformed options.
"""

import warnings
from enum import Enum

from pcapdecoder.exceptions import (
    PcapDecoderStrictnessError,
    PcapDecoderStrictnessWarning,
)


class Strictness(Enum):
    NONE = 0  # Decode silently
    WARN = 1  # Decode, but warn of potential issues
    FIX = 2  # Warn, and drop the offending data *if possible*
    FORBID = 3  # Raise exception on potential issues


strict_level = Strictness.WARN


def set_strictness(level):
    if not isinstance(level, Strictness):
        raise TypeError("expected a Strictness level, got {!r}".format(level))
    global strict_level
    strict_level = level


def get_strictness():
    return strict_level


def problem(msg, category=PcapDecoderStrictnessWarning):
    "Warn or raise an exception with the given message."
    if strict_level == Strictness.FORBID:
        raise PcapDecoderStrictnessError(msg)
    elif strict_level in (Strictness.WARN, Strictness.FIX):
        warnings.warn(category(msg), stacklevel=2)


def warn(msg, category=PcapDecoderStrictnessWarning):
    "Show a warning with the given message, unless running silently."
    if strict_level != Strictness.NONE:
        warnings.warn(category(msg), stacklevel=2)


def should_fix():
    return strict_level == Strictness.FIX
