import pytest

from pcapdecoder import strictness
from pcapdecoder.exceptions import (
    PcapDecoderStrictnessError,
    PcapDecoderStrictnessWarning,
    SkippedBlockWarning,
)
from pcapdecoder.strictness import Strictness


def test_default_level():
    assert strictness.get_strictness() is Strictness.WARN
    assert not strictness.should_fix()


def test_set_strictness_type(strict_level):
    with pytest.raises(TypeError):
        strict_level(3)


def test_problem_levels(strict_level, recwarn):
    strict_level(Strictness.NONE)
    strictness.problem("quiet")
    strictness.warn("quiet")
    assert len(recwarn) == 0

    strict_level(Strictness.FIX)
    assert strictness.should_fix()
    with pytest.warns(SkippedBlockWarning, match="fixable"):
        strictness.problem("fixable", SkippedBlockWarning)

    strict_level(Strictness.FORBID)
    with pytest.raises(PcapDecoderStrictnessError, match="forbidden"):
        strictness.problem("forbidden")
    # Plain warnings are never turned into errors
    with pytest.warns(PcapDecoderStrictnessWarning, match="just a warning"):
        strictness.warn("just a warning")
