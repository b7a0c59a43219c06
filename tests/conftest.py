import pytest

from pcapdecoder import strictness


@pytest.fixture
def strict_level():
    """Change the strictness level for one test only"""
    previous = strictness.get_strictness()
    yield strictness.set_strictness
    strictness.set_strictness(previous)
