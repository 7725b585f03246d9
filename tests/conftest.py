import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from underbar import VirtualTimeline


@pytest.fixture
def timeline():
    """Manual clock + scheduler starting at t=0ms."""
    return VirtualTimeline()


@pytest.fixture
def calls():
    """Records every invocation of the function it returns."""
    recorded = []

    def record(*args, **kwargs):
        recorded.append((args, kwargs))
        return len(recorded)

    record.log = recorded
    return record
