import os

import pytest

from tests.mocks import make_png

# Keep unit tests from trying to reach an Opik backend.
os.environ.setdefault("OPIK_TRACK_DISABLE", "true")


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()
