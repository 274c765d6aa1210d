from datetime import datetime, timezone

import pytest

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
