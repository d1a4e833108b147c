"""Shared fixtures for KidsGrowth tests."""

from collections.abc import Iterator
from zoneinfo import ZoneInfo

import pytest

from kidsgrowth.utils import dt_utils


@pytest.fixture(autouse=True)
def reset_default_timezone() -> Iterator[None]:
    """Run every test with UTC as the default zone and restore it afterwards."""
    previous = dt_utils.get_default_timezone()
    dt_utils.set_default_timezone(ZoneInfo("UTC"))
    yield
    dt_utils.set_default_timezone(previous)


@pytest.fixture
def new_york() -> ZoneInfo:
    """Return a zone with DST transitions."""
    return ZoneInfo("America/New_York")
