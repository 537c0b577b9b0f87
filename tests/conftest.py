import os
import random

import pytest

# Qt widgets in the smoke tests need a platform plugin without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from app_clock import ManualTickSource
from app_config import AppConfig
from app_core import EventDispatcher, FakeClock


@pytest.fixture()
def fake_clock():
    return FakeClock()


@pytest.fixture()
def tick_source():
    return ManualTickSource()


@pytest.fixture()
def dispatcher(tick_source, fake_clock):
    return EventDispatcher(
        config=AppConfig(),
        tick_source=tick_source,
        rng=random.Random(1234),
        clock=fake_clock,
    )
