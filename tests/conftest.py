from __future__ import annotations

import pytest

from tests.support import FakeClock, ManualTransport, RecordingIndicator, RecordingNotifier


@pytest.fixture
def manual_transport() -> ManualTransport:
    return ManualTransport()


@pytest.fixture
def indicator() -> RecordingIndicator:
    return RecordingIndicator()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
