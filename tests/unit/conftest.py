import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
####

import pytest

from bolt21guard.tracker import PaymentRiskTracker


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock(1_700_000_000.0)


@pytest.fixture
def tracker(clock):
    return PaymentRiskTracker(
        window_seconds=300,
        short_threshold=100_000,
        daily_threshold=500_000,
        clock=clock,
    )
