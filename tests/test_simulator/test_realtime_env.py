"""
Wall-Clock Environment Tests

A fake monotonic timer stands in for real time.
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest

from simulator.infrastructure.realtime_env import WallClockEnvironment


class FakeTimer:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_catch_up_follows_wall_time():
    timer = FakeTimer()
    env = WallClockEnvironment(realtime_factor=1.0, timer=timer)

    timer.now += 2.5
    assert env.catch_up() == pytest.approx(2.5)
    assert env.now == pytest.approx(2.5)


def test_catch_up_processes_due_events_only():
    timer = FakeTimer()
    env = WallClockEnvironment(realtime_factor=2.0, timer=timer)
    fired = []

    def process():
        yield env.timeout(3)
        fired.append(env.now)
        yield env.timeout(10)
        fired.append(env.now)

    env.process(process())
    timer.now += 2.0  # 4 simulated seconds
    env.catch_up()

    assert fired == [3]
    assert env.now == pytest.approx(4.0)


def test_catch_up_without_elapsed_time_is_a_no_op():
    timer = FakeTimer()
    env = WallClockEnvironment(timer=timer)
    assert env.catch_up() == 0


def test_invalid_factor_rejected():
    with pytest.raises(ValueError):
        WallClockEnvironment(realtime_factor=0)
