"""
Pytest configuration and shared fixtures for timing analyzer tests.
"""
import json

import pytest

from timing_analyzer import StageTiming, Timer, TimingPath, initialize, stop_recording


class FakeClock:
    """Clock whose time only moves when a test advances it."""

    def __init__(self, start=0):
        self.now = start

    def nano_time(self):
        return self.now

    def advance(self, ns):
        self.now += ns


def make_timer(*samples):
    """Timer holding the given samples (nanoseconds)."""
    timer = Timer()
    for sample in samples:
        timer.add_sample(sample)
    return timer


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def timer_factory():
    return make_timer


@pytest.fixture
def recorder():
    """Initialized recorder for the test's context; recording is stopped afterwards."""
    rec = initialize()
    yield rec
    stop_recording()


@pytest.fixture
def root_path():
    return TimingPath("root", 1)


@pytest.fixture
def distributed_scenario(root_path):
    """
    root (seq 1, 100ns) with a distributed child (seq 2, 40ns) and a matching stage.
    """
    child = TimingPath("collect", 2, root_path, is_distributed=True)
    timers = {
        root_path: make_timer(100),
        child: make_timer(40),
    }
    stages = [StageTiming(stage_name="collect", stage_id="s1", duration=40)]
    return timers, stages, child


@pytest.fixture
def sample_snapshot_data():
    """Snapshot file content: load -> parse, plus a distributed count under load."""
    return {
        "timers": [
            {
                "path": [{"name": "load", "sequence_id": 1, "distributed": False}],
                "total_time_ns": 1000, "count": 1, "min_ns": 1000, "max_ns": 1000
            },
            {
                "path": [
                    {"name": "load", "sequence_id": 1, "distributed": False},
                    {"name": "parse", "sequence_id": 1, "distributed": False}
                ],
                "total_time_ns": 300, "count": 2, "min_ns": 100, "max_ns": 200
            },
            {
                "path": [
                    {"name": "load", "sequence_id": 1, "distributed": False},
                    {"name": "count", "sequence_id": 2, "distributed": True}
                ],
                "total_time_ns": 500, "count": 1, "min_ns": 500, "max_ns": 500
            }
        ]
    }


@pytest.fixture
def temp_json_file(tmp_path):
    """Create a temporary JSON file and return a helper function."""
    counter = {"n": 0}

    def _create_file(data, name=None):
        counter["n"] += 1
        file_path = tmp_path / (name or f"test_{counter['n']}.json")
        with open(file_path, "w") as f:
            json.dump(data, f)
        return str(file_path)

    return _create_file
