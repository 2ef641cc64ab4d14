"""
Status Query Tests
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest

from controller.status_query import StatusQuery
from simulator.core.elevator import MOVING
from simulator.implementations.memory.state_store import InMemoryStateStore


@pytest.fixture
def store():
    store = InMemoryStateStore(lambda: 0.0)
    store.initialize(3)
    return store


def test_whole_fleet_in_id_order(store):
    records = StatusQuery(store).status()
    assert [r.id for r in records] == [1, 2, 3]


def test_single_elevator(store):
    store.update_elevator(2, {'current_floor': 9})
    records = StatusQuery(store).status(2)
    assert len(records) == 1
    assert records[0].id == 2
    assert records[0].current_floor == 9


def test_unknown_elevator_gives_empty_list(store):
    assert StatusQuery(store).status(42) == []


def test_status_does_not_modify_store(store):
    query = StatusQuery(store)
    before = store.list_elevators()
    query.status()
    query.status(1)
    assert store.list_elevators() == before
    assert store.list_events() == []


def test_snapshot_wire_shape(store):
    store.update_elevator(1, {'state': MOVING})
    snapshot = StatusQuery(store).status(1)[0].to_dict()
    assert snapshot == {
        'id': 1,
        'current_floor': 1,
        'state': "Moving",
        'direction': "None",
        'job_queue': [],
    }
