"""
Dispatcher Tests

Timings used throughout: 1.0s per floor, 0.5s per door action, 20 floors.
Leg 2 of a job starts |pickup - current| * 1.0 + 2 * 0.5 seconds after the call.
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
import simpy

from config.dispatch import DispatchConfig, BuildingConfig, ElevatorConfig, TimingConfig
from controller.dispatcher import INVALID_FLOORS_MESSAGE, NO_IDLE_ELEVATORS_MESSAGE, DISPATCHED_MESSAGE
from controller.system import build_system
from simulator.core.elevator import IDLE, MOVING, DOORS_OPEN, UP, DOWN, NO_DIRECTION
from simulator.core.movement import LEG_COMPLETED, LEG_CANCELLED, LEG_REJECTED, LEG_FAILED
from simulator.exceptions import StoreError
from simulator.implementations.memory.state_store import InMemoryStateStore


def make_system(num_elevators=2, floors=None, max_floors=20, store=None, env=None):
    """Build a system and place elevators at the given floors (default: all at 1)"""
    config = DispatchConfig(
        building=BuildingConfig(max_floors=max_floors),
        elevator=ElevatorConfig(num_elevators=num_elevators),
        timing=TimingConfig(floor_travel_time_ms=1000, door_action_time_ms=500),
    )
    system = build_system(config, env=env, store=store)
    for elevator_id, floor in enumerate(floors or [], start=1):
        system.store.update_elevator(elevator_id, {'current_floor': floor})
    return system


def test_two_car_scenario_picks_nearest_and_completes_both_legs():
    system = make_system(floors=[1, 10])
    env, store = system.env, system.store

    result = system.dispatcher.call(5, 15)

    assert result.success is True
    assert result.elevator_id == 1  # distance 4 beats distance 5
    assert result.status == MOVING
    assert result.message == DISPATCHED_MESSAGE
    assert result.job_id

    record = store.get_elevator(1)
    assert (record.state, record.direction) == (MOVING, UP)
    assert store.get_elevator(2).state == IDLE

    env.run(until=4.25)
    record = store.get_elevator(1)
    assert (record.current_floor, record.state) == (5, DOORS_OPEN)

    env.run(until=4.75)
    record = store.get_elevator(1)
    assert (record.current_floor, record.state, record.direction) == (5, IDLE, NO_DIRECTION)

    env.run(until=5.25)
    record = store.get_elevator(1)
    assert (record.current_floor, record.state, record.direction) == (5, MOVING, UP)
    assert record.active_job.job_id == result.job_id
    assert record.active_job.end_floor == 15

    env.run(until=16)
    record = store.get_elevator(1)
    assert record.current_floor == 15
    assert record.state == IDLE
    assert record.direction == NO_DIRECTION
    assert record.active_job is None


def test_job_process_reports_completion_at_estimated_time():
    system = make_system(floors=[3])
    result = system.dispatcher.call(7, 2)
    job = system.dispatcher.jobs[result.job_id]

    assert system.env.run(until=job) == LEG_COMPLETED
    # leg 1: 4 floors + door open; door close; leg 2: 5 floors + door open
    assert system.env.now == pytest.approx(4 + 0.5 + 0.5 + 5 + 0.5)
    assert system.store.get_elevator(1).current_floor == 2
    assert result.job_id not in system.dispatcher.jobs


def test_call_event_precedes_movement():
    system = make_system()
    result = system.dispatcher.call(3, 8)

    events = system.store.list_events()
    assert events[0].event_type == "call"
    assert events[0].elevator_id == result.elevator_id
    assert events[0].details == {'start_floor': 3, 'end_floor': 8, 'job_id': result.job_id}
    assert events[1].event_type == "state_update"
    assert events[1].details['state'] == MOVING


def test_ties_go_to_lowest_id():
    system = make_system(num_elevators=3, floors=[7, 3, 3])
    result = system.dispatcher.call(5, 9)
    assert result.elevator_id == 1

    system = make_system(num_elevators=3, floors=[12, 3, 7])
    result = system.dispatcher.call(5, 9)
    assert result.elevator_id == 2


def test_only_idle_elevators_are_considered():
    system = make_system(floors=[1, 20])
    first = system.dispatcher.call(2, 3)
    assert first.elevator_id == 1

    second = system.dispatcher.call(1, 4)
    assert second.success is True
    assert second.elevator_id == 2


def test_no_idle_elevator_rejects_without_mutation():
    system = make_system(num_elevators=1)
    assert system.dispatcher.call(3, 6).success is True

    events_before = len(system.store.list_events())
    record_before = system.store.get_elevator(1)

    result = system.dispatcher.call(2, 9)

    assert result.success is False
    assert result.message == NO_IDLE_ELEVATORS_MESSAGE
    assert result.job_id is None
    assert len(system.store.list_events()) == events_before
    assert system.store.get_elevator(1) == record_before


def test_elevator_between_legs_is_not_reassigned():
    system = make_system(num_elevators=1)
    system.dispatcher.call(3, 5)

    system.env.run(until=2.75)  # leg 1 done, waiting for leg 2
    assert system.store.get_elevator(1).state == IDLE

    result = system.dispatcher.call(4, 8)
    assert result.success is False
    assert result.message == NO_IDLE_ELEVATORS_MESSAGE

    system.env.run(until=10)
    assert system.store.get_elevator(1).current_floor == 5
    assert system.dispatcher.call(4, 8).success is True


@pytest.mark.parametrize("start_floor, end_floor", [
    (4, 4),
    (21, 3),
    (3, 21),
    (0, 5),
    (5, -1),
])
def test_invalid_floors_rejected_without_mutation(start_floor, end_floor):
    system = make_system()
    elevators_before = system.store.list_elevators()

    result = system.dispatcher.call(start_floor, end_floor)

    assert result.success is False
    assert result.message == INVALID_FLOORS_MESSAGE
    assert system.store.list_events() == []
    assert system.store.list_elevators() == elevators_before


def test_single_elevator_same_floor_call():
    system = make_system(num_elevators=1)
    result = system.dispatcher.call(1, 1)

    assert result.success is False
    assert result.message == "Invalid floor numbers."
    record = system.store.get_elevator(1)
    assert (record.state, record.current_floor) == (IDLE, 1)


def test_job_ids_are_unique():
    system = make_system(num_elevators=2)
    job_ids = set()
    for i in range(6):
        result = system.dispatcher.call(2 + i, 14 + i)
        assert result.success is True
        job_ids.add(result.job_id)
        system.env.run(until=system.dispatcher.jobs[result.job_id])
    assert len(job_ids) == 6


def test_pickup_at_current_floor():
    system = make_system(num_elevators=1, floors=[5])
    result = system.dispatcher.call(5, 8)
    assert result.success is True
    assert system.store.get_elevator(1).direction == DOWN  # zero-length leg 1

    system.env.run(until=0.25)
    assert system.store.get_elevator(1).state == DOORS_OPEN
    system.env.run(until=1.25)
    record = system.store.get_elevator(1)
    assert (record.state, record.direction) == (MOVING, UP)

    system.env.run(until=system.dispatcher.jobs[result.job_id])
    assert system.env.now == pytest.approx(0.5 + 0.5 + 3 + 0.5)
    assert system.store.get_elevator(1).current_floor == 8


def test_leg_two_skipped_when_elevator_not_at_pickup():
    system = make_system(num_elevators=1)
    result = system.dispatcher.call(3, 9)
    job = system.dispatcher.jobs[result.job_id]

    system.env.run(until=2.75)
    # Out-of-band write between the legs
    system.store.update_elevator(1, {'current_floor': 6})

    assert system.env.run(until=job) == LEG_REJECTED
    record = system.store.get_elevator(1)
    assert (record.state, record.current_floor) == (IDLE, 6)
    # Reservation released: the elevator can be dispatched again
    assert system.dispatcher.call(6, 2).success is True


def test_elevator_deleted_during_leg_one():
    system = make_system(floors=[1, 20])
    result = system.dispatcher.call(6, 2)
    job = system.dispatcher.jobs[result.job_id]

    system.env.run(until=2.5)
    system.store.delete_elevator(result.elevator_id)

    assert system.env.run(until=job) == LEG_CANCELLED
    assert [e.id for e in system.store.list_elevators()] == [2]
    assert system.store.get_elevator(2).state == IDLE


def test_full_trip_event_trail():
    system = make_system(num_elevators=1)
    result = system.dispatcher.call(2, 4)
    system.env.run(until=system.dispatcher.jobs[result.job_id])

    events = system.store.list_events()
    types = [e.event_type for e in events]
    assert types[0] == "call"
    assert types.count("arrival") == 2
    assert types.count("door_close") == 2
    timestamps = [e.timestamp for e in events]
    assert timestamps == sorted(timestamps)
    arrivals = [e.details['current_floor'] for e in events if e.event_type == "arrival"]
    assert arrivals == [2, 4]


class FailingStore(InMemoryStateStore):
    def list_elevators(self):
        raise StoreError("disk on fire")


def test_store_errors_propagate_to_caller():
    system = make_system()
    system.dispatcher.state_machine.store = FailingStore(lambda: 0.0)

    with pytest.raises(StoreError):
        system.dispatcher.call(2, 5)


class FlakyStore(InMemoryStateStore):
    """Fails the next `failures` floor-step writes"""

    def __init__(self, clock, failures=1):
        super().__init__(clock)
        self.failures = failures

    def update_elevator(self, elevator_id, partial):
        if 'current_floor' in partial and self.failures > 0:
            self.failures -= 1
            raise StoreError("disk I/O error")
        return super().update_elevator(elevator_id, partial)


def test_store_failure_during_a_step_ends_only_that_job():
    env = simpy.Environment()
    system = make_system(store=FlakyStore(lambda: env.now), env=env)
    result = system.dispatcher.call(5, 10)
    job = system.dispatcher.jobs[result.job_id]

    system.env.run(until=1.5)  # the first floor step fails here

    assert job.triggered
    assert job.value == LEG_FAILED
    assert result.job_id not in system.dispatcher.jobs
    assert not system.dispatcher.is_reserved(result.elevator_id)

    # The other elevator keeps working
    other = system.dispatcher.call(2, 4)
    assert other.success is True
    assert other.elevator_id == 2
    system.env.run(until=system.dispatcher.jobs[other.job_id])
    assert system.store.get_elevator(2).current_floor == 4
