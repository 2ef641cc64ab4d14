from typing import Any, Dict

from ..exceptions import InvalidTransition
from ..interfaces.state_store import IStateStore
from .elevator import (
    ElevatorRecord, EventRecord, STATES, DIRECTIONS,
    IDLE, MOVING, DOORS_OPEN, NO_DIRECTION, EVENT_STATE_UPDATE,
)

# Legal (old_state, new_state) pairs
ALLOWED_TRANSITIONS = {
    (IDLE, IDLE),
    (IDLE, MOVING),
    (MOVING, MOVING),
    (MOVING, DOORS_OPEN),
    (DOORS_OPEN, DOORS_OPEN),
    (DOORS_OPEN, IDLE),
}


class ElevatorStateMachine:
    """
    Guards every write to an elevator record.

    apply() merges a partial update into the stored record, refuses merges that
    break the elevator invariant, and writes one state_update audit event per
    accepted update. Callers are expected to send invariant-preserving updates;
    the checks here catch the ones that are not.
    """

    def __init__(self, store: IStateStore, max_floors: int, min_floor: int = 1, broker=None):
        """
        Args:
            store: State store holding the elevator records
            max_floors: Highest valid floor
            min_floor: Lowest valid floor
            broker: Optional MessageBroker; audit events are published on it
        """
        self.store = store
        self.max_floors = max_floors
        self.min_floor = min_floor
        self.broker = broker

    def read(self, elevator_id: int) -> ElevatorRecord:
        """Current snapshot (raises NotFound)"""
        return self.store.get_elevator(elevator_id)

    def apply(self, elevator_id: int, **partial: Any) -> ElevatorRecord:
        """
        Merge fields into an elevator and record a state_update event.

        Args:
            elevator_id: Target elevator
            **partial: Any of current_floor, state, direction, active_job

        Returns:
            The merged record

        Raises:
            NotFound: Unknown elevator id
            InvalidTransition: The merged record would violate the invariant
        """
        current = self.read(elevator_id)
        try:
            proposed = current.merged(partial)
        except ValueError as e:
            raise InvalidTransition(str(e)) from e
        try:
            self.validate(current, proposed)
        except InvalidTransition as e:
            now = self.store.clock()
            print(f"{now:.2f} [Elevator {elevator_id}] Refused update {partial}: {e}")
            raise

        merged = self.store.update_elevator(elevator_id, partial)
        if (current.state, current.direction) != (merged.state, merged.direction):
            now = self.store.clock()
            print(f"{now:.2f} [Elevator {elevator_id}] {current.state}/{current.direction} -> {merged.state}/{merged.direction}")
        self.record_event(elevator_id, EVENT_STATE_UPDATE, {
            'state': merged.state,
            'direction': merged.direction,
            'current_floor': merged.current_floor,
        })
        return merged

    def record_event(self, elevator_id: int, event_type: str, details: Dict[str, Any]) -> EventRecord:
        """Append an audit event and publish it if a broker is attached"""
        event = self.store.append_event(elevator_id, event_type, details)
        if self.broker is not None:
            self.broker.publish_event(event)
        return event

    def validate(self, current: ElevatorRecord, proposed: ElevatorRecord):
        """Raise InvalidTransition if moving from current to proposed is illegal"""
        if proposed.state not in STATES:
            raise InvalidTransition(f"unknown state {proposed.state!r}")
        if proposed.direction not in DIRECTIONS:
            raise InvalidTransition(f"unknown direction {proposed.direction!r}")

        is_idle = proposed.state == IDLE
        if is_idle != (proposed.direction == NO_DIRECTION) or is_idle != (proposed.active_job is None):
            raise InvalidTransition(
                f"state={proposed.state}, direction={proposed.direction}, "
                f"active_job={'set' if proposed.active_job else 'none'} are inconsistent"
            )

        if not (self.min_floor <= proposed.current_floor <= self.max_floors):
            raise InvalidTransition(
                f"floor {proposed.current_floor} outside [{self.min_floor}, {self.max_floors}]"
            )

        if (current.state, proposed.state) not in ALLOWED_TRANSITIONS:
            raise InvalidTransition(f"{current.state} -> {proposed.state} is not allowed")

        # Same job for the whole leg, including the door phase
        if current.state != IDLE and proposed.state != IDLE:
            if current.active_job.job_id != proposed.active_job.job_id:
                raise InvalidTransition(
                    f"elevator is busy with job {current.active_job.job_id}"
                )

        if proposed.current_floor != current.current_floor:
            if current.state != MOVING or proposed.state != MOVING:
                raise InvalidTransition("floor can only change while Moving")
            if abs(proposed.current_floor - current.current_floor) != 1:
                raise InvalidTransition(
                    f"floor step {current.current_floor} -> {proposed.current_floor} is not a single floor"
                )
