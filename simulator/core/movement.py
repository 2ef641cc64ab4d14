import simpy

from ..exceptions import InvalidTransition, NotFound, StoreError
from .elevator import (
    Job, IDLE, MOVING, DOORS_OPEN, UP, DOWN, NO_DIRECTION,
    EVENT_ARRIVAL, EVENT_DOOR_CLOSE,
)
from .state_machine import ElevatorStateMachine

# Leg outcomes (value of the process returned by start_leg)
LEG_COMPLETED = "Completed"
LEG_CANCELLED = "Cancelled"  # elevator record vanished mid-flight
LEG_REJECTED = "Rejected"    # a step was refused by the state machine
LEG_FAILED = "Failed"        # the store failed during a step


class MovementSimulator:
    """
    Drives one elevator through a single leg, floor by floor.

    A leg is a chain of SimPy timeouts: one floor_travel_time per floor, then
    the arrival door sequence (DoorsOpen, one door_action_time, Idle). Every
    step re-reads the elevator from the store before writing, so nothing is
    carried over from a stale snapshot.

    Nothing after the leg is decided here. Callers wait on the returned
    process to learn how the leg ended.
    """

    def __init__(self, env: simpy.Environment, state_machine: ElevatorStateMachine,
                 floor_travel_time: float, door_action_time: float):
        """
        Args:
            env: SimPy environment (timer facility)
            state_machine: Gatekeeper for elevator writes
            floor_travel_time: Simulated seconds to move one floor
            door_action_time: Simulated seconds for one door open or close
        """
        self.env = env
        self.state_machine = state_machine
        self.floor_travel_time = floor_travel_time
        self.door_action_time = door_action_time

    @staticmethod
    def direction_for(start_floor: int, end_floor: int) -> str:
        # A zero-length leg counts as Down
        return UP if end_floor > start_floor else DOWN

    def travel_duration(self, start_floor: int, end_floor: int) -> float:
        """Travel time between two floors, excluding door actions"""
        return abs(end_floor - start_floor) * self.floor_travel_time

    def start_leg(self, elevator_id: int, start_floor: int, end_floor: int, job_id: str) -> simpy.Process:
        """
        Put the elevator in Moving and start the timed leg.

        The Moving transition is written before returning, so a status query
        issued right after sees the elevator as busy.

        Args:
            elevator_id: Elevator to move
            start_floor: Floor the leg starts from (must be the current floor)
            end_floor: Floor the leg ends at; may equal start_floor
            job_id: Job the leg belongs to

        Returns:
            simpy.Process: Triggers when the leg ends; its value is one of
            LEG_COMPLETED, LEG_CANCELLED, LEG_REJECTED or LEG_FAILED

        Raises:
            NotFound: Unknown elevator
            InvalidTransition: Elevator is not Idle at start_floor
        """
        record = self.state_machine.read(elevator_id)
        if record.state != IDLE:
            raise InvalidTransition(f"Elevator {elevator_id} is {record.state}, expected {IDLE}")
        if record.current_floor != start_floor:
            raise InvalidTransition(
                f"Elevator {elevator_id} is at floor {record.current_floor}, leg starts at {start_floor}"
            )

        direction = self.direction_for(start_floor, end_floor)
        self.state_machine.apply(
            elevator_id,
            state=MOVING,
            direction=direction,
            active_job=Job(job_id=job_id, start_floor=start_floor, end_floor=end_floor),
        )
        print(f"{self.env.now:.2f} [Movement] Elevator {elevator_id} leg {start_floor} -> {end_floor} ({direction}) started")
        return self.env.process(self._run_leg(elevator_id, start_floor, end_floor, direction))

    def _run_leg(self, elevator_id, start_floor, end_floor, direction):
        step = 1 if direction == UP else -1
        floor = start_floor
        try:
            while floor != end_floor:
                yield self.env.timeout(self.floor_travel_time)
                record = self.state_machine.read(elevator_id)
                floor = record.current_floor + step
                self.state_machine.apply(elevator_id, current_floor=floor)

            yield from self._arrive(elevator_id, floor)
        except NotFound:
            print(f"{self.env.now:.2f} [Movement] Elevator {elevator_id} disappeared; leg to {end_floor} {LEG_CANCELLED}")
            return LEG_CANCELLED
        except InvalidTransition as e:
            print(f"{self.env.now:.2f} [Movement] Elevator {elevator_id} leg to {end_floor} {LEG_REJECTED}: {e}")
            return LEG_REJECTED
        except StoreError as e:
            print(f"{self.env.now:.2f} [Movement] Elevator {elevator_id} leg to {end_floor} {LEG_FAILED}: {e}")
            return LEG_FAILED
        return LEG_COMPLETED

    def _arrive(self, elevator_id, floor):
        """Doors open on arrival and close one door_action_time later"""
        self.state_machine.apply(elevator_id, state=DOORS_OPEN)
        self.state_machine.record_event(elevator_id, EVENT_ARRIVAL, {'current_floor': floor, 'doors': 'open'})

        yield self.env.timeout(self.door_action_time)

        self.state_machine.apply(elevator_id, state=IDLE, direction=NO_DIRECTION, active_job=None)
        self.state_machine.record_event(elevator_id, EVENT_DOOR_CLOSE, {'current_floor': floor, 'doors': 'closed'})
        print(f"{self.env.now:.2f} [Movement] Elevator {elevator_id} doors closed at floor {floor}")
