import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import simpy

from simulator.core.elevator import ElevatorRecord, Job, IDLE, MOVING, EVENT_CALL
from simulator.core.movement import MovementSimulator, LEG_COMPLETED, LEG_CANCELLED, LEG_REJECTED, LEG_FAILED
from simulator.core.state_machine import ElevatorStateMachine
from simulator.exceptions import InvalidTransition, NoAvailableResource, NotFound, StoreError, ValidationError
from .interfaces.allocation_strategy import IAllocationStrategy

INVALID_FLOORS_MESSAGE = "Invalid floor numbers."
NO_IDLE_ELEVATORS_MESSAGE = "No idle elevators available."
DISPATCHED_MESSAGE = "Elevator dispatched."


@dataclass
class CallResult:
    """Outcome of a call: dispatch acceptance, not trip completion"""
    success: bool
    message: str
    job_id: Optional[str] = None
    elevator_id: Optional[int] = None
    status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'success': self.success, 'message': self.message}
        if self.job_id is not None:
            result['jobId'] = self.job_id
        if self.elevator_id is not None:
            result['elevator_id'] = self.elevator_id
        if self.status is not None:
            result['status'] = self.status
        return result


class Dispatcher:
    """
    Accepts calls, picks an elevator and sequences the two legs of a job.

    Leg 1 takes the elevator from where it is to the pickup floor; leg 2 takes
    it to the destination. Leg 2 starts one door action after leg 1 reports
    completion, i.e. at |pickup - current| * travel + 2 * door after the call,
    which is the same moment a pure time estimate would give.

    Each elevator has a capacity-1 SimPy resource that a job holds for both
    legs. An elevator resting Idle between its legs is therefore never handed
    to another call.
    """

    def __init__(self, env: simpy.Environment, state_machine: ElevatorStateMachine,
                 movement: MovementSimulator, strategy: IAllocationStrategy,
                 max_floors: int, min_floor: int = 1):
        self.env = env
        self.state_machine = state_machine
        self.movement = movement
        self.strategy = strategy
        self.max_floors = max_floors
        self.min_floor = min_floor
        self._reservations: Dict[int, simpy.Resource] = {}
        # job_id -> running job process (removed when the job ends)
        self.jobs: Dict[str, simpy.Process] = {}

        print(f"{self.env.now:.2f} [Dispatcher] Using strategy: {self.strategy.get_strategy_name()}")

    def _reservation(self, elevator_id: int) -> simpy.Resource:
        if elevator_id not in self._reservations:
            self._reservations[elevator_id] = simpy.Resource(self.env, capacity=1)
        return self._reservations[elevator_id]

    def is_reserved(self, elevator_id: int) -> bool:
        """True while a job holds this elevator"""
        return self._reservation(elevator_id).count > 0

    def validate_floors(self, start_floor: int, end_floor: int):
        """Raise ValidationError for same-floor or out-of-range requests"""
        if start_floor == end_floor:
            raise ValidationError(INVALID_FLOORS_MESSAGE)
        for floor in (start_floor, end_floor):
            if floor < self.min_floor or floor > self.max_floors:
                raise ValidationError(INVALID_FLOORS_MESSAGE)

    def available_elevators(self) -> List[ElevatorRecord]:
        """Idle, unreserved elevators in ascending id order"""
        return [
            elevator for elevator in self.state_machine.store.list_elevators()
            if elevator.state == IDLE and not self.is_reserved(elevator.id)
        ]

    def select_elevator(self, start_floor: int, end_floor: int) -> ElevatorRecord:
        """Raise NoAvailableResource when nothing can take the call"""
        selected = self.strategy.select_elevator(start_floor, end_floor, self.available_elevators())
        if selected is None:
            raise NoAvailableResource(NO_IDLE_ELEVATORS_MESSAGE)
        return selected

    def call(self, start_floor: int, end_floor: int) -> CallResult:
        """
        Dispatch an elevator for a call.

        Returns as soon as leg 1 has started and leg 2 is sequenced; physical
        movement happens later on the SimPy clock.

        Args:
            start_floor: Pickup floor
            end_floor: Destination floor

        Returns:
            CallResult: success with job_id/elevator_id/status "Moving", or a
            rejection message. Rejections leave every elevator untouched.

        Raises:
            StoreError: The state store failed
        """
        try:
            self.validate_floors(start_floor, end_floor)
            elevator = self.select_elevator(start_floor, end_floor)
        except (ValidationError, NoAvailableResource) as e:
            print(f"{self.env.now:.2f} [Dispatcher] Call {start_floor} -> {end_floor} rejected: {e}")
            return CallResult(success=False, message=str(e))

        job = Job(job_id=str(uuid.uuid4()), start_floor=start_floor, end_floor=end_floor)
        self.state_machine.record_event(elevator.id, EVENT_CALL, {
            'start_floor': start_floor,
            'end_floor': end_floor,
            'job_id': job.job_id,
        })

        reservation = self._reservation(elevator.id).request()
        try:
            leg1 = self.movement.start_leg(elevator.id, elevator.current_floor, start_floor, job.job_id)
        except Exception:
            self._reservation(elevator.id).release(reservation)
            raise

        pickup_eta = self.movement.travel_duration(elevator.current_floor, start_floor) \
            + 2 * self.movement.door_action_time
        print(f"{self.env.now:.2f} [Dispatcher] Elevator {elevator.id} assigned job {job.job_id} "
              f"({start_floor} -> {end_floor}), leg 2 expected at t={self.env.now + pickup_eta:.2f}")

        self.jobs[job.job_id] = self.env.process(
            self._run_job(elevator.id, job, leg1, reservation, self.env.now + pickup_eta)
        )

        return CallResult(
            success=True,
            message=DISPATCHED_MESSAGE,
            job_id=job.job_id,
            elevator_id=elevator.id,
            status=MOVING,
        )

    def _run_job(self, elevator_id: int, job: Job, leg1: simpy.Process, reservation, leg2_eta: float):
        """Wait for leg 1, close the doors, then run leg 2. Value: final leg outcome."""
        try:
            outcome = yield leg1
            if outcome != LEG_COMPLETED:
                print(f"{self.env.now:.2f} [Dispatcher] Job {job.job_id} stopped after leg 1: {outcome}")
                return outcome

            # Door-close half of the pickup stop
            yield self.env.timeout(self.movement.door_action_time)
            if abs(self.env.now - leg2_eta) > 1e-9:
                print(f"{self.env.now:.2f} [Dispatcher] Job {job.job_id} leg 2 drifted from t={leg2_eta:.2f}")

            try:
                leg2 = self.movement.start_leg(elevator_id, job.start_floor, job.end_floor, job.job_id)
            except NotFound:
                print(f"{self.env.now:.2f} [Dispatcher] Job {job.job_id} {LEG_CANCELLED}: elevator {elevator_id} is gone")
                return LEG_CANCELLED
            except InvalidTransition as e:
                # Elevator is not where leg 1 should have left it; skip rather than overlap
                print(f"{self.env.now:.2f} [Dispatcher] Job {job.job_id} leg 2 skipped: {e}")
                return LEG_REJECTED
            except StoreError as e:
                print(f"{self.env.now:.2f} [Dispatcher] Job {job.job_id} leg 2 {LEG_FAILED}: {e}")
                return LEG_FAILED

            outcome = yield leg2
            print(f"{self.env.now:.2f} [Dispatcher] Job {job.job_id} finished: {outcome}")
            return outcome
        finally:
            self._reservation(elevator_id).release(reservation)
            self.jobs.pop(job.job_id, None)
