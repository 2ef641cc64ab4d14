"""
State Store Interface

Defines the narrow storage contract the dispatch core reads and writes through.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from ..core.elevator import ElevatorRecord, EventRecord, SqlLogRecord


class IStateStore(ABC):
    """
    Interface for elevator state and audit event storage

    The store is the single source of truth for elevator state. Callers
    access records by id and must not keep authoritative copies.

    Design Philosophy:
    - Partial updates: omitted fields keep their previous value
    - Append-only event log, ordered by timestamp
    - Events are timestamped with the simulation clock given to the store
    - Every elevator read (list_elevators, get_elevator) is audited in the
      SQL log, e.g. "SELECT * FROM elevators WHERE id = 2"

    Implementations:
    - InMemoryStateStore: dictionaries, used by tests and scenario runs
    - SQLiteStateStore: durable storage for the HTTP service
    """

    # Simulation clock used to timestamp events
    clock: Callable[[], float]

    @abstractmethod
    def initialize(self, num_elevators: int, home_floor: int = 1) -> None:
        """
        Create the fleet if it does not exist yet

        A durable store that already holds a fleet keeps it, but resets any
        elevator left Moving or DoorsOpen by a previous process to Idle
        (one state_update event each), since no process drives it anymore.

        Args:
            num_elevators: Number of elevators, ids 1..num_elevators
            home_floor: Starting floor of every elevator (state Idle)
        """
        pass

    @abstractmethod
    def list_elevators(self) -> List[ElevatorRecord]:
        """Return every elevator in ascending id order"""
        pass

    @abstractmethod
    def get_elevator(self, elevator_id: int) -> ElevatorRecord:
        """
        Get one elevator

        Raises:
            NotFound: If no elevator has this id
        """
        pass

    @abstractmethod
    def update_elevator(self, elevator_id: int, partial: Dict[str, Any]) -> ElevatorRecord:
        """
        Merge the given fields into the stored elevator

        Args:
            elevator_id: Target elevator
            partial: Any subset of current_floor, state, direction, active_job

        Returns:
            The merged record as stored

        Raises:
            NotFound: If no elevator has this id
        """
        pass

    @abstractmethod
    def delete_elevator(self, elevator_id: int) -> None:
        """
        Remove an elevator (external deletion)

        Raises:
            NotFound: If no elevator has this id
        """
        pass

    @abstractmethod
    def append_event(self, elevator_id: int, event_type: str, details: Dict[str, Any]) -> EventRecord:
        """Append an audit event stamped with the current simulation time"""
        pass

    @abstractmethod
    def list_events(self) -> List[EventRecord]:
        """Return every audit event in the order it was appended"""
        pass

    @abstractmethod
    def list_sql_logs(self) -> List[SqlLogRecord]:
        """Return every audited read in the order it happened"""
        pass
