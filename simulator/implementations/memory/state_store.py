import uuid
from typing import Any, Callable, Dict, List, Optional

from ...core.elevator import ElevatorRecord, EventRecord, SqlLogRecord, read_query
from ...exceptions import NotFound
from ...interfaces.state_store import IStateStore


class InMemoryStateStore(IStateStore):
    """
    Dictionary-backed state store

    Nothing survives the process. Used by the scenario runner and tests.
    """

    def __init__(self, clock: Callable[[], float]):
        """
        Args:
            clock: Returns the current simulation time (e.g. lambda: env.now)
        """
        self.clock = clock
        self._elevators: Dict[int, ElevatorRecord] = {}
        self._events: List[EventRecord] = []
        self._sql_logs: List[SqlLogRecord] = []

    def _log_read(self, elevator_id: Optional[int] = None):
        self._sql_logs.append(SqlLogRecord(
            id=str(uuid.uuid4()),
            timestamp=self.clock(),
            query_text=read_query(elevator_id),
        ))

    def initialize(self, num_elevators: int, home_floor: int = 1) -> None:
        if self._elevators:
            print(f"{self.clock():.2f} [Store] Elevators already exist. Not re-initializing.")
            return
        for elevator_id in range(1, num_elevators + 1):
            self._elevators[elevator_id] = ElevatorRecord(id=elevator_id, current_floor=home_floor)
        print(f"{self.clock():.2f} [Store] Initialized {num_elevators} elevators.")

    def list_elevators(self) -> List[ElevatorRecord]:
        self._log_read()
        return [self._elevators[key] for key in sorted(self._elevators)]

    def get_elevator(self, elevator_id: int) -> ElevatorRecord:
        self._log_read(elevator_id)
        try:
            return self._elevators[elevator_id]
        except KeyError:
            raise NotFound(elevator_id) from None

    def update_elevator(self, elevator_id: int, partial: Dict[str, Any]) -> ElevatorRecord:
        merged = self.get_elevator(elevator_id).merged(partial)
        self._elevators[elevator_id] = merged
        return merged

    def delete_elevator(self, elevator_id: int) -> None:
        if elevator_id not in self._elevators:
            raise NotFound(elevator_id)
        del self._elevators[elevator_id]

    def append_event(self, elevator_id: int, event_type: str, details: Dict[str, Any]) -> EventRecord:
        event = EventRecord(
            id=str(uuid.uuid4()),
            timestamp=self.clock(),
            elevator_id=elevator_id,
            event_type=event_type,
            details=dict(details),
        )
        self._events.append(event)
        return event

    def list_events(self) -> List[EventRecord]:
        return list(self._events)

    def list_sql_logs(self) -> List[SqlLogRecord]:
        return list(self._sql_logs)
