from typing import List, Optional

from simulator.core.elevator import ElevatorRecord
from simulator.exceptions import NotFound
from simulator.interfaces.state_store import IStateStore


class StatusQuery:
    """Read-only view of the fleet, straight from the state store"""

    def __init__(self, store: IStateStore):
        self.store = store

    def status(self, elevator_id: Optional[int] = None) -> List[ElevatorRecord]:
        """
        Current elevator snapshots

        Args:
            elevator_id: One elevator, or None for the whole fleet

        Returns:
            Singleton list for a known id, empty list for an unknown id,
            every elevator in ascending id order when no id is given
        """
        if elevator_id is None:
            return self.store.list_elevators()
        try:
            return [self.store.get_elevator(elevator_id)]
        except NotFound:
            return []
