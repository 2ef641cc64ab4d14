"""
Allocation Strategy Interface

Defines how an elevator is selected for a call.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from simulator.core.elevator import ElevatorRecord


class IAllocationStrategy(ABC):
    """
    Interface for elevator allocation strategies

    Design Philosophy:
    - Pure function of the call and a fleet snapshot (no side effects)
    - Deterministic: the same inputs always select the same elevator
    - Candidates are pre-filtered by the dispatcher (Idle and not reserved)

    Usage Examples:
    - NearestIdleCar: distance-based selection among idle elevators
    """

    @abstractmethod
    def select_elevator(
        self,
        start_floor: int,
        end_floor: int,
        candidates: List[ElevatorRecord]
    ) -> Optional[ElevatorRecord]:
        """
        Select the best elevator for a call

        Args:
            start_floor: Pickup floor
            end_floor: Destination floor
            candidates: Elevators that may take the call, in ascending id order

        Returns:
            The selected elevator, or None if no candidate is acceptable
        """
        pass

    @abstractmethod
    def get_strategy_name(self) -> str:
        """
        Get the name of this strategy

        Returns:
            str: Strategy name (for logging and debugging)
        """
        pass
