"""
Nearest Idle Car Strategy

Distance-based allocation among idle elevators.
"""

from typing import List, Optional

from simulator.core.elevator import ElevatorRecord, IDLE
from ..interfaces.allocation_strategy import IAllocationStrategy


class NearestIdleCarStrategy(IAllocationStrategy):
    """
    Nearest idle car allocation strategy

    Selection Logic:
    - Only IDLE elevators are considered
    - Score = |current_floor - start_floor|
    - Ties go to the lowest elevator id

    The tie-break is part of the contract: candidates are scanned in
    ascending id order and only a strictly smaller distance replaces the
    current best.

    Usage:
        strategy = NearestIdleCarStrategy()
        selected = strategy.select_elevator(5, 15, store.list_elevators())
    """

    def select_elevator(
        self,
        start_floor: int,
        end_floor: int,
        candidates: List[ElevatorRecord]
    ) -> Optional[ElevatorRecord]:
        best_elevator = None
        best_distance = None

        for elevator in sorted(candidates, key=lambda e: e.id):
            if elevator.state != IDLE:
                continue
            distance = abs(elevator.current_floor - start_floor)
            if best_distance is None or distance < best_distance:
                best_distance = distance
                best_elevator = elevator

        if best_elevator is not None:
            print(f"[Allocation] Selected elevator {best_elevator.id} "
                  f"at floor {best_elevator.current_floor} (distance={best_distance})")

        return best_elevator

    def get_strategy_name(self) -> str:
        """Return strategy name"""
        return "Nearest Idle Car (lowest id on ties)"
