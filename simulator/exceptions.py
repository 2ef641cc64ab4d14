"""
Error taxonomy shared by the simulator and controller packages
"""


class ElevatorSystemError(Exception):
    """Base class for all dispatch and simulation errors"""


class ValidationError(ElevatorSystemError, ValueError):
    """Invalid floor request (same start/end, out of range)"""


class NoAvailableResource(ElevatorSystemError):
    """No elevator can take the call right now"""


class NotFound(ElevatorSystemError):
    """Unknown elevator id"""

    def __init__(self, elevator_id):
        super().__init__(f"Elevator {elevator_id} not found")
        self.elevator_id = elevator_id


class InvalidTransition(ElevatorSystemError):
    """An update would break the elevator state invariant"""


class StoreError(ElevatorSystemError):
    """Failure inside the state store backend"""
