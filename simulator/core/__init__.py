"""Core dispatch entities: elevator records, state machine, movement"""

from .elevator import ElevatorRecord, EventRecord, Job
from .state_machine import ElevatorStateMachine
from .movement import MovementSimulator, LEG_COMPLETED, LEG_CANCELLED, LEG_REJECTED, LEG_FAILED

__all__ = [
    'ElevatorRecord',
    'EventRecord',
    'Job',
    'ElevatorStateMachine',
    'MovementSimulator',
    'LEG_COMPLETED',
    'LEG_CANCELLED',
    'LEG_REJECTED',
    'LEG_FAILED',
]
