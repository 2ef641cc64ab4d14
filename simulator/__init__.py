"""
Elevator Simulator - Core simulation engine

This package provides the elevator state machine, the floor-by-floor
movement simulator and the state stores they persist through.
"""

__version__ = "0.1.0"

from .core.elevator import ElevatorRecord, EventRecord, Job
from .core.state_machine import ElevatorStateMachine
from .core.movement import MovementSimulator

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import WallClockEnvironment

from .implementations import InMemoryStateStore, SQLiteStateStore, create_state_store

__all__ = [
    'ElevatorRecord',
    'EventRecord',
    'Job',
    'ElevatorStateMachine',
    'MovementSimulator',
    'MessageBroker',
    'WallClockEnvironment',
    'InMemoryStateStore',
    'SQLiteStateStore',
    'create_state_store',
]
