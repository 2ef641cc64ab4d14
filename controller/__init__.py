"""
Elevator Dispatch Controller

This package selects elevators for calls, sequences the legs of each job
and exposes read-only status queries.
"""

__version__ = "0.1.0"

from .dispatcher import Dispatcher, CallResult
from .status_query import StatusQuery
from .system import ElevatorSystem, build_system
from .service import ElevatorService

__all__ = [
    'Dispatcher',
    'CallResult',
    'StatusQuery',
    'ElevatorSystem',
    'build_system',
    'ElevatorService',
]
