"""Interface definitions for simulator components"""

from .state_store import IStateStore

__all__ = [
    'IStateStore',
]
