"""In-memory state store"""

from .state_store import InMemoryStateStore

__all__ = [
    'InMemoryStateStore',
]
