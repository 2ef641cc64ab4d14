"""Implementation variants of simulator components"""

from typing import Callable

from ..interfaces.state_store import IStateStore
from .memory import InMemoryStateStore
from .sqlite import SQLiteStateStore

__all__ = [
    'InMemoryStateStore',
    'SQLiteStateStore',
    'create_state_store',
]


def create_state_store(storage_config, clock: Callable[[], float]) -> IStateStore:
    """
    Create the state store selected by a StorageConfig

    Args:
        storage_config: StorageConfig (backend: 'memory' or 'sqlite')
        clock: Simulation clock used to timestamp events
    """
    if storage_config.backend == "memory":
        return InMemoryStateStore(clock)
    elif storage_config.backend == "sqlite":
        return SQLiteStateStore(clock, storage_config.db_path)
    else:
        raise ValueError(f"Unknown storage backend: {storage_config.backend}")
