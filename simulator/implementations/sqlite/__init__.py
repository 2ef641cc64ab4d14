"""SQLite state store"""

from .state_store import SQLiteStateStore

__all__ = [
    'SQLiteStateStore',
]
