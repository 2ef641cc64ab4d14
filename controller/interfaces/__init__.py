"""Interface definitions for controller components"""

from .allocation_strategy import IAllocationStrategy

__all__ = [
    'IAllocationStrategy',
]
