"""Infrastructure components for simulation"""

from .message_broker import MessageBroker
from .realtime_env import WallClockEnvironment

__all__ = [
    'MessageBroker',
    'WallClockEnvironment',
]
