"""
Elevator Dispatch Analyzer

Components:
- EventRecorder: records the audit event stream from the message broker
  and saves it as JSON Lines
"""

__version__ = "0.1.0"

from .event_recorder import EventRecorder

__all__ = ['EventRecorder']
