"""
Scenario Configuration

Scripted calls for the offline scenario runner (main.py).
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ScenarioCall:
    """One call issued at a given simulation time"""
    time: float
    start_floor: int
    end_floor: int

    def __post_init__(self):
        if self.time < 0:
            raise ValueError("call time cannot be negative")


@dataclass
class ScenarioConfig:
    """Ordered list of calls plus how long to run the simulation"""
    calls: List[ScenarioCall] = field(default_factory=list)
    duration: float = 300.0  # seconds

    def __post_init__(self):
        if self.duration <= 0:
            raise ValueError("duration must be positive")
        self.calls = sorted(self.calls, key=lambda c: c.time)

    @classmethod
    def from_dict(cls, data: dict) -> 'ScenarioConfig':
        """Create ScenarioConfig from dictionary"""
        scenario_data = (data or {}).get('scenario', data) or {}
        calls = [
            ScenarioCall(
                time=call_data.get('time', 0.0),
                start_floor=call_data['start_floor'],
                end_floor=call_data['end_floor']
            )
            for call_data in scenario_data.get('calls', [])
        ]
        return cls(calls=calls, duration=scenario_data.get('duration', 300.0))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'scenario': {
                'duration': self.duration,
                'calls': [
                    {'time': c.time, 'start_floor': c.start_floor, 'end_floor': c.end_floor}
                    for c in self.calls
                ]
            }
        }

    def validate(self):
        """Validate that every call fits inside the run"""
        for call in self.calls:
            if call.time >= self.duration:
                raise ValueError(f"call at t={call.time} is after the scenario duration ({self.duration})")
