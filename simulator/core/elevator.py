from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

# Elevator states
IDLE = "Idle"
MOVING = "Moving"
DOORS_OPEN = "DoorsOpen"
STATES = (IDLE, MOVING, DOORS_OPEN)

# Directions ("None" is a string on the wire, not Python's None)
UP = "Up"
DOWN = "Down"
NO_DIRECTION = "None"
DIRECTIONS = (UP, DOWN, NO_DIRECTION)

# Fields a partial update may carry
UPDATABLE_FIELDS = ("current_floor", "state", "direction", "active_job")


@dataclass(frozen=True)
class Job:
    """One accepted call: pickup floor -> destination floor"""
    job_id: str
    start_floor: int
    end_floor: int

    def to_dict(self) -> Dict[str, Any]:
        return {'start': self.start_floor, 'end': self.end_floor, 'jobId': self.job_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Job':
        return cls(job_id=data['jobId'], start_floor=data['start'], end_floor=data['end'])


@dataclass(frozen=True)
class ElevatorRecord:
    """
    Snapshot of one elevator as held by the state store

    Invariant: direction == "None" <=> state == Idle <=> active_job is None
    """
    id: int
    current_floor: int = 1
    state: str = IDLE
    direction: str = NO_DIRECTION
    active_job: Optional[Job] = None

    def merged(self, partial: Dict[str, Any]) -> 'ElevatorRecord':
        """Return a copy with the given fields replaced; omitted fields keep their value"""
        unknown = set(partial) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown elevator fields: {sorted(unknown)}")
        return replace(self, **partial)

    @property
    def job_queue(self) -> list:
        return [self.active_job.to_dict()] if self.active_job else []

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation used by the status query and the HTTP layer"""
        return {
            'id': self.id,
            'current_floor': self.current_floor,
            'state': self.state,
            'direction': self.direction,
            'job_queue': self.job_queue,
        }


@dataclass(frozen=True)
class EventRecord:
    """Immutable audit record"""
    id: str
    timestamp: float
    elevator_id: int
    event_type: str
    details: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'elevator_id': self.elevator_id,
            'event_type': self.event_type,
            'details': dict(self.details),
        }


@dataclass(frozen=True)
class SqlLogRecord:
    """One audited read against the elevator table"""
    id: str
    timestamp: float
    query_text: str
    who: str = "system"
    where_from: Optional[str] = None
    what: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'query_text': self.query_text,
            'who': self.who,
            'where_from': self.where_from,
            'what': self.what,
        }


def read_query(elevator_id: Optional[int] = None) -> str:
    """Query text recorded for an elevator read"""
    if elevator_id is None:
        return "SELECT * FROM elevators"
    return f"SELECT * FROM elevators WHERE id = {elevator_id}"


# Audit event types
EVENT_CALL = "call"
EVENT_ARRIVAL = "arrival"
EVENT_DOOR_CLOSE = "door_close"
EVENT_STATE_UPDATE = "state_update"
EVENT_TYPES = (EVENT_CALL, EVENT_ARRIVAL, EVENT_DOOR_CLOSE, EVENT_STATE_UPDATE)
