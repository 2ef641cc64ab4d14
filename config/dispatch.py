"""
Dispatch Configuration

Used by both the HTTP service and the scenario runner.
Contains building limits, fleet size, timings, storage and server settings.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class BuildingConfig:
    """
    Building specifications

    max_floors must be greater than min_floor. A single-floor building is
    rejected because every call in it would fail floor validation
    (start and end floors must differ).
    """
    max_floors: int = 20
    min_floor: int = 1

    def __post_init__(self):
        if self.min_floor < 1:
            raise ValueError("min_floor must be at least 1")
        if self.max_floors <= self.min_floor:
            raise ValueError("max_floors must be greater than min_floor")


@dataclass
class ElevatorConfig:
    """Fleet specifications"""
    num_elevators: int = 3
    home_floor: int = 1  # every elevator starts here, Idle

    def __post_init__(self):
        if self.num_elevators < 1:
            raise ValueError("num_elevators must be at least 1")


@dataclass
class TimingConfig:
    """Movement timings in milliseconds"""
    floor_travel_time_ms: int = 5000
    door_action_time_ms: int = 2000  # one door open or close

    def __post_init__(self):
        if self.floor_travel_time_ms <= 0:
            raise ValueError("floor_travel_time_ms must be positive")
        if self.door_action_time_ms <= 0:
            raise ValueError("door_action_time_ms must be positive")

    @property
    def floor_travel_time(self) -> float:
        """Seconds of simulated time per floor"""
        return self.floor_travel_time_ms / 1000

    @property
    def door_action_time(self) -> float:
        """Seconds of simulated time per door action"""
        return self.door_action_time_ms / 1000


@dataclass
class StorageConfig:
    """State store selection"""
    backend: str = "memory"  # memory, sqlite
    db_path: str = "./elevator.db"

    def __post_init__(self):
        if self.backend not in ["memory", "sqlite"]:
            raise ValueError("backend must be 'memory' or 'sqlite'")


@dataclass
class ServerConfig:
    """HTTP service settings"""
    host: str = "127.0.0.1"
    port: int = 3000
    realtime_factor: float = 1.0  # simulated seconds per real second
    tick_interval: float = 0.25  # seconds between clock catch-ups

    def __post_init__(self):
        if not (0 < self.port < 65536):
            raise ValueError("port must be between 1 and 65535")
        if self.realtime_factor <= 0:
            raise ValueError("realtime_factor must be positive")
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be positive")


@dataclass
class DispatchConfig:
    """
    Complete dispatch configuration

    Combines building, elevator, timing, storage and server settings.
    """
    building: BuildingConfig = field(default_factory=BuildingConfig)
    elevator: ElevatorConfig = field(default_factory=ElevatorConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    allocation_strategy: str = "NearestIdleCar"

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'DispatchConfig':
        """Create DispatchConfig from dictionary"""
        dispatch_data = (data or {}).get('dispatch', data) or {}

        building_data = dispatch_data.get('building', {})
        building = BuildingConfig(
            max_floors=building_data.get('max_floors', 20),
            min_floor=building_data.get('min_floor', 1)
        )

        elevator_data = dispatch_data.get('elevator', {})
        elevator = ElevatorConfig(
            num_elevators=elevator_data.get('num_elevators', 3),
            home_floor=elevator_data.get('home_floor', 1)
        )

        timing_data = dispatch_data.get('timing', {})
        timing = TimingConfig(
            floor_travel_time_ms=timing_data.get('floor_travel_time_ms', 5000),
            door_action_time_ms=timing_data.get('door_action_time_ms', 2000)
        )

        storage_data = dispatch_data.get('storage', {})
        storage = StorageConfig(
            backend=storage_data.get('backend', 'memory'),
            db_path=storage_data.get('db_path', './elevator.db')
        )

        server_data = dispatch_data.get('server', {})
        server = ServerConfig(
            host=server_data.get('host', '127.0.0.1'),
            port=server_data.get('port', 3000),
            realtime_factor=server_data.get('realtime_factor', 1.0),
            tick_interval=server_data.get('tick_interval', 0.25)
        )

        return cls(
            building=building,
            elevator=elevator,
            timing=timing,
            storage=storage,
            server=server,
            allocation_strategy=dispatch_data.get('allocation_strategy', 'NearestIdleCar')
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'dispatch': {
                'building': {
                    'max_floors': self.building.max_floors,
                    'min_floor': self.building.min_floor
                },
                'elevator': {
                    'num_elevators': self.elevator.num_elevators,
                    'home_floor': self.elevator.home_floor
                },
                'timing': {
                    'floor_travel_time_ms': self.timing.floor_travel_time_ms,
                    'door_action_time_ms': self.timing.door_action_time_ms
                },
                'storage': {
                    'backend': self.storage.backend,
                    'db_path': self.storage.db_path
                },
                'server': {
                    'host': self.server.host,
                    'port': self.server.port,
                    'realtime_factor': self.server.realtime_factor,
                    'tick_interval': self.server.tick_interval
                },
                'allocation_strategy': self.allocation_strategy
            }
        }

    def validate(self):
        """Validate configuration consistency"""
        if not (self.building.min_floor <= self.elevator.home_floor <= self.building.max_floors):
            raise ValueError(
                f"elevator.home_floor ({self.elevator.home_floor}) must be within "
                f"[{self.building.min_floor}, {self.building.max_floors}]"
            )
        if not self.allocation_strategy:
            raise ValueError("allocation_strategy is required")
