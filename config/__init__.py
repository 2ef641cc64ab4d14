"""
Configuration management package

Provides configuration classes for dispatch and scripted scenarios.
"""

from .dispatch import (
    DispatchConfig,
    BuildingConfig,
    ElevatorConfig,
    TimingConfig,
    StorageConfig,
    ServerConfig
)

from .scenario import (
    ScenarioConfig,
    ScenarioCall
)

from .config_loader import (
    ConfigLoader,
    load_dispatch_config,
    load_scenario_config,
    save_dispatch_config
)

__all__ = [
    # Dispatch
    'DispatchConfig',
    'BuildingConfig',
    'ElevatorConfig',
    'TimingConfig',
    'StorageConfig',
    'ServerConfig',

    # Scenario
    'ScenarioConfig',
    'ScenarioCall',

    # Loader
    'ConfigLoader',
    'load_dispatch_config',
    'load_scenario_config',
    'save_dispatch_config',
]
