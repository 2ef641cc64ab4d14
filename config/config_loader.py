"""
Configuration loader utility

Loads DispatchConfig and ScenarioConfig from YAML files and applies
environment variable overrides to DispatchConfig.
"""

import os
import yaml
from pathlib import Path
from typing import Mapping, Optional, Union

from .dispatch import DispatchConfig
from .scenario import ScenarioConfig


# Environment variable -> (section, attribute)
ENV_OVERRIDES = {
    'FLOOR_TRAVEL_TIME_MS': ('timing', 'floor_travel_time_ms'),
    'DOOR_ACTION_TIME_MS': ('timing', 'door_action_time_ms'),
    'MAX_FLOORS': ('building', 'max_floors'),
    'NUM_ELEVATORS': ('elevator', 'num_elevators'),
    'PORT': ('server', 'port'),
}


class ConfigLoader:
    """Utility class for loading configuration files"""

    @staticmethod
    def _read_yaml(file_path: Union[str, Path]) -> dict:
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def load_dispatch(file_path: Optional[Union[str, Path]] = None,
                      environ: Optional[Mapping[str, str]] = None) -> DispatchConfig:
        """
        Load DispatchConfig from YAML file, then apply environment overrides

        Args:
            file_path: Path to YAML file (None = built-in defaults)
            environ: Environment mapping (default: os.environ)

        Returns:
            DispatchConfig instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If validation fails
        """
        data = ConfigLoader._read_yaml(file_path) if file_path is not None else {}
        config = DispatchConfig.from_dict(data)
        config = ConfigLoader.apply_env_overrides(config, os.environ if environ is None else environ)
        config.validate()

        return config

    @staticmethod
    def apply_env_overrides(config: DispatchConfig, environ: Mapping[str, str]) -> DispatchConfig:
        """
        Apply recognised environment variables on top of a config

        Values that are not positive integers are ignored and the
        configured value is kept. DB_PATH switches storage to sqlite.
        """
        data = config.to_dict()
        section_data = data['dispatch']

        for var, (section, attribute) in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                value = int(raw)
            except ValueError:
                value = 0
            if value <= 0:
                print(f"[Config] Ignoring {var}={raw!r}: expected a positive integer")
                continue
            section_data[section][attribute] = value

        db_path = environ.get('DB_PATH')
        if db_path:
            section_data['storage']['backend'] = 'sqlite'
            section_data['storage']['db_path'] = db_path

        return DispatchConfig.from_dict(data)

    @staticmethod
    def load_scenario(file_path: Union[str, Path]) -> ScenarioConfig:
        """
        Load ScenarioConfig from YAML file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If validation fails
        """
        config = ScenarioConfig.from_dict(ConfigLoader._read_yaml(file_path))
        config.validate()

        return config

    @staticmethod
    def save_dispatch(config: DispatchConfig, file_path: Union[str, Path]):
        """
        Save DispatchConfig to YAML file

        Args:
            config: DispatchConfig instance
            file_path: Path to save YAML file
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)


# Convenience functions
def load_dispatch_config(file_path: Optional[Union[str, Path]] = None,
                         environ: Optional[Mapping[str, str]] = None) -> DispatchConfig:
    """Load DispatchConfig from YAML file and environment"""
    return ConfigLoader.load_dispatch(file_path, environ)


def load_scenario_config(file_path: Union[str, Path]) -> ScenarioConfig:
    """Load ScenarioConfig from YAML file"""
    return ConfigLoader.load_scenario(file_path)


def save_dispatch_config(config: DispatchConfig, file_path: Union[str, Path]):
    """Save DispatchConfig to YAML file"""
    ConfigLoader.save_dispatch(config, file_path)
