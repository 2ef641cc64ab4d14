"""
Configuration Loader Tests
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
import yaml

from config import (
    ConfigLoader, DispatchConfig, TimingConfig, ScenarioConfig, ScenarioCall,
    load_dispatch_config, load_scenario_config, save_dispatch_config,
)

SCENARIOS_DIR = project_root / "scenarios"


def write_yaml(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f)
    return path


def test_defaults_without_file_or_environment():
    config = load_dispatch_config(environ={})

    assert config.building.max_floors == 20
    assert config.building.min_floor == 1
    assert config.elevator.num_elevators == 3
    assert config.timing.floor_travel_time_ms == 5000
    assert config.timing.door_action_time_ms == 2000
    assert config.storage.backend == "memory"
    assert config.server.port == 3000
    assert config.allocation_strategy == "NearestIdleCar"


def test_timings_are_converted_to_seconds():
    timing = TimingConfig(floor_travel_time_ms=1500, door_action_time_ms=250)
    assert timing.floor_travel_time == pytest.approx(1.5)
    assert timing.door_action_time == pytest.approx(0.25)


def test_bundled_yaml_files_load():
    default = load_dispatch_config(SCENARIOS_DIR / "dispatch" / "default.yaml", environ={})
    assert default == DispatchConfig()

    two_cars = load_dispatch_config(SCENARIOS_DIR / "dispatch" / "two_cars.yaml", environ={})
    assert two_cars.elevator.num_elevators == 2
    assert two_cars.timing.floor_travel_time == pytest.approx(1.0)
    assert two_cars.timing.door_action_time == pytest.approx(0.5)

    scenario = load_scenario_config(SCENARIOS_DIR / "calls" / "two_car_demo.yaml")
    assert len(scenario.calls) == 6


def test_partial_yaml_keeps_other_defaults(tmp_path):
    path = write_yaml(tmp_path / "partial.yaml", {'dispatch': {'building': {'max_floors': 40}}})
    config = load_dispatch_config(path, environ={})
    assert config.building.max_floors == 40
    assert config.elevator.num_elevators == 3


def test_environment_overrides_file_values(tmp_path):
    path = write_yaml(tmp_path / "base.yaml", {'dispatch': {'timing': {'floor_travel_time_ms': 5000}}})
    environ = {
        'FLOOR_TRAVEL_TIME_MS': "1000",
        'DOOR_ACTION_TIME_MS': "400",
        'MAX_FLOORS': "30",
        'NUM_ELEVATORS': "5",
        'PORT': "8080",
    }
    config = load_dispatch_config(path, environ=environ)

    assert config.timing.floor_travel_time_ms == 1000
    assert config.timing.door_action_time_ms == 400
    assert config.building.max_floors == 30
    assert config.elevator.num_elevators == 5
    assert config.server.port == 8080


@pytest.mark.parametrize("raw", ["abc", "0", "-5", "1.5"])
def test_invalid_environment_values_are_ignored(raw, capsys):
    config = load_dispatch_config(environ={'NUM_ELEVATORS': raw})
    assert config.elevator.num_elevators == 3
    assert "Ignoring NUM_ELEVATORS" in capsys.readouterr().out


def test_single_floor_building_is_rejected():
    with pytest.raises(ValueError):
        load_dispatch_config(environ={'MAX_FLOORS': "1"})


def test_db_path_selects_sqlite(tmp_path):
    db_path = str(tmp_path / "fleet.db")
    config = load_dispatch_config(environ={'DB_PATH': db_path})
    assert config.storage.backend == "sqlite"
    assert config.storage.db_path == db_path


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        ConfigLoader.load_dispatch("does/not/exist.yaml", environ={})


def test_home_floor_outside_building_is_rejected(tmp_path):
    path = write_yaml(tmp_path / "bad.yaml", {
        'dispatch': {'building': {'max_floors': 10}, 'elevator': {'home_floor': 12}},
    })
    with pytest.raises(ValueError):
        load_dispatch_config(path, environ={})


@pytest.mark.parametrize("section, values", [
    ('building', {'max_floors': 1}),
    ('elevator', {'num_elevators': 0}),
    ('timing', {'door_action_time_ms': 0}),
    ('storage', {'backend': "redis"}),
    ('server', {'port': 70000}),
])
def test_out_of_range_values_are_rejected(section, values):
    with pytest.raises(ValueError):
        DispatchConfig.from_dict({'dispatch': {section: values}})


def test_save_and_reload(tmp_path):
    config = load_dispatch_config(environ={'NUM_ELEVATORS': "4"})
    path = tmp_path / "nested" / "saved.yaml"
    save_dispatch_config(config, path)
    assert load_dispatch_config(path, environ={}) == config


def test_scenario_calls_are_sorted_by_time():
    scenario = ScenarioConfig.from_dict({
        'scenario': {
            'duration': 100,
            'calls': [
                {'time': 30, 'start_floor': 2, 'end_floor': 5},
                {'time': 10, 'start_floor': 6, 'end_floor': 1},
            ],
        },
    })
    assert [c.time for c in scenario.calls] == [10, 30]
    assert scenario.calls[0] == ScenarioCall(time=10, start_floor=6, end_floor=1)


def test_scenario_call_after_duration_is_rejected(tmp_path):
    path = write_yaml(tmp_path / "late.yaml", {
        'scenario': {'duration': 10, 'calls': [{'time': 20, 'start_floor': 1, 'end_floor': 2}]},
    })
    with pytest.raises(ValueError):
        load_scenario_config(path)
