#!/usr/bin/env python3
"""
Launcher script for the elevator dispatch HTTP service
Builds the dispatch system on a wall-clock SimPy environment and serves it with Flask
"""
import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import load_dispatch_config
from controller.service import ElevatorService
from controller.system import build_system
from server.http_server import run_server
from simulator.exceptions import StoreError
from simulator.infrastructure.realtime_env import WallClockEnvironment


def main(argv=None):
    """
    Usage: run_server.py [dispatch_config.yaml]

    Environment variables FLOOR_TRAVEL_TIME_MS, DOOR_ACTION_TIME_MS,
    MAX_FLOORS, NUM_ELEVATORS, DB_PATH and PORT override the file.
    """
    argv = sys.argv[1:] if argv is None else argv
    config_path = argv[0] if argv else None

    print("--- Loading Configuration ---")
    try:
        config = load_dispatch_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Failed to load configuration: {e}")
        return 1

    print(f"Floors: {config.building.min_floor}-{config.building.max_floors}, "
          f"elevators: {config.elevator.num_elevators}, "
          f"travel: {config.timing.floor_travel_time_ms}ms/floor, "
          f"door: {config.timing.door_action_time_ms}ms, "
          f"storage: {config.storage.backend}")

    env = WallClockEnvironment(realtime_factor=config.server.realtime_factor)
    try:
        system = build_system(config, env=env)
    except StoreError as e:
        print(f"Failed to initialize state store: {e}")
        return 1
    service = ElevatorService(system)

    run_server(service, host=config.server.host, port=config.server.port)
    return 0


if __name__ == '__main__':
    sys.exit(main())
