import sys

import simpy

# Configuration
from config import load_dispatch_config, load_scenario_config

# Simulator and controller
from simulator.infrastructure.message_broker import MessageBroker
from controller.system import build_system

# Analyzer
from analyzer.event_recorder import EventRecorder


def run_simulation(dispatch_config_path="scenarios/dispatch/default.yaml",
                   scenario_path="scenarios/calls/two_car_demo.yaml",
                   log_path="dispatch_log.jsonl"):
    """
    Run a scripted scenario in simulated time

    Args:
        dispatch_config_path: Path to dispatch configuration YAML file
        scenario_path: Path to scenario (scripted calls) YAML file
        log_path: Where to save the JSON Lines event log

    Returns:
        ElevatorSystem after the run, for inspection
    """
    print("--- Loading Configuration ---")

    config = load_dispatch_config(dispatch_config_path)
    scenario = load_scenario_config(scenario_path)

    print(f"Dispatch Config: {dispatch_config_path}")
    print(f"Scenario: {scenario_path} ({len(scenario.calls)} calls, {scenario.duration:.0f}s)")

    print("\n--- Simulation Setup ---")
    env = simpy.Environment()
    broker = MessageBroker(env)

    recorder = EventRecorder(env, broker.get_broadcast_pipe())
    env.process(recorder.start_listening())
    recorder.set_simulation_metadata({
        'config': config.to_dict(),
        'scenario': scenario.to_dict(),
        'config_files': {
            'dispatch': dispatch_config_path,
            'scenario': scenario_path
        }
    })

    system = build_system(config, env=env, broker=broker)
    env.process(call_generator(env, system, scenario.calls))

    print("\n--- Simulation Start ---")
    env.run(until=scenario.duration)
    print("--- Simulation End ---")

    print("\nFinal fleet status:")
    for record in system.status_query.status():
        print(f"  Elevator {record.id}: floor {record.current_floor}, {record.state}, direction {record.direction}")

    recorder.print_summary()
    recorder.save_event_log(log_path)
    return system


def call_generator(env, system, calls):
    """Issue each scripted call at its scheduled time"""
    for call in calls:
        if call.time > env.now:
            yield env.timeout(call.time - env.now)
        result = system.dispatcher.call(call.start_floor, call.end_floor)
        print(f"{env.now:.2f} [Scenario] Call {call.start_floor} -> {call.end_floor}: {result.to_dict()}")


def main(argv=None):
    # Accept command line arguments for config files
    argv = sys.argv[1:] if argv is None else argv
    dispatch_config_path = argv[0] if len(argv) > 0 else "scenarios/dispatch/default.yaml"
    scenario_path = argv[1] if len(argv) > 1 else "scenarios/calls/two_car_demo.yaml"
    run_simulation(dispatch_config_path=dispatch_config_path, scenario_path=scenario_path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
