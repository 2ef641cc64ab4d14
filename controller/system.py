"""
System assembly

Wires environment, store, state machine, movement simulator, allocation
strategy, dispatcher and status query from a DispatchConfig.
"""

from dataclasses import dataclass
from typing import Optional

import simpy

from config.dispatch import DispatchConfig
from simulator.core.movement import MovementSimulator
from simulator.core.state_machine import ElevatorStateMachine
from simulator.implementations import create_state_store
from simulator.infrastructure.message_broker import MessageBroker
from simulator.interfaces.state_store import IStateStore
from .algorithms.nearest_idle_car import NearestIdleCarStrategy
from .dispatcher import Dispatcher
from .interfaces.allocation_strategy import IAllocationStrategy
from .status_query import StatusQuery


@dataclass
class ElevatorSystem:
    """Every long-lived component of one running dispatch system"""
    config: DispatchConfig
    env: simpy.Environment
    store: IStateStore
    state_machine: ElevatorStateMachine
    movement: MovementSimulator
    dispatcher: Dispatcher
    status_query: StatusQuery
    broker: Optional[MessageBroker] = None


def create_allocation_strategy(name: str) -> IAllocationStrategy:
    if name == "NearestIdleCar":
        return NearestIdleCarStrategy()
    else:
        raise ValueError(f"Unknown allocation strategy: {name}")


def build_system(config: DispatchConfig, env: Optional[simpy.Environment] = None,
                 broker: Optional[MessageBroker] = None,
                 store: Optional[IStateStore] = None) -> ElevatorSystem:
    """
    Build and initialize a dispatch system

    Args:
        config: Dispatch configuration
        env: SimPy environment (default: a new simpy.Environment)
        broker: Optional MessageBroker that receives every audit event
        store: State store (default: created from config.storage)

    Returns:
        ElevatorSystem with the fleet initialized in the store
    """
    if env is None:
        env = simpy.Environment()
    if store is None:
        store = create_state_store(config.storage, lambda: env.now)
    store.initialize(config.elevator.num_elevators, config.elevator.home_floor)

    state_machine = ElevatorStateMachine(
        store,
        max_floors=config.building.max_floors,
        min_floor=config.building.min_floor,
        broker=broker,
    )
    movement = MovementSimulator(
        env,
        state_machine,
        floor_travel_time=config.timing.floor_travel_time,
        door_action_time=config.timing.door_action_time,
    )
    dispatcher = Dispatcher(
        env,
        state_machine,
        movement,
        create_allocation_strategy(config.allocation_strategy),
        max_floors=config.building.max_floors,
        min_floor=config.building.min_floor,
    )

    return ElevatorSystem(
        config=config,
        env=env,
        store=store,
        state_machine=state_machine,
        movement=movement,
        dispatcher=dispatcher,
        status_query=StatusQuery(store),
        broker=broker,
    )
