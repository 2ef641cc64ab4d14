import threading
from typing import Any, Dict, List, Optional

from .system import ElevatorSystem


class ElevatorService:
    """
    Request-facing facade over one dispatch system.

    SimPy is single-threaded, while Flask serves requests from worker threads.
    Every entry point therefore runs under one lock: it first advances the
    simulation to the current wall time (when the environment supports it)
    and then reads or writes the store, so each request sees and mutates a
    consistent fleet.
    """

    def __init__(self, system: ElevatorSystem):
        self.system = system
        self._lock = threading.Lock()
        self._clock_thread: Optional[threading.Thread] = None
        self._stop_clock = threading.Event()

    def _catch_up(self):
        catch_up = getattr(self.system.env, 'catch_up', None)
        if catch_up is not None:
            catch_up()

    def tick(self) -> float:
        """Advance the simulation to wall time; returns the simulation time"""
        with self._lock:
            self._catch_up()
            return self.system.env.now

    def call_elevator(self, start_floor: int, end_floor: int) -> Dict[str, Any]:
        """Dispatch a call; see Dispatcher.call for the result shape"""
        with self._lock:
            self._catch_up()
            return self.system.dispatcher.call(start_floor, end_floor).to_dict()

    def get_elevator_status(self, elevator_id: Optional[int] = None) -> List[Dict[str, Any]]:
        with self._lock:
            self._catch_up()
            return [record.to_dict() for record in self.system.status_query.status(elevator_id)]

    def get_logs(self) -> Dict[str, Any]:
        """Audit event trail and elevator read log, oldest first"""
        with self._lock:
            self._catch_up()
            store = self.system.store
            return {
                'eventLogs': [event.to_dict() for event in store.list_events()],
                'sqlLogs': [entry.to_dict() for entry in store.list_sql_logs()],
            }

    def start_clock(self, interval: Optional[float] = None):
        """Start a daemon thread that calls tick() every interval seconds"""
        if self._clock_thread is not None:
            return
        if interval is None:
            interval = self.system.config.server.tick_interval
        self._stop_clock.clear()

        def run():
            while not self._stop_clock.wait(interval):
                self.tick()

        self._clock_thread = threading.Thread(target=run, name="elevator-clock", daemon=True)
        self._clock_thread.start()
        print(f"[Service] Clock started (tick every {interval:.2f}s)")

    def stop_clock(self):
        if self._clock_thread is None:
            return
        self._stop_clock.set()
        self._clock_thread.join()
        self._clock_thread = None
        print("[Service] Clock stopped")
