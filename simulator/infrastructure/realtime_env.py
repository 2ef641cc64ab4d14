"""
realtime_env.py

A SimPy environment whose simulation clock follows the wall clock.

Unlike a blocking real-time loop, the service drives this environment lazily:
whoever needs an up-to-date view (a request handler, the clock thread) calls
catch_up(), which processes every pending event up to the current scaled wall
time and returns immediately.
"""

import time

import simpy


class WallClockEnvironment(simpy.Environment):
    """
    SimPy environment synchronised to real time on demand.

    Args:
        realtime_factor (float): Simulated seconds per real second
            - 1.0 = real-time
            - 2.0 = double speed
            - 0.5 = half speed
        initial_time (float): Initial simulation time (default: 0)
        timer: Monotonic time source, injectable for tests

    Example:
        >>> env = WallClockEnvironment(realtime_factor=10.0)
        >>> env.catch_up()  # simulation now reflects elapsed wall time x10
    """

    def __init__(self, realtime_factor=1.0, initial_time=0, timer=time.monotonic):
        if realtime_factor <= 0:
            raise ValueError("realtime_factor must be positive")
        super().__init__(initial_time=initial_time)
        self.realtime_factor = realtime_factor
        self._timer = timer
        self.real_start_time = timer()
        self.sim_start_time = self.now

    def target_time(self) -> float:
        """Simulation time that corresponds to the current wall time"""
        real_elapsed = self._timer() - self.real_start_time
        return self.sim_start_time + real_elapsed * self.realtime_factor

    def catch_up(self) -> float:
        """
        Process all events due up to the current wall time.

        Returns:
            float: Simulation time after catching up
        """
        target = self.target_time()
        if target > self.now:
            self.run(until=target)
        return self.now

