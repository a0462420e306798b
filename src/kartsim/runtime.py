"""Non-graphical helpers for running the simulation loop."""

from __future__ import annotations

from dataclasses import dataclass

from .control import NEUTRAL, DriveInput
from .integrator import CarDimensions, PhysicsConfig
from .level_loader import LevelDescriptor
from .simulation import Simulation, TickResult
from .state import SimulationSnapshot


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters controlling fixed-step ticking."""

    time_step: float = 1.0 / 60.0


class SimulationSession:
    """Wraps a Simulation with step scheduling useful for Gym integration."""

    def __init__(
        self,
        level: LevelDescriptor | None = None,
        *,
        config: SimulationConfig | None = None,
        physics: PhysicsConfig | None = None,
        car: CarDimensions | None = None,
    ) -> None:
        self._config = config or SimulationConfig()
        self._simulation = Simulation(level, physics=physics, car=car)
        self._elapsed_time = 0.0
        self._step_index = 0
        self._last_result: TickResult | None = None

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def simulation(self) -> Simulation:
        return self._simulation

    @property
    def last_result(self) -> TickResult | None:
        return self._last_result

    def reset(self, level: LevelDescriptor | None = None) -> SimulationSnapshot:
        """Restart the run, optionally swapping the active level."""
        if level is not None:
            self._simulation.load_level(level)
        else:
            self._simulation.restart()
        self._elapsed_time = 0.0
        self._step_index = 0
        self._last_result = None
        return self.snapshot()

    def step(
        self,
        drive_input: DriveInput = NEUTRAL,
        *,
        time_step: float | None = None,
    ) -> SimulationSnapshot:
        """Advance the simulation using the provided control inputs."""
        step_dt = self._config.time_step if time_step is None else time_step
        self._last_result = self._simulation.tick(step_dt, drive_input)
        self._elapsed_time += step_dt
        self._step_index += 1
        return self.snapshot()

    def snapshot(self) -> SimulationSnapshot:
        """Return the current state without advancing the world."""
        return self._simulation.snapshot(
            elapsed_time=self._elapsed_time,
            step_index=self._step_index,
        )


__all__ = ["SimulationConfig", "SimulationSession"]
