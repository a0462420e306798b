"""Simulation context owning all mutable race state."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .collision import CollisionResolver
from .control import NEUTRAL, DriveInput
from .hazards import HazardEvent, HazardField, HazardKind
from .integrator import CarDimensions, PhysicsConfig, VehicleIntegrator, clamp_delta
from .level_loader import LevelDescriptor, default_level, load_level
from .race_progress import RaceProgress, RaceProgressState
from .state import Pose, SimulationSnapshot, VehicleSnapshot, VehicleState
from .track_curve import TrackCurve

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    """Everything the renderer needs after a tick."""

    pose: Pose
    events: Sequence[HazardEvent]
    checkpoint_reached: int | None
    finished_now: bool


class Simulation:
    """Encapsulates the curve, hazards, kart state and race progress of a level.

    Nothing outside this object writes to its state; callers drive it with
    :meth:`tick` and read the returned pose, flags and events.
    """

    def __init__(
        self,
        level: LevelDescriptor | None = None,
        *,
        physics: PhysicsConfig | None = None,
        car: CarDimensions | None = None,
    ) -> None:
        self._base_physics = physics
        self._car = car or CarDimensions()
        self.state = VehicleState()
        self._last_events: tuple[HazardEvent, ...] = ()
        self.load_level(level or default_level())

    def load_level(self, level: LevelDescriptor) -> None:
        """Swap in a new level and start a fresh run on it."""
        curve, hazards = load_level(level)
        physics = level.physics_config(self._base_physics)

        self.level = level
        self.curve: TrackCurve = curve
        self.hazards: HazardField = hazards
        self.integrator = VehicleIntegrator(physics, self._car)
        self.resolver = CollisionResolver(self._car, edge_margin=physics.edge_margin)
        self.race = RaceProgress(level.checkpoints, hit_radius=level.hit_radius)
        self.state.reset()
        self._last_events = ()
        self._pose = self.integrator.pose(self.state, self.curve)
        _logger.info(
            "Level '%s' ready: track %.1f long, %d hazards, %d checkpoints",
            level.name,
            curve.total,
            len(hazards),
            len(level.checkpoints),
        )

    @property
    def physics(self) -> PhysicsConfig:
        return self.integrator.config

    @property
    def pose(self) -> Pose:
        return self._pose

    @property
    def race_state(self) -> RaceProgressState:
        return self.race.state

    @property
    def lateral_limit(self) -> float:
        return self.integrator.lateral_limit(self.curve)

    def tick(self, delta: float, drive_input: DriveInput = NEUTRAL) -> TickResult:
        delta = clamp_delta(delta, self.physics.max_delta)
        state = self.state
        state.clear_events()

        self.integrator.step(state, drive_input, self.curve, self.hazards.ramps, delta)

        events: tuple[HazardEvent, ...] = ()
        if not state.finished:
            events = self.resolver.resolve(state, self.hazards, self.curve, delta)
            if any(event.kind is HazardKind.LAVA_ZONE for event in events):
                _logger.info("Lava hit at progress %.3f", state.progress)

        update = self.race.update(state, self.curve, delta)
        if update.finished_now:
            state.speed = 0.0
            state.lateral_velocity = 0.0
            state.jump_velocity = 0.0

        self._pose = self.integrator.pose(state, self.curve)
        self._last_events = events
        return TickResult(
            pose=self._pose,
            events=events,
            checkpoint_reached=update.checkpoint_reached,
            finished_now=update.finished_now,
        )

    def restart(self) -> None:
        """Reinitialise the kart, one-shot hazards and race progress together."""
        self.state.reset()
        self.hazards.reset()
        self.race.reset()
        self._last_events = ()
        self._pose = self.integrator.pose(self.state, self.curve)
        _logger.info("Run restarted on level '%s'", self.level.name)

    def clear_lava_hit(self) -> None:
        self.state.lava_hit = False

    def snapshot(self, *, elapsed_time: float = 0.0, step_index: int = 0) -> SimulationSnapshot:
        return SimulationSnapshot(
            vehicle=VehicleSnapshot.capture(self.state),
            pose=self._pose,
            race=self.race.state,
            events=self._last_events,
            elapsed_time=elapsed_time,
            step_index=step_index,
        )


__all__ = ["Simulation", "TickResult"]
