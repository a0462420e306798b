"""Mutable vehicle record and lightweight snapshots of simulation state."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Sequence, Tuple

if TYPE_CHECKING:
    from .hazards import HazardEvent
    from .race_progress import RaceProgressState

Vec3 = Tuple[float, float, float]

_ONE_SHOT_FLAGS = (
    "collision_hit",
    "turbo_just_activated",
    "trampoline_just_launched",
    "edge_hit",
)


@dataclass
class VehicleState:
    """Everything the core knows about the kart between ticks.

    ``progress`` is the fraction of the track length travelled, ``lateral`` the
    signed offset from the centreline along the curve's left normal and
    ``jump_height`` the height above the track surface. ``lava_hit`` is a
    latch: it stays set until the caller clears it or restarts the run.
    """

    progress: float = 0.0
    speed: float = 0.0
    lateral: float = 0.0
    lateral_velocity: float = 0.0
    jump_height: float = 0.0
    jump_velocity: float = 0.0
    ramp_jumped: bool = False
    turbo_remaining: float = 0.0
    turbo_speed: float = 0.0
    star_remaining: float = 0.0
    finished: bool = False
    lava_hit: bool = False
    collectible_collected: bool = False
    collectibles: int = 0
    collision_hit: bool = False
    turbo_just_activated: bool = False
    trampoline_just_launched: bool = False
    edge_hit: bool = False

    @property
    def airborne(self) -> bool:
        return self.jump_height > 0.0

    @property
    def invincible(self) -> bool:
        return self.star_remaining > 0.0

    @property
    def turbo_active(self) -> bool:
        return self.turbo_remaining > 0.0

    def clear_events(self) -> None:
        """Drop the flags that only describe the previous tick."""
        for name in _ONE_SHOT_FLAGS:
            setattr(self, name, False)

    def reset(self) -> None:
        for field in fields(self):
            setattr(self, field.name, field.default)


@dataclass(frozen=True)
class Pose:
    """World-space placement handed to the renderer."""

    position: Vec3
    yaw: float


@dataclass(frozen=True)
class VehicleSnapshot:
    progress: float
    speed: float
    lateral: float
    lateral_velocity: float
    jump_height: float
    jump_velocity: float
    turbo_remaining: float
    star_remaining: float
    finished: bool
    lava_hit: bool
    collectibles: int
    collision_hit: bool
    turbo_just_activated: bool
    trampoline_just_launched: bool
    edge_hit: bool

    @classmethod
    def capture(cls, state: VehicleState) -> "VehicleSnapshot":
        return cls(
            progress=state.progress,
            speed=state.speed,
            lateral=state.lateral,
            lateral_velocity=state.lateral_velocity,
            jump_height=state.jump_height,
            jump_velocity=state.jump_velocity,
            turbo_remaining=state.turbo_remaining,
            star_remaining=state.star_remaining,
            finished=state.finished,
            lava_hit=state.lava_hit,
            collectibles=state.collectibles,
            collision_hit=state.collision_hit,
            turbo_just_activated=state.turbo_just_activated,
            trampoline_just_launched=state.trampoline_just_launched,
            edge_hit=state.edge_hit,
        )


@dataclass(frozen=True)
class SimulationSnapshot:
    """High-level view of a simulation step suitable for Gym wrappers."""

    vehicle: VehicleSnapshot
    pose: Pose
    race: RaceProgressState
    events: Sequence[HazardEvent]
    elapsed_time: float
    step_index: int


__all__ = [
    "Vec3",
    "VehicleState",
    "Pose",
    "VehicleSnapshot",
    "SimulationSnapshot",
]
