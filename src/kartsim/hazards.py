"""Track-anchored hazards and their per-kind responses."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Iterable, Iterator, List, Tuple

from .state import VehicleState


class HazardKind(Enum):
    OBSTACLE = "obstacle"
    TREE = "tree"
    RAMP = "ramp"
    TURBO_PAD = "turbo_pad"
    TRAMPOLINE = "trampoline"
    LAVA_ZONE = "lava_zone"
    MUD_ZONE = "mud_zone"
    COLLECTIBLE = "collectible"
    STAR_ITEM = "star_item"


@dataclass(frozen=True)
class HazardEvent:
    """A hazard response that fired during a tick."""

    kind: HazardKind
    index: int


@dataclass(frozen=True)
class ContactContext:
    """Per-tick values every hazard response may need."""

    delta: float
    car_half_width: float
    car_progress_half: float


@dataclass
class Hazard:
    """Base footprint: a rectangle in (lateral, progress) track space.

    ``progress_half`` is expressed as a fraction of the track length so the
    overlap test does not depend on curve resolution.
    """

    kind: ClassVar[HazardKind]

    t: float
    lateral: float
    lateral_half: float = 0.8
    progress_half: float = 0.001

    def overlaps(self, state: VehicleState, contact: ContactContext) -> bool:
        dx = abs(state.lateral - self.lateral)
        dz = abs(state.progress - self.t)
        return (
            dx < contact.car_half_width + self.lateral_half
            and dz < contact.car_progress_half + self.progress_half
        )

    def update(self, state: VehicleState, contact: ContactContext) -> bool:
        """Run the overlap test and apply the response; True if it fired."""
        if not self.overlaps(state, contact):
            return False
        return self.resolve(state, contact)

    def resolve(self, state: VehicleState, contact: ContactContext) -> bool:
        return False

    def reset(self) -> None:
        """Restore race-start state; only one-shot hazards carry any."""


@dataclass
class Obstacle(Hazard):
    """Solid block: bonks the kart backwards unless jumped over."""

    kind: ClassVar[HazardKind] = HazardKind.OBSTACLE

    clearance: float = 0.84
    push: float = 1.4
    lateral_damping: float = 0.2
    progress_kick: float = 0.0015
    reverse: float = 14.0

    def resolve(self, state: VehicleState, contact: ContactContext) -> bool:
        if state.invincible or state.jump_height > self.clearance:
            return False
        offset = state.lateral - self.lateral
        push_dir = math.copysign(1.0, offset) if offset != 0.0 else 1.0
        state.lateral += push_dir * self.push * contact.delta
        state.lateral_velocity *= self.lateral_damping
        state.progress = max(0.0, state.progress - self.progress_kick)
        state.speed = min(state.speed, 0.0)
        state.speed -= self.reverse * contact.delta
        state.collision_hit = True
        return True


@dataclass
class Tree(Obstacle):
    kind: ClassVar[HazardKind] = HazardKind.TREE

    lateral_half: float = 0.9
    clearance: float = 2.4
    push: float = 1.8
    lateral_damping: float = 0.3
    progress_kick: float = 0.002
    reverse: float = 16.0


@dataclass
class Ramp(Hazard):
    """Wedge that lifts the kart; the vertical response lives in the integrator.

    The ramp rises from 0 at its near edge to ``height`` at its far edge and
    widens linearly from ``front_width`` to ``back_width``.
    """

    kind: ClassVar[HazardKind] = HazardKind.RAMP

    front_width: float = 3.0
    back_width: float = 4.0
    height: float = 1.2

    def __post_init__(self) -> None:
        self.lateral_half = max(self.front_width, self.back_width) * 0.5

    def fraction_at(self, progress: float) -> float:
        span = self.progress_half * 2.0
        if span <= 0.0:
            return -1.0
        return (progress - self.t) / span + 0.5

    def width_at(self, fraction: float) -> float:
        return self.front_width + (self.back_width - self.front_width) * fraction

    def height_at(self, fraction: float) -> float:
        return self.height * fraction

    def contact_fraction(self, state: VehicleState, car_half_width: float) -> float | None:
        """Fraction along the ramp if the kart is on it, otherwise None."""
        fraction = self.fraction_at(state.progress)
        if fraction < 0.0 or fraction > 1.0:
            return None
        if abs(state.lateral - self.lateral) > car_half_width + self.width_at(fraction) * 0.5:
            return None
        return fraction


@dataclass
class TurboPad(Hazard):
    kind: ClassVar[HazardKind] = HazardKind.TURBO_PAD

    lateral_half: float = 1.5
    boost_speed: float = 70.0
    duration: float = 1.2

    def resolve(self, state: VehicleState, contact: ContactContext) -> bool:
        was_active = state.turbo_remaining > 0.0
        state.turbo_remaining = self.duration
        state.turbo_speed = self.boost_speed
        if was_active:
            return False
        state.turbo_just_activated = True
        return True


@dataclass
class Trampoline(Hazard):
    """Launches once per pass; ``launched`` holds while the kart is on it."""

    kind: ClassVar[HazardKind] = HazardKind.TRAMPOLINE

    lateral_half: float = 1.5
    launch_velocity: float = 16.0
    airborne_threshold: float = 0.2
    launched: bool = False

    def update(self, state: VehicleState, contact: ContactContext) -> bool:
        if not self.overlaps(state, contact):
            self.launched = False
            return False
        return self.resolve(state, contact)

    def resolve(self, state: VehicleState, contact: ContactContext) -> bool:
        fired = False
        if not self.launched and state.jump_height <= self.airborne_threshold:
            state.jump_velocity = self.launch_velocity
            state.trampoline_just_launched = True
            fired = True
        self.launched = True
        return fired

    def reset(self) -> None:
        self.launched = False


@dataclass
class LavaZone(Hazard):
    kind: ClassVar[HazardKind] = HazardKind.LAVA_ZONE

    lateral_half: float = 2.5
    safety_height: float = 0.5

    def resolve(self, state: VehicleState, contact: ContactContext) -> bool:
        if state.jump_height > self.safety_height or state.invincible:
            return False
        if state.lava_hit:
            return False
        state.lava_hit = True
        return True


@dataclass
class MudZone(Hazard):
    """Caps speed magnitude and bleeds lateral velocity without reversing."""

    kind: ClassVar[HazardKind] = HazardKind.MUD_ZONE

    lateral_half: float = 2.5
    max_speed: float = 18.0
    lateral_damping: float = 0.85
    airborne_threshold: float = 0.3

    def resolve(self, state: VehicleState, contact: ContactContext) -> bool:
        if state.invincible or state.jump_height > self.airborne_threshold:
            return False
        if abs(state.speed) > self.max_speed:
            state.speed = math.copysign(self.max_speed, state.speed)
        state.lateral_velocity *= self.lateral_damping
        return True


@dataclass
class Collectible(Hazard):
    kind: ClassVar[HazardKind] = HazardKind.COLLECTIBLE

    collected: bool = False

    def resolve(self, state: VehicleState, contact: ContactContext) -> bool:
        if self.collected:
            return False
        self.collected = True
        self.apply_pickup(state)
        return True

    def apply_pickup(self, state: VehicleState) -> None:
        state.collectible_collected = True
        state.collectibles += 1

    def reset(self) -> None:
        self.collected = False


@dataclass
class StarItem(Collectible):
    """Grants temporary invincibility against barriers, lava and mud."""

    kind: ClassVar[HazardKind] = HazardKind.STAR_ITEM

    duration: float = 6.0

    def apply_pickup(self, state: VehicleState) -> None:
        state.star_remaining = self.duration


HAZARD_TYPES = {
    cls.kind: cls
    for cls in (
        Obstacle,
        Tree,
        Ramp,
        TurboPad,
        Trampoline,
        LavaZone,
        MudZone,
        Collectible,
        StarItem,
    )
}


class HazardField:
    """All hazards of a level in declaration order."""

    def __init__(self, hazards: Iterable[Hazard] = ()) -> None:
        self._hazards: List[Hazard] = list(hazards)

    def __iter__(self) -> Iterator[Hazard]:
        return iter(self._hazards)

    def __len__(self) -> int:
        return len(self._hazards)

    def __getitem__(self, index: int) -> Hazard:
        return self._hazards[index]

    def of_kind(self, kind: HazardKind) -> Tuple[Hazard, ...]:
        return tuple(hazard for hazard in self._hazards if hazard.kind is kind)

    @property
    def ramps(self) -> Tuple[Ramp, ...]:
        return tuple(hazard for hazard in self._hazards if isinstance(hazard, Ramp))

    def remaining_collectibles(self) -> int:
        return sum(
            1
            for hazard in self._hazards
            if hazard.kind is HazardKind.COLLECTIBLE and not hazard.collected  # type: ignore[attr-defined]
        )

    def reset(self) -> None:
        for hazard in self._hazards:
            hazard.reset()


__all__ = [
    "HazardKind",
    "HazardEvent",
    "ContactContext",
    "Hazard",
    "Obstacle",
    "Tree",
    "Ramp",
    "TurboPad",
    "Trampoline",
    "LavaZone",
    "MudZone",
    "Collectible",
    "StarItem",
    "HAZARD_TYPES",
    "HazardField",
]
