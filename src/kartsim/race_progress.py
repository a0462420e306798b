"""Checkpoint sequencing and the finish condition."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from .state import VehicleState
from .track_curve import TrackCurve

_logger = logging.getLogger(__name__)

DEFAULT_CHECKPOINTS = (0.25, 0.5, 0.75)
DEFAULT_HIT_RADIUS = 5.0


class RaceStatus(Enum):
    RACING = "racing"
    FINISHED = "finished"


@dataclass(frozen=True)
class RaceProgressState:
    status: RaceStatus
    checkpoint_index: int
    checkpoint_count: int
    elapsed: float
    finish_time: float | None

    @property
    def finished(self) -> bool:
        return self.status is RaceStatus.FINISHED

    @property
    def checkpoints_complete(self) -> bool:
        return self.checkpoint_index >= self.checkpoint_count


@dataclass(frozen=True)
class RaceUpdate:
    """What changed in the race during one tick."""

    checkpoint_reached: int | None
    finished_now: bool


def validate_checkpoints(checkpoints: Sequence[float]) -> tuple[float, ...]:
    values = tuple(float(value) for value in checkpoints)
    for value in values:
        if not 0.0 <= value < 1.0:
            raise ValueError(f"Checkpoint {value} must lie in [0, 1)")
    for earlier, later in zip(values, values[1:]):
        if later <= earlier:
            raise ValueError("Checkpoints must be strictly increasing")
    return values


class RaceProgress:
    """Tracks ordered checkpoints along the curve and the race clock.

    A checkpoint counts once the curve position at the kart's progress comes
    within ``hit_radius`` of the checkpoint's curve position. The race
    finishes only when ``progress`` reaches 1 with every checkpoint passed.
    """

    def __init__(
        self,
        checkpoints: Sequence[float] = DEFAULT_CHECKPOINTS,
        *,
        hit_radius: float = DEFAULT_HIT_RADIUS,
        finish_callback: Callable[[float], None] | None = None,
    ) -> None:
        if hit_radius <= 0:
            raise ValueError("hit_radius must be positive")
        self._checkpoints = validate_checkpoints(checkpoints)
        self._hit_radius = hit_radius
        self._finish_callback = finish_callback

        self._status = RaceStatus.RACING
        self._checkpoint_index = 0
        self._elapsed = 0.0
        self._finish_time: float | None = None

    @property
    def checkpoints(self) -> tuple[float, ...]:
        return self._checkpoints

    @property
    def checkpoint_index(self) -> int:
        return self._checkpoint_index

    @property
    def status(self) -> RaceStatus:
        return self._status

    @property
    def finished(self) -> bool:
        return self._status is RaceStatus.FINISHED

    def update(self, state: VehicleState, curve: TrackCurve, delta: float) -> RaceUpdate:
        if self._status is RaceStatus.FINISHED:
            return RaceUpdate(checkpoint_reached=None, finished_now=False)

        self._elapsed += delta

        reached = None
        if self._checkpoint_index < len(self._checkpoints):
            target = curve.point_at(self._checkpoints[self._checkpoint_index])
            center = curve.point_at(state.progress)
            if math.dist(center, target) < self._hit_radius:
                reached = self._checkpoint_index
                self._checkpoint_index += 1
                _logger.debug(
                    "Checkpoint %d/%d reached at %.2fs",
                    self._checkpoint_index,
                    len(self._checkpoints),
                    self._elapsed,
                )

        finished_now = False
        if state.progress >= 1.0 and self._checkpoint_index == len(self._checkpoints):
            self._status = RaceStatus.FINISHED
            self._finish_time = self._elapsed
            state.finished = True
            finished_now = True
            _logger.info("Race finished in %.2fs", self._elapsed)
            if self._finish_callback is not None:
                self._finish_callback(self._elapsed)

        return RaceUpdate(checkpoint_reached=reached, finished_now=finished_now)

    @property
    def state(self) -> RaceProgressState:
        return RaceProgressState(
            status=self._status,
            checkpoint_index=self._checkpoint_index,
            checkpoint_count=len(self._checkpoints),
            elapsed=self._elapsed,
            finish_time=self._finish_time,
        )

    def reset(self) -> None:
        self._status = RaceStatus.RACING
        self._checkpoint_index = 0
        self._elapsed = 0.0
        self._finish_time = None


__all__ = [
    "RaceStatus",
    "RaceProgressState",
    "RaceUpdate",
    "RaceProgress",
    "validate_checkpoints",
    "DEFAULT_CHECKPOINTS",
    "DEFAULT_HIT_RADIUS",
]
