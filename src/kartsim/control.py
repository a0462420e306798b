"""Driver inputs for a tick and their discrete enumeration for agents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class DriveInput:
    """Digital controls sampled once per frame."""

    throttle: bool = False
    reverse: bool = False
    steer_left: bool = False
    steer_right: bool = False

    @property
    def any(self) -> bool:
        return self.throttle or self.reverse or self.steer_left or self.steer_right


NEUTRAL = DriveInput()


@dataclass(frozen=True)
class DiscreteControl:
    """Simple throttle/steer control abstraction."""

    throttle: int  # -1 = reverse, 0 = coasting, 1 = accelerate
    steer: int  # -1 = left, 0 = straight, 1 = right

    def clamp(self) -> "DiscreteControl":
        return DiscreteControl(
            throttle=max(-1, min(1, self.throttle)),
            steer=max(-1, min(1, self.steer)),
        )


def control_to_input(control: DiscreteControl) -> DriveInput:
    """Convert a discrete control state to the button set read by the integrator."""
    control = control.clamp()
    return DriveInput(
        throttle=control.throttle > 0,
        reverse=control.throttle < 0,
        steer_left=control.steer < 0,
        steer_right=control.steer > 0,
    )


# (throttle, |steer|) -> position in the action list; idle first, reverse last
_ACTION_GROUPS = {
    (0, 0): 0,
    (1, 0): 1,
    (1, 1): 2,
    (0, 1): 3,
    (-1, 1): 4,
    (-1, 0): 5,
}


def _action_rank(control: DiscreteControl) -> tuple[int, int]:
    return _ACTION_GROUPS[(control.throttle, abs(control.steer))], control.steer


def enumerate_controls(
    throttle_levels: Sequence[int] = (-1, 0, 1),
    steer_levels: Sequence[int] = (-1, 0, 1),
) -> List[DiscreteControl]:
    """Return the distinct clamped throttle/steer combinations in action order.

    Index 0 is the idle control when it is present, index 1 straight
    acceleration.
    """
    unique = {
        DiscreteControl(throttle=throttle, steer=steer).clamp()
        for throttle in throttle_levels
        for steer in steer_levels
    }
    return sorted(unique, key=_action_rank)


__all__ = [
    "DriveInput",
    "NEUTRAL",
    "DiscreteControl",
    "control_to_input",
    "enumerate_controls",
]
