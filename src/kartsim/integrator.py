"""Per-tick longitudinal, lateral and vertical integration of the kart."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from .control import DriveInput
from .hazards import Ramp
from .state import Pose, VehicleState
from .track_curve import TrackCurve


@dataclass(frozen=True)
class PhysicsConfig:
    """Arcade handling constants; ``drag`` is applied per tick, not per second."""

    accel: float = 22.0
    reverse_accel: float = 18.0
    drag: float = 0.94
    max_speed: float = 48.0
    max_reverse: float = 22.0
    steer_force: float = 8.0
    steer_speed_threshold: float = 0.5
    stationary_lateral_decay: float = 0.6
    drift_drag: float = 3.4
    curve_force: float = 0.0014
    speed_to_progress: float = 0.0025
    edge_margin: float = 0.6
    edge_slowdown: float = 0.7
    edge_slowdown_margin: float = 0.8
    gravity: float = -30.0
    ramp_jump_speed_min: float = 12.0
    ramp_jump_fraction: float = 0.85
    ramp_jump_boost_speed_factor: float = 0.25
    ramp_jump_boost_base: float = 4.0
    slip_speed_floor: float = 6.0
    slip_yaw_scale: float = 0.2
    ride_height: float = 0.7
    max_delta: float = 0.1


@dataclass(frozen=True)
class CarDimensions:
    half_width: float = 1.2
    half_length: float = 2.1


def clamp_delta(delta: float, max_delta: float) -> float:
    """Guard against huge steps after a suspended frame and negative clocks."""
    if not delta > 0.0:
        return 0.0
    return min(delta, max_delta)


class VehicleIntegrator:
    """Advances a VehicleState along a TrackCurve for one tick."""

    def __init__(
        self,
        config: PhysicsConfig | None = None,
        car: CarDimensions | None = None,
    ) -> None:
        self.config = config or PhysicsConfig()
        self.car = car or CarDimensions()

    def lateral_limit(self, curve: TrackCurve) -> float:
        return max(0.0, curve.half_width - self.config.edge_margin)

    def step(
        self,
        state: VehicleState,
        drive_input: DriveInput,
        curve: TrackCurve,
        ramps: Iterable[Ramp],
        delta: float,
    ) -> Pose:
        cfg = self.config
        delta = clamp_delta(delta, cfg.max_delta)

        if state.finished:
            state.speed = 0.0
            state.lateral_velocity = 0.0
            state.jump_velocity = 0.0
            return self.pose(state, curve)

        state.star_remaining = max(0.0, state.star_remaining - delta)

        self._integrate_longitudinal(state, drive_input, delta)
        self._integrate_lateral(state, drive_input, curve, delta)
        self._integrate_progress(state, delta)
        self._integrate_vertical(state, ramps, delta)
        self._apply_edge_penalty(state, curve)
        return self.pose(state, curve)

    def pose(self, state: VehicleState, curve: TrackCurve) -> Pose:
        """Derive the world-space pose from the track-space state."""
        cfg = self.config
        cx, cy, cz = curve.point_at(state.progress)
        nx, _, nz = curve.left_normal_at(state.progress)
        position = (
            cx + nx * state.lateral,
            cy + cfg.ride_height + state.jump_height,
            cz + nz * state.lateral,
        )
        slip = math.atan2(state.lateral_velocity, max(cfg.slip_speed_floor, abs(state.speed)))
        yaw = curve.yaw_at(state.progress) + slip * cfg.slip_yaw_scale
        return Pose(position=position, yaw=yaw)

    def _integrate_longitudinal(
        self, state: VehicleState, drive_input: DriveInput, delta: float
    ) -> None:
        cfg = self.config
        if state.turbo_remaining > 0.0:
            state.turbo_remaining = max(0.0, state.turbo_remaining - delta)
            state.speed = state.turbo_speed
        elif drive_input.throttle and not drive_input.reverse:
            state.speed = min(cfg.max_speed, state.speed + cfg.accel * delta)
        elif drive_input.reverse:
            state.speed = max(-cfg.max_reverse, state.speed - cfg.reverse_accel * delta)
        else:
            state.speed *= cfg.drag

    def _integrate_lateral(
        self,
        state: VehicleState,
        drive_input: DriveInput,
        curve: TrackCurve,
        delta: float,
    ) -> None:
        cfg = self.config
        if abs(state.speed) > cfg.steer_speed_threshold:
            if drive_input.steer_left:
                state.lateral_velocity -= cfg.steer_force * delta
            if drive_input.steer_right:
                state.lateral_velocity += cfg.steer_force * delta
        else:
            state.lateral_velocity *= cfg.stationary_lateral_decay

        curvature = curve.curvature_at(state.progress)
        state.lateral_velocity += curvature * state.speed * state.speed * cfg.curve_force

        state.lateral_velocity *= max(0.0, 1.0 - cfg.drift_drag * delta)
        state.lateral += state.lateral_velocity * delta

        limit = self.lateral_limit(curve)
        state.lateral = max(-limit, min(limit, state.lateral))

    def _integrate_progress(self, state: VehicleState, delta: float) -> None:
        state.progress += state.speed * delta * self.config.speed_to_progress
        state.progress = max(0.0, min(1.0, state.progress))
        if state.progress >= 1.0 and state.speed > 0.0:
            state.speed = 0.0

    def _integrate_vertical(
        self, state: VehicleState, ramps: Iterable[Ramp], delta: float
    ) -> None:
        cfg = self.config
        ramp_contact = False
        should_jump = False
        ramp_lift = 0.0
        for ramp in ramps:
            fraction = ramp.contact_fraction(state, self.car.half_width)
            if fraction is None:
                continue
            ramp_contact = True
            ramp_lift = max(ramp_lift, ramp.height_at(fraction))
            if fraction > cfg.ramp_jump_fraction and state.speed > cfg.ramp_jump_speed_min:
                should_jump = True

        if ramp_lift > 0.0:
            # a trampoline launch may already have the kart higher than the ramp
            state.jump_height = max(state.jump_height, ramp_lift)
            state.jump_velocity = max(0.0, state.jump_velocity)

        if should_jump and not state.ramp_jumped:
            state.jump_velocity = max(
                state.jump_velocity,
                abs(state.speed) * cfg.ramp_jump_boost_speed_factor + cfg.ramp_jump_boost_base,
            )
            state.ramp_jumped = True
        if not ramp_contact and state.jump_height == 0.0:
            state.ramp_jumped = False

        if ramp_lift == 0.0:
            state.jump_velocity += cfg.gravity * delta
            state.jump_height += state.jump_velocity * delta
        if state.jump_height < 0.0:
            state.jump_height = 0.0
            state.jump_velocity = 0.0

    def _apply_edge_penalty(self, state: VehicleState, curve: TrackCurve) -> None:
        cfg = self.config
        if abs(state.lateral) >= curve.half_width - cfg.edge_slowdown_margin:
            state.speed *= cfg.edge_slowdown
            state.edge_hit = True


__all__ = ["PhysicsConfig", "CarDimensions", "VehicleIntegrator", "clamp_delta"]
