"""Arc-length parametrised track centreline sampled from a sinusoidal generator."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

Vec3 = Tuple[float, float, float]

DEFAULT_TRACK_LENGTH = 800.0
DEFAULT_SEGMENT_COUNT = 200
DEFAULT_HALF_WIDTH = 6.0
DEFAULT_MAJOR_AMPLITUDE = 12.0
DEFAULT_MAJOR_FREQUENCY = math.pi * 4.0
DEFAULT_MINOR_AMPLITUDE = 6.0
DEFAULT_MINOR_FREQUENCY = math.pi * 1.5


@dataclass(frozen=True)
class TrackCurveConfig:
    """Generator parameters for ``x(t) = A1 sin(w1 t) + A2 sin(w2 t)``."""

    length: float = DEFAULT_TRACK_LENGTH
    segment_count: int = DEFAULT_SEGMENT_COUNT
    half_width: float = DEFAULT_HALF_WIDTH
    major_amplitude: float = DEFAULT_MAJOR_AMPLITUDE
    major_frequency: float = DEFAULT_MAJOR_FREQUENCY
    minor_amplitude: float = DEFAULT_MINOR_AMPLITUDE
    minor_frequency: float = DEFAULT_MINOR_FREQUENCY


class TrackCurve:
    """Sampled 3D path with a cumulative arc-length lookup table.

    ``t`` is the normalised fraction of the total arc length. Points are
    stored as an ``(N + 1, 3)`` array and never modified after construction.
    """

    def __init__(self, points: np.ndarray, half_width: float) -> None:
        points = np.array(points, dtype=float)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError("points must be an (N, 3) array")
        if len(points) < 3:
            raise ValueError("A track curve requires at least three samples")
        if half_width <= 0:
            raise ValueError("half_width must be positive")

        steps = np.linalg.norm(np.diff(points, axis=0), axis=1)
        distances = np.concatenate(([0.0], np.cumsum(steps)))

        self._points = points
        self._distances = distances
        self._points.setflags(write=False)
        self._distances.setflags(write=False)
        self._total = float(distances[-1])
        self._half_width = float(half_width)
        self._segment_count = len(points) - 1
        self._dt = 1.0 / self._segment_count

    @classmethod
    def build(
        cls,
        length: float = DEFAULT_TRACK_LENGTH,
        segment_count: int = DEFAULT_SEGMENT_COUNT,
        *,
        half_width: float = DEFAULT_HALF_WIDTH,
        major_amplitude: float = DEFAULT_MAJOR_AMPLITUDE,
        major_frequency: float = DEFAULT_MAJOR_FREQUENCY,
        minor_amplitude: float = DEFAULT_MINOR_AMPLITUDE,
        minor_frequency: float = DEFAULT_MINOR_FREQUENCY,
    ) -> "TrackCurve":
        if length <= 0:
            raise ValueError("Track length must be positive")
        if segment_count < 2:
            raise ValueError("segment_count must be >= 2")

        t = np.linspace(0.0, 1.0, segment_count + 1)
        x = major_amplitude * np.sin(major_frequency * t) + minor_amplitude * np.sin(
            minor_frequency * t
        )
        y = np.zeros_like(t)
        z = t * length
        return cls(np.column_stack((x, y, z)), half_width)

    @property
    def points(self) -> np.ndarray:
        return self._points

    @property
    def distances(self) -> np.ndarray:
        return self._distances

    @property
    def total(self) -> float:
        return self._total

    @property
    def half_width(self) -> float:
        return self._half_width

    @property
    def segment_count(self) -> int:
        return self._segment_count

    def point_at(self, t: float) -> Vec3:
        """Return the centreline position at arc-length fraction ``t``."""
        if t <= 0.0:
            return _as_vec3(self._points[0])
        if t >= 1.0:
            return _as_vec3(self._points[-1])

        target = t * self._total
        index = int(np.searchsorted(self._distances, target, side="left"))
        if index <= 0:
            return _as_vec3(self._points[0])
        if index > self._segment_count:
            return _as_vec3(self._points[-1])

        prev_dist = self._distances[index - 1]
        span = self._distances[index] - prev_dist
        ratio = (target - prev_dist) / span if span > 0.0 else 0.0
        prev = self._points[index - 1]
        nxt = self._points[index]
        return _as_vec3(prev + (nxt - prev) * ratio)

    def tangent_at(self, t: float) -> Vec3:
        """Unit tangent, central difference inside and one-sided at the ends."""
        if t <= 0.0:
            delta = self._points[1] - self._points[0]
        elif t >= 1.0:
            delta = self._points[-1] - self._points[-2]
        else:
            ahead = np.array(self.point_at(min(1.0, t + self._dt)))
            behind = np.array(self.point_at(max(0.0, t - self._dt)))
            delta = ahead - behind
        return _normalize(delta)

    def curvature_at(self, t: float) -> float:
        """Signed yaw change across ``[t - dt, t + dt]`` wrapped into (-pi, pi]."""
        yaw_before = self.yaw_at(max(0.0, t - self._dt))
        yaw_after = self.yaw_at(min(1.0, t + self._dt))
        return wrap_angle(yaw_after - yaw_before)

    def yaw_at(self, t: float) -> float:
        tx, _, tz = self.tangent_at(t)
        return math.atan2(tx, tz)

    def left_normal_at(self, t: float) -> Vec3:
        tx, _, tz = self.tangent_at(t)
        return _normalize(np.array((-tz, 0.0, tx)))


def build_track_curve(config: TrackCurveConfig) -> TrackCurve:
    return TrackCurve.build(
        config.length,
        config.segment_count,
        half_width=config.half_width,
        major_amplitude=config.major_amplitude,
        major_frequency=config.major_frequency,
        minor_amplitude=config.minor_amplitude,
        minor_frequency=config.minor_frequency,
    )


def wrap_angle(angle: float) -> float:
    if angle > math.pi:
        angle -= 2.0 * math.pi
    elif angle <= -math.pi:
        angle += 2.0 * math.pi
    return angle


def _as_vec3(value: np.ndarray) -> Vec3:
    return float(value[0]), float(value[1]), float(value[2])


def _normalize(v: np.ndarray) -> Vec3:
    length = float(np.linalg.norm(v))
    if length == 0.0:
        return 0.0, 0.0, 0.0
    return _as_vec3(v / length)


__all__ = [
    "TrackCurve",
    "TrackCurveConfig",
    "Vec3",
    "build_track_curve",
    "wrap_angle",
    "DEFAULT_TRACK_LENGTH",
    "DEFAULT_SEGMENT_COUNT",
    "DEFAULT_HALF_WIDTH",
]
