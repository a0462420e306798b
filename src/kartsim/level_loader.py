"""Level descriptors and helpers for loading them from JSON files."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence, Tuple

from .hazards import HAZARD_TYPES, Hazard, HazardField, HazardKind
from .integrator import PhysicsConfig
from .race_progress import DEFAULT_CHECKPOINTS, DEFAULT_HIT_RADIUS, validate_checkpoints
from .track_curve import TrackCurve, TrackCurveConfig, build_track_curve

_logger = logging.getLogger(__name__)

# JSON list names for each hazard kind
PLACEMENT_KEYS: Dict[str, HazardKind] = {
    "obstacles": HazardKind.OBSTACLE,
    "trees": HazardKind.TREE,
    "ramps": HazardKind.RAMP,
    "turbo_pads": HazardKind.TURBO_PAD,
    "trampolines": HazardKind.TRAMPOLINE,
    "lava_zones": HazardKind.LAVA_ZONE,
    "mud_zones": HazardKind.MUD_ZONE,
    "collectibles": HazardKind.COLLECTIBLE,
    "stars": HazardKind.STAR_ITEM,
}

# Longitudinal half extent in world units, converted to a track fraction on build.
DEFAULT_HALF_LENGTHS: Dict[HazardKind, float] = {
    HazardKind.OBSTACLE: 0.8,
    HazardKind.TREE: 0.9,
    HazardKind.RAMP: 6.0,
    HazardKind.TURBO_PAD: 2.0,
    HazardKind.TRAMPOLINE: 1.5,
    HazardKind.LAVA_ZONE: 4.0,
    HazardKind.MUD_ZONE: 4.0,
    HazardKind.COLLECTIBLE: 0.8,
    HazardKind.STAR_ITEM: 0.8,
}

_RESERVED_PARAMS = {"t", "lateral", "progress_half", "launched", "collected"}

STOCK_OBSTACLE_LAYOUT: Tuple[Tuple[float, float], ...] = (
    (0.18, -2.2),
    (0.32, 2.4),
    (0.46, -1.8),
    (0.58, 2.0),
    (0.7, -2.6),
    (0.84, 2.2),
)


@dataclass(frozen=True)
class HazardPlacement:
    """A hazard anchored at ``(t, lateral)`` with optional per-kind overrides."""

    kind: HazardKind
    t: float
    lateral: float = 0.0
    half_length: float | None = None
    params: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class LevelDescriptor:
    name: str = "default"
    track: TrackCurveConfig = TrackCurveConfig()
    checkpoints: Sequence[float] = DEFAULT_CHECKPOINTS
    hit_radius: float = DEFAULT_HIT_RADIUS
    hazards: Sequence[HazardPlacement] = ()
    physics: Mapping[str, float] = field(default_factory=dict)

    def physics_config(self, base: PhysicsConfig | None = None) -> PhysicsConfig:
        base = base or PhysicsConfig()
        if not self.physics:
            return base
        known = {item.name for item in fields(PhysicsConfig)}
        unknown = sorted(set(self.physics) - known)
        if unknown:
            raise ValueError(f"Unknown physics settings: {', '.join(unknown)}")
        return replace(base, **{key: float(value) for key, value in self.physics.items()})


@dataclass(frozen=True)
class LoadedLevel:
    """Container bundling a level with its source path."""

    name: str
    path: Path
    level: LevelDescriptor


class LevelLoadError(RuntimeError):
    """Raised when a level file cannot be parsed."""


def load_level(descriptor: LevelDescriptor) -> Tuple[TrackCurve, HazardField]:
    """Build the curve and hazard field for a level; no side effects."""
    curve = build_track_curve(descriptor.track)
    hazards = HazardField(build_hazard(placement, curve) for placement in descriptor.hazards)
    return curve, hazards


def build_hazard(placement: HazardPlacement, curve: TrackCurve) -> Hazard:
    cls = HAZARD_TYPES[placement.kind]
    _check_params(placement.kind, placement.params)
    half_length = (
        placement.half_length
        if placement.half_length is not None
        else DEFAULT_HALF_LENGTHS[placement.kind]
    )
    if half_length <= 0:
        raise ValueError(f"{placement.kind.value} half_length must be positive")
    kwargs = {key: float(value) for key, value in placement.params.items()}
    return cls(
        t=placement.t,
        lateral=placement.lateral,
        progress_half=half_length / curve.total,
        **kwargs,
    )


def default_level() -> LevelDescriptor:
    """Return the stock straight-into-the-wiggles course with six blocks."""
    hazards = tuple(
        HazardPlacement(kind=HazardKind.OBSTACLE, t=t, lateral=lateral)
        for t, lateral in STOCK_OBSTACLE_LAYOUT
    )
    return LevelDescriptor(name="default", hazards=hazards)


def load_level_file(path: Path) -> LevelDescriptor:
    """Load a level from a JSON file."""
    try:
        raw = json.loads(path.read_text())
    except OSError as exc:  # pragma: no cover - simple file error pass-through
        raise LevelLoadError(f"Failed to read level file {path!s}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise LevelLoadError(f"Invalid JSON in level file {path!s}: {exc}") from exc

    try:
        level = parse_level(raw, default_name=path.stem)
    except (KeyError, TypeError, ValueError) as exc:
        raise LevelLoadError(f"Malformed level data in {path!s}: {exc}") from exc
    _logger.info("Loaded level '%s' from %s (%d hazards)", level.name, path, len(level.hazards))
    return level


def parse_level(raw: Mapping[str, Any], *, default_name: str = "level") -> LevelDescriptor:
    if not isinstance(raw, Mapping):
        raise TypeError("Level data must be a JSON object")

    track = _parse_track(raw.get("track", {}))
    checkpoints = validate_checkpoints(raw.get("checkpoints", DEFAULT_CHECKPOINTS))
    hit_radius = float(raw.get("hit_radius", DEFAULT_HIT_RADIUS))
    if hit_radius <= 0:
        raise ValueError("hit_radius must be positive")

    raw_hazards = raw.get("hazards", {})
    if not isinstance(raw_hazards, Mapping):
        raise TypeError("'hazards' must map hazard lists by kind")
    placements = []
    for key, items in raw_hazards.items():
        if key not in PLACEMENT_KEYS:
            raise ValueError(f"Unknown hazard list '{key}'")
        kind = PLACEMENT_KEYS[key]
        for index, item in enumerate(items):
            placements.append(_parse_placement(kind, item, f"{key}[{index}]"))

    physics = raw.get("physics", {})
    if not isinstance(physics, Mapping):
        raise TypeError("'physics' must be an object")

    level = LevelDescriptor(
        name=str(raw.get("name", default_name)),
        track=track,
        checkpoints=checkpoints,
        hit_radius=hit_radius,
        hazards=tuple(placements),
        physics=dict(physics),
    )
    level.physics_config()
    return level


def discover_levels(directory: Path) -> Dict[str, LoadedLevel]:
    """Return a mapping of level names to loaded levels from a directory."""
    levels: Dict[str, LoadedLevel] = {}
    if not directory.exists():
        return levels
    for file in sorted(directory.glob("*.json")):
        try:
            level = load_level_file(file)
        except LevelLoadError as exc:
            _logger.warning("Skipping level %s: %s", file.name, exc)
            continue
        name = file.stem
        levels[name] = LoadedLevel(name=name, path=file, level=level)
    return levels


def _parse_track(raw: Mapping[str, Any]) -> TrackCurveConfig:
    if not isinstance(raw, Mapping):
        raise TypeError("'track' must be an object")
    base = TrackCurveConfig()
    config = TrackCurveConfig(
        length=float(raw.get("length", base.length)),
        segment_count=int(raw.get("segments", base.segment_count)),
        half_width=float(raw.get("half_width", base.half_width)),
        major_amplitude=float(raw.get("major_amplitude", base.major_amplitude)),
        major_frequency=float(raw.get("major_frequency", base.major_frequency)),
        minor_amplitude=float(raw.get("minor_amplitude", base.minor_amplitude)),
        minor_frequency=float(raw.get("minor_frequency", base.minor_frequency)),
    )
    if config.length <= 0 or not math.isfinite(config.length):
        raise ValueError("Track length must be a positive number")
    if config.segment_count < 2:
        raise ValueError("Track needs at least two segments")
    if config.half_width <= 0:
        raise ValueError("Track half_width must be positive")
    return config


def _parse_placement(kind: HazardKind, raw: Mapping[str, Any], label: str) -> HazardPlacement:
    if not isinstance(raw, Mapping):
        raise TypeError(f"{label} must be an object")
    t = float(raw["t"])
    if not 0.0 <= t <= 1.0:
        raise ValueError(f"{label} t={t} must lie in [0, 1]")
    half_length = raw.get("half_length")
    params = {
        key: float(value)
        for key, value in raw.items()
        if key not in ("t", "lateral", "half_length")
    }
    _check_params(kind, params)
    return HazardPlacement(
        kind=kind,
        t=t,
        lateral=float(raw.get("lateral", 0.0)),
        half_length=float(half_length) if half_length is not None else None,
        params=params,
    )


def _check_params(kind: HazardKind, params: Mapping[str, float]) -> None:
    allowed = {item.name for item in fields(HAZARD_TYPES[kind])} - _RESERVED_PARAMS
    unknown = sorted(set(params) - allowed)
    if unknown:
        raise ValueError(f"Unknown {kind.value} settings: {', '.join(unknown)}")


__all__ = [
    "HazardPlacement",
    "LevelDescriptor",
    "LoadedLevel",
    "LevelLoadError",
    "load_level",
    "build_hazard",
    "default_level",
    "load_level_file",
    "parse_level",
    "discover_levels",
    "PLACEMENT_KEYS",
]
