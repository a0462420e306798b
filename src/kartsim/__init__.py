"""Arcade kart racing simulation core: track curve, kart physics, hazards and race progress."""

from .collision import CollisionResolver
from .control import DiscreteControl, DriveInput, control_to_input, enumerate_controls
from .gym_env import EnvironmentConfig, KartRaceEnv
from .hazards import (
    Collectible,
    Hazard,
    HazardEvent,
    HazardField,
    HazardKind,
    LavaZone,
    MudZone,
    Obstacle,
    Ramp,
    StarItem,
    Trampoline,
    Tree,
    TurboPad,
)
from .integrator import CarDimensions, PhysicsConfig, VehicleIntegrator
from .level_loader import (
    HazardPlacement,
    LevelDescriptor,
    LevelLoadError,
    LoadedLevel,
    default_level,
    discover_levels,
    load_level,
    load_level_file,
)
from .race_progress import RaceProgress, RaceProgressState, RaceStatus
from .runtime import SimulationConfig, SimulationSession
from .simulation import Simulation, TickResult
from .state import Pose, SimulationSnapshot, VehicleState
from .track_curve import TrackCurve, TrackCurveConfig, build_track_curve

__all__ = [
    "CarDimensions",
    "Collectible",
    "CollisionResolver",
    "DiscreteControl",
    "DriveInput",
    "EnvironmentConfig",
    "Hazard",
    "HazardEvent",
    "HazardField",
    "HazardKind",
    "HazardPlacement",
    "KartRaceEnv",
    "LavaZone",
    "LevelDescriptor",
    "LevelLoadError",
    "LoadedLevel",
    "MudZone",
    "Obstacle",
    "PhysicsConfig",
    "Pose",
    "RaceProgress",
    "RaceProgressState",
    "RaceStatus",
    "Ramp",
    "Simulation",
    "SimulationConfig",
    "SimulationSession",
    "SimulationSnapshot",
    "StarItem",
    "TickResult",
    "TrackCurve",
    "TrackCurveConfig",
    "Trampoline",
    "Tree",
    "TurboPad",
    "VehicleIntegrator",
    "VehicleState",
    "build_track_curve",
    "control_to_input",
    "default_level",
    "discover_levels",
    "enumerate_controls",
    "load_level",
    "load_level_file",
]
