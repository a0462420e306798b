from __future__ import annotations

import pytest

from kartsim.level_loader import LevelDescriptor
from kartsim.track_curve import TrackCurve, TrackCurveConfig

STRAIGHT_TRACK = TrackCurveConfig(major_amplitude=0.0, minor_amplitude=0.0)


@pytest.fixture
def straight_curve() -> TrackCurve:
    return TrackCurve.build(800.0, 200, major_amplitude=0.0, minor_amplitude=0.0)


@pytest.fixture
def curvy_curve() -> TrackCurve:
    return TrackCurve.build()


def straight_level(**overrides) -> LevelDescriptor:
    """Flat, straight level with no hazards unless overridden."""
    values = {"name": "straight", "track": STRAIGHT_TRACK}
    values.update(overrides)
    return LevelDescriptor(**values)
