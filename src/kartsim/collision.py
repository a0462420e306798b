"""Resolves kart contact against every hazard of the level."""

from __future__ import annotations

from typing import List, Tuple

from .hazards import ContactContext, HazardEvent, HazardField
from .integrator import CarDimensions
from .state import VehicleState
from .track_curve import TrackCurve


class CollisionResolver:
    """Applies each hazard's response once per tick.

    Every hazard is tested independently in declaration order with no early
    exit, so overlapping effects (mud and an obstacle, say) all apply.
    """

    def __init__(self, car: CarDimensions | None = None, edge_margin: float = 0.6) -> None:
        self.car = car or CarDimensions()
        self.edge_margin = edge_margin

    def resolve(
        self,
        state: VehicleState,
        hazards: HazardField,
        curve: TrackCurve,
        delta: float,
    ) -> Tuple[HazardEvent, ...]:
        contact = ContactContext(
            delta=delta,
            car_half_width=self.car.half_width,
            car_progress_half=self.car.half_length / curve.total,
        )
        events: List[HazardEvent] = []
        for index, hazard in enumerate(hazards):
            if hazard.update(state, contact):
                events.append(HazardEvent(kind=hazard.kind, index=index))

        limit = max(0.0, curve.half_width - self.edge_margin)
        state.lateral = max(-limit, min(limit, state.lateral))
        state.progress = max(0.0, min(1.0, state.progress))
        return tuple(events)


__all__ = ["CollisionResolver"]
