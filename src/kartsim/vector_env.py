"""Factory helpers for creating vectorised kart race environments."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Sequence

import gymnasium as gym
from gymnasium.vector import AsyncVectorEnv, SyncVectorEnv

from .gym_env import KartRaceEnv

EnvFactory = Callable[[], KartRaceEnv]


def _make_env_factory(env_kwargs: Dict[str, Any]) -> EnvFactory:
    def _factory() -> KartRaceEnv:
        return KartRaceEnv(**env_kwargs)

    return _factory


def make_vector_env(
    num_envs: int,
    *,
    env_kwargs: Dict[str, Any] | None = None,
    level_names: Sequence[str] | None = None,
    asynchronous: bool = False,
) -> gym.vector.VectorEnv:
    """Return a Gymnasium VectorEnv wrapping ``num_envs`` kart race envs.

    When ``level_names`` is given, sub-environment ``i`` races on
    ``level_names[i % len(level_names)]`` and any ``level_name`` in
    ``env_kwargs`` is overridden.
    """
    if num_envs <= 0:
        raise ValueError("num_envs must be positive")
    if level_names is not None and not level_names:
        raise ValueError("level_names must not be empty")

    base_kwargs = dict(env_kwargs or {})
    factories: List[EnvFactory] = []
    for index in range(num_envs):
        kwargs = dict(base_kwargs)
        if level_names is not None:
            kwargs["level_name"] = level_names[index % len(level_names)]
        factories.append(_make_env_factory(kwargs))

    if asynchronous:
        return AsyncVectorEnv(factories)
    return SyncVectorEnv(factories)


__all__ = ["make_vector_env"]
