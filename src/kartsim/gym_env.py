"""Gymnasium environment wrapper for the kart simulation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

import gymnasium as gym
import numpy as np

from .control import DiscreteControl, control_to_input, enumerate_controls
from .level_loader import LevelDescriptor, default_level, discover_levels, load_level_file
from .runtime import SimulationConfig, SimulationSession
from .simulation import Simulation

DEFAULT_TIME_STEP = 1.0 / 60.0
OBSERVATION_SIZE = 8


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _load_level_from_sources(
    level: LevelDescriptor | None,
    *,
    level_file: str | Path | None,
    level_name: str | None,
    levels_dir: str | Path | None,
) -> LevelDescriptor:
    if level is not None:
        return level

    if level_file is not None:
        return load_level_file(Path(level_file))

    if level_name:
        candidate_path = Path(level_name)
        if candidate_path.exists():
            return load_level_file(candidate_path)

        search_dirs: list[Path] = []
        if levels_dir is not None:
            search_dirs.append(Path(levels_dir))
        search_dirs.append(_project_root() / "levels")
        for directory in search_dirs:
            levels = discover_levels(directory)
            if level_name in levels:
                return levels[level_name].level
        raise FileNotFoundError(f"Unable to locate level '{level_name}'")

    return default_level()


ObservationBuilder = Callable[[Simulation], np.ndarray]
RewardFunction = Callable[[Simulation, dict], float]


@dataclass(frozen=True)
class EnvironmentConfig:
    """Configuration bundle for the Gymnasium environment."""

    time_step: float = DEFAULT_TIME_STEP
    max_episode_steps: int = 5000
    frame_skip: int = 1
    progress_reward_scale: float = 100.0
    collision_penalty: float = 1.0
    lava_penalty: float = 10.0
    finish_bonus: float = 10.0
    jump_scale: float = 10.0


class KartRaceEnv(gym.Env):
    """Gymnasium-compatible wrapper around the Simulation class."""

    metadata = {
        "render_modes": ("none",),
        "render_fps": int(1.0 / DEFAULT_TIME_STEP),
    }

    def __init__(
        self,
        *,
        level: LevelDescriptor | None = None,
        level_file: str | Path | None = None,
        level_name: str | None = None,
        levels_dir: str | Path | None = None,
        render_mode: str | None = None,
        action_controls: Sequence[DiscreteControl] | None = None,
        reward_fn: RewardFunction | None = None,
        env_config: EnvironmentConfig | None = None,
        observation_builder: ObservationBuilder | None = None,
    ) -> None:
        super().__init__()
        self.render_mode = render_mode or "none"
        if self.render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode '{self.render_mode}'")

        self._env_config = env_config or EnvironmentConfig()
        if self._env_config.frame_skip < 1:
            raise ValueError("frame_skip must be >= 1")

        loaded_level = _load_level_from_sources(
            level,
            level_file=level_file,
            level_name=level_name,
            levels_dir=levels_dir,
        )
        self._session = SimulationSession(
            loaded_level,
            config=SimulationConfig(time_step=self._env_config.time_step),
        )

        self._controls = (
            list(action_controls)
            if action_controls is not None
            else enumerate_controls()
        )
        if not self._controls:
            raise ValueError("action_controls must contain at least one control option")

        self.action_space = gym.spaces.Discrete(len(self._controls))

        low = np.array([0.0, -1.0, -1.0, 0.0, -np.pi, 0.0, 0.0, 0.0], dtype=np.float32)
        high = np.array([1.0, 2.0, 1.0, 1.0, np.pi, 1.0, 1.0, 1.0], dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        self._reward_fn = reward_fn or self._default_reward
        self._observation_builder = (
            observation_builder
            if observation_builder is not None
            else self._build_observation
        )

        self._step_count = 0
        self._episode_terminated = False
        self._last_progress = 0.0

    @property
    def simulation(self) -> Simulation:
        return self._session.simulation

    def reset(self, *, seed: int | None = None, options: dict | None = None):
        super().reset(seed=seed)

        self._session.reset()
        self._step_count = 0
        self._episode_terminated = False
        self._last_progress = self.simulation.state.progress

        observation = self._observation_builder(self.simulation)
        return observation, self._gather_info()

    def step(self, action: int):
        if not self.action_space.contains(action):
            raise gym.error.InvalidAction(
                f"Action {action!r} is outside {self.action_space}"
            )

        if self._episode_terminated:
            raise gym.error.ResetNeeded(
                "Cannot call step() on a terminated episode. Call reset() first."
            )

        drive_input = control_to_input(self._controls[int(action)])

        events = []
        for _ in range(self._env_config.frame_skip):
            self._session.step(drive_input)
            result = self._session.last_result
            if result is not None:
                events.extend(result.events)
            state = self.simulation.state
            if state.finished or state.lava_hit:
                break

        self._step_count += 1

        simulation = self.simulation
        observation = self._observation_builder(simulation)
        info = self._gather_info()
        info["events"] = tuple(events)
        reward = self._reward_fn(simulation, info)
        self._last_progress = simulation.state.progress

        terminated = bool(simulation.state.finished or simulation.state.lava_hit)
        truncated = self._step_count >= self._env_config.max_episode_steps
        self._episode_terminated = terminated or truncated

        return observation, reward, terminated, truncated, info

    def render(self):
        return None

    def close(self) -> None:
        pass

    def _build_observation(self, simulation: Simulation) -> np.ndarray:
        state = simulation.state
        physics = simulation.physics
        race = simulation.race_state
        limit = max(simulation.lateral_limit, 1e-6)
        checkpoint_fraction = (
            race.checkpoint_index / race.checkpoint_count if race.checkpoint_count else 1.0
        )
        values = np.array(
            [
                state.progress,
                state.speed / max(physics.max_speed, 1e-6),
                state.lateral / limit,
                state.jump_height / self._env_config.jump_scale,
                simulation.curve.curvature_at(state.progress),
                checkpoint_fraction,
                1.0 if state.turbo_active else 0.0,
                1.0 if state.invincible else 0.0,
            ],
            dtype=np.float32,
        )
        return np.clip(values, self.observation_space.low, self.observation_space.high)

    def _gather_info(self) -> dict:
        simulation = self.simulation
        state = simulation.state
        race = simulation.race_state
        return {
            "progress": state.progress,
            "speed": state.speed,
            "lateral": state.lateral,
            "jump_height": state.jump_height,
            "checkpoint_index": race.checkpoint_index,
            "race_state": race,
            "finished": state.finished,
            "lava_hit": state.lava_hit,
            "collision_hit": state.collision_hit,
            "collectibles": state.collectibles,
            "step_count": self._step_count,
        }

    def _default_reward(self, simulation: Simulation, info: dict) -> float:
        cfg = self._env_config
        reward = (simulation.state.progress - self._last_progress) * cfg.progress_reward_scale
        if info.get("collision_hit"):
            reward -= cfg.collision_penalty
        if info.get("lava_hit"):
            reward -= cfg.lava_penalty
        if info.get("finished"):
            reward += cfg.finish_bonus
        return float(reward)


__all__ = ["KartRaceEnv", "EnvironmentConfig"]
