import gymnasium as gym
import numpy as np
import pytest

from conftest import straight_level
from kartsim.control import DiscreteControl
from kartsim.gym_env import EnvironmentConfig, KartRaceEnv
from kartsim.hazards import HazardKind
from kartsim.level_loader import HazardPlacement

FORWARD = 1


def test_env_reset_and_step():
    env = KartRaceEnv()
    obs, info = env.reset(seed=42)
    assert isinstance(obs, np.ndarray)
    assert obs.shape == (8,)
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert "race_state" in info

    action = env.action_space.sample()
    next_obs, reward, terminated, truncated, step_info = env.step(action)
    assert next_obs.shape == (8,)
    assert isinstance(reward, float)
    assert isinstance(terminated, bool)
    assert isinstance(truncated, bool)
    assert "events" in step_info
    assert "checkpoint_index" in step_info
    env.close()


def test_forward_action_earns_progress_reward():
    env = KartRaceEnv(level=straight_level())
    env.reset()

    total = 0.0
    for _ in range(30):
        _, reward, _, _, info = env.step(FORWARD)
        total += reward

    assert info["speed"] > 0.0
    assert total == pytest.approx(info["progress"] * 100.0)


def test_lava_terminates_episode():
    level = straight_level(
        hazards=(HazardPlacement(kind=HazardKind.LAVA_ZONE, t=0.01, lateral=0.0),)
    )
    env = KartRaceEnv(level=level)
    env.reset()

    terminated = False
    for _ in range(120):
        _, reward, terminated, truncated, info = env.step(FORWARD)
        if terminated:
            break

    assert terminated
    assert info["lava_hit"]
    assert reward < 0.0
    assert HazardKind.LAVA_ZONE in {event.kind for event in info["events"]}
    with pytest.raises(gym.error.ResetNeeded):
        env.step(FORWARD)

    env.reset()
    assert not env.simulation.state.lava_hit


def test_episode_truncates_at_step_limit():
    env = KartRaceEnv(level=straight_level(), env_config=EnvironmentConfig(max_episode_steps=3))
    env.reset()

    results = [env.step(0) for _ in range(3)]

    assert [result[3] for result in results] == [False, False, True]
    assert results[-1][4]["step_count"] == 3


def test_frame_skip_advances_several_ticks():
    env = KartRaceEnv(level=straight_level(), env_config=EnvironmentConfig(frame_skip=4))
    env.reset()

    env.step(FORWARD)

    assert env.simulation.race_state.elapsed == pytest.approx(4.0 / 60.0)


def test_invalid_action_rejected():
    env = KartRaceEnv(level=straight_level())
    env.reset()
    with pytest.raises(gym.error.InvalidAction):
        env.step(99)


def test_custom_controls_define_action_space():
    controls = [DiscreteControl(throttle=1, steer=0), DiscreteControl(throttle=0, steer=0)]
    env = KartRaceEnv(level=straight_level(), action_controls=controls)
    assert env.action_space.n == 2


def test_level_lookup_by_name():
    env = KartRaceEnv(level_name="meadow")
    assert env.simulation.level.name == "Meadow Sprint"

    with pytest.raises(FileNotFoundError):
        KartRaceEnv(level_name="does-not-exist")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"render_mode": "human"},
        {"env_config": EnvironmentConfig(frame_skip=0)},
        {"action_controls": []},
    ],
)
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        KartRaceEnv(**kwargs)
