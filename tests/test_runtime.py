from conftest import straight_level
from kartsim.control import DriveInput
from kartsim.runtime import SimulationConfig, SimulationSession


def test_session_step_advances_time() -> None:
    config = SimulationConfig(time_step=0.05)
    session = SimulationSession(straight_level(), config=config)

    initial = session.snapshot()
    assert initial.step_index == 0
    assert initial.elapsed_time == 0.0
    assert session.last_result is None

    after_step = session.step(DriveInput(throttle=True))
    assert after_step.step_index == 1
    assert after_step.elapsed_time == config.time_step
    assert after_step.vehicle.speed > 0.0
    assert after_step.race.elapsed == config.time_step
    assert session.last_result is not None
    assert session.last_result.pose == after_step.pose


def test_step_accepts_time_step_override() -> None:
    session = SimulationSession(straight_level())

    snapshot = session.step(DriveInput(throttle=True), time_step=0.1)

    assert snapshot.elapsed_time == 0.1
    assert snapshot.vehicle.speed == 22.0 * 0.1


def test_reset_restarts_or_swaps_level() -> None:
    session = SimulationSession(straight_level())
    for _ in range(10):
        session.step(DriveInput(throttle=True))

    restarted = session.reset()
    assert restarted.step_index == 0
    assert restarted.elapsed_time == 0.0
    assert restarted.vehicle.progress == 0.0
    assert session.last_result is None

    swapped = session.reset(straight_level(name="other", checkpoints=(0.5,)))
    assert session.simulation.level.name == "other"
    assert swapped.race.checkpoint_count == 1
