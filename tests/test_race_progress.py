import pytest

from kartsim.race_progress import RaceProgress, RaceStatus, validate_checkpoints
from kartsim.state import VehicleState

DT = 1.0 / 60.0


def test_checkpoint_counts_inside_hit_radius(straight_curve) -> None:
    race = RaceProgress()
    state = VehicleState(progress=0.2)

    assert race.update(state, straight_curve, DT).checkpoint_reached is None

    # 4 units short of the 0.25 checkpoint on an 800 long straight
    state.progress = 0.245
    update = race.update(state, straight_curve, DT)

    assert update.checkpoint_reached == 0
    assert race.checkpoint_index == 1


def test_checkpoints_must_be_taken_in_order(straight_curve) -> None:
    race = RaceProgress()
    state = VehicleState(progress=0.5)

    race.update(state, straight_curve, DT)

    assert race.checkpoint_index == 0


def test_at_most_one_checkpoint_per_tick(straight_curve) -> None:
    race = RaceProgress((0.25, 0.251))
    state = VehicleState(progress=0.2505)

    assert race.update(state, straight_curve, DT).checkpoint_reached == 0
    assert race.update(state, straight_curve, DT).checkpoint_reached == 1
    assert race.update(state, straight_curve, DT).checkpoint_reached is None
    assert race.state.checkpoints_complete


def test_finish_requires_every_checkpoint(straight_curve) -> None:
    race = RaceProgress()
    state = VehicleState(progress=1.0)

    for _ in range(10):
        update = race.update(state, straight_curve, DT)
        assert not update.finished_now

    assert race.status is RaceStatus.RACING
    assert not state.finished
    assert race.checkpoint_index == 0


def test_finish_latches_time_and_fires_callback(straight_curve) -> None:
    finishes = []
    race = RaceProgress((0.5,), finish_callback=finishes.append)
    state = VehicleState(progress=0.5)

    race.update(state, straight_curve, 0.5)
    state.progress = 1.0
    update = race.update(state, straight_curve, 0.25)

    assert update.finished_now
    assert state.finished
    assert race.state.finished
    assert race.state.finish_time == pytest.approx(0.75)
    assert finishes == [pytest.approx(0.75)]

    later = race.update(state, straight_curve, 1.0)
    assert not later.finished_now
    assert race.state.elapsed == pytest.approx(0.75)
    assert len(finishes) == 1


def test_no_checkpoints_finishes_at_the_line(straight_curve) -> None:
    race = RaceProgress(())
    state = VehicleState(progress=1.0)

    assert race.update(state, straight_curve, DT).finished_now


def test_reset_restarts_the_clock(straight_curve) -> None:
    race = RaceProgress((0.5,))
    state = VehicleState(progress=0.5)
    race.update(state, straight_curve, 1.0)

    race.reset()

    snapshot = race.state
    assert snapshot.status is RaceStatus.RACING
    assert snapshot.checkpoint_index == 0
    assert snapshot.elapsed == 0.0
    assert snapshot.finish_time is None
    assert snapshot.checkpoint_count == 1


@pytest.mark.parametrize(
    "checkpoints",
    [(0.5, 0.4), (0.3, 0.3), (1.0,), (-0.1, 0.5)],
)
def test_invalid_checkpoints_are_rejected(checkpoints) -> None:
    with pytest.raises(ValueError):
        validate_checkpoints(checkpoints)


def test_hit_radius_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RaceProgress(hit_radius=0.0)
