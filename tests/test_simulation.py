import pytest

from conftest import straight_level
from kartsim.control import NEUTRAL, DriveInput
from kartsim.hazards import HazardEvent, HazardKind
from kartsim.level_loader import HazardPlacement
from kartsim.race_progress import RaceStatus
from kartsim.simulation import Simulation

DT = 1.0 / 60.0
THROTTLE = DriveInput(throttle=True)


def _placement(kind: HazardKind, t: float, lateral: float = 0.0, **kwargs) -> HazardPlacement:
    return HazardPlacement(kind=kind, t=t, lateral=lateral, **kwargs)


def test_default_simulation_uses_stock_course() -> None:
    simulation = Simulation()

    assert simulation.level.name == "default"
    assert len(simulation.hazards.of_kind(HazardKind.OBSTACLE)) == 6
    assert simulation.race_state.checkpoint_count == 3
    assert simulation.pose.position == pytest.approx((0.0, 0.7, 0.0))


def test_turbo_pad_entry_fires_once_then_boost_expires() -> None:
    level = straight_level(hazards=(_placement(HazardKind.TURBO_PAD, 0.41, half_length=8.0),))
    simulation = Simulation(level)
    simulation.state.progress = 0.39
    simulation.state.speed = 48.0

    activations = 0
    boosted_ticks = 0
    for _ in range(240):
        simulation.tick(DT, THROTTLE)
        activations += simulation.state.turbo_just_activated
        boosted_ticks += simulation.state.speed == 70.0

    assert activations == 1
    assert boosted_ticks >= 72
    assert simulation.state.speed == 48.0
    assert not simulation.state.finished


def test_lava_sets_flag_on_entry() -> None:
    level = straight_level(hazards=(_placement(HazardKind.LAVA_ZONE, 0.1),))
    simulation = Simulation(level)
    simulation.state.progress = 0.1

    result = simulation.tick(DT)

    assert simulation.state.lava_hit
    assert HazardEvent(HazardKind.LAVA_ZONE, 0) in result.events

    simulation.clear_lava_hit()
    assert not simulation.state.lava_hit


def test_star_protects_from_lava() -> None:
    level = straight_level(hazards=(_placement(HazardKind.LAVA_ZONE, 0.1),))
    simulation = Simulation(level)
    simulation.state.progress = 0.1
    simulation.state.star_remaining = 3.0

    result = simulation.tick(DT)

    assert not simulation.state.lava_hit
    assert result.events == ()


def test_full_lap_finishes_on_the_line() -> None:
    simulation = Simulation(straight_level())

    reached = []
    finish_tick = None
    for index in range(2000):
        result = simulation.tick(DT, THROTTLE)
        if result.checkpoint_reached is not None:
            reached.append(result.checkpoint_reached)
        if result.finished_now:
            finish_tick = index
            break

    assert reached == [0, 1, 2]
    assert finish_tick is not None
    assert simulation.state.progress == 1.0
    assert simulation.state.finished
    assert simulation.race_state.status is RaceStatus.FINISHED
    assert simulation.race_state.finish_time == pytest.approx((finish_tick + 1) * DT)

    pose = simulation.pose
    result = simulation.tick(DT, THROTTLE)
    assert simulation.state.speed == 0.0
    assert result.events == ()
    assert not result.finished_now
    assert simulation.pose == pose


def test_finish_line_without_checkpoints_pins_the_kart() -> None:
    simulation = Simulation(straight_level())
    simulation.state.progress = 0.9
    simulation.state.speed = 48.0

    for _ in range(600):
        simulation.tick(DT, THROTTLE)

    for _ in range(30):
        simulation.tick(DT, THROTTLE)
        assert simulation.state.progress == 1.0
        assert simulation.state.speed <= 0.0

    assert not simulation.state.finished
    assert simulation.race_state.checkpoint_index == 0
    assert simulation.race_state.status is RaceStatus.RACING


def test_obstacle_hit_is_reported_in_tick_result() -> None:
    level = straight_level(hazards=(_placement(HazardKind.OBSTACLE, 0.02),))
    simulation = Simulation(level)

    hits = []
    for _ in range(300):
        result = simulation.tick(DT, THROTTLE)
        if result.events:
            hits.append(result.events)
            assert simulation.state.collision_hit
            assert simulation.state.speed < 0.0
            break

    assert hits == [(HazardEvent(HazardKind.OBSTACLE, 0),)]


def test_restart_resets_kart_hazards_and_race() -> None:
    level = straight_level(
        hazards=(
            _placement(HazardKind.COLLECTIBLE, 0.005),
            _placement(HazardKind.LAVA_ZONE, 0.2),
        )
    )
    simulation = Simulation(level)
    for _ in range(600):
        simulation.tick(DT, THROTTLE)
        if simulation.state.lava_hit:
            break

    assert simulation.state.collectibles == 1
    assert simulation.state.lava_hit
    assert simulation.race_state.elapsed > 0.0

    simulation.restart()

    assert simulation.state.progress == 0.0
    assert simulation.state.collectibles == 0
    assert not simulation.state.lava_hit
    assert simulation.hazards.remaining_collectibles() == 1
    assert simulation.race_state.elapsed == 0.0
    assert simulation.pose.position == pytest.approx((0.0, 0.7, 0.0))


def test_tick_clamps_delta() -> None:
    simulation = Simulation(straight_level())

    simulation.tick(5.0, THROTTLE)
    assert simulation.state.speed == pytest.approx(2.2)
    assert simulation.race_state.elapsed == pytest.approx(0.1)

    simulation.tick(-1.0, THROTTLE)
    assert simulation.state.speed == pytest.approx(2.2)
    assert simulation.race_state.elapsed == pytest.approx(0.1)


def test_one_shot_flags_clear_each_tick() -> None:
    simulation = Simulation(straight_level())
    simulation.state.collision_hit = True
    simulation.state.edge_hit = True

    simulation.tick(DT, NEUTRAL)

    assert not simulation.state.collision_hit
    assert not simulation.state.edge_hit


def test_pose_places_kart_beside_centreline() -> None:
    simulation = Simulation(straight_level())
    simulation.state.progress = 0.25
    simulation.state.lateral = 2.0

    result = simulation.tick(DT, NEUTRAL)

    assert result.pose.position == pytest.approx((-2.0, 0.7, 200.0))


def test_level_physics_overrides_apply() -> None:
    simulation = Simulation(straight_level(physics={"max_speed": 30.0}))

    for _ in range(300):
        simulation.tick(DT, THROTTLE)

    assert simulation.physics.max_speed == 30.0
    assert simulation.state.speed == pytest.approx(30.0)


def test_load_level_replaces_course_and_resets_state() -> None:
    simulation = Simulation()
    for _ in range(30):
        simulation.tick(DT, THROTTLE)

    simulation.load_level(straight_level(checkpoints=(0.5,)))

    assert simulation.level.name == "straight"
    assert len(simulation.hazards) == 0
    assert simulation.state.progress == 0.0
    assert simulation.state.speed == 0.0
    assert simulation.race_state.checkpoint_count == 1
    assert simulation.lateral_limit == pytest.approx(5.4)


def test_snapshot_captures_vehicle_and_race() -> None:
    simulation = Simulation(straight_level())
    simulation.tick(DT, THROTTLE)

    snapshot = simulation.snapshot(elapsed_time=DT, step_index=1)

    assert snapshot.vehicle.speed == simulation.state.speed
    assert snapshot.vehicle.progress == simulation.state.progress
    assert snapshot.pose == simulation.pose
    assert snapshot.race.checkpoint_index == 0
    assert snapshot.events == ()
    assert snapshot.step_index == 1
