from kartsim.control import (
    NEUTRAL,
    DiscreteControl,
    DriveInput,
    control_to_input,
    enumerate_controls,
)


def test_control_to_input_mapping() -> None:
    assert control_to_input(DiscreteControl(throttle=1, steer=-1)) == DriveInput(
        throttle=True, steer_left=True
    )
    assert control_to_input(DiscreteControl(throttle=-1, steer=1)) == DriveInput(
        reverse=True, steer_right=True
    )
    assert control_to_input(DiscreteControl(throttle=0, steer=0)) == NEUTRAL


def test_control_to_input_clamps_levels() -> None:
    assert control_to_input(DiscreteControl(throttle=5, steer=-3)) == DriveInput(
        throttle=True, steer_left=True
    )


def test_enumerate_controls_has_expected_combinations() -> None:
    controls = enumerate_controls()
    assert len(controls) == 9
    assert controls[0] == DiscreteControl(throttle=0, steer=0)
    assert controls[1] == DiscreteControl(throttle=1, steer=0)
    assert DiscreteControl(throttle=1, steer=1) in controls
    assert DiscreteControl(throttle=-1, steer=-1) in controls


def test_enumerate_controls_drops_duplicates() -> None:
    controls = enumerate_controls(throttle_levels=(1, 2), steer_levels=(0,))
    assert controls == [DiscreteControl(throttle=1, steer=0)]


def test_neutral_input_is_idle() -> None:
    assert not NEUTRAL.any
    assert DriveInput(steer_right=True).any
