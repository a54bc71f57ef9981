from firelink.state import (
    KalmanFilterState,
    MoCapData,
    NavOutput,
    OnboardControl,
    PozyxData,
    RcInputs,
    SensorState,
)


def test_onboard_control_vectors_have_three_axes():
    control = OnboardControl()
    assert control.kp_pos == [0.0, 0.0, 0.0]
    assert len(control.pos_integral) == 3
    assert len(control.kp) == 3 and len(control.ki) == 3
    assert control.waypoint_number == 0


def test_onboard_control_defaults_are_independent():
    a = OnboardControl()
    b = OnboardControl()
    a.pos_integral[0] = 5.0
    a.kp[2] = 1.5
    assert b.pos_integral == [0.0, 0.0, 0.0]
    assert b.kp == [0.0, 0.0, 0.0]


def test_nav_output_shapes():
    nav = NavOutput()
    assert len(nav.q) == 4
    assert len(nav.fire_location) == 2
    assert nav.payload_dropped == 0
    assert nav.p_b_e_L is not nav.v_b_e_L


def test_kalman_filter_covariances_are_square():
    kf = KalmanFilterState()
    assert len(kf.orientation_covariance) == 7
    assert all(len(row) == 7 for row in kf.orientation_covariance)
    assert len(kf.position_covariance) == 9
    assert all(len(row) == 9 for row in kf.position_covariance)
    kf.position_covariance[0][0] = 1.0
    assert kf.position_covariance[1][0] == 0.0


def test_mocap_starts_waiting_for_first_frame():
    mocap = MoCapData()
    assert mocap.first is True
    assert mocap.valid == 0
    assert mocap.quat == [0.0, 0.0, 0.0, 0.0]


def test_sensor_state_holds_separate_sources():
    s1 = SensorState()
    s2 = SensorState()
    s1.pozyx.acc[0] = 9.81
    s1.mocap.update_counter += 1
    assert s2.pozyx.acc[0] == 0.0
    assert s2.mocap.update_counter == 0
    assert isinstance(s1.pozyx, PozyxData)


def test_rc_inputs_keyword_construction():
    rc = RcInputs(roll=1500, thr=1100, good_receiver=True)
    assert rc.roll == 1500
    assert rc.thr == 1100
    assert rc.good_receiver is True
    assert rc.good_kill_wire is False