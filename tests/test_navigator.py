import math
import random
from types import SimpleNamespace

import pytest

from skynav.core.quaternion import Quaternion, X_AXIS, Y_AXIS, Z_AXIS
from skynav.navigator.camera_state import ViewSize
from skynav.navigator.navigator import NavigationMode, Navigator
from skynav.navigator.observer import CallbackObserver


class Recorder:
    def __init__(self):
        self.orientations = []
        self.fovs = []
        self.observer = CallbackObserver(self.orientations.append, self.fovs.append)

    @property
    def count(self):
        return len(self.orientations) + len(self.fovs)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def navigator(recorder):
    return Navigator(ViewSize(800, 1000), Quaternion.identity(), 60.0, observer=recorder.observer)


def test_initial_state(navigator, recorder):
    assert navigator.mode is NavigationMode.GESTURE
    assert navigator.orientation == Quaternion.identity()
    assert navigator.field_of_view_degrees == pytest.approx(60.0)
    assert navigator.view_size == ViewSize(800, 1000)
    assert recorder.count == 0


def test_construction_requires_positive_height():
    with pytest.raises(ValueError):
        Navigator(ViewSize(800, 0), Quaternion.identity(), 60.0)


def test_horizontal_pan_rotates_about_y(navigator, recorder):
    a = math.radians(60.0) / 1000

    assert navigator.on_pan(100.0, 0.0) is True

    expected = Quaternion.from_axis_angle(-100.0 * a, Y_AXIS)
    assert navigator.orientation.isclose(expected, tol=1e-12)
    assert recorder.orientations == [navigator.orientation]


def test_vertical_pan_rotates_about_x(navigator):
    a = math.radians(60.0) / 1000

    navigator.on_pan(0.0, -50.0)

    expected = Quaternion.from_axis_angle(50.0 * a, X_AXIS)
    assert navigator.orientation.isclose(expected, tol=1e-12)


def test_diagonal_pan_composes_horizontal_outside_vertical(navigator):
    a = math.radians(60.0) / 1000
    rh = Quaternion.from_axis_angle(-300.0 * a, Y_AXIS)
    rv = Quaternion.from_axis_angle(-200.0 * a, X_AXIS)

    navigator.on_pan(300.0, 200.0)

    assert navigator.orientation.isclose(rh * rv, tol=1e-12)
    assert not navigator.orientation.isclose(rv * rh, tol=1e-6)


def test_pan_composes_in_world_frame(recorder):
    start = Quaternion.from_axis_angle(0.5, Z_AXIS)
    nav = Navigator(ViewSize(800, 1000), start, 60.0, observer=recorder.observer)
    a = math.radians(60.0) / 1000

    nav.on_pan(100.0, 0.0)

    expected = Quaternion.from_axis_angle(-100.0 * a, Y_AXIS) * start
    assert nav.orientation.isclose(expected, tol=1e-12)


def test_pan_angle_scales_with_zoom(navigator):
    navigator.on_scale(2.0)
    a = navigator.field_of_view_radians / 1000

    navigator.on_pan(100.0, 0.0)

    expected = Quaternion.from_axis_angle(-100.0 * a, Y_AXIS)
    assert navigator.orientation.isclose(expected, tol=1e-12)


def test_rotate_quarter_turn_from_identity(navigator, recorder):
    navigator.on_rotate(math.pi / 2)

    expected = Quaternion(0.0, 0.0, -math.sqrt(0.5), math.sqrt(0.5))
    assert navigator.orientation.isclose(expected, tol=1e-12)
    assert len(recorder.orientations) == 1


def test_scale_two_halves_fov(navigator, recorder):
    navigator.on_scale(2.0)

    assert navigator.field_of_view_degrees == pytest.approx(30.0)
    assert recorder.fovs == [pytest.approx(30.0)]


def test_strong_pinch_clamps_to_minimum(navigator, recorder):
    navigator.on_scale(20.0)

    assert navigator.field_of_view_radians == 0.1
    assert recorder.fovs == [pytest.approx(5.7296, abs=1e-4)]


def test_pinch_in_clamps_to_maximum(navigator):
    navigator.on_scale(0.1)

    assert navigator.field_of_view_radians == 2.0


def test_scale_one_does_not_notify(navigator, recorder):
    assert navigator.on_scale(1.0) is True

    assert recorder.count == 0
    assert navigator.field_of_view_degrees == pytest.approx(60.0)


@pytest.mark.parametrize("ratio", [0.01, 0.5, 0.99, 1.0, 1.7, 3.0, 1000.0])
def test_fov_always_within_bounds(navigator, ratio):
    for _ in range(5):
        navigator.on_scale(ratio)
        assert 0.1 <= navigator.field_of_view_radians <= 2.0


@pytest.mark.parametrize("ratio", [0.0, -2.0, float("nan"), float("inf")])
def test_scale_rejects_invalid_ratio(navigator, ratio):
    with pytest.raises(ValueError):
        navigator.on_scale(ratio)


@pytest.mark.parametrize("dx, dy", [(float("nan"), 0.0), (0.0, float("inf"))])
def test_pan_rejects_non_finite(navigator, dx, dy):
    with pytest.raises(ValueError):
        navigator.on_pan(dx, dy)
    assert navigator.orientation == Quaternion.identity()


def test_rotate_rejects_non_finite(navigator):
    with pytest.raises(ValueError):
        navigator.on_rotate(float("nan"))


def test_orientation_stays_unit_over_many_updates(navigator):
    rng = random.Random(1234)
    for i in range(2000):
        choice = rng.random()
        if choice < 0.5:
            navigator.on_pan(rng.uniform(-400, 400), rng.uniform(-400, 400))
        elif choice < 0.8:
            navigator.on_rotate(rng.uniform(-math.pi, math.pi))
        elif choice < 0.9:
            navigator.on_scale(rng.uniform(0.5, 2.0))
        else:
            navigator.enter_device_motion_mode(
                Quaternion.from_axis_angle(rng.uniform(-3, 3), (rng.random(), rng.random(), 1.0)))
            navigator.enter_gesture_mode()
        assert abs(navigator.orientation.norm() - 1.0) < 1e-9


def test_enter_device_motion_mode_replaces_orientation(navigator, recorder):
    q = Quaternion.from_axis_angle(0.8, (1.0, 1.0, 0.0))

    navigator.enter_device_motion_mode(q)

    assert navigator.mode is NavigationMode.DEVICE_MOTION
    assert recorder.orientations == [q]

    navigator.on_pan(120.0, 40.0)
    navigator.on_rotate(0.3)
    navigator.on_scale(2.0)

    assert recorder.orientations == [q]
    assert recorder.fovs == []
    assert navigator.orientation == q
    assert navigator.field_of_view_degrees == pytest.approx(60.0)


def test_gestures_report_ignored_in_device_motion_mode(navigator):
    navigator.enter_device_motion_mode(Quaternion.identity())

    assert navigator.on_pan(10.0, 0.0) is False
    assert navigator.on_rotate(0.1) is False
    assert navigator.on_scale(2.0) is False


def test_motion_updates_applied_only_in_device_motion_mode(navigator, recorder):
    q1 = Quaternion.from_axis_angle(0.2, X_AXIS)
    q2 = Quaternion.from_axis_angle(-0.6, Y_AXIS)

    assert navigator.set_motion_orientation(q1) is False
    assert navigator.orientation == Quaternion.identity()
    assert recorder.count == 0

    navigator.enter_device_motion_mode(q1)
    assert navigator.set_motion_orientation(q2) is True
    assert navigator.orientation == q2

    navigator.enter_gesture_mode()
    assert navigator.set_motion_orientation(q1) is False
    assert navigator.orientation == q2
    assert recorder.orientations == [q1, q2]


def test_gestures_resume_after_returning_to_gesture_mode(navigator):
    q = Quaternion.from_axis_angle(0.4, Z_AXIS)
    navigator.enter_device_motion_mode(q)
    navigator.enter_gesture_mode()

    navigator.on_rotate(0.1)

    assert navigator.orientation.isclose(Quaternion.from_axis_angle(-0.1, Z_AXIS) * q, tol=1e-12)


def test_mode_changed_callbacks(navigator):
    changes = []
    navigator.add_mode_changed_callback(lambda old, new: changes.append((old, new)))

    navigator.enter_device_motion_mode(Quaternion.identity())
    navigator.enter_device_motion_mode(Quaternion.identity())
    navigator.enter_gesture_mode()
    navigator.enter_gesture_mode()

    assert changes == [
        (NavigationMode.GESTURE, NavigationMode.DEVICE_MOTION),
        (NavigationMode.DEVICE_MOTION, NavigationMode.GESTURE),
    ]


def test_initial_mode_device_motion(recorder):
    nav = Navigator(ViewSize(800, 600), Quaternion.identity(), 60.0,
                    observer=recorder.observer, mode=NavigationMode.DEVICE_MOTION)

    assert nav.on_pan(10.0, 10.0) is False
    assert nav.set_motion_orientation(Quaternion.from_axis_angle(0.1, X_AXIS)) is True


def test_from_settings_uses_configured_values():
    settings = SimpleNamespace(
        initial_fov_deg=45.0,
        min_fov_rad=0.2,
        max_fov_rad=1.5,
        initial_mode="device_motion",
    )

    nav = Navigator.from_settings(settings, ViewSize(640, 480))

    assert nav.mode is NavigationMode.DEVICE_MOTION
    assert nav.field_of_view_degrees == pytest.approx(45.0)
    assert nav.state.min_fov_radians == 0.2
    assert nav.state.max_fov_radians == 1.5


def test_invalid_motion_orientation_keeps_gesture_mode(navigator, recorder):
    with pytest.raises(ValueError):
        navigator.enter_device_motion_mode(Quaternion(0.0, 0.0, 0.0, 0.0))

    assert navigator.mode is NavigationMode.GESTURE
    assert recorder.count == 0


def test_tiny_ratio_clamps_to_maximum(navigator, recorder):
    assert navigator.on_scale(1e-310) is True

    assert navigator.field_of_view_radians == 2.0
    assert recorder.fovs == [pytest.approx(math.degrees(2.0))]


def test_mode_callback_sees_motion_orientation(navigator):
    q = Quaternion.from_axis_angle(0.8, (1.0, 1.0, 0.0))
    seen = []
    navigator.add_mode_changed_callback(lambda old, new: seen.append((new, navigator.orientation)))

    navigator.enter_device_motion_mode(q)

    assert seen == [(NavigationMode.DEVICE_MOTION, q)]


def test_callback_registered_during_mode_change_runs_next_time(navigator):
    calls = []

    def late(old, new):
        calls.append(("late", new))

    def first(old, new):
        calls.append(("first", new))
        if len(calls) == 1:
            navigator.add_mode_changed_callback(late)

    navigator.add_mode_changed_callback(first)

    navigator.enter_device_motion_mode(Quaternion.identity())
    assert calls == [("first", NavigationMode.DEVICE_MOTION)]

    navigator.enter_gesture_mode()
    assert calls[1:] == [("first", NavigationMode.GESTURE), ("late", NavigationMode.GESTURE)]
