"""Navigator - turns gestures and device motion into camera state changes."""
from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable, Optional, TYPE_CHECKING

from skynav.core.quaternion import Quaternion, X_AXIS, Y_AXIS, Z_AXIS
from skynav.navigator.camera_state import (
    DEFAULT_MAX_FOV_RADIANS,
    DEFAULT_MIN_FOV_RADIANS,
    CameraState,
    ViewSize,
    require_valid_quaternion,
)
from skynav.navigator.observer import NavigationObserver
from skynav.utils.log_util import log_io

if TYPE_CHECKING:
    from skynav.app.app_settings_manager import AppSettingsManager


logger = logging.getLogger(__name__)


class NavigationMode(str, Enum):
    """Source that currently drives the camera orientation."""
    GESTURE = "gesture"
    DEVICE_MOTION = "device_motion"

    def __str__(self):
        return self.value


def _require_finite(name: str, *values: float) -> None:
    for v in values:
        if not math.isfinite(v):
            raise ValueError(f"{name} must be finite, got {v}.")


class Navigator:
    """
    Camera navigation state machine.

    In GESTURE mode pan, rotate and pinch gestures move the camera and
    device-motion updates are ignored. In DEVICE_MOTION mode the sensor
    orientation replaces the camera orientation and gestures are ignored.

    Usage:
        navigator = Navigator(ViewSize(800, 600), Quaternion.identity(), 60.0,
                              observer=renderer_sync)
        navigator.on_pan(12.0, -3.0)
        navigator.enter_device_motion_mode(sensor_orientation)
    """

    def __init__(self,
                 view_size: ViewSize,
                 initial_orientation: Quaternion,
                 initial_fov_degrees: float,
                 observer: Optional[NavigationObserver] = None,
                 mode: NavigationMode = NavigationMode.GESTURE,
                 *,
                 min_fov_radians: float = DEFAULT_MIN_FOV_RADIANS,
                 max_fov_radians: float = DEFAULT_MAX_FOV_RADIANS):
        self._state = CameraState(
            view_size,
            initial_orientation,
            initial_fov_degrees,
            min_fov_radians=min_fov_radians,
            max_fov_radians=max_fov_radians,
        )
        self._mode = NavigationMode(mode)
        self._on_mode_changed_callbacks: list[Callable[[NavigationMode, NavigationMode], None]] = []
        if observer is not None:
            self._state.add_observer(observer)

        logger.debug("Navigator created: view=%s fov=%.2f deg mode=%s",
                     view_size, self._state.field_of_view_degrees, self._mode)

    @classmethod
    def from_settings(cls,
                      settings: AppSettingsManager,
                      view_size: ViewSize,
                      observer: Optional[NavigationObserver] = None,
                      initial_orientation: Quaternion | None = None) -> Navigator:
        """Create a navigator using the configured zoom range and start mode."""
        return cls(
            view_size,
            initial_orientation if initial_orientation is not None else Quaternion.identity(),
            settings.initial_fov_deg,
            observer=observer,
            mode=NavigationMode(settings.initial_mode),
            min_fov_radians=settings.min_fov_rad,
            max_fov_radians=settings.max_fov_rad,
        )

    @property
    def mode(self) -> NavigationMode:
        return self._mode

    @property
    def state(self) -> CameraState:
        return self._state

    @property
    def orientation(self) -> Quaternion:
        return self._state.orientation

    @property
    def field_of_view_degrees(self) -> float:
        return self._state.field_of_view_degrees

    @property
    def field_of_view_radians(self) -> float:
        return self._state.field_of_view_radians

    @property
    def view_size(self) -> ViewSize:
        return self._state.view_size

    def angle_per_distance(self) -> float:
        return self._state.angle_per_distance()

    def add_observer(self, observer: NavigationObserver) -> None:
        self._state.add_observer(observer)

    def remove_observer(self, observer: NavigationObserver) -> None:
        self._state.remove_observer(observer)

    def add_mode_changed_callback(
            self,
            callback: Callable[[NavigationMode, NavigationMode], None]
    ) -> None:
        """
        Add a callback for navigation mode changes.

        Callback signature: callback(old_mode: NavigationMode, new_mode: NavigationMode) -> None
        """
        self._on_mode_changed_callbacks.append(callback)

    # ----- mode switching -----

    @log_io()
    def enter_gesture_mode(self) -> None:
        """Pan and rotate gestures drive the orientation from now on."""
        self._set_mode(NavigationMode.GESTURE)

    @log_io()
    def enter_device_motion_mode(self, initial_orientation: Quaternion) -> None:
        """
        Device motion drives the orientation from now on.

        :param initial_orientation: Current absolute sensor orientation,
            applied immediately.
        """
        require_valid_quaternion(initial_orientation)
        old_mode = self._mode
        self._mode = NavigationMode.DEVICE_MOTION
        self._state.replace_orientation(initial_orientation)
        self._notify_mode_changed(old_mode)

    def set_motion_orientation(self, orientation: Quaternion) -> bool:
        """
        Apply an absolute orientation from the device-motion feed.

        :return: False if ignored because gestures are in control
        """
        if self._mode is not NavigationMode.DEVICE_MOTION:
            logger.debug("Device motion update ignored in %s mode", self._mode)
            return False
        self._state.replace_orientation(orientation)
        return True

    # ----- gestures -----

    def on_pan(self, dx: float, dy: float) -> bool:
        """
        Rotate by a pan gesture.

        :param dx: Horizontal pan distance (view units)
        :param dy: Vertical pan distance (view units)
        :return: False if ignored because device motion is in control
        """
        _require_finite("Pan delta", dx, dy)
        if not self._accepts_gestures("pan"):
            return False

        a = self._state.angle_per_distance()
        horizontal_angle = -dx * a
        vertical_angle = -dy * a
        horizontal_rotation = Quaternion.from_axis_angle(horizontal_angle, Y_AXIS)
        vertical_rotation = Quaternion.from_axis_angle(vertical_angle, X_AXIS)
        self._state.compose_rotation(horizontal_rotation * vertical_rotation)
        return True

    def on_rotate(self, angle: float) -> bool:
        """
        Rotate about the forward axis by a twist gesture.

        :param angle: Twist angle in radians
        """
        _require_finite("Rotation angle", angle)
        if not self._accepts_gestures("rotate"):
            return False

        self._state.compose_rotation(Quaternion.from_axis_angle(-angle, Z_AXIS))
        return True

    def on_scale(self, ratio: float) -> bool:
        """
        Zoom by a pinch gesture.

        A ratio above 1 (fingers spreading) narrows the field of view.

        :param ratio: Scale factor since the previous pinch update, 1.0 = no change
        """
        _require_finite("Scale ratio", ratio)
        if ratio <= 0:
            raise ValueError(f"Scale ratio must be positive, got {ratio}.")
        if not self._accepts_gestures("pinch"):
            return False

        self._state.set_field_of_view_radians(self._state.field_of_view_radians / ratio)
        return True

    def _accepts_gestures(self, kind: str) -> bool:
        if self._mode is NavigationMode.GESTURE:
            return True
        logger.debug("%s gesture ignored in %s mode", kind, self._mode)
        return False

    def _set_mode(self, mode: NavigationMode) -> None:
        old_mode = self._mode
        self._mode = mode
        self._notify_mode_changed(old_mode)

    def _notify_mode_changed(self, old_mode: NavigationMode) -> None:
        mode = self._mode
        if old_mode is mode:
            return

        logger.info(f"Navigation mode changed from {old_mode} -> {mode}")
        for callback in list(self._on_mode_changed_callbacks):
            try:
                callback(old_mode, mode)
            except Exception as e:
                logger.exception(f"Error in mode changed callback: {e}")
