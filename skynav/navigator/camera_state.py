"""Camera state (orientation and zoom) separated from input and rendering."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from skynav.core.quaternion import Quaternion
from skynav.navigator.observer import NavigationObserver

logger = logging.getLogger(__name__)

DEFAULT_MIN_FOV_RADIANS = 0.1
DEFAULT_MAX_FOV_RADIANS = 2.0


@dataclass(frozen=True)
class ViewSize:
    "Immutable viewport dimensions, in the same unit as pan deltas."
    width: float
    height: float

    def __str__(self) -> str:
        return f"{self.width:g}x{self.height:g}"


def require_valid_quaternion(q: Quaternion) -> None:
    if not isinstance(q, Quaternion):
        raise TypeError(f"Expected Quaternion, got {type(q).__name__}.")
    if not q.is_finite():
        raise ValueError(f"Quaternion has non-finite components: {q}")
    if q.norm() == 0.0:
        raise ValueError("Quaternion must not be zero.")


class CameraState:
    """
    Holds the camera orientation and vertical field of view.

    Responsible for:
    - Keeping the orientation a unit quaternion.
    - Keeping the field of view inside [min_fov_radians, max_fov_radians].
    - Notifying observers once a field has its final value.
    - Don't have concerns about input devices or rendering.
    """

    def __init__(self,
                 view_size: ViewSize,
                 orientation: Quaternion | None = None,
                 fov_degrees: float = 60.0,
                 *,
                 min_fov_radians: float = DEFAULT_MIN_FOV_RADIANS,
                 max_fov_radians: float = DEFAULT_MAX_FOV_RADIANS):
        if not (math.isfinite(view_size.width) and view_size.width > 0):
            raise ValueError(f"View width must be positive, got {view_size.width}.")
        if not (math.isfinite(view_size.height) and view_size.height > 0):
            raise ValueError(f"View height must be positive, got {view_size.height}.")
        if not (0 < min_fov_radians < max_fov_radians and math.isfinite(max_fov_radians)):
            raise ValueError(
                f"Invalid field of view bounds: min={min_fov_radians}, max={max_fov_radians}.")
        if not math.isfinite(fov_degrees):
            raise ValueError(f"Field of view must be finite, got {fov_degrees}.")

        if orientation is None:
            orientation = Quaternion.identity()
        require_valid_quaternion(orientation)

        self._view_size = view_size
        self._min_fov = float(min_fov_radians)
        self._max_fov = float(max_fov_radians)
        self._orientation = orientation if orientation.is_unit() else orientation.normalized()

        fov = math.radians(fov_degrees)
        self._fov = self._clamp(fov)
        if self._fov != fov:
            logger.warning("Initial field of view %.3f deg clamped to %.3f deg",
                           fov_degrees, math.degrees(self._fov))

        self._observers: list[NavigationObserver] = []

    @property
    def view_size(self) -> ViewSize:
        return self._view_size

    @property
    def orientation(self) -> Quaternion:
        return self._orientation

    @property
    def min_fov_radians(self) -> float:
        return self._min_fov

    @property
    def max_fov_radians(self) -> float:
        return self._max_fov

    @property
    def field_of_view_radians(self) -> float:
        return self._fov

    @property
    def field_of_view_degrees(self) -> float:
        return math.degrees(self._fov)

    def angle_per_distance(self) -> float:
        """Radians of rotation per unit of pan distance at the current zoom."""
        return self._fov / self._view_size.height

    def set_field_of_view_radians(self, value: float) -> bool:
        """
        Set the vertical field of view, clamped into the valid range.

        :param value: Field of view in radians
        :return: True if the stored value changed
        """
        if math.isnan(value):
            raise ValueError("Field of view must not be NaN.")
        clamped = self._clamp(value)
        if clamped == self._fov:
            return False
        self._fov = clamped
        self._notify_field_of_view_changed()
        return True

    def set_field_of_view_degrees(self, value: float) -> bool:
        return self.set_field_of_view_radians(math.radians(value))

    def compose_rotation(self, rotation: Quaternion) -> None:
        """Apply ``rotation`` in the world frame: orientation <- rotation * orientation."""
        require_valid_quaternion(rotation)
        self._orientation = (rotation * self._orientation).normalized()
        self._notify_orientation_changed()

    def replace_orientation(self, orientation: Quaternion) -> None:
        """Replace the orientation with an absolute one (device motion)."""
        require_valid_quaternion(orientation)
        self._orientation = orientation if orientation.is_unit() else orientation.normalized()
        self._notify_orientation_changed()

    def add_observer(self, observer: NavigationObserver) -> None:
        """
        Add an observer for state changes.

        Observer interface: on_orientation_changed(q), on_field_of_view_changed(deg)
        """
        self._observers.append(observer)

    def remove_observer(self, observer: NavigationObserver) -> None:
        self._observers.remove(observer)

    def _clamp(self, value: float) -> float:
        return max(self._min_fov, min(self._max_fov, value))

    def _notify_orientation_changed(self) -> None:
        for observer in list(self._observers):
            try:
                observer.on_orientation_changed(self._orientation)
            except Exception as e:
                logger.exception(f"Error in orientation observer: {e}")

    def _notify_field_of_view_changed(self) -> None:
        degrees = self.field_of_view_degrees
        for observer in list(self._observers):
            try:
                observer.on_field_of_view_changed(degrees)
            except Exception as e:
                logger.exception(f"Error in field of view observer: {e}")
