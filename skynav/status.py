from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import Callable, Optional

from skynav.core.quaternion import Quaternion

# Camera looks down its local -Z axis.
FORWARD = (0.0, 0.0, -1.0)


@dataclass
class StatusField:
    """
    A labelled value shown in the status bar.

    :ivar label: The label/name of the status field.
    :ivar fmt: Format string used when no formatter is given.
    :ivar formatter: Callable turning the value into display text.
    :ivar value: Current numerical value.
    """
    label: str
    fmt: str = "{}"
    formatter: Callable[[float], str] = None
    value: float = 0.0

    def __post_init__(self):
        if self.formatter is None:
            self.formatter = lambda v, fmt=self.fmt: fmt.format(v)

    def text(self) -> str:
        return f"{self.label}: {self.formatter(self.value)}"


def view_direction_angles(orientation: Quaternion) -> tuple[float, float]:
    """
    Azimuth and altitude (degrees) of the camera's viewing direction.

    Azimuth is measured from -Z towards +X in [0, 360),
    altitude from the XZ plane towards +Y in [-90, 90].
    """
    dx, dy, dz = orientation.rotate(FORWARD)
    azimuth = math.degrees(math.atan2(dx, -dz)) % 360.0
    altitude = math.degrees(math.asin(max(-1.0, min(1.0, dy))))
    return azimuth, altitude


def format_altitude(altitude: float) -> str:
    """+ above the horizon, - below."""
    return f"{altitude:+.1f}°"


STATUS_FIELDS = {
    "fov": StatusField(label="FOV", fmt="{:.1f}°", value=60.0),
    "azimuth": StatusField(label="Az", fmt="{:.1f}°"),
    "altitude": StatusField(label="Alt", formatter=format_altitude),
}


class NavigationStatus:
    """
    NavigationObserver that keeps status fields in sync with the camera.

    ``on_field_changed(key, field)`` is called for every field that changed.
    """

    def __init__(self, on_field_changed: Optional[Callable[[str, StatusField], None]] = None):
        # per-instance copies so several views don't share values
        self.fields: dict[str, StatusField] = {
            k: copy.deepcopy(v) for k, v in STATUS_FIELDS.items()
        }
        self._on_field_changed = on_field_changed

    def on_orientation_changed(self, orientation: Quaternion) -> None:
        azimuth, altitude = view_direction_angles(orientation)
        self._update(azimuth=azimuth, altitude=altitude)

    def on_field_of_view_changed(self, vfov_degrees: float) -> None:
        self._update(fov=vfov_degrees)

    def text(self, key: str) -> str:
        return self.fields[key].text()

    def _update(self, **values: float) -> None:
        for key, value in values.items():
            field = self.fields[key]
            if field.value == value:
                continue
            field.value = value
            if self._on_field_changed is not None:
                self._on_field_changed(key, field)
