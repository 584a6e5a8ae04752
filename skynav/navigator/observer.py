"""Observer interface for navigation state changes."""
from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

from skynav.core.quaternion import Quaternion


@runtime_checkable
class NavigationObserver(Protocol):
    """
    Receives every accepted change of the camera state.

    Both methods are called synchronously, after the new value is final.
    """

    def on_orientation_changed(self, orientation: Quaternion) -> None: ...

    def on_field_of_view_changed(self, vfov_degrees: float) -> None: ...


class CallbackObserver:
    """Adapts plain callables to the NavigationObserver protocol."""

    def __init__(self,
                 on_orientation: Optional[Callable[[Quaternion], None]] = None,
                 on_field_of_view: Optional[Callable[[float], None]] = None):
        self._on_orientation = on_orientation
        self._on_field_of_view = on_field_of_view

    def on_orientation_changed(self, orientation: Quaternion) -> None:
        if self._on_orientation is not None:
            self._on_orientation(orientation)

    def on_field_of_view_changed(self, vfov_degrees: float) -> None:
        if self._on_field_of_view is not None:
            self._on_field_of_view(vfov_degrees)
