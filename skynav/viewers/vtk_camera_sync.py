"""Keeps a VTK camera in step with the navigator."""
from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np
import vtk

from skynav.core.quaternion import Quaternion

logger = logging.getLogger(__name__)

# Camera frame: looks down -Z with +Y up.
_FORWARD = np.array([0.0, 0.0, -1.0])
_UP = np.array([0.0, 1.0, 0.0])


class VtkCameraSync:
    """
    NavigationObserver that writes orientation and vertical field of view
    into a vtkCamera sitting at the centre of the celestial sphere.
    """

    def __init__(self,
                 camera: vtk.vtkCamera,
                 renderer: Optional[vtk.vtkRenderer] = None,
                 render_callback: Optional[Callable[[], None]] = None,
                 center: tuple[float, float, float] = (0.0, 0.0, 0.0)):
        self.camera = camera
        self.renderer = renderer
        self._render_callback = render_callback
        self._center = np.asarray(center, dtype=float)
        # vertical angle, matching the navigator's vertical field of view
        self.camera.UseHorizontalViewAngleOff()
        self._apply_orientation(Quaternion.identity())

    def sync(self, orientation: Quaternion, vfov_degrees: float) -> None:
        """Apply a full state in one go (e.g. at startup)."""
        self._apply_orientation(orientation)
        self.camera.SetViewAngle(vfov_degrees)
        self._refresh()

    def on_orientation_changed(self, orientation: Quaternion) -> None:
        self._apply_orientation(orientation)
        self._refresh()

    def on_field_of_view_changed(self, vfov_degrees: float) -> None:
        self.camera.SetViewAngle(vfov_degrees)
        logger.debug("Camera view angle: %.3f", vfov_degrees)
        self._refresh()

    def _apply_orientation(self, orientation: Quaternion) -> None:
        rotation = orientation.to_matrix()
        direction = rotation @ _FORWARD
        view_up = rotation @ _UP

        # focal point first so position and focal point never coincide
        self.camera.SetFocalPoint(*(self._center + direction))
        self.camera.SetPosition(*self._center)
        self.camera.SetViewUp(*view_up)

    def _refresh(self) -> None:
        if self.renderer is not None:
            self.renderer.ResetCameraClippingRange()
        if self._render_callback is not None:
            self._render_callback()
