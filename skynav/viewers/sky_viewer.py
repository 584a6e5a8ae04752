"""VTK view of the celestial sphere driven by a Navigator."""
from __future__ import annotations

import logging

import vtk
from PySide6 import QtCore, QtWidgets
from vtkmodules.qt.QVTKRenderWindowInteractor import QVTKRenderWindowInteractor

from skynav.app.app_settings_manager import AppSettingsManager
from skynav.core.quaternion import Quaternion
from skynav.navigator.camera_state import ViewSize
from skynav.navigator.navigator import NavigationMode, Navigator
from skynav.status import NavigationStatus, StatusField
from skynav.viewers.gesture_bridge import GestureBridge
from skynav.viewers.vtk_camera_sync import VtkCameraSync

logger = logging.getLogger(__name__)

SPHERE_RADIUS = 10.0


class SkyViewer(QtWidgets.QWidget):
    """
    Widget showing the sky grid from the sphere centre.

    The navigator is created once for the initial view size; later resizes
    keep the initial pan-to-angle mapping.
    """

    # Signals
    statusFieldChanged = QtCore.Signal(str, object)
    modeChanged = QtCore.Signal(object)

    def __init__(
            self,
            view_size: ViewSize,
            settings_manager: AppSettingsManager | None = None,
            parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setting = settings_manager or AppSettingsManager()

        self.vtk_widget = QVTKRenderWindowInteractor(self)
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.vtk_widget)

        self.renderer = vtk.vtkRenderer()
        self.renderer.SetBackground(0.02, 0.02, 0.08)
        self.vtk_widget.GetRenderWindow().AddRenderer(self.renderer)
        self.interactor = self.vtk_widget.GetRenderWindow().GetInteractor()
        self.renderer.AddActor(self._make_sky_grid())

        self.status = NavigationStatus(self._emit_status)
        self.camera_sync = VtkCameraSync(
            self.renderer.GetActiveCamera(),
            renderer=self.renderer,
            render_callback=self.update_view,
        )
        self.navigator = Navigator.from_settings(self.setting, view_size, observer=self.camera_sync)
        self.navigator.add_observer(self.status)
        self.navigator.add_mode_changed_callback(lambda old, new: self.modeChanged.emit(new))
        self.gesture_bridge = GestureBridge(self.navigator, self.vtk_widget)

        self.camera_sync.sync(self.navigator.orientation, self.navigator.field_of_view_degrees)
        self.status.on_orientation_changed(self.navigator.orientation)
        self.status.on_field_of_view_changed(self.navigator.field_of_view_degrees)

    def start(self) -> None:
        self.interactor.Initialize()
        self.update_view()

    def update_view(self) -> None:
        self.vtk_widget.GetRenderWindow().Render()

    def use_gestures(self) -> None:
        self.navigator.enter_gesture_mode()

    def use_device_motion(self, orientation: Quaternion | None = None) -> None:
        """Hand orientation control to the motion feed, starting at ``orientation``."""
        if orientation is None:
            orientation = self.navigator.orientation
        self.navigator.enter_device_motion_mode(orientation)

    @QtCore.Slot(object)
    def on_device_motion(self, orientation: Quaternion) -> None:
        """Slot for an external motion feed delivering absolute orientations."""
        self.navigator.set_motion_orientation(orientation)

    def _emit_status(self, key: str, field: StatusField) -> None:
        self.statusFieldChanged.emit(key, field)

    def _make_sky_grid(self) -> vtk.vtkActor:
        """Wireframe sphere standing in for parallels and meridians."""
        source = vtk.vtkSphereSource()
        source.SetRadius(SPHERE_RADIUS)
        source.SetThetaResolution(24)
        source.SetPhiResolution(12)

        mapper = vtk.vtkPolyDataMapper()
        mapper.SetInputConnection(source.GetOutputPort())

        actor = vtk.vtkActor()
        actor.SetMapper(mapper)
        actor.GetProperty().SetRepresentationToWireframe()
        actor.GetProperty().SetColor(0.3, 0.5, 0.9)
        return actor
