"""Gesture bridge - forwards Qt gesture and mouse input to the navigator."""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from PySide6.QtCore import QEvent, QObject, QPointF, Qt
from PySide6.QtWidgets import QPinchGesture, QWidget

if TYPE_CHECKING:
    from skynav.navigator.navigator import Navigator


logger = logging.getLogger(__name__)

# Wheel units per doubling of the zoom (one notch is 120 units).
WHEEL_UNITS_PER_DOUBLING = 480.0


def wheel_to_scale_ratio(angle_delta: float) -> float:
    """
    Convert a wheel angle delta into a pinch-like scale ratio.

    Scrolling forward (positive delta) zooms in, i.e. ratio > 1.
    """
    return 2.0 ** (angle_delta / WHEEL_UNITS_PER_DOUBLING)


class GestureBridge(QObject):
    """
    Event filter translating input on a view into Navigator calls.

    - Pan gesture / left-button drag -> on_pan(dx, dy) in pixels
    - Pinch scale factor / wheel -> on_scale(ratio)
    - Pinch rotation -> on_rotate(radians)

    Handled events are consumed so the widget underneath (e.g. a VTK
    interactor) does not move its own camera.
    """

    def __init__(self, navigator: Navigator, widget: QWidget | None = None):
        super().__init__(widget)
        self.navigator = navigator
        self._drag_pos: QPointF | None = None
        if widget is not None:
            self.install(widget)

    def install(self, widget: QWidget) -> None:
        """Grab touch gestures on the widget and start filtering its events."""
        widget.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents)
        widget.grabGesture(Qt.GestureType.PanGesture)
        widget.grabGesture(Qt.GestureType.PinchGesture)
        widget.installEventFilter(self)
        logger.debug("Gesture bridge installed on %s", type(widget).__name__)

    def eventFilter(self, obj, event):
        etype = event.type()
        if etype == QEvent.Type.Gesture:
            return self._handle_gesture_event(event)
        if etype == QEvent.Type.MouseButtonPress and event.button() == Qt.MouseButton.LeftButton:
            self._drag_pos = event.position()
            return True
        if etype == QEvent.Type.MouseMove and self._drag_pos is not None:
            pos = event.position()
            self.handle_drag(pos.x() - self._drag_pos.x(), pos.y() - self._drag_pos.y())
            self._drag_pos = pos
            return True
        if etype == QEvent.Type.MouseButtonRelease and event.button() == Qt.MouseButton.LeftButton:
            self._drag_pos = None
            return True
        if etype == QEvent.Type.Wheel:
            self.handle_wheel(event.angleDelta().y())
            return True
        return super().eventFilter(obj, event)

    def handle_drag(self, dx: float, dy: float) -> None:
        if dx or dy:
            self.navigator.on_pan(dx, dy)

    def handle_wheel(self, angle_delta: float) -> None:
        if angle_delta:
            self.navigator.on_scale(wheel_to_scale_ratio(angle_delta))

    def handle_pan(self, gesture) -> None:
        """Forward the incremental offset of a QPanGesture."""
        delta = gesture.delta()
        self.handle_drag(delta.x(), delta.y())

    def handle_pinch(self, gesture) -> None:
        """
        Forward a QPinchGesture.

        scaleFactor() is relative to the previous update, rotation angles are
        in degrees and converted here.
        """
        flags = gesture.changeFlags()
        if flags & QPinchGesture.ChangeFlag.ScaleFactorChanged:
            factor = gesture.scaleFactor()
            if factor > 0 and factor != 1.0:
                self.navigator.on_scale(factor)
        if flags & QPinchGesture.ChangeFlag.RotationAngleChanged:
            delta_deg = gesture.rotationAngle() - gesture.lastRotationAngle()
            if delta_deg:
                self.navigator.on_rotate(math.radians(delta_deg))

    def _handle_gesture_event(self, event) -> bool:
        pinch = event.gesture(Qt.GestureType.PinchGesture)
        if pinch is not None:
            self.handle_pinch(pinch)
            event.accept(pinch)
        pan = event.gesture(Qt.GestureType.PanGesture)
        if pan is not None:
            self.handle_pan(pan)
            event.accept(pan)
        return pinch is not None or pan is not None
