"""Camera navigation state machine."""

from skynav.navigator.camera_state import CameraState, ViewSize
from skynav.navigator.navigator import NavigationMode, Navigator
from skynav.navigator.observer import CallbackObserver, NavigationObserver

__all__ = [
    "CallbackObserver",
    "CameraState",
    "NavigationMode",
    "NavigationObserver",
    "Navigator",
    "ViewSize",
]
