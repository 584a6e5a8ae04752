"""Core components layer - math shared by navigation and viewers."""

from skynav.core.quaternion import Quaternion, X_AXIS, Y_AXIS, Z_AXIS

__all__ = [
    "Quaternion",
    "X_AXIS",
    "Y_AXIS",
    "Z_AXIS",
]
