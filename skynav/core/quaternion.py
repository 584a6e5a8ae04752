"""Quaternion value type used for camera orientation."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

Vector3 = Tuple[float, float, float]

UNIT_TOLERANCE = 1e-6


@dataclass(frozen=True)
class Quaternion:
    """
    Rotation quaternion stored as (x, y, z, w).

    The vector part comes first and the scalar part last.
    Multiplication is the Hamilton product: ``a * b`` applies ``b`` first,
    then ``a``.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def identity(cls) -> Quaternion:
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_axis_angle(cls, angle: float, axis: Vector3) -> Quaternion:
        """
        Build the rotation of ``angle`` radians about ``axis``.

        :param angle: Rotation angle in radians
        :param axis: Rotation axis (x, y, z), normalised here
        :return: Unit quaternion
        """
        ax, ay, az = (float(a) for a in axis)
        length = math.sqrt(ax * ax + ay * ay + az * az)
        if length == 0.0:
            raise ValueError("Rotation axis must not be the zero vector.")
        s = math.sin(angle / 2.0) / length
        return cls(ax * s, ay * s, az * s, math.cos(angle / 2.0))

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Quaternion:
        """Build from an (x, y, z, w) sequence."""
        if len(values) != 4:
            raise ValueError(f"Quaternion needs 4 components, got {len(values)}.")
        return cls(*(float(v) for v in values))

    def __mul__(self, other: Quaternion) -> Quaternion:
        if not isinstance(other, Quaternion):
            return NotImplemented
        lx, ly, lz, lw = self.x, self.y, self.z, self.w
        rx, ry, rz, rw = other.x, other.y, other.z, other.w
        return Quaternion(
            lw * rx + lx * rw + ly * rz - lz * ry,
            lw * ry + ly * rw + lz * rx - lx * rz,
            lw * rz + lz * rw + lx * ry - ly * rx,
            lw * rw - lx * rx - ly * ry - lz * rz,
        )

    def __iter__(self):
        return iter((self.x, self.y, self.z, self.w))

    def __str__(self) -> str:
        return f"Quaternion(x={self.x:.4f}, y={self.y:.4f}, z={self.z:.4f}, w={self.w:.4f})"

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w)

    def normalized(self) -> Quaternion:
        n = self.norm()
        if n == 0.0:
            raise ValueError("Cannot normalize a zero quaternion.")
        return Quaternion(self.x / n, self.y / n, self.z / n, self.w / n)

    def conjugate(self) -> Quaternion:
        return Quaternion(-self.x, -self.y, -self.z, self.w)

    def inverse(self) -> Quaternion:
        n2 = self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w
        if n2 == 0.0:
            raise ValueError("Cannot invert a zero quaternion.")
        c = self.conjugate()
        return Quaternion(c.x / n2, c.y / n2, c.z / n2, c.w / n2)

    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in self)

    def is_unit(self, tol: float = UNIT_TOLERANCE) -> bool:
        return abs(self.norm() - 1.0) <= tol

    def isclose(self, other: Quaternion, tol: float = 1e-9) -> bool:
        """
        Compare as rotations.

        ``q`` and ``-q`` describe the same rotation, so both signs match.
        """
        same = all(abs(a - b) <= tol for a, b in zip(self, other))
        opposite = all(abs(a + b) <= tol for a, b in zip(self, other))
        return same or opposite

    def rotate(self, vector: Vector3) -> Vector3:
        """Rotate a 3D vector by this (unit) quaternion."""
        p = Quaternion(float(vector[0]), float(vector[1]), float(vector[2]), 0.0)
        r = self * p * self.conjugate()
        return (r.x, r.y, r.z)

    def to_matrix(self) -> np.ndarray:
        """3x3 rotation matrix of this (unit) quaternion."""
        x, y, z, w = self.x, self.y, self.z, self.w
        return np.array([
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - z * w), 2.0 * (x * z + y * w)],
            [2.0 * (x * y + z * w), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - x * w)],
            [2.0 * (x * z - y * w), 2.0 * (y * z + x * w), 1.0 - 2.0 * (x * x + y * y)],
        ])

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z, self.w], dtype=float)


# Axes in the camera's local frame.
X_AXIS: Vector3 = (1.0, 0.0, 0.0)
Y_AXIS: Vector3 = (0.0, 1.0, 0.0)
Z_AXIS: Vector3 = (0.0, 0.0, 1.0)
