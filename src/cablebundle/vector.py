# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the 2D vector value type used by the packing engine.
#
# ===--------------------------------------------------------------------------------------===#

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np


@dataclass(frozen=True)
class Vector2:
    """Immutable 2D vector.

    Arithmetic with another Vector2 is component-wise; arithmetic with a number
    applies the scalar to both components. Division by zero is not guarded here.

    Attributes:
        x: Horizontal component.
        y: Vertical component.
    """

    x: float
    y: float

    def __add__(self, other: Vector2 | float) -> Vector2:
        if isinstance(other, Vector2):
            return Vector2(self.x + other.x, self.y + other.y)
        return Vector2(self.x + other, self.y + other)

    def __sub__(self, other: Vector2 | float) -> Vector2:
        if isinstance(other, Vector2):
            return Vector2(self.x - other.x, self.y - other.y)
        return Vector2(self.x - other, self.y - other)

    def __mul__(self, other: Vector2 | float) -> Vector2:
        if isinstance(other, Vector2):
            return Vector2(self.x * other.x, self.y * other.y)
        return Vector2(self.x * other, self.y * other)

    __rmul__ = __mul__

    def __truediv__(self, other: Vector2 | float) -> Vector2:
        if isinstance(other, Vector2):
            return Vector2(self.x / other.x, self.y / other.y)
        return Vector2(self.x / other, self.y / other)

    def length(self) -> float:
        """Returns the Euclidean norm."""
        return math.hypot(self.x, self.y)

    def perp(self) -> Vector2:
        """Returns the vector rotated by 90 degrees counter-clockwise."""
        return Vector2(-self.y, self.x)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vector2:
        return cls(float(arr[0]), float(arr[1]))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(x={self.x:.6f},y={self.y:.6f})"


def distance(a: Vector2, b: Vector2) -> float:
    """Euclidean distance between two points."""
    return (a - b).length()
