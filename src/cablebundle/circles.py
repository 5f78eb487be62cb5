# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the circle class and the construction of the insertion order.
#
# ===--------------------------------------------------------------------------------------===#

from typing import List, Optional, Sequence, Set

from dataclasses import dataclass, field
import math

from cablebundle.vector import Vector2


@dataclass
class Circle:
    """A disc to be placed inside the bundle.

    A circle starts unplaced, with no centre and no neighbours. Placing it sets
    its centre and its slot in the placed sequence exactly once; neighbours are
    stored as slots of that sequence so the adjacency graph holds no references
    between circles.

    Attributes:
        radius: Radius of the disc, fixed after construction.
        input_index: Position of the radius in the caller's input sequence.
        center: Centre of the disc, None while unplaced.
        index: Slot in the placed sequence, None while unplaced.
        neighbours: Slots of the placed circles this circle is tangent to.
    """

    radius: float
    input_index: int = 0
    center: Optional[Vector2] = None
    index: Optional[int] = None
    neighbours: Set[int] = field(default_factory=set)

    @property
    def placed(self) -> bool:
        return self.index is not None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            "("
            f"radius={self.radius},"
            f"input_index={self.input_index},"
            f"center={self.center},"
            f"index={self.index},"
            f"neighbours={sorted(self.neighbours)}"
            ")"
        )


def make_circles(radii: Sequence[float]) -> List[Circle]:
    """Builds one unplaced circle per radius, sorted by decreasing radius.

    The returned order is the insertion order of the packing engine and is not
    changed afterwards.

    Args:
        radii: Sequence of strictly positive radii.

    Returns:
        List of unplaced circles, largest first.

    Raises:
        ValueError: If a radius is not a finite positive number.
    """
    circles: List[Circle] = []
    for i, r in enumerate(radii):
        r = float(r)
        if not math.isfinite(r) or r <= 0:
            raise ValueError(f"Circle {i} has invalid radius {r}; radii must be positive.")
        circles.append(Circle(radius=r, input_index=i))

    circles.sort(key=lambda c: c.radius, reverse=True)
    return circles
