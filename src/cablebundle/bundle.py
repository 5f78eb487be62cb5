# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the bundle state and the recentering routines.
#
# ===--------------------------------------------------------------------------------------===#

from typing import List, Tuple

from enum import Enum

import numpy as np

from cablebundle.circles import Circle
from cablebundle.vector import Vector2


class BundlePhase(Enum):
    SEEDING = "seeding"
    GROWING = "growing"
    COMPLETE = "complete"
    FAILED = "failed"


class BundleState:
    """Working set of one packing run.

    The placed circles form a dense arena: ``placed[i]`` has ``index == i`` and
    row ``i`` of ``centers``/``radii`` holds its centre and radius. Neighbour
    links are slots of this arena.

    Attributes:
        circles: All circles of the run, sorted by decreasing radius.
        placed: Circles placed so far, in placement order.
        center: Current bundle centre.
        radius: Current bundle radius.
        centers: Array of shape (k, 2) with the centres of the placed circles.
        radii: Array of shape (k,) with the radii of the placed circles.
        phase: Current bundle phase.
    """

    def __init__(self, circles: List[Circle], center: Vector2):
        """Initializes an empty bundle.

        Args:
            circles: Circles of the run, already sorted by decreasing radius.
            center: Initial bundle centre.
        """
        self.circles: List[Circle] = circles
        self.placed: List[Circle] = []
        self.center: Vector2 = center
        self.radius: float = 0.0
        self.centers: np.ndarray = np.zeros((0, 2), dtype=np.float64)
        self.radii: np.ndarray = np.zeros((0,), dtype=np.float64)
        self.phase: BundlePhase = BundlePhase.SEEDING

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            "("
            f"num_circles={len(self.circles)},"
            f"num_placed={len(self.placed)},"
            f"center={self.center},"
            f"radius={self.radius:.6f},"
            f"phase={self.phase.value}"
            ")"
        )

    def place(self, circle: Circle, center: Vector2, anchors: Tuple[Circle, ...] = ()) -> None:
        """Places a circle at ``center`` and links it to its anchors.

        Args:
            circle: Unplaced circle.
            center: Accepted centre position.
            anchors: Already placed circles the new circle is tangent to.

        Raises:
            ValueError: If the circle is already placed or an anchor is not.
        """
        if circle.placed:
            raise ValueError(f"{circle} is already placed.")
        for anchor in anchors:
            if not anchor.placed:
                raise ValueError(f"Anchor {anchor} is not placed.")

        circle.center = center
        circle.index = len(self.placed)
        self.placed.append(circle)
        self.centers = np.vstack([self.centers, center.as_array()])
        self.radii = np.append(self.radii, circle.radius)

        for anchor in anchors:
            circle.neighbours.add(anchor.index)
            anchor.neighbours.add(circle.index)

    def neighbours_of(self, circle: Circle) -> List[Circle]:
        return [self.placed[i] for i in sorted(circle.neighbours)]

    def recenter(self) -> None:
        """Moves the bundle to the weighted centroid and shrinks it to fit."""
        self.center, self.radius = bundle_extent(self.centers, self.radii)


def center_of_mass(centers: np.ndarray, radii: np.ndarray) -> Vector2:
    """Returns the centroid of the circles weighted by their squared radius."""
    weights: np.ndarray = radii**2
    return Vector2.from_array((centers * weights[:, None]).sum(axis=0) / weights.sum())


def furthest_extent(center: Vector2, centers: np.ndarray, radii: np.ndarray) -> float:
    """Returns the distance from ``center`` to the furthest point of any circle."""
    if len(radii) == 0:
        return 0.0
    dists: np.ndarray = np.linalg.norm(centers - center.as_array(), axis=1)
    return float(np.max(dists + radii))


def bundle_extent(centers: np.ndarray, radii: np.ndarray) -> Tuple[Vector2, float]:
    """Computes the recentred bundle for a set of placed circles.

    This is a pure function of the placed set: the centre is the squared-radius
    weighted centroid and the radius is the smallest one containing every
    circle from that centre.

    Args:
        centers: Array of shape (k, 2), k >= 1.
        radii: Array of shape (k,).

    Returns:
        Tuple of the new centre and the new radius.
    """
    center: Vector2 = center_of_mass(centers, radii)
    return center, furthest_extent(center, centers, radii)


def find_violations(state: BundleState, eps: float = 1e-5) -> List[str]:
    """Lists every broken invariant of a bundle state.

    Checks pairwise non-overlap, containment in the bundle and symmetry of the
    neighbour relation, all within ``eps``.

    Args:
        state: Bundle to check.
        eps: Tolerance for floating point comparisons.

    Returns:
        Human readable descriptions of the violations, empty if there are none.
    """
    violations: List[str] = []
    n: int = len(state.placed)
    if n == 0:
        return violations

    dists: np.ndarray = np.linalg.norm(state.centers - state.center.as_array(), axis=1)
    for i in np.nonzero(dists + state.radii > state.radius + eps)[0]:
        violations.append(
            f"Circle {i} sticks out of the bundle: "
            f"{dists[i] + state.radii[i]:.6f} > {state.radius:.6f}"
        )

    for i in range(n):
        for j in range(i + 1, n):
            dist: float = float(np.linalg.norm(state.centers[i] - state.centers[j]))
            if dist + eps < state.radii[i] + state.radii[j]:
                violations.append(
                    f"Circles {i} and {j} overlap: "
                    f"dist={dist:.6f}, r1+r2={state.radii[i] + state.radii[j]:.6f}"
                )

    for circle in state.placed:
        if circle.index in circle.neighbours:
            violations.append(f"Circle {circle.index} lists itself as a neighbour")
        for j in circle.neighbours:
            if circle.index not in state.placed[j].neighbours:
                violations.append(f"Neighbour link {circle.index} -> {j} is not symmetric")

    return violations
